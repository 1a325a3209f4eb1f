import io

import pytest

from socialapi import create_app
from socialapi.db import execute_db

PASSWORD = "secret1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DATABASE": str(tmp_path / "social-test.db"),
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "SECRET_KEY": "test-secret",
        "COOKIE_SECURE": False,
        "MAX_CONTENT_LENGTH": 64 * 1024,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def png_file(name="pic.png"):
    return (io.BytesIO(PNG_BYTES), name)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class AuthActions:
    def __init__(self, app, client):
        self._app = app
        self._client = client

    def signup(self, name="Alice", email="alice@example.com", password=PASSWORD):
        return self._client.post(
            "/api/auth/signup", json={"name": name, "email": email, "password": password}
        )

    def login(self, email="alice@example.com", password=PASSWORD):
        return self._client.post("/api/auth/login", json={"email": email, "password": password})

    def register_and_login(self, name="Alice", email="alice@example.com", password=PASSWORD):
        """Returns (user dict, access token)."""
        self.signup(name, email, password)
        data = self.login(email, password).get_json()
        return data["user"], data["accessToken"]

    def promote(self, email):
        with self._app.app_context():
            execute_db("UPDATE users SET role = 'ADMIN' WHERE email = ?", (email,))


@pytest.fixture
def auth(app, client):
    return AuthActions(app, client)


@pytest.fixture
def alice(auth):
    return auth.register_and_login("Alice", "alice@example.com")


@pytest.fixture
def bob(auth):
    return auth.register_and_login("Bob", "bob@example.com")


@pytest.fixture
def admin(auth):
    auth.signup("Root", "root@example.com")
    auth.promote("root@example.com")
    data = auth.login("root@example.com").get_json()
    return data["user"], data["accessToken"]


@pytest.fixture
def post_factory(client):
    def create(token, title="Hello", content="First post"):
        resp = client.post("/api/post", json={"title": title, "content": content}, headers=bearer(token))
        assert resp.status_code == 201
        return resp.get_json()["post"]
    return create
