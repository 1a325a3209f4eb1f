from conftest import PASSWORD, bearer, png_file

from socialapi.auth import hash_password, verify_password
from socialapi.db import query_db
from socialapi.errors import ErrorCode


def refresh_cookie_header(resp):
    for header in resp.headers.getlist("Set-Cookie"):
        if header.startswith("refreshToken="):
            return header
    return None


def test_signup_returns_user_without_password(client):
    resp = client.post("/api/auth/signup", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 201
    user = resp.get_json()["user"]
    assert user["email"] == "a@x.com"
    assert user["role"] == "USER"
    assert "password" not in user
    assert "password_hash" not in user
    assert "secret1" not in resp.get_data(as_text=True)


def test_signup_stores_hash_not_plaintext(app, auth):
    auth.signup()
    with app.app_context():
        row = query_db("SELECT password_hash FROM users WHERE email = ?", ("alice@example.com",), one=True)
    assert row["password_hash"] != PASSWORD


def test_signup_duplicate_email_conflicts(app, auth):
    assert auth.signup().status_code == 201
    resp = auth.signup(name="Other")
    assert resp.status_code == 403
    assert resp.get_json()["errorCode"] == ErrorCode.ALREADY_EXIST
    with app.app_context():
        count = query_db("SELECT COUNT(*) AS c FROM users", one=True)["c"]
    assert count == 1


def test_signup_email_is_case_insensitive(auth):
    auth.signup(email="Alice@Example.com")
    assert auth.signup(email="alice@example.com").status_code == 403


def test_signup_ignores_role(client):
    resp = client.post(
        "/api/auth/signup",
        json={"name": "Eve", "email": "eve@example.com", "password": "secret1", "role": "ADMIN"},
    )
    assert resp.get_json()["user"]["role"] == "USER"


def test_signup_validation_errors(client):
    resp = client.post("/api/auth/signup", json={"name": "", "email": "nope", "password": "123"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["errorCode"] == ErrorCode.INVALID_DATA
    assert body["message"] == "Invalid data"
    fields = {d["field"] for d in body["details"]}
    assert fields == {"name", "email", "password"}


def test_signup_with_profile_image(app, client):
    resp = client.post(
        "/api/auth/signup",
        data={"name": "Pic", "email": "pic@example.com", "password": "secret1", "file": png_file("me.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    profile_img = resp.get_json()["user"]["profileImg"]
    assert profile_img.startswith("/uploads/profiles/")
    assert profile_img.endswith("_me.png")


def test_login_returns_token_and_refresh_cookie(auth):
    auth.signup()
    resp = auth.login()
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["accessToken"]
    assert body["user"]["email"] == "alice@example.com"

    cookie = refresh_cookie_header(resp)
    assert cookie is not None
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "Max-Age=604800" in cookie
    assert "Path=/" in cookie


def test_refresh_cookie_is_secure_when_configured(app, auth):
    app.config["COOKIE_SECURE"] = True
    auth.signup()
    assert "Secure" in refresh_cookie_header(auth.login())


def test_login_wrong_password(auth):
    auth.signup()
    resp = auth.login(password="wrong-password")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["errorCode"] == ErrorCode.INVALID_DATA
    assert "accessToken" not in body
    assert refresh_cookie_header(resp) is None


def test_login_unknown_email(auth):
    resp = auth.login(email="nobody@example.com")
    assert resp.status_code == 404
    assert resp.get_json()["errorCode"] == ErrorCode.NOT_FOUND


def test_login_missing_fields(client):
    resp = client.post("/api/auth/login", json={})
    assert resp.status_code == 400


def test_me_echoes_identity(client, alice):
    user, token = alice
    resp = client.get("/api/auth/me", headers=bearer(token))
    assert resp.status_code == 200
    assert resp.get_json()["user"] == user


def test_me_requires_token(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.get_json()["errorCode"] == ErrorCode.UNAUTHORIZED_ACCESS


def test_me_rejects_garbage_token(client):
    resp = client.get("/api/auth/me", headers=bearer("not-a-jwt"))
    assert resp.status_code == 401


def test_logout_clears_cookie_but_access_token_still_works(client, alice):
    _, token = alice
    resp = client.get("/api/auth/logout", headers=bearer(token))
    assert resp.status_code == 200
    cookie = refresh_cookie_header(resp)
    assert cookie is not None
    assert "Max-Age=0" in cookie
    # stateless tokens: nothing is revoked server side
    assert client.get("/api/auth/me", headers=bearer(token)).status_code == 200


def test_logout_requires_token(client):
    resp = client.get("/api/auth/logout")
    assert resp.status_code == 401
    assert resp.get_json()["errorCode"] == ErrorCode.UNAUTHORIZED_ACCESS
    assert refresh_cookie_header(resp) is None


def test_password_hash_is_salted():
    first, second = hash_password(PASSWORD), hash_password(PASSWORD)
    assert first != second
    assert first.startswith("scrypt:")
    assert verify_password(first, PASSWORD) and verify_password(second, PASSWORD)
