import io

from conftest import bearer, png_file

from socialapi.errors import ErrorCode


def test_profile_image_path(client):
    created = client.post(
        "/api/auth/signup",
        data={"name": "Pic", "email": "pic@example.com", "password": "secret1", "file": png_file()},
        content_type="multipart/form-data",
    ).get_json()["user"]
    resp = client.get(f"/api/image/profile/{created['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["imgPath"] == created["profileImg"]


def test_post_image_path(client, alice):
    post = client.post(
        "/api/post",
        data={"title": "t", "content": "c", "file": png_file()},
        headers=bearer(alice[1]),
        content_type="multipart/form-data",
    ).get_json()["post"]
    resp = client.get(f"/api/image/post/{post['id']}")
    assert resp.get_json()["imgPath"] == post["postImg"]


def test_missing_images(client, alice, post_factory):
    post = post_factory(alice[1])
    assert client.get(f"/api/image/post/{post['id']}").status_code == 404
    assert client.get(f"/api/image/profile/{alice[0]['id']}").status_code == 404
    assert client.get("/api/image/profile/999").status_code == 404


def test_invalid_image_type(client):
    resp = client.get("/api/image/banner/1")
    assert resp.status_code == 400
    assert resp.get_json()["errorCode"] == ErrorCode.INVALID_DATA


def test_upload_too_large(client, alice):
    resp = client.post(
        "/api/post",
        data={"title": "big", "content": "x", "file": (io.BytesIO(b"\x89PNG" + b"0" * 128 * 1024), "big.png")},
        headers=bearer(alice[1]),
        content_type="multipart/form-data",
    )
    assert resp.status_code == 413
    assert resp.get_json()["errorCode"] == ErrorCode.FILE_TOO_LARGE


def test_uploads_path_traversal(client):
    assert client.get("/uploads/../social-test.db").status_code == 404
