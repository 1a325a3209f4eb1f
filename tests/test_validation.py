import io

import pytest
from werkzeug.datastructures import FileStorage

from socialapi.errors import ApiException
from socialapi.uploads import POSTS, save_upload
from socialapi.validation import (
    pagination,
    validate_post_update,
    validate_reaction,
    validate_signup,
    validate_user_update,
)


def test_signup_normalizes_email():
    assert validate_signup({"name": " A ", "email": " A@X.com ", "password": "secret1"}) == (
        "A",
        "a@x.com",
        "secret1",
    )


@pytest.mark.parametrize("email", ["plain", "a@b", "a b@c.d", "@x.com"])
def test_signup_rejects_bad_emails(email):
    with pytest.raises(ApiException) as exc:
        validate_signup({"name": "A", "email": email, "password": "secret1"})
    assert exc.value.status_code == 400


def test_post_update_rejects_blank_fields():
    with pytest.raises(ApiException) as exc:
        validate_post_update({"title": "  "}, has_file=False)
    assert exc.value.details == [{"field": "title", "message": "title cannot be empty"}]


def test_post_update_file_only_is_fine():
    assert validate_post_update({}, has_file=True) == {}


def test_reaction_type_is_case_insensitive():
    assert validate_reaction({"type": "haha"}) == "HAHA"


def test_user_update_role_needs_admin():
    assert validate_user_update({"role": "admin"}, has_file=False, allow_role=True) == {"role": "ADMIN"}
    with pytest.raises(ApiException):
        validate_user_update({"role": "admin"}, has_file=False, allow_role=False)


@pytest.mark.parametrize(
    "args", [{"limit": "101"}, {"offset": "-1"}, {"limit": "x"}, {"offset": str(2 ** 63)}]
)
def test_pagination_bounds(args):
    with pytest.raises(ApiException):
        pagination(args, 20, 100)


def test_pagination_defaults():
    assert pagination({}, 20, 100) == (20, 0)


def _file(name, mimetype):
    return FileStorage(stream=io.BytesIO(b"\x89PNG data"), filename=name, content_type=mimetype)


def test_save_upload_writes_into_category_folder(app, tmp_path):
    with app.app_context():
        path = save_upload(_file("../../evil name.png", "image/png"), POSTS)
    assert path.startswith("/uploads/posts/")
    name = path.rsplit("/", 1)[1]
    assert name.endswith("_evil_name.png")
    assert (tmp_path / "uploads" / "posts" / name).read_bytes() == b"\x89PNG data"


@pytest.mark.parametrize("name,mimetype", [
    ("shell.php", "image/png"),
    ("pic.png", "text/html"),
    ("noext", "image/png"),
])
def test_save_upload_rejects_non_images(app, name, mimetype):
    with app.app_context():
        with pytest.raises(ApiException) as exc:
            save_upload(_file(name, mimetype), POSTS)
    assert exc.value.status_code == 400


def test_save_upload_unknown_category(app):
    with app.app_context():
        with pytest.raises(ValueError):
            save_upload(_file("pic.png", "image/png"), "banners")


def test_pagination_accepts_largest_storable_offset():
    assert pagination({"offset": str(2 ** 63 - 1)}, 20, 100) == (20, 2 ** 63 - 1)
