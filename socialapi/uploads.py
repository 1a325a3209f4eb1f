"""
Image upload handling.

Files arrive as multipart ``file`` fields and are written to
``UPLOAD_FOLDER/<category>/``. The returned path is the public URL under
``/uploads``, which is what gets stored on the user or post row.
"""

import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import bad_request

logger = logging.getLogger(__name__)

PROFILES = "profiles"
POSTS = "posts"
CATEGORIES = (PROFILES, POSTS)


def allowed_file_extension(filename: str) -> bool:
    if "." not in filename:
        return False
    ext = filename.rsplit(".", 1)[1].lower()
    return ext in current_app.config["ALLOWED_EXTENSIONS"]


def is_image_mimetype(file_storage) -> bool:
    # some clients send a wrong mimetype; the extension check runs as well
    mimetype = (file_storage.mimetype or "").lower()
    return mimetype.startswith("image/")


def category_folder(category: str) -> str:
    if category not in CATEGORIES:
        raise ValueError(f"unknown upload category: {category}")
    folder = os.path.join(current_app.config["UPLOAD_FOLDER"], category)
    os.makedirs(folder, exist_ok=True)
    return folder


def save_upload(file_storage, category: str) -> str:
    """
    Write an uploaded image to disk and return its public path,
    e.g. ``/uploads/posts/3f2a..._cat.png``. Invalid files raise a 400.
    """
    filename = secure_filename(file_storage.filename) if file_storage.filename else ""
    if not filename:
        raise bad_request("Uploaded file has no usable filename")
    if not allowed_file_extension(filename) or not is_image_mimetype(file_storage):
        raise bad_request("Invalid image upload (type/extension)")

    name = f"{uuid.uuid4().hex}_{filename}"
    path = os.path.join(category_folder(category), name)
    # size is already capped by MAX_CONTENT_LENGTH
    file_storage.save(path)
    logger.info("Stored %s upload %s", category, name)
    return f"/uploads/{category}/{name}"


def uploaded_file_from_request(request):
    """The optional ``file`` part of a multipart request, or None."""
    file_storage = request.files.get("file")
    if file_storage is None or not file_storage.filename:
        return None
    return file_storage
