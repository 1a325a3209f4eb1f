from flask import Blueprint, current_app, jsonify, send_from_directory

from ..errors import bad_request, not_found
from ..models import get_post_row, get_user_row

bp = Blueprint("images", __name__)

files_bp = Blueprint("uploads", __name__)

IMAGE_COLUMNS = {
    "profile": (get_user_row, "profile_img", "Profile image not found"),
    "post": (get_post_row, "post_img", "Post image not found"),
}


@bp.route("/<image_type>/<id:entity_id>", methods=["GET"])
def image_path(image_type, entity_id):
    """GET /api/image/profile/29 -> {"imgPath": "/uploads/profiles/..."}"""
    if image_type not in IMAGE_COLUMNS:
        raise bad_request("Invalid type. Must be 'profile' or 'post'.")
    loader, column, missing = IMAGE_COLUMNS[image_type]
    row = loader(entity_id)
    if not row or not row[column]:
        raise not_found(missing)
    return jsonify({"imgPath": row[column]})


@files_bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename):
    # for real traffic let the reverse proxy serve this folder
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename, as_attachment=False)
