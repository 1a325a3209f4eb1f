import logging

from flask import Blueprint, g, jsonify, request

from ..auth import admin_required, hash_password, is_admin, jwt_required
from ..db import execute_db, query_db
from ..errors import forbidden, not_found
from ..models import get_user_by_id, post_to_dict, user_to_dict
from ..uploads import PROFILES, save_upload, uploaded_file_from_request
from ..validation import page_args, request_data, validate_user_update

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)


@bp.route("", methods=["GET"])
@jwt_required
@admin_required
def list_users():
    limit, offset = page_args()
    rows = query_db("SELECT * FROM users ORDER BY id ASC LIMIT ? OFFSET ?", (limit, offset))
    return jsonify({"users": [user_to_dict(r) for r in rows]})


@bp.route("/<id:user_id>", methods=["GET"])
@jwt_required
@admin_required
def get_user(user_id):
    user = get_user_by_id(user_id)
    if not user:
        raise not_found("User not found")
    return jsonify({"user": user})


@bp.route("/<id:user_id>", methods=["PUT"])
@jwt_required
def update_user(user_id):
    caller = g.current_user
    admin = is_admin(caller)
    if caller["id"] != user_id and not admin:
        raise forbidden("You can only update your own profile")
    if not get_user_by_id(user_id):
        raise not_found("User not found")

    file_storage = uploaded_file_from_request(request)
    changes = validate_user_update(request_data(), has_file=file_storage is not None, allow_role=admin)
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))
    if file_storage:
        changes["profile_img"] = save_upload(file_storage, PROFILES)

    assignments = ", ".join(f"{column} = ?" for column in changes)
    execute_db(f"UPDATE users SET {assignments} WHERE id = ?", (*changes.values(), user_id))
    if "role" in changes:
        logger.info("User %s set role of user %s to %s", caller["id"], user_id, changes["role"])
    return jsonify({"user": get_user_by_id(user_id)})


@bp.route("/<id:user_id>/posts", methods=["GET"])
def user_posts(user_id):
    if not get_user_by_id(user_id):
        raise not_found("User not found")
    limit, offset = page_args()
    rows = query_db(
        "SELECT * FROM posts WHERE author_id = ? ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
        (user_id, limit, offset),
    )
    return jsonify({"posts": [post_to_dict(r) for r in rows]})
