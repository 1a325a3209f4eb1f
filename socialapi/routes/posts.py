import logging

from flask import Blueprint, g, jsonify, request

from ..auth import jwt_required
from ..db import NOW, execute_db, query_db
from ..errors import not_found
from ..models import get_post_comments, get_post_row, post_to_dict
from ..ownership import post_owner
from ..uploads import POSTS, save_upload, uploaded_file_from_request
from ..validation import page_args, request_data, validate_post_create, validate_post_update

logger = logging.getLogger(__name__)

bp = Blueprint("posts", __name__)


@bp.route("", methods=["GET"])
def list_posts():
    limit, offset = page_args()
    rows = query_db(
        "SELECT * FROM posts ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
        (limit, offset),
    )
    return jsonify({"posts": [post_to_dict(r) for r in rows]})


@bp.route("/<id:post_id>", methods=["GET"])
def get_post(post_id):
    row = get_post_row(post_id)
    if not row:
        raise not_found("Post not found")
    return jsonify({"post": post_to_dict(row, detailed=True)})


@bp.route("/<id:post_id>/comments", methods=["GET"])
def post_comments(post_id):
    if not get_post_row(post_id):
        raise not_found("Post not found")
    return jsonify({"comments": get_post_comments(post_id)})


@bp.route("", methods=["POST"])
@jwt_required
def create_post():
    # multipart/form-data or JSON accepted; a file needs form-data
    title, content = validate_post_create(request_data())
    post_img = None
    file_storage = uploaded_file_from_request(request)
    if file_storage:
        post_img = save_upload(file_storage, POSTS)

    post_id = execute_db(
        "INSERT INTO posts (title, content, post_img, author_id) VALUES (?, ?, ?, ?)",
        (title, content, post_img, g.current_user["id"]),
    )
    logger.info("User %s created post %s", g.current_user["id"], post_id)
    return jsonify({"post": post_to_dict(get_post_row(post_id))}), 201


@bp.route("/<id:post_id>", methods=["PUT"])
@jwt_required
@post_owner
def update_post(post_id):
    file_storage = uploaded_file_from_request(request)
    changes = validate_post_update(request_data(), has_file=file_storage is not None)
    if file_storage:
        changes["post_img"] = save_upload(file_storage, POSTS)

    assignments = ", ".join(f"{column} = ?" for column in changes)
    execute_db(
        f"UPDATE posts SET {assignments}, updated_at = {NOW} WHERE id = ?",
        (*changes.values(), post_id),
    )
    return jsonify({"post": post_to_dict(get_post_row(post_id))})


@bp.route("/<id:post_id>", methods=["DELETE"])
@jwt_required
@post_owner
def delete_post(post_id):
    deleted = post_to_dict(g.target)
    execute_db("DELETE FROM posts WHERE id = ?", (post_id,))
    logger.info("User %s deleted post %s", g.current_user["id"], post_id)
    return jsonify({"post": deleted})
