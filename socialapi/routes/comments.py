from flask import Blueprint, g, jsonify

from ..auth import jwt_required
from ..db import NOW, execute_db
from ..errors import not_found
from ..models import get_comment_with_user, get_post_row
from ..ownership import comment_owner
from ..validation import request_data, validate_comment

bp = Blueprint("comments", __name__)


@bp.route("/<id:post_id>", methods=["POST"])
@jwt_required
def create_comment(post_id):
    content = validate_comment(request_data())
    if not get_post_row(post_id):
        raise not_found("Post not found")
    comment_id = execute_db(
        "INSERT INTO comments (content, post_id, user_id) VALUES (?, ?, ?)",
        (content, post_id, g.current_user["id"]),
    )
    return jsonify({"comment": get_comment_with_user(comment_id)}), 201


@bp.route("/<id:comment_id>", methods=["PUT"])
@jwt_required
@comment_owner
def update_comment(comment_id):
    content = validate_comment(request_data())
    execute_db(
        f"UPDATE comments SET content = ?, updated_at = {NOW} WHERE id = ?",
        (content, comment_id),
    )
    return jsonify({"comment": get_comment_with_user(comment_id)})


@bp.route("/<id:comment_id>", methods=["DELETE"])
@jwt_required
@comment_owner
def delete_comment(comment_id):
    execute_db("DELETE FROM comments WHERE id = ?", (comment_id,))
    return jsonify({"message": "Comment deleted successfully"})
