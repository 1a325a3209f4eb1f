from collections import Counter

from flask import Blueprint, g, jsonify

from ..auth import jwt_required
from ..db import execute_db, execute_db_rowcount
from ..errors import not_found
from ..models import get_post_reactions, get_post_row, get_reaction_row, reaction_to_dict
from ..validation import request_data, validate_reaction

bp = Blueprint("reactions", __name__)


@bp.route("/<id:post_id>", methods=["POST"])
@jwt_required
def react(post_id):
    """Create the caller's reaction on a post, or change its type."""
    reaction_type = validate_reaction(request_data())
    if not get_post_row(post_id):
        raise not_found("Post not found")

    user_id = g.current_user["id"]
    # the unique (user_id, post_id) pair decides which caller creates the row
    created = execute_db_rowcount(
        """
        INSERT INTO reactions (type, post_id, user_id) VALUES (?, ?, ?)
        ON CONFLICT(user_id, post_id) DO NOTHING
        """,
        (reaction_type, post_id, user_id),
    ) == 1
    if not created:
        execute_db(
            "UPDATE reactions SET type = ? WHERE user_id = ? AND post_id = ?",
            (reaction_type, user_id, post_id),
        )
    reaction = reaction_to_dict(get_reaction_row(user_id, post_id))
    return jsonify({"reaction": reaction}), 201 if created else 200


@bp.route("/<id:post_id>", methods=["DELETE"])
@jwt_required
def remove_reaction(post_id):
    if not get_post_row(post_id):
        raise not_found("Post not found")
    row = get_reaction_row(g.current_user["id"], post_id)
    if not row:
        raise not_found("Reaction not found")
    execute_db("DELETE FROM reactions WHERE id = ?", (row["id"],))
    return jsonify({"reaction": reaction_to_dict(row)})


@bp.route("/<id:post_id>", methods=["GET"])
def list_reactions(post_id):
    if not get_post_row(post_id):
        raise not_found("Post not found")
    reactions = get_post_reactions(post_id)
    return jsonify({
        "postId": post_id,
        "reactionCount": len(reactions),
        "summary": dict(Counter(r["type"] for r in reactions)),
        "reactions": reactions,
    })
