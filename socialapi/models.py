"""
Row lookups and row -> JSON helpers.

Rows come straight from sqlite3 (``sqlite3.Row``); the dicts returned here are
what the API serializes. Password hashes never leave this module.
"""

from .db import query_db


def user_to_dict(row):
    if row is None:
        return None
    return {
        "id": row["id"],
        "name": row["name"],
        "email": row["email"],
        "role": row["role"],
        "profileImg": row["profile_img"],
        "createdAt": row["created_at"],
    }


def user_summary(row, prefix=""):
    """Author/commenter block embedded in posts and comments."""
    return {
        "id": row[f"{prefix}id"],
        "name": row[f"{prefix}name"],
        "profileImg": row[f"{prefix}profile_img"],
    }


def get_user_row(user_id: int):
    return query_db("SELECT * FROM users WHERE id = ?", (user_id,), one=True)


def get_user_row_by_email(email: str):
    return query_db("SELECT * FROM users WHERE email = ?", (email,), one=True)


def get_user_by_id(user_id: int):
    return user_to_dict(get_user_row(user_id))


def get_post_row(post_id: int):
    return query_db("SELECT * FROM posts WHERE id = ?", (post_id,), one=True)


def get_comment_row(comment_id: int):
    return query_db("SELECT * FROM comments WHERE id = ?", (comment_id,), one=True)


def get_reaction_row(user_id: int, post_id: int):
    return query_db(
        "SELECT * FROM reactions WHERE user_id = ? AND post_id = ?",
        (user_id, post_id),
        one=True,
    )


def comment_to_dict(row):
    if row is None:
        return None
    data = {
        "id": row["id"],
        "content": row["content"],
        "postId": row["post_id"],
        "userId": row["user_id"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }
    if "u_name" in row.keys():
        data["user"] = user_summary(row, prefix="u_")
    return data


def reaction_to_dict(row):
    if row is None:
        return None
    return {
        "id": row["id"],
        "type": row["type"],
        "postId": row["post_id"],
        "userId": row["user_id"],
        "createdAt": row["created_at"],
    }


COMMENT_WITH_USER_SQL = """
SELECT c.*, u.id AS u_id, u.name AS u_name, u.profile_img AS u_profile_img
FROM comments c JOIN users u ON c.user_id = u.id
"""


def get_comment_with_user(comment_id: int):
    row = query_db(COMMENT_WITH_USER_SQL + " WHERE c.id = ?", (comment_id,), one=True)
    return comment_to_dict(row)


def get_post_comments(post_id: int):
    rows = query_db(
        COMMENT_WITH_USER_SQL + " WHERE c.post_id = ? ORDER BY c.created_at ASC, c.id ASC",
        (post_id,),
    )
    return [comment_to_dict(r) for r in rows]


def get_post_reactions(post_id: int):
    rows = query_db("SELECT * FROM reactions WHERE post_id = ? ORDER BY id ASC", (post_id,))
    return [reaction_to_dict(r) for r in rows]


def post_to_dict(row, detailed=False):
    """
    Serialize a post row. Counts are computed per request; ``detailed`` also
    embeds the comment thread and the individual reactions.
    """
    if row is None:
        return None
    post_id = row["id"]
    author = get_user_row(row["author_id"])
    reactions_row = query_db("SELECT COUNT(*) AS c FROM reactions WHERE post_id = ?", (post_id,), one=True)
    comments_row = query_db("SELECT COUNT(*) AS c FROM comments WHERE post_id = ?", (post_id,), one=True)
    data = {
        "id": post_id,
        "title": row["title"],
        "content": row["content"],
        "postImg": row["post_img"],
        "authorId": row["author_id"],
        "author": user_summary(author) if author else None,
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
        "reactionCount": reactions_row["c"] if reactions_row else 0,
        "commentCount": comments_row["c"] if comments_row else 0,
    }
    if detailed:
        data["comments"] = get_post_comments(post_id)
        data["reactions"] = get_post_reactions(post_id)
    return data
