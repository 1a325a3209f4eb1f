import functools

from flask import g

from .auth import is_admin
from .errors import forbidden, not_found
from .models import get_comment_row, get_post_row


def owner_required(loader, view_arg: str, owner_column: str, label: str):
    """
    Build a decorator that loads the target row from the route argument
    ``view_arg`` and lets the request through only for its owner or an admin.
    Stack it under @jwt_required. The row is handed over as ``g.target``.
    """
    def decorator(f):
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            row = loader(kwargs[view_arg])
            if row is None:
                raise not_found(f"{label} not found")
            user = g.current_user
            if not is_admin(user) and row[owner_column] != user["id"]:
                raise forbidden(f"You are not the author of this {label.lower()}")
            g.target = row
            return f(*args, **kwargs)
        return wrapper
    return decorator


post_owner = owner_required(get_post_row, "post_id", "author_id", "Post")
comment_owner = owner_required(get_comment_row, "comment_id", "user_id", "Comment")
