"""
Input validation.

Validators return cleaned values or raise a 400 whose ``details`` lists every
offending field as ``{"field", "message"}``.
"""

import re

from flask import current_app, request

from .db import SQLITE_MAX_INT
from .errors import bad_request

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
REACTION_TYPES = ("LIKE", "LOVE", "HAHA", "WOW", "SAD", "ANGRY")


def request_data() -> dict:
    """Body fields from either a JSON or a form-data request."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def _text(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    return str(value).strip()


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


class FieldErrors:
    def __init__(self):
        self.errors = []

    def add(self, field, message):
        self.errors.append({"field": field, "message": message})

    def raise_if_any(self):
        if self.errors:
            raise bad_request(self.errors)


def validate_signup(data: dict):
    errors = FieldErrors()
    name = _text(data, "name") or ""
    email = (_text(data, "email") or "").lower()
    password = data.get("password") or ""
    if not name:
        errors.add("name", "name is required")
    if not email:
        errors.add("email", "email is required")
    elif not validate_email(email):
        errors.add("email", "invalid email")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.add("password", f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    errors.raise_if_any()
    return name, email, password


def validate_login(data: dict):
    errors = FieldErrors()
    email = (_text(data, "email") or "").lower()
    password = data.get("password") or ""
    if not email:
        errors.add("email", "email is required")
    if not password or not isinstance(password, str):
        errors.add("password", "password is required")
    errors.raise_if_any()
    return email, password


def validate_post_create(data: dict):
    errors = FieldErrors()
    title = _text(data, "title") or ""
    content = _text(data, "content") or ""
    if not title:
        errors.add("title", "title is required")
    if not content:
        errors.add("content", "content is required")
    errors.raise_if_any()
    return title, content


def validate_post_update(data: dict, has_file: bool):
    """Returns a dict of the columns to change (title/content)."""
    errors = FieldErrors()
    changes = {}
    for field in ("title", "content"):
        value = _text(data, field)
        if value is None:
            continue
        if not value:
            errors.add(field, f"{field} cannot be empty")
        else:
            changes[field] = value
    if not changes and not has_file and not errors.errors:
        errors.add("body", "nothing to update")
    errors.raise_if_any()
    return changes


def validate_comment(data: dict) -> str:
    content = _text(data, "content") or ""
    if not content:
        raise bad_request([{"field": "content", "message": "content is required"}])
    return content


def validate_reaction(data: dict) -> str:
    reaction_type = (_text(data, "type") or "").upper()
    if not reaction_type:
        raise bad_request([{"field": "type", "message": "Reaction type is required"}])
    if reaction_type not in REACTION_TYPES:
        raise bad_request([{"field": "type", "message": f"type must be one of {', '.join(REACTION_TYPES)}"}])
    return reaction_type


def validate_user_update(data: dict, has_file: bool, allow_role: bool):
    errors = FieldErrors()
    changes = {}
    name = _text(data, "name")
    if name is not None:
        if not name:
            errors.add("name", "name cannot be empty")
        else:
            changes["name"] = name
    password = data.get("password")
    if password is not None:
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            errors.add("password", f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        else:
            changes["password"] = password
    role = _text(data, "role")
    if role is not None:
        role = role.upper()
        if not allow_role:
            errors.add("role", "only admins can change roles")
        elif role not in ("USER", "ADMIN"):
            errors.add("role", "role must be USER or ADMIN")
        else:
            changes["role"] = role
    if not changes and not has_file and not errors.errors:
        errors.add("body", "nothing to update")
    errors.raise_if_any()
    return changes


def pagination(args, default_limit: int, max_limit: int):
    try:
        limit = int(args.get("limit", default_limit))
        offset = int(args.get("offset", 0))
    except ValueError:
        raise bad_request("limit and offset must be integers")
    if limit < 1 or limit > max_limit:
        raise bad_request(f"limit must be between 1 and {max_limit}")
    if offset < 0 or offset > SQLITE_MAX_INT:
        raise bad_request(f"offset must be between 0 and {SQLITE_MAX_INT}")
    return limit, offset


def page_args():
    """limit/offset from the query string of the current request."""
    return pagination(
        request.args,
        current_app.config["DEFAULT_PAGE_LIMIT"],
        current_app.config["MAX_PAGE_LIMIT"],
    )
