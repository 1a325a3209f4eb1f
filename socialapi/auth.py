"""
JWT helpers and the decorators that guard routes.

Two token kinds are issued at login: a short-lived access token returned in
the body and sent back as ``Authorization: Bearer``, and a refresh token kept
in an http-only cookie. Tokens are stateless; nothing is stored or revoked
server side.
"""

import datetime
import functools
import logging
from typing import Optional

import jwt  # PyJWT
from flask import current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import ApiException, ErrorCode, forbidden, unauthorized
from .models import get_user_by_id

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ROLES = (ROLE_USER, ROLE_ADMIN)


def hash_password(password: str) -> str:
    # werkzeug's salted scrypt at its default cost, in place of bcrypt rounds=10
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def _create_token(user_id: int, token_type: str, exp_seconds: int) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": now + datetime.timedelta(seconds=exp_seconds),
    }
    return jwt.encode(
        payload,
        current_app.config["SECRET_KEY"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def create_access_token(user_id: int) -> str:
    return _create_token(user_id, ACCESS, current_app.config["ACCESS_TOKEN_EXP_SECONDS"])


def create_refresh_token(user_id: int) -> str:
    return _create_token(user_id, REFRESH, current_app.config["REFRESH_TOKEN_EXP_SECONDS"])


def decode_token(token: str, token_type: str = ACCESS) -> Optional[dict]:
    """Return the payload of a valid token of the given kind, else None."""
    try:
        payload = jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired %s token", token_type)
        return None
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected invalid %s token: %s", token_type, e)
        return None
    if payload.get("type") != token_type:
        return None
    return payload


def user_id_from_payload(payload: dict) -> Optional[int]:
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def set_refresh_cookie(response, token: str):
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        token,
        max_age=current_app.config["REFRESH_TOKEN_EXP_SECONDS"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Strict",
        path="/",
    )
    return response


def clear_refresh_cookie(response):
    response.delete_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Strict",
        path="/",
    )
    return response


def jwt_required(f):
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            raise unauthorized("Missing or invalid Authorization header")
        token = auth.split(" ", 1)[1].strip()
        payload = decode_token(token, ACCESS)
        if not payload:
            raise unauthorized("Invalid or expired token")
        user_id = user_id_from_payload(payload)
        g.current_user = get_user_by_id(user_id) if user_id is not None else None
        if not g.current_user:
            raise unauthorized("User not found")
        return f(*args, **kwargs)
    return wrapper


def is_admin(user) -> bool:
    return bool(user) and user["role"] == ROLE_ADMIN


def admin_required(f):
    """Must be stacked under @jwt_required."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        if not is_admin(g.current_user):
            raise forbidden("Admin role required")
        return f(*args, **kwargs)
    return wrapper


def refresh_failed(details=None):
    return ApiException(ErrorCode.FAILED_REFRESH_TOKEN, 403, details)
