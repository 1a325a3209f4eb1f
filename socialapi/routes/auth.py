import logging
import sqlite3

from flask import Blueprint, current_app, g, jsonify, request

from ..auth import (
    REFRESH,
    clear_refresh_cookie,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    jwt_required,
    refresh_failed,
    set_refresh_cookie,
    user_id_from_payload,
    verify_password,
)
from ..db import execute_db
from ..errors import already_exists, bad_request, not_found
from ..models import get_user_by_id, get_user_row_by_email, user_to_dict
from ..uploads import PROFILES, save_upload, uploaded_file_from_request
from ..validation import request_data, validate_login, validate_signup

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


@bp.route("/signup", methods=["POST"])
def signup():
    name, email, password = validate_signup(request_data())

    if get_user_row_by_email(email):
        raise already_exists("email already registered")

    profile_img = None
    file_storage = uploaded_file_from_request(request)
    if file_storage:
        profile_img = save_upload(file_storage, PROFILES)

    try:
        user_id = execute_db(
            "INSERT INTO users (name, email, password_hash, profile_img) VALUES (?, ?, ?, ?)",
            (name, email, hash_password(password), profile_img),
        )
    except sqlite3.IntegrityError:
        # lost a race against a concurrent signup with the same email
        raise already_exists("email already registered")

    logger.info("Registered user %s", user_id)
    return jsonify({"user": get_user_by_id(user_id)}), 201


@bp.route("/login", methods=["POST"])
def login():
    email, password = validate_login(request_data())

    row = get_user_row_by_email(email)
    if not row:
        raise not_found("No user with this email")
    if not verify_password(row["password_hash"], password):
        raise bad_request("Password not correct, try again!")

    response = jsonify({"user": user_to_dict(row), "accessToken": create_access_token(row["id"])})
    set_refresh_cookie(response, create_refresh_token(row["id"]))
    logger.info("User %s logged in", row["id"])
    return response


@bp.route("/me", methods=["GET"])
@jwt_required
def me():
    return jsonify({"user": g.current_user})


@bp.route("/logout", methods=["GET"])
@jwt_required
def logout():
    response = jsonify({"user": g.current_user})
    return clear_refresh_cookie(response)


token_bp = Blueprint("token", __name__)


@token_bp.route("/refresh", methods=["POST"])
def refresh():
    """Trade the refresh cookie for a new access token. The cookie is not rotated."""
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    if not token:
        raise refresh_failed("No refresh token cookie")
    payload = decode_token(token, REFRESH)
    if not payload:
        raise refresh_failed("Invalid or expired refresh token")
    user_id = user_id_from_payload(payload)
    user = get_user_by_id(user_id) if user_id is not None else None
    if not user:
        raise refresh_failed("User no longer exists")
    return jsonify({"accessToken": create_access_token(user["id"])})
