"""
Typed API errors and the single place that turns them into JSON responses.

Every failure leaves the app as ``{"message", "errorCode", "details"}`` with
the status code belonging to the error. Stack traces only go to the log.
"""

import enum
import logging
import sqlite3

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ErrorCode(enum.IntEnum):
    INVALID_DATA = 4000
    UNAUTHORIZED_ACCESS = 4010
    ALREADY_EXIST = 4030
    FAILED_REFRESH_TOKEN = 4031
    FORBIDDEN = 4032
    NOT_FOUND = 4040
    METHOD_NOT_ALLOWED = 4050
    FILE_TOO_LARGE = 4130
    GENERAL_EXCEPTION = 5000


ERROR_MESSAGES = {
    ErrorCode.INVALID_DATA: "Invalid data",
    ErrorCode.UNAUTHORIZED_ACCESS: "Unauthorized access",
    ErrorCode.ALREADY_EXIST: "These credentials already exist",
    ErrorCode.FAILED_REFRESH_TOKEN: "Refresh token is invalid or missing",
    ErrorCode.FORBIDDEN: "You are not allowed to perform this action",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.METHOD_NOT_ALLOWED: "Method not allowed",
    ErrorCode.FILE_TOO_LARGE: "Uploaded file is too large",
    ErrorCode.GENERAL_EXCEPTION: "Something went wrong. Try again",
}

# werkzeug status -> our code, for errors raised by Flask itself
_HTTP_STATUS_CODES = {
    400: ErrorCode.INVALID_DATA,
    401: ErrorCode.UNAUTHORIZED_ACCESS,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    413: ErrorCode.FILE_TOO_LARGE,
}


class ApiException(Exception):
    def __init__(self, error_code: ErrorCode, status_code: int, details=None):
        self.error_code = ErrorCode(error_code)
        self.message = ERROR_MESSAGES.get(self.error_code, "Unknown error occurred")
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        return {
            "message": self.message,
            "errorCode": int(self.error_code),
            "details": self.details,
        }


def bad_request(details=None):
    return ApiException(ErrorCode.INVALID_DATA, 400, details)


def unauthorized(details=None):
    return ApiException(ErrorCode.UNAUTHORIZED_ACCESS, 401, details)


def forbidden(details=None):
    return ApiException(ErrorCode.FORBIDDEN, 403, details)


def not_found(details=None):
    return ApiException(ErrorCode.NOT_FOUND, 404, details)


def already_exists(details=None):
    return ApiException(ErrorCode.ALREADY_EXIST, 403, details)


def handle_api_exception(e: ApiException):
    return jsonify(e.to_dict()), e.status_code


def handle_http_exception(e: HTTPException):
    code = _HTTP_STATUS_CODES.get(e.code, ErrorCode.GENERAL_EXCEPTION)
    return handle_api_exception(ApiException(code, e.code or 500, e.description))


def handle_integrity_error(e: sqlite3.IntegrityError):
    # only unique keys mean "already exists"; FK/NOT NULL/CHECK failures are bugs or races
    if "UNIQUE constraint" in str(e):
        logger.warning("Unique constraint reached the error handler: %s", e)
        return handle_api_exception(already_exists())
    logger.exception("Integrity error")
    return handle_api_exception(ApiException(ErrorCode.GENERAL_EXCEPTION, 500))


def handle_unexpected_exception(e: Exception):
    logger.exception("Unhandled exception")
    return handle_api_exception(ApiException(ErrorCode.GENERAL_EXCEPTION, 500))


def register_error_handlers(app):
    app.register_error_handler(ApiException, handle_api_exception)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(sqlite3.IntegrityError, handle_integrity_error)
    app.register_error_handler(Exception, handle_unexpected_exception)
