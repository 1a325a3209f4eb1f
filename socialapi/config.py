"""
Configuration for the social API.

Everything is read from environment variables (``SOCIAL_*``). A ``.env`` file
in the working directory is loaded first, so local development does not need
exported variables.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent.resolve()

DEV_JWT_SECRET = "please_set_SOCIAL_JWT_SECRET_in_env"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE = os.environ.get("SOCIAL_DATABASE", str(BASE_DIR / "social.db"))
    UPLOAD_FOLDER = os.environ.get("SOCIAL_UPLOAD_FOLDER", str(BASE_DIR / "uploads"))

    # In production this MUST be set. create_app() warns when it is not.
    SECRET_KEY = os.environ.get("SOCIAL_JWT_SECRET") or DEV_JWT_SECRET
    JWT_ALGORITHM = os.environ.get("SOCIAL_JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXP_SECONDS = int(os.environ.get("SOCIAL_ACCESS_TOKEN_EXP_SECONDS", 15 * 60))
    REFRESH_TOKEN_EXP_SECONDS = int(os.environ.get("SOCIAL_REFRESH_TOKEN_EXP_SECONDS", 60 * 60 * 24 * 7))

    REFRESH_COOKIE_NAME = "refreshToken"
    COOKIE_SECURE = _env_bool("SOCIAL_COOKIE_SECURE", True)

    MAX_CONTENT_LENGTH = int(os.environ.get("SOCIAL_MAX_CONTENT_LENGTH", 5 * 1024 * 1024))
    ALLOWED_EXTENSIONS = {
        ext.strip().lower() for ext in os.environ.get("SOCIAL_ALLOWED_EXT", "png,jpg,jpeg,gif,webp").split(",")
    }

    CORS_ORIGINS = os.environ.get("SOCIAL_CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("SOCIAL_LOG_LEVEL", "INFO")

    DEFAULT_PAGE_LIMIT = 20
    MAX_PAGE_LIMIT = 100
