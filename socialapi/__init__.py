"""
Social API: users, posts, comments and reactions behind a JSON REST surface.

Build the app with ``create_app()``; see ``app.py`` for serving it.
"""

import logging
import os
import time

from flask import Flask, g, request
from flask_cors import CORS

from . import cli, db
from .config import DEV_JWT_SECRET, Config
from .errors import register_error_handlers
from .routes import register_blueprints

logger = logging.getLogger("socialapi")


def create_app(test_config=None):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)
    app.json.sort_keys = False

    logging.basicConfig(level=app.config["LOG_LEVEL"])
    if app.config["SECRET_KEY"] == DEV_JWT_SECRET and not app.testing:
        logger.warning("SOCIAL_JWT_SECRET is not set; using the development secret")

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    origins = app.config["CORS_ORIGINS"]
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=origins != "*",
    )

    db.init_app(app)
    cli.init_app(app)
    register_error_handlers(app)
    register_blueprints(app)
    register_request_hooks(app)

    with app.app_context():
        db.init_db()
    logger.info("Database initialized/ready at %s", app.config["DATABASE"])
    logger.info("Uploads folder: %s", app.config["UPLOAD_FOLDER"])

    return app


def register_request_hooks(app):
    request_logger = logging.getLogger("socialapi.requests")

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        request_logger.info(
            "%s %s %s %.1fms", request.method, request.full_path.rstrip("?"), response.status_code, elapsed_ms
        )
        return response

    @app.after_request
    def set_security_headers(response):
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        return response
