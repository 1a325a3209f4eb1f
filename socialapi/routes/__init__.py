from flask import jsonify
from werkzeug.routing import IntegerConverter

from ..db import SQLITE_MAX_INT
from . import auth, comments, images, posts, reactions, users


class IdConverter(IntegerConverter):
    """``<id:...>``: a row id. Values sqlite cannot store never match, so they 404."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("max", SQLITE_MAX_INT)
        super().__init__(map, *args, **kwargs)


def register_blueprints(app):
    # converters must exist before any rule using them is added
    app.url_map.converters["id"] = IdConverter

    app.register_blueprint(auth.bp, url_prefix="/api/auth")
    app.register_blueprint(auth.token_bp, url_prefix="/api")
    app.register_blueprint(users.bp, url_prefix="/api/user")
    app.register_blueprint(posts.bp, url_prefix="/api/post")
    app.register_blueprint(comments.bp, url_prefix="/api/comment")
    app.register_blueprint(reactions.bp, url_prefix="/api/reaction")
    app.register_blueprint(images.bp, url_prefix="/api/image")
    app.register_blueprint(images.files_bp)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})
