"""QuoraHub application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask, g, jsonify

from quorahub.config import config_by_name
from quorahub.extensions import init_extensions, login_manager


def create_app(config_name: Optional[str] = None, *, start_listeners: Optional[bool] = None) -> Flask:
    """Create and configure the QuoraHub Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    # Normalize relative sqlite paths to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    _import_models()
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    @app.get("/api/v1/ping")
    def ping():
        """Lightweight endpoint for load-balancer health checks."""
        return {"pong": True}, 200

    from quorahub.cli import register_commands

    register_commands(app)

    if start_listeners is None:
        start_listeners = bool(app.config.get("EVENT_LISTENERS_AUTOSTART"))
    if start_listeners:
        _start_in_process_listeners(app)

    return app


def _import_models() -> None:
    """Import every model module so metadata is complete for create_all/alembic."""
    from quorahub.core.audit import models as audit_models  # noqa: F401
    from quorahub.core.notifications import models as notification_models  # noqa: F401
    from quorahub.core.search import models as search_models  # noqa: F401
    from quorahub.core.users import models as user_models  # noqa: F401
    from quorahub.domains.answers.models import answer_models  # noqa: F401
    from quorahub.domains.comments.models import comment_models  # noqa: F401
    from quorahub.domains.questions.models import question_models  # noqa: F401
    from quorahub.domains.tags.models import tag_models  # noqa: F401


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from quorahub.core.auth.controllers import auth_bp  # local import to avoid circulars
    from quorahub.core.notifications.controllers import notification_api_bp
    from quorahub.core.search.controllers import search_api_bp
    from quorahub.core.users.controllers import user_api_bp
    from quorahub.domains.answers.controllers.answer_api import answer_api_bp
    from quorahub.domains.comments.controllers.comment_api import comment_api_bp
    from quorahub.domains.questions.controllers.question_api import question_api_bp
    from quorahub.domains.tags.controllers.tag_api import tag_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(user_api_bp, url_prefix="/api/v1/users")
    app.register_blueprint(question_api_bp, url_prefix="/api/v1/questions")
    app.register_blueprint(answer_api_bp, url_prefix="/api/v1/answers")
    app.register_blueprint(comment_api_bp, url_prefix="/api/v1/comments")
    app.register_blueprint(tag_api_bp, url_prefix="/api/v1/tags")
    app.register_blueprint(notification_api_bp, url_prefix="/api/v1/notifications")
    app.register_blueprint(search_api_bp, url_prefix="/api/v1/search")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Bearer-token principal loading and the uniform 401 body."""
    from flask_login import current_user

    from quorahub.core.auth.gate import authentication_gate

    @login_manager.request_loader
    def _load_user_from_request(req):
        return authentication_gate.authenticate(req)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"ok": False, "error": "unauthorized"}), 401

    @app.before_request
    def _authenticate_request():
        # Requests can share an app context (and its ``g``); never reuse a principal.
        g.pop("_login_user", None)
        current_user._get_current_object()


def _start_in_process_listeners(app: Flask) -> None:
    from quorahub.core.events.consumer import event_consumer
    from quorahub.platform.worker.config import ListenerConfig
    from quorahub.platform.worker.listener import start_listeners

    start_listeners(app, app.extensions["event_broker"], event_consumer.handle, ListenerConfig.from_config(app.config))
