import os

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from synqchain.config import Config
from synqchain.db import close_db, init_db
from synqchain.db_migrations import register_db_cli
from synqchain.erp import EXTENSION_KEY, build_erp_adapter
from synqchain.observability import (
    configure_json_logging,
    ensure_request_id,
    mark_request_start,
    observe_response,
)
from synqchain.security import apply_security_headers, enforce_rate_limit


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_json_logging(app)

    _ensure_database_dir(app)
    _register_error_handlers(app)
    _register_security(app)
    _register_auth(app)
    _register_erp_adapter(app)
    _register_blueprints(app)
    register_db_cli(app)
    _maybe_init_schema(app)

    app.teardown_appcontext(close_db)
    return app


def _ensure_database_dir(app: Flask) -> None:
    database_dir = app.config.get("DATABASE_DIR")
    if database_dir:
        os.makedirs(database_dir, exist_ok=True)


def _maybe_init_schema(app: Flask) -> None:
    auto_init = bool(app.config.get("DB_AUTO_INIT", False))
    if app.testing:
        auto_init = True
    if not auto_init:
        return

    flask_env = (os.environ.get("FLASK_ENV", "development") or "development").strip().lower()
    if not app.testing and flask_env != "development":
        app.logger.warning("DB_AUTO_INIT ignored outside development.")
        return

    with app.app_context():
        init_db()


def _register_erp_adapter(app: Flask) -> None:
    adapter = build_erp_adapter(app.config)
    app.extensions[EXTENSION_KEY] = adapter
    app.logger.info(
        "erp_adapter_ready",
        extra={"erp_adapter_id": adapter.adapter_id, "erp_adapter_name": adapter.name},
    )


def _register_blueprints(app: Flask) -> None:
    from synqchain.routes.analytics_routes import analytics_bp
    from synqchain.routes.health_routes import health_bp
    from synqchain.routes.po_routes import po_bp
    from synqchain.routes.project_routes import project_bp
    from synqchain.routes.supplier_routes import supplier_bp

    app.register_blueprint(po_bp)
    app.register_blueprint(project_bp)
    app.register_blueprint(supplier_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(health_bp)


def _register_auth(app: Flask) -> None:
    from synqchain.auth import register_auth

    register_auth(app)


def _register_error_handlers(app: Flask) -> None:
    from synqchain.errors import AppError, SystemError

    @app.before_request
    def _ensure_request_id() -> None:
        ensure_request_id()
        mark_request_start()

    @app.after_request
    def _append_request_id(response):
        response.headers["X-Request-Id"] = ensure_request_id()
        response = observe_response(response)
        return apply_security_headers(response)

    def _log_error(error: AppError, request_id: str) -> None:
        log_method = app.logger.error if error.critical else app.logger.warning
        log_method(
            "application_error",
            extra={
                "request_id": request_id,
                "error_code": error.code,
                "http_status": error.http_status,
                "message_key": error.message_key,
                "details": error.details,
                "request_path": request.path,
                "http_method": request.method,
            },
            exc_info=error.critical,
        )

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        request_id = ensure_request_id()
        _log_error(exc, request_id)
        response = jsonify(exc.to_response_payload())
        retry_after = exc.payload.get("retryAfter")
        if retry_after is not None:
            response.headers["Retry-After"] = str(retry_after)
        return response, exc.http_status

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        # Routing redirects such as a trailing-slash 308 stay as werkzeug built them.
        if exc.code is None or exc.code < 400:
            return exc
        response = exc.get_response()
        response.data = app.json.dumps({"error": exc.description or exc.name})
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        request_id = ensure_request_id()
        mapped = SystemError(
            code="unexpected_error",
            message_key="unexpected_error",
            http_status=500,
            critical=True,
            details=str(exc),
        )
        app.logger.exception(
            "unexpected_exception",
            extra={
                "request_id": request_id,
                "error_code": mapped.code,
                "request_path": request.path,
                "http_method": request.method,
            },
        )
        return jsonify(mapped.to_response_payload()), mapped.http_status


def _register_security(app: Flask) -> None:
    @app.before_request
    def _rate_limit_guard():
        return enforce_rate_limit()
