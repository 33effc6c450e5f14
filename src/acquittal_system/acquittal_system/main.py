from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.http import error_response, validation_response
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .exports.controller import register as register_exports
from .ingestion.controller import register as register_ingestion
from .reporting.controller import register as register_reporting
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(_e):
        return error_response("Route not found", 404, path=request.path)

    @app.errorhandler(413)
    def too_large(_e):
        limit = app.config.get("MAX_CONTENT_LENGTH") or 0
        return error_response(f"File too large (limit {limit // (1024 * 1024)} MB)", 413)

    @app.errorhandler(ValidationError)
    def validation_failed(e: ValidationError):
        return validation_response(e)

    @app.errorhandler(AuthenticationError)
    def unauthenticated(e: AuthenticationError):
        return error_response(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def forbidden(e: AuthorizationError):
        return error_response(str(e), 403)

    @app.errorhandler(NotFoundError)
    def missing(e: NotFoundError):
        return error_response(str(e), 404)

    @app.errorhandler(Exception)
    def unhandled(e: Exception):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", 10 * 1024 * 1024))
    app.config["UPLOAD_EXTENSIONS"] = tuple(getattr(settings, "UPLOAD_EXTENSIONS", (".xlsx", ".csv")))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", 24)),
            backup_dir=getattr(settings, "BACKUP_DIR", "backups"),
        )

    app.extensions["container"] = container

    register_users(app, container)
    register_ingestion(app, container)
    register_reporting(app, container)
    register_exports(app, container)
    register_settings(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "CHS Acquittals API is running"})

    _register_error_handlers(app)
    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=5000, debug=application.config["DEBUG"])
