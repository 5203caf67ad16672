from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .auth.settings import AuthSettings
from .container import Container, build_container
from .core.constants import EXPORT_VERSION, MAX_IMPORT_BYTES, METHOD_NOT_ALLOWED_MESSAGE, SERVER_ERROR_MESSAGE
from .core.exceptions import DomainError
from .database.connection import DBConfig
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .activities.controller import register as register_activities
from .exports.controller import register as register_exports
from .indicators.controller import register as register_indicators
from .periods.controller import register as register_periods
from .programs.controller import register as register_programs
from .results.controller import register as register_results
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        if e.code == 405:
            return jsonify({"error": METHOD_NOT_ALLOWED_MESSAGE}), 405
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        app.logger.exception("Unhandled error")
        return jsonify({"error": SERVER_ERROR_MESSAGE, "details": str(e)}), 500


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    auth_settings = AuthSettings.from_settings(settings)

    app.secret_key = auth_settings.secret_key
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PERMANENT_SESSION_LIFETIME"] = auth_settings.lifetime
    app.config["MAX_CONTENT_LENGTH"] = MAX_IMPORT_BYTES
    # Fixed expiry: the session cookie is not pushed forward on each request.
    app.config["SESSION_REFRESH_EACH_REQUEST"] = False

    logging.basicConfig(level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO))
    app.logger.setLevel(logging.DEBUG if app.config["DEBUG"] else logging.INFO)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if app.config["DEBUG"]:
            app.logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            app.logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            app.logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            auth_settings=auth_settings,
            export_version=str(getattr(settings, "EXPORT_VERSION", EXPORT_VERSION)),
        )

    register_users(app, container)
    register_periods(app, container)
    register_programs(app, container)
    register_activities(app, container)
    register_indicators(app, container)
    register_results(app, container)
    register_exports(app, container)

    _register_error_handlers(app)

    return app
