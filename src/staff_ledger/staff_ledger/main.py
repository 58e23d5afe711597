from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import DomainError, NotFoundError, PolicyError, ServerError, StateConflictError, ValidationError
from .corrections.controller import register as register_corrections
from .database.bootstrap import apply_schema
from .leaves.controller import register as register_leaves
from .shifts.controller import register as register_shifts
from .stats.controller import register as register_stats

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (StateConflictError, 409),
    (PolicyError, 422),
    (ServerError, 500),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_CODES:
        if isinstance(error, cls):
            return status
    return 400


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error(f"Request failed | Code: {error.code} | {error.message}")
        return jsonify({"success": False, "message": error.message, "code": error.code}), status

    @app.errorhandler(404)
    def handle_not_found(_error):
        return jsonify({"success": False, "message": "Resource not found", "code": "NOT_FOUND"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_error):
        return jsonify({"success": False, "message": "Method not allowed", "code": "METHOD_NOT_ALLOWED"}), 405


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SITE_TIMEZONE"] = getattr(settings, "SITE_TIMEZONE", None)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(
        f"Starting staff-ledger | Settings: {settings_module} | "
        f"DB: {db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
        container = build_container(db_config=db_config, site_timezone=app.config["SITE_TIMEZONE"])

    app.extensions["staff_ledger"] = container
    _register_error_handlers(app)

    register_attendance(app, container)
    register_corrections(app, container)
    register_leaves(app, container)
    register_shifts(app, container)
    register_stats(app, container)

    return app
