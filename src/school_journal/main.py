from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, Response, request
from werkzeug.exceptions import MethodNotAllowed, NotFound

from .common.http import apply_no_store, error_response
from .config import get_settings_module
from .container import Container, build_container
from .core.logging_config import setup_logging
from .database.bootstrap import apply_schema, list_tables
from .journals.controller import register as register_journals
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    backend = getattr(settings, "STORAGE_BACKEND", "mysql")
    db_config = getattr(settings, "DB_CONFIG")
    logger.info("settings=%s backend=%s", settings_module, backend)

    if container is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(backend=backend, db_config=db_config)
        if backend == "memory" or bool(getattr(settings, "AUTO_SEED_DB", False)):
            # list_users seeds the roster on an empty store, so logins work right away
            container.user_service.list_users()

    register_users(app, container)
    register_journals(app, container)

    @app.after_request
    def _no_store(response: Response) -> Response:
        if request.path.startswith("/api/"):
            apply_no_store(response)
        return response

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(e: MethodNotAllowed):
        body, status = error_response(405, f"Method {request.method} Not Allowed", key="error")
        body.headers["Allow"] = ", ".join(sorted(e.valid_methods or []))
        return body, status

    @app.errorhandler(NotFound)
    def _not_found(e: NotFound):
        return error_response(404, "Not found")

    return app
