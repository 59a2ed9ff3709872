from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.logging_utils import setup_logging
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_GRACE_MINUTES
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .exception_days.controller import register as register_exception_days
from .hierarchy.controller import register as register_hierarchy
from .notifications.controller import register as register_notifications

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

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_grace_minutes=int(getattr(settings, "DEFAULT_GRACE_MINUTES", DEFAULT_GRACE_MINUTES)),
        )

    register_error_handlers(app)
    register_attendance(app, container)
    register_hierarchy(app, container)
    register_notifications(app, container)
    register_employees(app, container)
    register_exception_days(app, container)

    return app
