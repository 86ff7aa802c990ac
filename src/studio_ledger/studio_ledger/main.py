from __future__ import annotations

import importlib
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api import register_error_handlers
from .attendance.controller import register as register_attendance
from .catalog.controller import register as register_catalog
from .container import Container, StudioSettings, build_container
from .database.bootstrap import apply_schema, list_tables
from .payments.controller import register as register_payments
from .people.controller import register as register_people
from .sessions.controller import register as register_sessions
from .suggestions.controller import register as register_suggestions

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def setup_logging(app: Flask) -> None:
    """Console handler always; rotating file handler when LOG_DIR is set."""
    log_format = logging.Formatter("%(asctime)s %(levelname)s %(name)s : %(message)s")
    level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO

    root = logging.getLogger(__name__.rsplit(".", 1)[0])
    root.setLevel(level)

    if not root.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(log_format)
        root.addHandler(console_handler)

        log_dir = app.config.get("LOG_DIR")
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, "studio_ledger.log"),
                maxBytes=1024 * 1024 * 10,  # 10MB
                backupCount=5,
            )
            file_handler.setFormatter(log_format)
            file_handler.setLevel(logging.INFO)
            root.addHandler(file_handler)

    app.logger.setLevel(level)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["LOG_DIR"] = getattr(settings, "LOG_DIR", None)
    setup_logging(app)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        studio_settings = StudioSettings(
            churn_window=int(getattr(settings, "CHURN_WINDOW", StudioSettings.churn_window)),
            churn_threshold=int(getattr(settings, "CHURN_THRESHOLD", StudioSettings.churn_threshold)),
            reminder_days=int(getattr(settings, "PAYMENT_REMINDER_DAYS", StudioSettings.reminder_days)),
        )
        container = build_container(db_config=db_config, settings=studio_settings)
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)
            app.logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["studio_container"] = container

    register_error_handlers(app)
    register_catalog(app, container)
    register_sessions(app, container)
    register_people(app, container)
    register_attendance(app, container)
    register_payments(app, container)
    register_suggestions(app, container)

    return app
