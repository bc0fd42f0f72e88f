from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .applications.controller import register as register_applications
from .attendance.controller import register as register_attendance
from .calendar.controller import register as register_calendar
from .common.errors import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .hackathons.controller import register as register_hackathons
from .notes.controller import register as register_notes
from .overview.controller import register as register_overview
from .projects.controller import register as register_projects
from .system.controller import register as register_system
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)

_SETTING_NAMES = ("ATTENDANCE_POLICY", "CALENDAR_POLICY", "POOL_SIZE")


def _database_file(name: str) -> Path:
    return Path(__file__).resolve().parents[3] / "database" / name


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_database_file("schema.sql"))
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_database_file("seed.sql"))
        logger.info("seed data ready")

    container = build_container(
        db_config=db_config,
        settings={name: getattr(settings, name) for name in _SETTING_NAMES if hasattr(settings, name)},
    )
    app.extensions["command_console"] = container

    register_error_handlers(app)
    register_overview(app, container)
    register_attendance(app, container)
    register_calendar(app, container)
    register_hackathons(app, container)
    register_projects(app, container)
    register_tasks(app, container)
    register_notes(app, container)
    register_applications(app, container)
    register_system(app, container)

    return app
