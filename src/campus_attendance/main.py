from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .academics.controller import register as register_academics
from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import (
    apply_schema,
    apply_seed_sql,
    ensure_demo_scan_code,
    ensure_demo_users,
    list_tables,
)
from .justifications.controller import register as register_justifications
from .notifications.controller import register as register_notifications
from .timetable.controller import register as register_timetable
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parents[2] / "database"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SQL_DIR / "schema.sql")
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=SQL_DIR / "seed.sql")
        ensure_demo_users(db_config)
        ensure_demo_scan_code(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory; pass a prebuilt container to skip MySQL wiring."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["UPLOAD_FOLDER"] = getattr(settings, "UPLOAD_FOLDER", "uploads")

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
        _bootstrap_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            upload_folder=app.config["UPLOAD_FOLDER"],
            scan_code_ttl_minutes=int(getattr(settings, "SCAN_CODE_TTL_MINUTES", 15)),
            demo_logins_enabled=bool(getattr(settings, "DEMO_LOGINS_ENABLED", False)),
        )

    register_users(app, container)
    register_academics(app, container)
    register_timetable(app, container)
    register_attendance(app, container)
    register_justifications(app, container)
    register_notifications(app, container)
    register_dashboard(app, container)

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)
