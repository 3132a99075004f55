"""Create the database (if needed) and apply database/schema.sql."""

from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import apply_schema, list_tables

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "database" / "schema.sql"


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
