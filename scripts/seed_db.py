"""Load demo data: database/seed.sql, the built-in accounts and a long-lived DEMO-QR code."""

from __future__ import annotations

import argparse
import importlib
from pathlib import Path

from dotenv import load_dotenv

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import apply_seed_sql, ensure_demo_scan_code, ensure_demo_users

SEED_PATH = Path(__file__).resolve().parents[1] / "database" / "seed.sql"


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--qr-code", default="DEMO-QR", help="scan code to (re)create for the first session")
    parser.add_argument("--qr-ttl-minutes", type=int, default=60 * 24)
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=SEED_PATH)
    ensure_demo_users(db_config)
    ensure_demo_scan_code(db_config, code=args.qr_code, ttl_minutes=args.qr_ttl_minutes)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
