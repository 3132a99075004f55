from __future__ import annotations

import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_utc
from ..core.constants import DEMO_ACCOUNTS, DEMO_PASSWORD, TECH_ADMIN_ID, TECH_ADMIN_NAME, TECH_ADMIN_PASSWORD
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _starts_line_comment(sql: str, i: int) -> bool:
    # MySQL needs whitespace (or end of input) after the two dashes.
    if sql[i : i + 2] != "--":
        return False
    follower = sql[i + 2 : i + 3]
    return not follower or follower.isspace()


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files; ';' and "-- " comments count only outside quotes.
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False

    for i, ch in enumerate(sql):
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == "-" and not in_single and not in_double and _starts_line_comment(sql, i):
            in_comment = True
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> int:
    count = 0
    for stmt in iter_sql_statements(sql):
        cur.execute(stmt)
        count += 1
    return count


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_sql_file(db_config: dict, path: str | Path) -> int:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = _exec_sql(cur, sql)
        conn.commit()
        return count
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_sql_file(db_config, schema_path)
    logger.info("Applied %s statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _apply_sql_file(db_config, seed_path)
    logger.info("Applied %s statements from %s", count, seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh the built-in accounts with real password hashes."""
    target = DBConfig.from_dict(db_config)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_user(user_id: str, name: str, password: str, user_type: str) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE user_id=%s", (user_id,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, user_type=%s, is_active=1 WHERE user_id=%s",
                    (name, password_hash, user_type, user_id),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (user_id, name, password_hash, user_type, is_active)
                    VALUES (%s, %s, %s, %s, 1)
                    """,
                    (user_id, name, password_hash, user_type),
                )

        upsert_user(TECH_ADMIN_ID, TECH_ADMIN_NAME, TECH_ADMIN_PASSWORD, "tech-admin")
        for user_id, (user_type, name) in DEMO_ACCOUNTS.items():
            upsert_user(user_id, name, DEMO_PASSWORD, user_type)

        # Place the demo student in the seeded L3 / IS / G1 structure when it exists.
        cur.execute("SELECT group_id, level_id, specialization_id FROM student_groups ORDER BY group_id LIMIT 1")
        group = cur.fetchone()
        if group:
            cur.execute(
                "UPDATE users SET group_id=%s, level_id=%s, specialization_id=%s WHERE user_id=%s",
                (group["group_id"], group["level_id"], group["specialization_id"], "S12345"),
            )

        conn.commit()
    finally:
        conn.close()


def ensure_demo_scan_code(db_config: dict, *, code: str = "DEMO-QR", ttl_minutes: int = 60 * 24) -> None:
    """Refresh a long-lived demo scan code on the first timetable entry."""
    target = DBConfig.from_dict(db_config)
    expires_at = now_utc() + timedelta(minutes=ttl_minutes)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT timetable_id, teacher_id FROM timetable ORDER BY timetable_id LIMIT 1")
        entry = cur.fetchone()
        if not entry:
            return
        cur.execute("DELETE FROM qr_codes WHERE code=%s", (code,))
        cur.execute(
            """
            INSERT INTO qr_codes (teacher_id, course_id, timetable_id, code, is_active, expires_at)
            VALUES (%s, %s, %s, %s, 1, %s)
            """,
            (entry["teacher_id"], None, entry["timetable_id"], code, expires_at),
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
