from __future__ import annotations

from pathlib import Path

import pytest

from campus_attendance.config import get_settings_module
from campus_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

SQL_DIR = Path(__file__).resolve().parents[2] / "database"


def test_splitter_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_splitter_handles_escaped_quotes():
    sql = "INSERT INTO t VALUES ('it\\'s; fine');"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('it\\'s; fine')"]


def test_line_comments_are_dropped_outside_quotes():
    sql = "-- header\nCREATE TABLE a (id INT); -- trailing note\nSELECT 1 --x;\n"
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (id INT)", "SELECT 1 --x"]


def test_dashes_inside_string_literals_are_kept():
    sql = "INSERT INTO t VALUES('a\n-- not a comment\nb');"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES('a\n-- not a comment\nb')"]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE a (id INT);"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (id INT)"]


def test_schema_file_defines_attendance_unique_key():
    sql = _strip_create_db_and_use((SQL_DIR / "schema.sql").read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    tables = [s.split("(")[0].split()[-1] for s in statements if s.upper().startswith("CREATE TABLE")]
    for table in ("users", "sessions", "timetable", "qr_codes", "attendance", "justifications", "notifications"):
        assert table in tables

    attendance = next(s for s in statements if "CREATE TABLE IF NOT EXISTS attendance" in s)
    assert "UNIQUE KEY uq_attendance_session_day (student_id, timetable_id, attendance_date)" in attendance


def test_seed_file_parses():
    sql = _strip_create_db_and_use((SQL_DIR / "seed.sql").read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))
    assert statements
    assert all(s.upper().startswith("INSERT IGNORE INTO") for s in statements)


@pytest.mark.parametrize(
    "env,expected",
    [
        ("production", "campus_attendance.config.production"),
        ("prod", "campus_attendance.config.production"),
        ("testing", "campus_attendance.config.testing"),
        ("anything", "campus_attendance.config.development"),
    ],
)
def test_settings_module_selection(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_seed_has_an_absence_for_the_demo_student():
    sql = _strip_create_db_and_use((SQL_DIR / "seed.sql").read_text(encoding="utf-8"))
    attendance = [s for s in iter_sql_statements(sql) if s.startswith("INSERT IGNORE INTO attendance")]
    assert attendance
    assert "'S12345'" in attendance[0] and "'absent'" in attendance[0]

    users = [s for s in iter_sql_statements(sql) if s.startswith("INSERT IGNORE INTO users")]
    assert any("'S12345'" in s for s in users)
