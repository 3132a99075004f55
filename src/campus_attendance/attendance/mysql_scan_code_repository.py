from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import ScanCode
from .repository import ScanCodeRepository

_SELECT = """
    SELECT qr_code_id, code, teacher_id, timetable_id, course_id, is_active, expires_at, created_at
    FROM qr_codes
"""


def _row_to_scan_code(row: dict) -> ScanCode:
    return ScanCode(
        qr_code_id=int(row["qr_code_id"]),
        code=row["code"],
        teacher_id=str(row["teacher_id"]),
        timetable_id=row.get("timetable_id"),
        course_id=row.get("course_id"),
        is_active=bool(row["is_active"]),
        expires_at=row["expires_at"],
        created_at=row.get("created_at"),
    )


class MySQLScanCodeRepository(ScanCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_by_code(self, code: str) -> Optional[ScanCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE code=%s AND is_active=1", (code,))
            row = fetchone(cur)
            return _row_to_scan_code(row) if row else None

    def get_by_code(self, code: str) -> Optional[ScanCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE code=%s", (code,))
            row = fetchone(cur)
            return _row_to_scan_code(row) if row else None

    def create_code(
        self,
        *,
        teacher_id: str,
        timetable_id: int,
        course_id: Optional[int],
        code: str,
        expires_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO qr_codes(teacher_id, course_id, timetable_id, code, is_active, expires_at)
                VALUES(%s,%s,%s,%s,1,%s)
                """,
                (teacher_id, course_id, timetable_id, code, expires_at),
            )
            return int(cur.lastrowid)

    def deactivate_for_timetable(self, timetable_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE qr_codes SET is_active=0 WHERE timetable_id=%s AND is_active=1", (timetable_id,))
            return int(cur.rowcount)

    def deactivate(self, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE qr_codes SET is_active=0 WHERE code=%s", (code,))
            return cur.rowcount > 0
