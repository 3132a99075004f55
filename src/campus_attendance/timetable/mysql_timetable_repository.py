from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import TimetableEntry
from .repository import TimetableRepository

_SELECT = """
    SELECT t.timetable_id, t.module_id, t.day_of_week, t.start_time, t.end_time, t.room,
           t.teacher_id, t.group_id, t.session_type,
           m.name AS module_name, m.code AS module_code,
           u.name AS teacher_name
    FROM timetable t
    JOIN modules m ON m.module_id = t.module_id
    LEFT JOIN users u ON u.user_id = t.teacher_id
"""


def _row_to_entry(row: dict) -> TimetableEntry:
    return TimetableEntry(
        timetable_id=int(row["timetable_id"]),
        module_id=int(row["module_id"]),
        day_of_week=int(row["day_of_week"]),
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        room=row["room"],
        teacher_id=str(row["teacher_id"]),
        session_type=SessionType(row["session_type"]),
        group_id=row.get("group_id"),
        module_name=row.get("module_name"),
        module_code=row.get("module_code"),
        teacher_name=row.get("teacher_name"),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_entry(self, timetable_id: int) -> Optional[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.timetable_id=%s", (timetable_id,))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def list_for_modules(self, module_ids: Sequence[int], *, group_id: Optional[int] = None) -> Sequence[TimetableEntry]:
        if not module_ids:
            return []
        sql = _SELECT + f" WHERE t.module_id IN ({in_clause(module_ids)})"
        params = list(module_ids)
        if group_id is not None:
            sql += " AND (t.group_id=%s OR t.group_id IS NULL)"
            params.append(group_id)
        sql += " ORDER BY t.day_of_week, t.start_time"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_for_teacher(self, teacher_id: str) -> Sequence[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.teacher_id=%s ORDER BY t.day_of_week, t.start_time", (teacher_id,))
            return [_row_to_entry(r) for r in fetchall(cur)]
