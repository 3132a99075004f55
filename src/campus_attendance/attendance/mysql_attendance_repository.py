from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..common.datetime_utils import format_time_range
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    normalize_mysql_date,
    normalize_mysql_time,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, module_id, course_id, timetable_id, attendance_date, recorded_at, status"


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["attendance_id"]),
        student_id=str(row["student_id"]),
        module_id=int(row["module_id"]),
        course_id=row.get("course_id"),
        timetable_id=row.get("timetable_id"),
        attendance_date=normalize_mysql_date(row["attendance_date"]),
        recorded_at=row["recorded_at"],
        status=AttendanceStatus(row["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_for_session_on_date(
        self, *, student_id: str, timetable_id: int, attendance_date: date
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE student_id=%s AND timetable_id=%s AND attendance_date=%s
                ORDER BY attendance_id
                """,
                (student_id, timetable_id, attendance_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def insert(
        self,
        *,
        student_id: str,
        module_id: int,
        course_id: Optional[int],
        timetable_id: Optional[int],
        attendance_date: date,
        recorded_at: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(student_id, module_id, course_id, timetable_id,
                                           attendance_date, recorded_at, status)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (student_id, module_id, course_id, timetable_id, attendance_date, recorded_at, status.value),
                )
                attendance_id = int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError("Attendance already recorded for this session") from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student_id,
            module_id=module_id,
            course_id=course_id,
            timetable_id=timetable_id,
            attendance_date=attendance_date,
            recorded_at=recorded_at,
            status=status,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (attendance_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_for_student(
        self,
        student_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        module_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        sql = """
            SELECT a.attendance_id, a.attendance_date, a.recorded_at, a.status, a.module_id, a.timetable_id,
                   m.name AS module_name, m.name_ar AS module_name_ar, m.code AS module_code,
                   t.session_type, t.room, t.start_time, t.end_time
            FROM attendance a
            JOIN modules m ON m.module_id = a.module_id
            LEFT JOIN timetable t ON t.timetable_id = a.timetable_id
            WHERE a.student_id=%s
        """
        params: list = [student_id]
        if status is not None:
            sql += " AND a.status=%s"
            params.append(status.value)
        if module_id is not None:
            sql += " AND a.module_id=%s"
            params.append(module_id)
        sql += " ORDER BY a.attendance_date DESC, a.recorded_at DESC LIMIT %s"
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)

        out: list[dict] = []
        for r in rows:
            has_session = r.get("timetable_id") is not None and r.get("start_time") is not None
            out.append(
                {
                    "id": int(r["attendance_id"]),
                    "date": normalize_mysql_date(r["attendance_date"]).isoformat(),
                    "recorded_at": r["recorded_at"].isoformat() if r.get("recorded_at") else None,
                    "status": r["status"],
                    "module": {
                        "id": int(r["module_id"]),
                        "name": r["module_name"],
                        "name_ar": r.get("module_name_ar"),
                        "code": r["module_code"],
                    },
                    "session": (
                        {
                            "id": int(r["timetable_id"]),
                            "type": r.get("session_type"),
                            "room": r.get("room"),
                            "time": format_time_range(
                                normalize_mysql_time(r["start_time"]), normalize_mysql_time(r.get("end_time"))
                            ),
                        }
                        if has_session
                        else None
                    ),
                }
            )
        return out

    def find_absence(self, *, student_id: str, module_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE student_id=%s AND module_id=%s AND attendance_date=%s AND status='absent'
                ORDER BY attendance_id
                LIMIT 1
                """,
                (student_id, module_id, attendance_date),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def set_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance SET status=%s WHERE attendance_id=%s", (status.value, attendance_id))
            return cur.rowcount > 0

    def count_by_status(self, student_id: Optional[str] = None) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            if student_id is None:
                cur.execute("SELECT status, COUNT(*) AS total FROM attendance GROUP BY status")
            else:
                cur.execute(
                    "SELECT status, COUNT(*) AS total FROM attendance WHERE student_id=%s GROUP BY status",
                    (student_id,),
                )
            return {r["status"]: int(r["total"]) for r in fetchall(cur)}
