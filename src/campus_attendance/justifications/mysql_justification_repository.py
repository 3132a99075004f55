from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import JustificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Justification
from .repository import JustificationRepository


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _row_to_dict(r: dict) -> dict:
    return {
        "id": int(r["justification_id"]),
        "student": {"id": r["student_id"], "name": r.get("student_name")},
        "module": {"id": int(r["module_id"]), "name": r["module_name"], "name_ar": r.get("module_name_ar"), "code": r["module_code"]},
        "attendance": {
            "id": int(r["attendance_id"]),
            "date": _iso(normalize_mysql_date(r.get("attendance_date"))),
            "status": r.get("attendance_status"),
        },
        "file_path": r["file_path"],
        "reason": r.get("reason"),
        "status": r["status"],
        "submitted_at": _iso(r.get("submitted_at")),
        "reviewed_at": _iso(r.get("reviewed_at")),
        "reviewed_by": r.get("reviewed_by"),
        "comments": r.get("comments"),
    }


_SELECT_JOINED = """
    SELECT j.justification_id, j.student_id, j.module_id, j.attendance_id, j.file_path, j.reason, j.status,
           j.submitted_at, j.reviewed_at, j.reviewed_by, j.comments,
           u.name AS student_name,
           m.name AS module_name, m.name_ar AS module_name_ar, m.code AS module_code,
           a.attendance_date, a.status AS attendance_status
    FROM justifications j
    JOIN modules m ON m.module_id = j.module_id
    JOIN attendance a ON a.attendance_id = j.attendance_id
    LEFT JOIN users u ON u.user_id = j.student_id
"""


class MySQLJustificationRepository(JustificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        student_id: str,
        module_id: int,
        attendance_id: int,
        file_path: str,
        reason: Optional[str],
        submitted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO justifications(student_id, module_id, attendance_id, file_path, reason, status, submitted_at)
                VALUES(%s,%s,%s,%s,%s,'pending',%s)
                """,
                (student_id, module_id, attendance_id, file_path, reason, submitted_at),
            )
            return int(cur.lastrowid)

    def get_by_id(self, justification_id: int) -> Optional[Justification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT justification_id, student_id, module_id, attendance_id, file_path, reason, status,
                       submitted_at, reviewed_at, reviewed_by, comments
                FROM justifications
                WHERE justification_id=%s
                """,
                (justification_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Justification(
                justification_id=int(row["justification_id"]),
                student_id=str(row["student_id"]),
                module_id=int(row["module_id"]),
                attendance_id=int(row["attendance_id"]),
                file_path=row["file_path"],
                status=JustificationStatus(row["status"]),
                submitted_at=row["submitted_at"],
                reason=row.get("reason"),
                reviewed_at=row.get("reviewed_at"),
                reviewed_by=row.get("reviewed_by"),
                comments=row.get("comments"),
            )

    def list_for_student(self, student_id: str) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_JOINED + " WHERE j.student_id=%s ORDER BY j.submitted_at DESC", (student_id,))
            return [_row_to_dict(r) for r in fetchall(cur)]

    def list_pending_for_teacher(self, teacher_id: str) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_JOINED + " WHERE m.teacher_id=%s AND j.status='pending' ORDER BY j.submitted_at",
                (teacher_id,),
            )
            return [_row_to_dict(r) for r in fetchall(cur)]

    def review(
        self,
        justification_id: int,
        *,
        status: JustificationStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        comments: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE justifications
                SET status=%s, reviewed_by=%s, reviewed_at=%s, comments=%s
                WHERE justification_id=%s AND status='pending'
                """,
                (status.value, reviewed_by, reviewed_at, comments, justification_id),
            )
            return cur.rowcount > 0

    def count_pending(self, *, student_id: Optional[str] = None, teacher_id: Optional[str] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM justifications j JOIN modules m ON m.module_id = j.module_id WHERE j.status='pending'"
        params: list = []
        if student_id is not None:
            sql += " AND j.student_id=%s"
            params.append(student_id)
        if teacher_id is not None:
            sql += " AND m.teacher_id=%s"
            params.append(teacher_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0
