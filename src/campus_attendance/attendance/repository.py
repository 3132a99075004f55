from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, ScanCode


class ScanCodeRepository(Protocol):
    def get_active_by_code(self, code: str) -> Optional[ScanCode]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[ScanCode]:
        raise NotImplementedError

    def create_code(
        self,
        *,
        teacher_id: str,
        timetable_id: int,
        course_id: Optional[int],
        code: str,
        expires_at: datetime,
    ) -> int:
        raise NotImplementedError

    def deactivate_for_timetable(self, timetable_id: int) -> int:
        raise NotImplementedError

    def deactivate(self, code: str) -> bool:
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def find_for_session_on_date(
        self, *, student_id: str, timetable_id: int, attendance_date: date
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert one row; raises DuplicateRecordError when the session/day key is taken."""
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(
        self,
        student_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        module_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """History rows joined with module and session info, newest first."""
        raise NotImplementedError

    def find_absence(self, *, student_id: str, module_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def set_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def count_by_status(self, student_id: Optional[str] = None) -> dict:
        raise NotImplementedError
