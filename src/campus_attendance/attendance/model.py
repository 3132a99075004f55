from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..timetable.model import TimetableEntry


@dataclass(frozen=True)
class ScanCode:
    """Short-lived code a teacher displays as a QR image for one session."""

    qr_code_id: int
    code: str
    teacher_id: str
    timetable_id: Optional[int]
    course_id: Optional[int]
    is_active: bool
    expires_at: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    attendance_id: int
    student_id: str
    module_id: int
    timetable_id: Optional[int]
    course_id: Optional[int]
    attendance_date: date
    recorded_at: datetime
    status: AttendanceStatus


@dataclass(frozen=True)
class ValidatedCode:
    scan_code: ScanCode
    session: TimetableEntry


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    session: TimetableEntry
    already_recorded: bool
