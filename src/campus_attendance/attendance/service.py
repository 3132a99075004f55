"""QR check-in and attendance history.

The check-in runs a short chain: validate the scan code (active, not expired,
session and module resolvable), look for an attendance row already recorded
for the same student/session today, insert a ``present`` row otherwise, and
build the response payload.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import as_naive_utc, now_utc
from ..common.serialization import to_json
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DuplicateRecordError,
    InputMissingError,
    LookupFailureError,
    ScanCodeExpiredError,
    ScanCodeNotFoundError,
    ValidationError,
    WriteFailureError,
)
from ..timetable.repository import TimetableRepository
from .model import AttendanceRecord, CheckInResult, ValidatedCode
from .repository import AttendanceRepository, ScanCodeRepository

logger = logging.getLogger(__name__)

MSG_RECORDED = "Attendance recorded successfully"
MSG_ALREADY_RECORDED = "You have already registered your attendance for this session"


def format_response(result: CheckInResult) -> dict:
    session = result.session
    return {
        "message": MSG_ALREADY_RECORDED if result.already_recorded else MSG_RECORDED,
        "attendance": to_json(result.record),
        "module": {"name": session.module_name, "code": session.module_code},
        "session": {"type": session.session_type.value, "room": session.room, "time": session.time_range},
        "already_recorded": result.already_recorded,
    }


class CheckInService:
    """Use case: a student checks in to a session with a scan code."""

    def __init__(
        self,
        scan_codes: ScanCodeRepository,
        attendance: AttendanceRepository,
        timetable: TimetableRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._scan_codes = scan_codes
        self._attendance = attendance
        self._timetable = timetable
        self._clock = clock

    def validate_code(self, code: str, *, now: Optional[datetime] = None) -> ValidatedCode:
        now = now or self._clock()
        scan_code = self._scan_codes.get_active_by_code(code)
        if not scan_code:
            raise ScanCodeNotFoundError("Invalid or expired QR code")
        if as_naive_utc(scan_code.expires_at) <= now:
            raise ScanCodeExpiredError("QR code has expired")

        if scan_code.timetable_id is None:
            raise LookupFailureError("Failed to retrieve session information")
        try:
            entry = self._timetable.get_entry(scan_code.timetable_id)
        except Exception as e:
            logger.exception("Session lookup failed for scan code %s", scan_code.qr_code_id)
            raise LookupFailureError("Failed to retrieve session information") from e
        if not entry:
            raise LookupFailureError("Failed to retrieve session information")

        return ValidatedCode(scan_code=scan_code, session=entry)

    def find_existing(self, student_id: str, timetable_id: int, day: date) -> Optional[AttendanceRecord]:
        records = self._attendance.find_for_session_on_date(
            student_id=student_id, timetable_id=timetable_id, attendance_date=day
        )
        return records[0] if records else None

    def record(self, student_id: str, validated: ValidatedCode, now: datetime) -> CheckInResult:
        scan_code, entry = validated.scan_code, validated.session
        try:
            record = self._attendance.insert(
                student_id=student_id,
                module_id=entry.module_id,
                course_id=scan_code.course_id,
                timetable_id=entry.timetable_id,
                attendance_date=now.date(),
                recorded_at=now,
                status=AttendanceStatus.PRESENT,
            )
        except DuplicateRecordError as e:
            # A concurrent check-in for the same session won the insert.
            existing = self.find_existing(student_id, entry.timetable_id, now.date())
            if existing:
                return CheckInResult(record=existing, session=entry, already_recorded=True)
            raise WriteFailureError("Failed to record attendance") from e
        except Exception as e:
            logger.exception("Attendance insert failed for student %s session %s", student_id, entry.timetable_id)
            raise WriteFailureError("Failed to record attendance") from e

        logger.info("Student %s checked in to session %s", student_id, entry.timetable_id)
        return CheckInResult(record=record, session=entry, already_recorded=False)

    def check_in(self, student_id: Optional[str], code: Optional[str]) -> CheckInResult:
        # JSON clients may send numbers; codes are matched as text.
        code = "" if code is None else str(code).strip()
        if not code or not student_id:
            raise InputMissingError("QR code and student ID are required")

        now = self._clock()
        validated = self.validate_code(code, now=now)

        existing = self.find_existing(student_id, validated.session.timetable_id, now.date())
        if existing:
            return CheckInResult(record=existing, session=validated.session, already_recorded=True)

        return self.record(student_id, validated, now)


class AttendanceHistoryService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def history(
        self,
        student_id: str,
        *,
        status: Optional[str] = None,
        module_id: Optional[int] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[dict]:
        status_filter = None
        if status:
            try:
                status_filter = AttendanceStatus(status)
            except ValueError:
                raise ValidationError("Invalid attendance status") from None
        return self._attendance.list_for_student(student_id, status=status_filter, module_id=module_id, limit=limit)
