from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SCAN_CODE_TTL_MINUTES
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..timetable.repository import TimetableRepository
from .model import ScanCode
from .repository import ScanCodeRepository

logger = logging.getLogger(__name__)


def new_token() -> str:
    return secrets.token_urlsafe(12)


class ScanCodeService:
    """Use case: a teacher opens a check-in window for one of their sessions."""

    def __init__(
        self,
        scan_codes: ScanCodeRepository,
        timetable: TimetableRepository,
        *,
        ttl_minutes: int = DEFAULT_SCAN_CODE_TTL_MINUTES,
        clock: Callable[[], datetime] = now_utc,
        token_factory: Callable[[], str] = new_token,
    ):
        if ttl_minutes <= 0:
            raise ValueError("ttl_minutes must be positive")
        self._scan_codes = scan_codes
        self._timetable = timetable
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock
        self._token_factory = token_factory

    def generate(self, *, teacher_id: str, timetable_id: int, course_id: Optional[int] = None) -> ScanCode:
        entry = self._timetable.get_entry(timetable_id)
        if not entry:
            raise NotFoundError("Session not found")
        if entry.teacher_id != teacher_id:
            raise AuthorizationError("You do not teach this session")

        closed = self._scan_codes.deactivate_for_timetable(timetable_id)
        if closed:
            logger.info("Deactivated %s previous code(s) for session %s", closed, timetable_id)

        now = self._clock()
        code = self._token_factory()
        expires_at = now + self._ttl
        qr_code_id = self._scan_codes.create_code(
            teacher_id=teacher_id,
            timetable_id=timetable_id,
            course_id=course_id,
            code=code,
            expires_at=expires_at,
        )
        logger.info("Teacher %s opened check-in for session %s until %s", teacher_id, timetable_id, expires_at)
        return ScanCode(
            qr_code_id=qr_code_id,
            code=code,
            teacher_id=teacher_id,
            timetable_id=timetable_id,
            course_id=course_id,
            is_active=True,
            expires_at=expires_at,
            created_at=now,
        )

    def get_owned(self, *, teacher_id: str, code: str) -> ScanCode:
        scan_code = self._scan_codes.get_by_code(code)
        if not scan_code:
            raise NotFoundError("QR code not found")
        if scan_code.teacher_id != teacher_id:
            raise AuthorizationError("You do not own this QR code")
        return scan_code

    def deactivate(self, *, teacher_id: str, code: str) -> None:
        scan_code = self.get_owned(teacher_id=teacher_id, code=code)
        if not scan_code.is_active:
            raise ValidationError("QR code is already inactive")
        self._scan_codes.deactivate(code)
