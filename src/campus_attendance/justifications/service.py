from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from werkzeug.utils import secure_filename

from ..academics.repository import AcademicRepository
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.validators import optional_str, require_positive_int
from ..core.constants import ALLOWED_JUSTIFICATION_EXTENSIONS
from ..core.enums import AttendanceStatus, JustificationStatus, UserType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from .repository import JustificationRepository

logger = logging.getLogger(__name__)


def store_upload(upload: Any, *, folder: str, student_id: str, now: datetime) -> str:
    """Save an uploaded file (werkzeug FileStorage) under ``folder/<student_id>/``."""
    filename = secure_filename(upload.filename or "")
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ALLOWED_JUSTIFICATION_EXTENSIONS:
        raise ValidationError("Unsupported file type (allowed: pdf, png, jpg, jpeg)")

    target_dir = os.path.join(folder, secure_filename(student_id))
    os.makedirs(target_dir, exist_ok=True)
    path = os.path.join(target_dir, f"{now.strftime('%Y%m%d%H%M%S')}_{filename}")
    upload.save(path)
    return path


class JustificationService:
    """Use case: students justify absences, teachers review them."""

    def __init__(
        self,
        justifications: JustificationRepository,
        attendance: AttendanceRepository,
        academics: AcademicRepository,
        notifications: NotificationService,
        *,
        upload_folder: str,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._justifications = justifications
        self._attendance = attendance
        self._academics = academics
        self._notifications = notifications
        self._upload_folder = upload_folder
        self._clock = clock

    def submit(
        self,
        *,
        student_id: str,
        student_name: Optional[str],
        module_id: Any,
        absence_date: Optional[str],
        reason: Optional[str],
        upload: Any = None,
    ) -> int:
        if not module_id or not absence_date or not reason or not str(reason).strip():
            raise ValidationError("Missing required fields")
        module_id = require_positive_int(module_id, "Module")
        try:
            day = parse_iso_date(str(absence_date)[:10])
        except ValueError:
            raise ValidationError("Absence date must be YYYY-MM-DD") from None
        reason = str(reason).strip()

        absence = self._attendance.find_absence(student_id=student_id, module_id=module_id, attendance_date=day)
        if not absence:
            raise NotFoundError("No matching absence record found")

        now = self._clock()
        file_path = reason
        if upload is not None and getattr(upload, "filename", None):
            file_path = store_upload(upload, folder=self._upload_folder, student_id=student_id, now=now)

        justification_id = self._justifications.create(
            student_id=student_id,
            module_id=module_id,
            attendance_id=absence.attendance_id,
            file_path=file_path,
            reason=reason,
            submitted_at=now,
        )
        logger.info("Justification %s submitted by %s", justification_id, student_id)

        module = self._academics.get_module(module_id)
        if module and module.teacher_id:
            self._notifications.notify(
                title="New absence justification",
                message=f"Student {student_name or student_id} submitted an absence justification for "
                f"{module.name} that needs review",
                created_by=student_id,
                target_user_type=UserType.TEACHER.value,
            )
        return justification_id

    def list_mine(self, student_id: str) -> Sequence[dict]:
        return self._justifications.list_for_student(student_id)

    def list_for_review(self, teacher_id: str) -> Sequence[dict]:
        return self._justifications.list_pending_for_teacher(teacher_id)

    def review(
        self,
        *,
        reviewer_id: str,
        reviewer_type: UserType,
        justification_id: int,
        decision: Optional[str],
        comments: Optional[str] = None,
    ) -> JustificationStatus:
        try:
            status = JustificationStatus(str(decision))
        except ValueError:
            raise ValidationError("Decision must be 'approved' or 'rejected'") from None
        if status == JustificationStatus.PENDING:
            raise ValidationError("Decision must be 'approved' or 'rejected'")

        justification = self._justifications.get_by_id(justification_id)
        if not justification:
            raise NotFoundError("Justification not found")
        if justification.status != JustificationStatus.PENDING:
            raise ValidationError("Justification has already been reviewed")

        if not reviewer_type.is_admin:
            module = self._academics.get_module(justification.module_id)
            if reviewer_type != UserType.TEACHER or not module or module.teacher_id != reviewer_id:
                raise AuthorizationError("You cannot review this justification")

        updated = self._justifications.review(
            justification_id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=self._clock(),
            comments=optional_str(comments),
        )
        if not updated:
            raise ValidationError("Justification has already been reviewed")

        if status == JustificationStatus.APPROVED:
            self._attendance.set_status(justification.attendance_id, AttendanceStatus.EXCUSED)
        logger.info("Justification %s %s by %s", justification_id, status.value, reviewer_id)
        return status
