from __future__ import annotations

from typing import Optional

from ..academics.repository import AcademicRepository
from ..attendance.repository import AttendanceRepository
from ..common.serialization import to_json
from ..core.enums import AttendanceStatus, UserType
from ..justifications.repository import JustificationRepository
from ..notifications.repository import NotificationRepository
from ..timetable.service import TimetableService
from ..users.repository import UserRepository


def _status_counts(raw: dict) -> dict:
    counts = {s.value: int(raw.get(s.value, 0)) for s in AttendanceStatus}
    counts["total"] = sum(counts.values())
    return counts


class DashboardService:
    """Role-specific summary shown on the landing page."""

    def __init__(
        self,
        *,
        users: UserRepository,
        academics: AcademicRepository,
        attendance: AttendanceRepository,
        justifications: JustificationRepository,
        notifications: NotificationRepository,
        timetable: TimetableService,
    ):
        self._users = users
        self._academics = academics
        self._attendance = attendance
        self._justifications = justifications
        self._notifications = notifications
        self._timetable = timetable

    def for_student(self, student_id: str, *, specialization_id: Optional[int], group_id: Optional[int]) -> dict:
        return {
            "attendance": _status_counts(self._attendance.count_by_status(student_id)),
            "pending_justifications": self._justifications.count_pending(student_id=student_id),
            "today": self._timetable.student_today(specialization_id=specialization_id, group_id=group_id),
        }

    def for_teacher(self, teacher_id: str) -> dict:
        modules = self._academics.list_modules(teacher_id=teacher_id)
        return {
            "modules": [{"id": m.module_id, "name": m.name, "code": m.code} for m in modules],
            "today": self._timetable.teacher_today(teacher_id),
            "pending_justifications": self._justifications.count_pending(teacher_id=teacher_id),
        }

    def for_admin(self) -> dict:
        by_type = {t.value: 0 for t in UserType}
        by_type.update(self._users.count_by_type())
        return {
            "users": by_type,
            "modules": len(self._academics.list_modules()),
            "groups": len(self._academics.list_groups()),
            "attendance": _status_counts(self._attendance.count_by_status()),
            "pending_justifications": self._justifications.count_pending(),
            "active_notifications": len(self._notifications.list_active()),
        }

    def summary(self, user: dict) -> dict:
        user_type = UserType(user["user_type"])
        if user_type == UserType.STUDENT:
            data = self.for_student(
                user["id"], specialization_id=user.get("specialization_id"), group_id=user.get("group_id")
            )
        elif user_type == UserType.TEACHER:
            data = self.for_teacher(user["id"])
        else:
            data = self.for_admin()
        return {"user_type": user_type.value, **to_json(data)}
