from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import optional_int, optional_str, require_non_empty
from ..core.enums import UserType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def is_visible_to(
    notification: Notification,
    *,
    user_type: Optional[str],
    level_id: Optional[int] = None,
    specialization_id: Optional[int] = None,
) -> bool:
    """Level and specialization targets only narrow what students see."""
    if user_type and notification.target_user_type not in (None, user_type):
        return False
    if user_type == UserType.STUDENT.value:
        if level_id and notification.target_level_id not in (None, level_id):
            return False
        if specialization_id and notification.target_specialization_id not in (None, specialization_id):
            return False
    return True


class NotificationService:
    def __init__(self, notifications: NotificationRepository, *, clock: Callable[[], datetime] = now_utc):
        self._notifications = notifications
        self._clock = clock

    def list_for_user(
        self,
        *,
        user_type: Optional[str],
        level_id: Optional[int] = None,
        specialization_id: Optional[int] = None,
    ) -> Sequence[Notification]:
        return [
            n
            for n in self._notifications.list_active()
            if is_visible_to(n, user_type=user_type, level_id=level_id, specialization_id=specialization_id)
        ]

    def list_all(self, *, current_type: Optional[UserType]) -> Sequence[Notification]:
        self._require_admin(current_type)
        return self._notifications.list_all()

    @staticmethod
    def _require_admin(current_type: Optional[UserType]) -> None:
        if not current_type or not current_type.is_admin:
            raise AuthorizationError("Unauthorized")

    def create(self, *, current_type: Optional[UserType], created_by: str, data: dict) -> int:
        self._require_admin(current_type)
        if not data.get("title") or not data.get("message"):
            raise ValidationError("Title and message are required")

        target_user_type = optional_str(data.get("target_user_type") or data.get("targetUserType"))
        if target_user_type:
            try:
                UserType(target_user_type)
            except ValueError:
                raise ValidationError("Invalid target user type") from None

        notification_id = self._notifications.create(
            title=require_non_empty(data.get("title"), "Title"),
            message=require_non_empty(data.get("message"), "Message"),
            created_by=created_by,
            created_at=self._clock(),
            target_user_type=target_user_type,
            target_level_id=optional_int(data.get("target_level_id") or data.get("targetLevelId")),
            target_specialization_id=optional_int(
                data.get("target_specialization_id") or data.get("targetSpecializationId")
            ),
        )
        logger.info("Notification %s created by %s", notification_id, created_by)
        return notification_id

    def notify(self, *, title: str, message: str, created_by: str, target_user_type: Optional[str] = None) -> int:
        """System-generated notification (no admin check)."""
        return self._notifications.create(
            title=title,
            message=message,
            created_by=created_by,
            created_at=self._clock(),
            target_user_type=target_user_type,
        )

    def update(self, *, current_type: Optional[UserType], notification_id: int, data: dict) -> None:
        self._require_admin(current_type)
        fields: dict = {}
        if "title" in data:
            fields["title"] = require_non_empty(data["title"], "Title")
        if "message" in data:
            fields["message"] = require_non_empty(data["message"], "Message")
        if "active" in data:
            fields["active"] = 1 if data["active"] else 0
        if not fields:
            raise ValidationError("Nothing to update")
        if not self._notifications.update(notification_id, fields):
            raise NotFoundError("Notification not found")

    def delete(self, *, current_type: Optional[UserType], notification_id: int) -> None:
        self._require_admin(current_type)
        if not self._notifications.delete(notification_id):
            raise NotFoundError("Notification not found")
