from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def list_active(self) -> Sequence[Notification]:
        """Active notifications, newest first."""
        raise NotImplementedError

    def list_all(self) -> Sequence[Notification]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        message: str,
        created_by: str,
        created_at: datetime,
        target_user_type: Optional[str] = None,
        target_level_id: Optional[int] = None,
        target_specialization_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, notification_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, notification_id: int) -> bool:
        raise NotImplementedError
