from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    """Announcement; each target left as None matches everyone."""

    notification_id: int
    title: str
    message: str
    active: bool
    created_at: datetime
    created_by: str
    target_user_type: Optional[str] = None
    target_level_id: Optional[int] = None
    target_specialization_id: Optional[int] = None
