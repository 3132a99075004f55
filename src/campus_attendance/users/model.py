from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import UserType


@dataclass(frozen=True)
class User:
    """Account row. Students additionally carry their level, specialization and group."""

    user_id: str
    name: str
    password_hash: str
    user_type: UserType
    email: Optional[str] = None
    level_id: Optional[int] = None
    specialization_id: Optional[int] = None
    group_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LoginSession:
    session_id: str
    user_id: str
    expires_at: datetime
