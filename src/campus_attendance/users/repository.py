from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import UserType
from .model import LoginSession, User


class UserRepository(Protocol):
    """Storage interface for accounts; services depend on this, not on MySQL."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        password_hash: str,
        user_type: UserType,
        email: Optional[str] = None,
        level_id: Optional[int] = None,
        specialization_id: Optional[int] = None,
        group_id: Optional[int] = None,
    ) -> None:
        raise NotImplementedError

    def update_user(self, user_id: str, fields: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: str) -> bool:
        raise NotImplementedError

    def list_users(self, user_type: Optional[UserType] = None) -> Sequence[User]:
        raise NotImplementedError

    def list_teacher_ids(self) -> Sequence[str]:
        raise NotImplementedError

    def count_by_type(self) -> dict:
        raise NotImplementedError


class SessionRepository(Protocol):
    def create_session(self, *, session_id: str, user_id: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def get_session(self, session_id: str) -> Optional[LoginSession]:
        raise NotImplementedError

    def delete_session(self, session_id: str) -> bool:
        raise NotImplementedError
