from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_utc
from ..common.validators import optional_int, optional_str, require_min_length, require_non_empty
from ..core.constants import (
    DEFAULT_SESSION_DAYS,
    DEMO_ACCOUNTS,
    DEMO_PASSWORD,
    MIN_PASSWORD_LENGTH,
    TECH_ADMIN_ID,
    TECH_ADMIN_NAME,
    TECH_ADMIN_PASSWORD,
)
from ..core.enums import UserType
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import SessionRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    user_type: UserType
    name: str
    level_id: Optional[int]
    specialization_id: Optional[int]
    group_id: Optional[int]
    session_id: str

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "user_type": self.user_type.value,
            "name": self.name,
            "level_id": self.level_id,
            "specialization_id": self.specialization_id,
            "group_id": self.group_id,
            "session_id": self.session_id,
        }


def parse_user_type(value: Optional[str]) -> UserType:
    try:
        return UserType(str(value))
    except ValueError:
        raise ValidationError("Invalid user type") from None


def _password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder hashes like 'CHANGE_ME' from seed.sql
        return False


class AuthService:
    """Use case: login and logout, backed by the sessions table."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        *,
        demo_logins_enabled: bool = False,
        session_days: int = DEFAULT_SESSION_DAYS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._sessions = sessions
        self._demo_logins_enabled = demo_logins_enabled
        self._session_days = session_days
        self._clock = clock

    def _builtin_name(self, user_id: str, password: str, user_type: UserType) -> Optional[str]:
        if not self._demo_logins_enabled:
            return None
        if user_type == UserType.TECH_ADMIN and user_id == TECH_ADMIN_ID and password == TECH_ADMIN_PASSWORD:
            return TECH_ADMIN_NAME
        demo = DEMO_ACCOUNTS.get(user_id)
        if demo and demo[0] == user_type.value and password == DEMO_PASSWORD:
            return demo[1]
        return None

    def _ensure_builtin_user(self, user_id: str, password: str, user_type: UserType, name: str) -> User:
        user = self._users.get_by_id(user_id)
        if user:
            return user
        logger.info("Creating built-in %s account %s", user_type.value, user_id)
        password_hash = generate_password_hash(password)
        self._users.create_user(user_id=user_id, name=name, password_hash=password_hash, user_type=user_type)
        return User(user_id=user_id, name=name, password_hash=password_hash, user_type=user_type)

    def login(self, user_id: Optional[str], password: Optional[str], user_type: Optional[str]) -> SessionUser:
        if not user_id or not password or not user_type:
            raise ValidationError("Missing required fields")
        user_id = str(user_id).strip()
        kind = parse_user_type(user_type)

        builtin_name = self._builtin_name(user_id, password, kind)
        if builtin_name:
            user = self._ensure_builtin_user(user_id, password, kind, builtin_name)
        else:
            user = self._users.get_by_id(user_id)
            if not user or user.user_type != kind or not user.is_active:
                raise AuthenticationError("Invalid credentials")
            if not _password_matches(user.password_hash, password):
                raise AuthenticationError("Invalid credentials")

        session_id = str(uuid.uuid4())
        self._sessions.create_session(
            session_id=session_id,
            user_id=user.user_id,
            expires_at=self._clock() + timedelta(days=self._session_days),
        )
        logger.info("User %s logged in as %s", user.user_id, kind.value)

        return SessionUser(
            user_id=user.user_id,
            user_type=kind,
            name=user.name,
            level_id=user.level_id,
            specialization_id=user.specialization_id,
            group_id=user.group_id,
            session_id=session_id,
        )

    def logout(self, session_id: Optional[str]) -> None:
        if session_id:
            self._sessions.delete_session(session_id)


class UserService:
    """Use case: manage accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, user_type: Optional[str] = None) -> Sequence[User]:
        kind = parse_user_type(user_type) if user_type else None
        return self._users.list_users(kind)

    def create_user(
        self,
        *,
        user_id: str,
        name: str,
        password: str,
        user_type: str,
        email: Optional[str] = None,
        level_id=None,
        specialization_id=None,
        group_id=None,
    ) -> str:
        user_id = require_non_empty(user_id, "User ID")
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        kind = parse_user_type(user_type)

        if kind == UserType.TECH_ADMIN:
            raise ValidationError("Technical administrator accounts cannot be created here")
        if self._users.get_by_id(user_id):
            raise ValidationError("User ID already exists")

        self._users.create_user(
            user_id=user_id,
            name=name,
            password_hash=generate_password_hash(password),
            user_type=kind,
            email=optional_str(email),
            level_id=optional_int(level_id),
            specialization_id=optional_int(specialization_id),
            group_id=optional_int(group_id),
        )
        return user_id

    def update_user(self, user_id: str, changes: dict) -> None:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        fields: dict = {}
        if "name" in changes:
            fields["name"] = require_non_empty(changes["name"], "Name")
        if changes.get("password"):
            require_min_length(changes["password"], "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(changes["password"])
        if "email" in changes:
            fields["email"] = optional_str(changes["email"])
        for key in ("level_id", "specialization_id", "group_id"):
            if key in changes:
                fields[key] = optional_int(changes[key])
        if "is_active" in changes:
            fields["is_active"] = 1 if changes["is_active"] else 0

        if not fields:
            raise ValidationError("Nothing to update")
        self._users.update_user(user_id, fields)

    def delete_user(self, *, current_type: UserType, user_id: str) -> None:
        if not current_type.is_admin:
            raise AuthorizationError("You do not have permission")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.user_type == UserType.TECH_ADMIN:
            raise ValidationError("Technical administrator accounts cannot be deleted")

        self._users.delete_by_id(user_id)
