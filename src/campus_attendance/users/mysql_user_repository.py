from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import UserType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LoginSession, User
from .repository import SessionRepository, UserRepository

_USER_COLUMNS = (
    "user_id, name, password_hash, user_type, email, level_id, specialization_id, group_id, is_active, created_at"
)

# Columns an admin may change through update_user().
_UPDATABLE_COLUMNS = {"name", "password_hash", "email", "level_id", "specialization_id", "group_id", "is_active"}


def _row_to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        password_hash=row["password_hash"],
        user_type=UserType(row["user_type"]),
        email=row.get("email"),
        level_id=row.get("level_id"),
        specialization_id=row.get("specialization_id"),
        group_id=row.get("group_id"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, name, password_hash, user_type, email,
                                  level_id, specialization_id, group_id, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (user_id, name, password_hash, user_type.value, email, level_id, specialization_id, group_id),
            )

    def update_user(self, user_id: str, fields: dict) -> bool:
        columns = [c for c in fields if c in _UPDATABLE_COLUMNS]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [fields[c] for c in columns] + [user_id]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE user_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def list_users(self, user_type: Optional[UserType] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if user_type is None:
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY created_at DESC, user_id")
            else:
                cur.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE user_type=%s ORDER BY created_at DESC, user_id",
                    (user_type.value,),
                )
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_teacher_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE user_type='teacher' AND is_active=1")
            return [str(r["user_id"]) for r in fetchall(cur)]

    def count_by_type(self) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_type, COUNT(*) AS total FROM users GROUP BY user_type")
            return {r["user_type"]: int(r["total"]) for r in fetchall(cur)}


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_session(self, *, session_id: str, user_id: str, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sessions(session_id, user_id, expires_at) VALUES(%s,%s,%s)",
                (session_id, user_id, expires_at),
            )

    def get_session(self, session_id: str) -> Optional[LoginSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT session_id, user_id, expires_at FROM sessions WHERE session_id=%s", (session_id,))
            row = fetchone(cur)
            if not row:
                return None
            return LoginSession(
                session_id=str(row["session_id"]),
                user_id=str(row["user_id"]),
                expires_at=row["expires_at"],
            )

    def delete_session(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE session_id=%s", (session_id,))
            return cur.rowcount > 0
