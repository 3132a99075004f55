from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository

_SELECT = """
    SELECT notification_id, title, message, active, created_at, created_by,
           target_user_type, target_level_id, target_specialization_id
    FROM notifications
"""
_UPDATABLE_COLUMNS = ("title", "message", "active")


def _row_to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=int(row["notification_id"]),
        title=row["title"],
        message=row["message"],
        active=bool(row["active"]),
        created_at=row["created_at"],
        created_by=str(row["created_by"]),
        target_user_type=row.get("target_user_type"),
        target_level_id=row.get("target_level_id"),
        target_specialization_id=row.get("target_specialization_id"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE active=1 ORDER BY created_at DESC, notification_id DESC")
            return [_row_to_notification(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY created_at DESC, notification_id DESC")
            return [_row_to_notification(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(title, message, active, created_at, created_by,
                                          target_user_type, target_level_id, target_specialization_id)
                VALUES(%s,%s,1,%s,%s,%s,%s,%s)
                """,
                (
                    title,
                    message,
                    created_at,
                    created_by,
                    target_user_type,
                    target_level_id,
                    target_specialization_id,
                ),
            )
            return int(cur.lastrowid)

    def update(self, notification_id: int, fields: dict) -> bool:
        columns = [c for c in _UPDATABLE_COLUMNS if c in fields]
        if not columns:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE notifications SET {', '.join(f'{c}=%s' for c in columns)} WHERE notification_id=%s",
                tuple(fields[c] for c in columns) + (notification_id,),
            )
            return cur.rowcount > 0

    def delete(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE notification_id=%s", (notification_id,))
            return cur.rowcount > 0
