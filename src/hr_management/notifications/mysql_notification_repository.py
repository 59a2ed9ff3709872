from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationUrgency
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        message: str,
        notification_type: str,
        urgency: NotificationUrgency,
        sender_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(employee_id, message, notification_type, urgency, sender_id, is_read)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (int(employee_id), message, notification_type, urgency.value, sender_id),
            )
            return int(cur.lastrowid)

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, employee_id, message, notification_type, urgency,
                       created_at, sender_id, is_read
                FROM notifications
                WHERE employee_id=%s
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    employee_id=int(r["employee_id"]),
                    message=r["message"],
                    notification_type=r["notification_type"],
                    urgency=NotificationUrgency(r["urgency"]),
                    created_at=r["created_at"],
                    sender_id=r.get("sender_id"),
                    is_read=bool(r.get("is_read")),
                )
                for r in fetchall(cur)
            ]

    def count_unread(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS unread FROM notifications WHERE employee_id=%s AND is_read=0",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return int(r["unread"]) if r else 0

    def mark_as_read(self, *, notification_id: int, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND employee_id=%s",
                (int(notification_id), int(employee_id)),
            )
            return cur.rowcount > 0

    def mark_all_as_read(self, employee_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE employee_id=%s AND is_read=0",
                (int(employee_id),),
            )
            return int(cur.rowcount)

    def list_team_member_ids(self, manager_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id
                FROM employees
                WHERE manager_id=%s AND employee_id<>%s AND is_active=1
                ORDER BY employee_id
                """,
                (int(manager_id), int(manager_id)),
            )
            return [int(r["employee_id"]) for r in fetchall(cur)]
