from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationUrgency
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        message: str,
        notification_type: str,
        urgency: NotificationUrgency,
        sender_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int = 200) -> Sequence[Notification]:
        raise NotImplementedError

    def count_unread(self, employee_id: int) -> int:
        raise NotImplementedError

    def mark_as_read(self, *, notification_id: int, employee_id: int) -> bool:
        raise NotImplementedError

    def mark_all_as_read(self, employee_id: int) -> int:
        raise NotImplementedError

    def list_team_member_ids(self, manager_id: int) -> Sequence[int]:
        """Active direct reports of manager_id, excluding a self-pointing manager."""

        raise NotImplementedError
