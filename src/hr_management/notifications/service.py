from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import NotificationUrgency, Role
from ..core.exceptions import DataStoreError, ValidationError
from ..employees.roles import approver_roles, require_role
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify_employee(
        self,
        employee_id: int,
        message: str,
        *,
        notification_type: str = "General",
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
        sender_id: Optional[int] = None,
    ) -> bool:
        """Create a notification record; returns False instead of raising on store failure."""

        try:
            self._notifications.create(
                employee_id=int(employee_id),
                message=message,
                notification_type=notification_type,
                urgency=NotificationUrgency(urgency),
                sender_id=sender_id,
            )
        except DataStoreError as exc:
            logger.warning("Notification to employee %s not delivered: %s", employee_id, exc)
            return False
        return True

    def send(
        self,
        *,
        employee_ids: Sequence[int],
        message: str,
        sender_id: Optional[int] = None,
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
    ) -> int:
        message = require_non_empty(message, "Message")
        if not employee_ids:
            raise ValidationError("At least one recipient is required")
        delivered = 0
        for employee_id in employee_ids:
            if self.notify_employee(
                employee_id,
                message,
                notification_type="Manual",
                urgency=urgency,
                sender_id=sender_id,
            ):
                delivered += 1
        return delivered

    def list_for_employee(self, employee_id: int) -> Sequence[Notification]:
        return self._notifications.list_for_employee(int(employee_id))

    def unread_count(self, employee_id: int) -> int:
        return self._notifications.count_unread(int(employee_id))

    def mark_as_read(self, *, notification_id: int, employee_id: int) -> None:
        if not self._notifications.mark_as_read(notification_id=int(notification_id), employee_id=int(employee_id)):
            raise ValidationError("Notification not found")

    def mark_all_as_read(self, employee_id: int) -> int:
        return self._notifications.mark_all_as_read(int(employee_id))

    def send_team_notification(
        self,
        *,
        current_role: Role,
        manager_id: int,
        message: str,
        urgency: NotificationUrgency = NotificationUrgency.NORMAL,
    ) -> int:
        """Notify every active direct report of manager_id. Returns how many were delivered."""

        require_role(current_role, approver_roles())
        manager_id = require_positive_id(manager_id, "Manager")
        team = self._notifications.list_team_member_ids(manager_id)
        if not team:
            raise ValidationError("Manager has no team members")
        delivered = self.send(employee_ids=team, message=message, sender_id=manager_id, urgency=urgency)
        logger.info("Team notification from %s delivered to %d of %d", manager_id, delivered, len(team))
        return delivered
