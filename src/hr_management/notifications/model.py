from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationUrgency


@dataclass(frozen=True)
class Notification:
    notification_id: int
    employee_id: int
    message: str
    notification_type: str
    urgency: NotificationUrgency
    created_at: datetime
    sender_id: Optional[int] = None
    is_read: bool = False
