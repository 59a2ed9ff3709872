from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in/clock-out pair."""

    attendance_id: int
    employee_id: int
    shift_id: Optional[int]
    entry_time: datetime
    exit_time: Optional[datetime]
    duration_hours: Optional[float]
    login_method: str
    logout_method: Optional[str] = None
    exception_id: Optional[int] = None
    is_late: bool = False

    @property
    def is_open(self) -> bool:
        return self.exit_time is None

    @property
    def status(self) -> str:
        if self.exit_time is None:
            return "Clocked In"
        if self.is_late:
            return "Late"
        return "Present"


@dataclass(frozen=True)
class AttendanceLogEntry:
    log_id: int
    attendance_id: int
    actor: str
    logged_at: datetime
    reason: str
