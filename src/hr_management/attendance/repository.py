from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceLogEntry, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        """Most recent record by entry time (open or closed)."""

        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """Most recent record whose entry falls on work_date."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, since: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_open(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        method: str,
        shift_id: Optional[int] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def close(
        self,
        *,
        attendance_id: int,
        exit_time: datetime,
        method: str,
        duration_hours: float,
    ) -> bool:
        raise NotImplementedError

    def append_log(self, *, attendance_id: int, actor: str, reason: str) -> int:
        raise NotImplementedError

    def list_logs(self, attendance_id: int) -> Sequence[AttendanceLogEntry]:
        raise NotImplementedError

    def link_exception(self, *, exception_id: int, on_date: date) -> int:
        """Attach an exception day to records entering or exiting on that date."""

        raise NotImplementedError

    def list_for_manager(self, manager_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records of the manager's direct reports entering between start and end, inclusive."""

        raise NotImplementedError
