from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import AssignmentStatus, ShiftType


@dataclass(frozen=True)
class ShiftDefinition:
    """Domain entity: a shift schedule (start/end time-of-day and break)."""

    shift_id: int
    name: str
    shift_type: ShiftType
    start_time: time
    end_time: time
    break_minutes: int = 0
    break_start_time: Optional[time] = None
    cycle_id: Optional[int] = None
    is_active: bool = True

    @property
    def crosses_midnight(self) -> bool:
        return self.end_time <= self.start_time

    @property
    def duration_hours(self) -> float:
        start = datetime.combine(date.min, self.start_time)
        end = datetime.combine(date.min, self.end_time)
        span = end - start
        if self.crosses_midnight:
            span += timedelta(hours=24)
        return span.total_seconds() / 3600 - self.break_minutes / 60

    @property
    def second_slot_start(self) -> Optional[time]:
        """Start of the second slot for a split shift (break start + break)."""
        if self.break_start_time is None:
            return None
        base = datetime.combine(date.min, self.break_start_time)
        return (base + timedelta(minutes=self.break_minutes)).time()


@dataclass(frozen=True)
class ShiftAssignment:
    """Links an employee to a shift for the half-open range [start_date, end_date)."""

    assignment_id: int
    employee_id: int
    shift: ShiftDefinition
    start_date: date
    end_date: Optional[date] = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE

    def covers(self, on_date: date) -> bool:
        if self.status != AssignmentStatus.ACTIVE:
            return False
        if on_date < self.start_date:
            return False
        return self.end_date is None or on_date < self.end_date


@dataclass(frozen=True)
class RotationStep:
    order_number: int
    shift: ShiftDefinition
