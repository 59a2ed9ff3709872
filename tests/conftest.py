from __future__ import annotations

from datetime import date, datetime, time

import pytest

from hr_management.core.enums import ShiftType
from hr_management.shifts.model import ShiftAssignment, ShiftDefinition


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def day_shift() -> ShiftDefinition:
    return ShiftDefinition(
        shift_id=1,
        name="Day",
        shift_type=ShiftType.NORMAL,
        start_time=time(9, 0),
        end_time=time(17, 0),
        break_minutes=60,
    )


@pytest.fixture
def split_shift() -> ShiftDefinition:
    # 09:00-13:00, one hour break, 14:00-18:00
    return ShiftDefinition(
        shift_id=2,
        name="Split",
        shift_type=ShiftType.SPLIT,
        start_time=time(9, 0),
        end_time=time(18, 0),
        break_minutes=60,
        break_start_time=time(13, 0),
    )


@pytest.fixture
def assign():
    def _assign(employee_id: int, shift: ShiftDefinition, start: date, end: date | None = None) -> ShiftAssignment:
        return ShiftAssignment(
            assignment_id=employee_id * 100 + shift.shift_id,
            employee_id=employee_id,
            shift=shift,
            start_date=start,
            end_date=end,
        )

    return _assign
