from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from hr_management.core.enums import AssignmentStatus, ShiftType
from hr_management.shifts.model import RotationStep, ShiftAssignment, ShiftDefinition
from hr_management.shifts.resolver import ShiftResolver


class InMemoryShifts:
    def __init__(self, assignments=(), cycles=None):
        self.assignments = list(assignments)
        self.cycles: dict[int, list[RotationStep]] = dict(cycles or {})

    def get_active_assignment(self, employee_id: int, on_date: date) -> Optional[ShiftAssignment]:
        covering = [a for a in self.assignments if a.employee_id == employee_id and a.covers(on_date)]
        covering.sort(key=lambda a: (a.start_date, a.assignment_id), reverse=True)
        return covering[0] if covering else None

    def get_rotation_steps(self, cycle_id: int):
        return sorted(self.cycles.get(cycle_id, []), key=lambda s: s.order_number)


def _shift(shift_id: int, start: time, end: time, **kw) -> ShiftDefinition:
    kw.setdefault("shift_type", ShiftType.NORMAL)
    return ShiftDefinition(shift_id=shift_id, name=f"S{shift_id}", start_time=start, end_time=end, **kw)


ROTATION = _shift(10, time(6, 0), time(14, 0), shift_type=ShiftType.ROTATIONAL, cycle_id=7)
STEP_A = _shift(11, time(6, 0), time(14, 0))
STEP_B = _shift(12, time(14, 0), time(22, 0))
STEP_C = _shift(13, time(22, 0), time(6, 0))


def test_no_assignment_resolves_to_none():
    resolver = ShiftResolver(InMemoryShifts())
    assert resolver.resolve(1, datetime(2026, 3, 2, 9, 0)) is None


def test_fixed_shift_uses_its_start(day_shift, assign):
    resolver = ShiftResolver(InMemoryShifts([assign(1, day_shift, date(2026, 1, 1))]))

    resolved = resolver.resolve(1, datetime(2026, 3, 2, 9, 5))

    assert resolved.shift == day_shift
    assert resolved.start_time == time(9, 0)
    assert resolved.rotation_index is None


def test_rotation_picks_step_by_days_since_start(assign):
    shifts = InMemoryShifts(
        [assign(1, ROTATION, date(2026, 3, 1))],
        cycles={
            7: [
                RotationStep(order_number=1, shift=STEP_A),
                RotationStep(order_number=2, shift=STEP_B),
                RotationStep(order_number=3, shift=STEP_C),
            ]
        },
    )
    resolver = ShiftResolver(shifts)

    # four days in: 4 % 3 == 1, the second step
    resolved = resolver.resolve(1, datetime(2026, 3, 5, 14, 10))

    assert resolved.rotation_index == 1
    assert resolved.shift == STEP_B
    assert resolved.start_time == time(14, 0)


def test_rotation_with_empty_cycle_falls_back_to_base(assign):
    resolver = ShiftResolver(InMemoryShifts([assign(1, ROTATION, date(2026, 3, 1))]))

    resolved = resolver.resolve(1, datetime(2026, 3, 3, 6, 0))

    assert resolved.shift == ROTATION
    assert resolved.rotation_index is None


def test_rotational_day_on_split_step_uses_slot_selection(split_shift, assign):
    shifts = InMemoryShifts(
        [assign(1, ROTATION, date(2026, 3, 1))],
        cycles={7: [RotationStep(order_number=1, shift=STEP_A), RotationStep(order_number=2, shift=split_shift)]},
    )

    resolved = ShiftResolver(shifts).resolve(1, datetime(2026, 3, 2, 13, 55))

    assert resolved.shift == split_shift
    assert resolved.slot == 2
    assert resolved.start_time == time(14, 0)


def test_assignment_range_is_half_open(day_shift, assign):
    a = assign(1, day_shift, date(2026, 3, 1), date(2026, 3, 5))
    assert a.covers(date(2026, 3, 1))
    assert a.covers(date(2026, 3, 4))
    assert not a.covers(date(2026, 3, 5))
    assert not a.covers(date(2026, 2, 28))


def test_inactive_assignment_never_covers(day_shift):
    a = ShiftAssignment(
        assignment_id=1,
        employee_id=1,
        shift=day_shift,
        start_date=date(2026, 3, 1),
        status=AssignmentStatus.INACTIVE,
    )
    assert not a.covers(date(2026, 3, 2))


def test_latest_started_assignment_wins(day_shift, split_shift, assign):
    shifts = InMemoryShifts([assign(1, day_shift, date(2026, 1, 1)), assign(1, split_shift, date(2026, 3, 1))])

    resolved = ShiftResolver(shifts).resolve(1, datetime(2026, 3, 2, 9, 0))

    assert resolved.shift == split_shift
