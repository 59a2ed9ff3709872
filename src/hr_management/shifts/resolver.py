from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ShiftType
from .factory import ShiftStartStrategyFactory
from .model import ShiftAssignment, ShiftDefinition
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedShift:
    """The shift that governs one clock-in.

    `shift` is the effective shift: for a rotational assignment it is the
    cycle step for that day, not the assigned rotational definition.
    """

    assignment: ShiftAssignment
    shift: ShiftDefinition
    start_time: time
    slot: int = 1
    rotation_index: Optional[int] = None


class ShiftResolver:
    def __init__(self, shifts: ShiftRepository, *, strategy_factory: ShiftStartStrategyFactory | None = None):
        self._shifts = shifts
        self._factory = strategy_factory or ShiftStartStrategyFactory()

    def resolve(self, employee_id: int, at: datetime) -> Optional[ResolvedShift]:
        assignment = self._shifts.get_active_assignment(int(employee_id), at.date())
        if assignment is None:
            return None

        shift, rotation_index = self.effective_shift(assignment, at.date())
        decision = self._factory.for_shift(shift).start_for(shift=shift, at=at)
        return ResolvedShift(
            assignment=assignment,
            shift=shift,
            start_time=decision.start_time,
            slot=decision.slot,
            rotation_index=rotation_index,
        )

    def effective_shift(self, assignment: ShiftAssignment, on_date: date) -> tuple[ShiftDefinition, Optional[int]]:
        base = assignment.shift
        if base.shift_type != ShiftType.ROTATIONAL or base.cycle_id is None:
            return base, None

        days_elapsed = (on_date - assignment.start_date).days
        if days_elapsed < 0:
            return base, None

        steps = list(self._shifts.get_rotation_steps(base.cycle_id))
        if not steps:
            logger.warning("Rotation cycle %s has no steps; using base shift %s", base.cycle_id, base.shift_id)
            return base, None

        index = days_elapsed % len(steps)
        return steps[index].shift, index
