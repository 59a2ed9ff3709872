from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import minutes_of_day
from ..model import ShiftDefinition
from .base import ShiftStartStrategy, SlotDecision


class SplitSlotStrategy(ShiftStartStrategy):
    """Two-slot shift: pick the slot whose start is nearest to the clock-in.

    The second slot is only considered once the clock-in is past the first
    slot's start. Ties go to the first slot.
    """

    def start_for(self, *, shift: ShiftDefinition, at: datetime) -> SlotDecision:
        second_start = shift.second_slot_start
        if second_start is None:
            return SlotDecision(start_time=shift.start_time)

        now = at.time()
        diff_first = abs(minutes_of_day(now) - minutes_of_day(shift.start_time))
        diff_second = abs(minutes_of_day(now) - minutes_of_day(second_start))

        if now > shift.start_time and diff_second < diff_first:
            return SlotDecision(start_time=second_start, slot=2)
        return SlotDecision(start_time=shift.start_time)
