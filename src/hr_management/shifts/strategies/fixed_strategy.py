from __future__ import annotations

from datetime import datetime

from ..model import ShiftDefinition
from .base import ShiftStartStrategy, SlotDecision


class FixedStartStrategy(ShiftStartStrategy):
    """Single-slot shift: the shift's own start is authoritative."""

    def start_for(self, *, shift: ShiftDefinition, at: datetime) -> SlotDecision:
        return SlotDecision(start_time=shift.start_time)
