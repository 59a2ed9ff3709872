from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ShiftType
from .model import ShiftDefinition
from .strategies.base import ShiftStartStrategy
from .strategies.fixed_strategy import FixedStartStrategy
from .strategies.split_strategy import SplitSlotStrategy


@dataclass
class ShiftStartStrategyFactory:
    """Factory Pattern: choose the start-selection strategy by shift type."""

    def for_shift(self, shift: ShiftDefinition) -> ShiftStartStrategy:
        if shift.shift_type == ShiftType.SPLIT:
            return SplitSlotStrategy()
        return FixedStartStrategy()
