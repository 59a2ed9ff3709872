from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time

from ..model import ShiftDefinition


@dataclass(frozen=True)
class SlotDecision:
    start_time: time
    slot: int = 1


class ShiftStartStrategy(ABC):
    """Strategy Pattern: decide which start time-of-day a clock-in is measured against."""

    @abstractmethod
    def start_for(self, *, shift: ShiftDefinition, at: datetime) -> SlotDecision:
        raise NotImplementedError
