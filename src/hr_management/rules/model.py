from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import RuleType


@dataclass(frozen=True)
class AttendanceRule:
    rule_id: int
    rule_type: RuleType
    name: str
    threshold_minutes: Optional[int]
    penalty_amount: Optional[Decimal] = None
    is_active: bool = True

    @property
    def summary(self) -> str:
        if self.rule_type == RuleType.GRACE_PERIOD:
            return f"{self.threshold_minutes} minutes allowed before marking late"
        if self.rule_type == RuleType.LATENESS_PENALTY:
            return f"{self.penalty_amount} deduction per {self.threshold_minutes} minutes late"
        return f"Minimum {self.threshold_minutes} minutes required"
