from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RuleType
from .model import AttendanceRule


class RuleRepository(Protocol):
    def get_grace_period_minutes(self) -> Optional[int]:
        """Threshold of the active GracePeriod rule, None when not configured."""

        raise NotImplementedError

    def replace_active_rule(
        self,
        *,
        rule_type: RuleType,
        name: str,
        threshold_minutes: int,
        penalty_amount: Optional[Decimal] = None,
    ) -> int:
        """Deactivate existing rules of this type and insert the new active one."""

        raise NotImplementedError

    def list_active(self) -> Sequence[AttendanceRule]:
        raise NotImplementedError
