from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from ..common.validators import require_non_negative
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.enums import Role, RuleType
from ..core.exceptions import DataStoreError, ValidationError
from ..employees.roles import require_role, rule_admin_roles
from .model import AttendanceRule
from .repository import RuleRepository

logger = logging.getLogger(__name__)


class GracePeriodProvider:
    """Reads the grace period on every evaluation.

    A missing rule or an unreachable store yields the default, so clock-ins
    are never blocked by configuration problems.
    """

    def __init__(self, rules: RuleRepository, *, default_minutes: int = DEFAULT_GRACE_MINUTES):
        self._rules = rules
        self._default = int(default_minutes)

    @property
    def default_minutes(self) -> int:
        return self._default

    def current_minutes(self) -> int:
        try:
            minutes = self._rules.get_grace_period_minutes()
        except DataStoreError as exc:
            logger.warning("Grace period unavailable, using default of %s minutes: %s", self._default, exc)
            return self._default

        if minutes is None or minutes < 0:
            return self._default
        return int(minutes)


class AttendanceRuleService:
    """Use case: configure attendance time rules (admin)."""

    def __init__(self, rules: RuleRepository):
        self._rules = rules

    def set_grace_period(self, *, current_role: Role, minutes: int) -> int:
        require_role(current_role, rule_admin_roles())
        minutes = require_non_negative(minutes, "Grace period")
        return self._rules.replace_active_rule(
            rule_type=RuleType.GRACE_PERIOD,
            name="Grace Period",
            threshold_minutes=minutes,
        )

    def define_penalty_threshold(self, *, current_role: Role, late_minutes: int, penalty_amount: Decimal) -> int:
        require_role(current_role, rule_admin_roles())
        if int(late_minutes) <= 0:
            raise ValidationError("Lateness threshold must be positive")
        amount = Decimal(str(penalty_amount))
        if amount < 0:
            raise ValidationError("Penalty amount cannot be negative")
        return self._rules.replace_active_rule(
            rule_type=RuleType.LATENESS_PENALTY,
            name="Lateness Penalty",
            threshold_minutes=int(late_minutes),
            penalty_amount=amount,
        )

    def define_short_time_rule(self, *, current_role: Role, threshold_minutes: int) -> int:
        require_role(current_role, rule_admin_roles())
        if int(threshold_minutes) <= 0:
            raise ValidationError("Short time threshold must be positive")
        return self._rules.replace_active_rule(
            rule_type=RuleType.SHORT_TIME,
            name="Short Time Rule",
            threshold_minutes=int(threshold_minutes),
        )

    def list_rules(self) -> Sequence[AttendanceRule]:
        return self._rules.list_active()
