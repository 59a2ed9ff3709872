from __future__ import annotations

from decimal import Decimal

import pytest

from hr_management.core.enums import Role, RuleType
from hr_management.core.exceptions import AuthorizationError, DataStoreError, ValidationError
from hr_management.rules.model import AttendanceRule
from hr_management.rules.service import AttendanceRuleService, GracePeriodProvider


class InMemoryRules:
    def __init__(self, grace=None, fail=False):
        self.grace = grace
        self.fail = fail
        self.rules: list[AttendanceRule] = []

    def get_grace_period_minutes(self):
        if self.fail:
            raise DataStoreError("connection refused")
        return self.grace

    def replace_active_rule(self, *, rule_type, name, threshold_minutes, penalty_amount=None):
        self.rules = [r for r in self.rules if r.rule_type != rule_type]
        rule = AttendanceRule(
            rule_id=len(self.rules) + 1,
            rule_type=rule_type,
            name=name,
            threshold_minutes=threshold_minutes,
            penalty_amount=penalty_amount,
        )
        self.rules.append(rule)
        if rule_type == RuleType.GRACE_PERIOD:
            self.grace = threshold_minutes
        return rule.rule_id

    def list_active(self):
        return list(self.rules)


def test_grace_period_reads_configured_rule():
    assert GracePeriodProvider(InMemoryRules(grace=10)).current_minutes() == 10


def test_grace_period_defaults_when_missing():
    assert GracePeriodProvider(InMemoryRules()).current_minutes() == 15


def test_grace_period_defaults_when_store_fails(caplog):
    provider = GracePeriodProvider(InMemoryRules(grace=5, fail=True))

    with caplog.at_level("WARNING"):
        assert provider.current_minutes() == 15

    assert "Grace period unavailable" in caplog.text


def test_zero_grace_is_respected():
    assert GracePeriodProvider(InMemoryRules(grace=0)).current_minutes() == 0


def test_set_grace_period_replaces_previous_rule():
    rules = InMemoryRules(grace=15)
    service = AttendanceRuleService(rules)

    service.set_grace_period(current_role=Role.HR_ADMIN, minutes=5)
    service.set_grace_period(current_role=Role.HR_ADMIN, minutes=7)

    grace_rules = [r for r in service.list_rules() if r.rule_type == RuleType.GRACE_PERIOD]
    assert len(grace_rules) == 1
    assert GracePeriodProvider(rules).current_minutes() == 7


def test_rule_changes_need_admin_role():
    service = AttendanceRuleService(InMemoryRules())
    with pytest.raises(AuthorizationError):
        service.set_grace_period(current_role=Role.LINE_MANAGER, minutes=5)


def test_negative_grace_rejected():
    with pytest.raises(ValidationError):
        AttendanceRuleService(InMemoryRules()).set_grace_period(current_role=Role.HR_ADMIN, minutes=-1)


def test_penalty_rule_summary():
    service = AttendanceRuleService(InMemoryRules())
    service.define_penalty_threshold(current_role=Role.SYSTEM_ADMIN, late_minutes=30, penalty_amount=Decimal("12.50"))

    (rule,) = service.list_rules()
    assert rule.rule_type == RuleType.LATENESS_PENALTY
    assert rule.summary == "12.50 deduction per 30 minutes late"


def test_short_time_threshold_must_be_positive():
    with pytest.raises(ValidationError):
        AttendanceRuleService(InMemoryRules()).define_short_time_rule(current_role=Role.HR_ADMIN, threshold_minutes=0)
