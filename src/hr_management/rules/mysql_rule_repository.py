from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import RuleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRule
from .repository import RuleRepository


class MySQLRuleRepository(RuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_grace_period_minutes(self) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT threshold_minutes
                FROM attendance_rules
                WHERE rule_type=%s AND is_active=1
                ORDER BY rule_id DESC
                LIMIT 1
                """,
                (RuleType.GRACE_PERIOD.value,),
            )
            r = fetchone(cur)
            if not r or r.get("threshold_minutes") is None:
                return None
            return int(r["threshold_minutes"])

    def replace_active_rule(
        self,
        *,
        rule_type: RuleType,
        name: str,
        threshold_minutes: int,
        penalty_amount: Optional[Decimal] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_rules SET is_active=0 WHERE rule_type=%s AND is_active=1",
                (rule_type.value,),
            )
            cur.execute(
                """
                INSERT INTO attendance_rules(rule_type, rule_name, threshold_minutes, penalty_amount, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (rule_type.value, name, int(threshold_minutes), penalty_amount),
            )
            return int(cur.lastrowid)

    def list_active(self) -> Sequence[AttendanceRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT rule_id, rule_type, rule_name, threshold_minutes, penalty_amount, is_active
                FROM attendance_rules
                WHERE is_active=1
                ORDER BY rule_type, rule_id
                """
            )
            return [
                AttendanceRule(
                    rule_id=int(r["rule_id"]),
                    rule_type=RuleType(r["rule_type"]),
                    name=r["rule_name"],
                    threshold_minutes=r.get("threshold_minutes"),
                    penalty_amount=r.get("penalty_amount"),
                    is_active=bool(r.get("is_active", True)),
                )
                for r in fetchall(cur)
            ]
