from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AssignmentStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import RotationStep, ShiftAssignment, ShiftDefinition
from .repository import ShiftRepository

_SHIFT_COLUMNS = """
    s.shift_id, s.name, s.shift_type, s.start_time, s.end_time,
    s.break_minutes, s.break_start_time, s.cycle_id, s.is_active
"""


def _to_shift(r: Dict[str, Any]) -> ShiftDefinition:
    return ShiftDefinition(
        shift_id=int(r["shift_id"]),
        name=r["name"],
        shift_type=ShiftType(r["shift_type"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        break_start_time=normalize_mysql_time(r.get("break_start_time")),
        cycle_id=r.get("cycle_id"),
        is_active=bool(r.get("is_active", True)),
    )


def _to_assignment(r: Dict[str, Any]) -> ShiftAssignment:
    return ShiftAssignment(
        assignment_id=int(r["assignment_id"]),
        employee_id=int(r["employee_id"]),
        shift=_to_shift(r),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        status=AssignmentStatus(r["status"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shift_schedules s ORDER BY s.shift_id")
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SHIFT_COLUMNS} FROM shift_schedules s WHERE s.shift_id=%s",
                (int(shift_id),),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def create(
        self,
        *,
        name: str,
        shift_type: ShiftType,
        start_time: time,
        end_time: time,
        break_minutes: int,
        break_start_time: Optional[time] = None,
        cycle_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_schedules(
                    name, shift_type, start_time, end_time, break_minutes, break_start_time, cycle_id, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (name, shift_type.value, start_time, end_time, int(break_minutes), break_start_time, cycle_id),
            )
            return int(cur.lastrowid)

    def get_active_assignment(self, employee_id: int, on_date: date) -> Optional[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sa.assignment_id, sa.employee_id, sa.start_date, sa.end_date, sa.status,
                       {_SHIFT_COLUMNS}
                FROM shift_assignments sa
                JOIN shift_schedules s ON s.shift_id = sa.shift_id
                WHERE sa.employee_id=%s
                  AND sa.status=%s
                  AND sa.start_date <= %s
                  AND (sa.end_date IS NULL OR sa.end_date > %s)
                ORDER BY sa.start_date DESC, sa.assignment_id DESC
                LIMIT 1
                """,
                (int(employee_id), AssignmentStatus.ACTIVE.value, on_date, on_date),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def get_rotation_steps(self, cycle_id: int) -> Sequence[RotationStep]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT cs.order_number, {_SHIFT_COLUMNS}
                FROM shift_cycle_steps cs
                JOIN shift_schedules s ON s.shift_id = cs.shift_id
                WHERE cs.cycle_id=%s
                ORDER BY cs.order_number
                """,
                (int(cycle_id),),
            )
            return [RotationStep(order_number=int(r["order_number"]), shift=_to_shift(r)) for r in fetchall(cur)]

    def create_rotation_cycle(self, *, name: str, shift_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO shift_cycles(cycle_name) VALUES(%s)", (name,))
            cycle_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT INTO shift_cycle_steps(cycle_id, order_number, shift_id) VALUES(%s,%s,%s)",
                [(cycle_id, order, int(shift_id)) for order, shift_id in enumerate(shift_ids, start=1)],
            )
            return cycle_id

    def assign_to_employee(
        self,
        *,
        employee_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments(employee_id, shift_id, start_date, end_date, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(shift_id), start_date, end_date, AssignmentStatus.ACTIVE.value),
            )
            return int(cur.lastrowid)

    def assign_to_department(
        self,
        *,
        department_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_assignments(employee_id, shift_id, start_date, end_date, status)
                SELECT e.employee_id, %s, %s, %s, %s
                FROM employees e
                WHERE e.department_id=%s AND e.is_active=1
                """,
                (int(shift_id), start_date, end_date, AssignmentStatus.ACTIVE.value, int(department_id)),
            )
            return int(cur.rowcount)

    def list_assignments(self, employee_id: int) -> Sequence[ShiftAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT sa.assignment_id, sa.employee_id, sa.start_date, sa.end_date, sa.status,
                       {_SHIFT_COLUMNS}
                FROM shift_assignments sa
                JOIN shift_schedules s ON s.shift_id = sa.shift_id
                WHERE sa.employee_id=%s
                ORDER BY sa.start_date DESC, sa.assignment_id DESC
                """,
                (int(employee_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]
