from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from ..core.constants import LATE_ARRIVAL_REASON
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceLogEntry, AttendanceRecord
from .repository import AttendanceRepository

_RECORD_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.shift_id, a.entry_time, a.exit_time,
           a.duration_hours, a.login_method, a.logout_method, a.exception_id,
           EXISTS(
               SELECT 1 FROM attendance_logs al
               WHERE al.attendance_id = a.attendance_id AND al.reason = %s
           ) AS is_late
    FROM attendance a
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    duration = r.get("duration_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        shift_id=r.get("shift_id"),
        entry_time=r["entry_time"],
        exit_time=r.get("exit_time"),
        duration_hours=float(duration) if duration is not None else None,
        login_method=r["login_method"],
        logout_method=r.get("logout_method"),
        exception_id=r.get("exception_id"),
        is_late=bool(r.get("is_late")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                WHERE a.employee_id=%s
                ORDER BY a.entry_time DESC, a.attendance_id DESC
                LIMIT 1
                """,
                (LATE_ARRIVAL_REASON, int(employee_id)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                WHERE a.employee_id=%s AND a.entry_time >= %s AND a.entry_time < %s
                ORDER BY a.entry_time DESC
                LIMIT 1
                """,
                (LATE_ARRIVAL_REASON, int(employee_id), work_date, work_date + timedelta(days=1)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, since: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                WHERE a.employee_id=%s AND a.entry_time >= %s
                ORDER BY a.entry_time DESC
                """,
                (LATE_ARRIVAL_REASON, int(employee_id), since),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_open(
        self,
        *,
        employee_id: int,
        entry_time: datetime,
        method: str,
        shift_id: Optional[int] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, entry_time, login_method, shift_id)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), entry_time, method, shift_id),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=int(employee_id),
            shift_id=shift_id,
            entry_time=entry_time,
            exit_time=None,
            duration_hours=None,
            login_method=method,
        )

    def close(
        self,
        *,
        attendance_id: int,
        exit_time: datetime,
        method: str,
        duration_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET exit_time=%s, logout_method=%s, duration_hours=%s
                WHERE attendance_id=%s AND exit_time IS NULL
                """,
                (exit_time, method, float(duration_hours), int(attendance_id)),
            )
            return cur.rowcount > 0

    def append_log(self, *, attendance_id: int, actor: str, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(attendance_id, actor, logged_at, reason)
                VALUES(%s,%s,NOW(),%s)
                """,
                (int(attendance_id), actor, reason),
            )
            return int(cur.lastrowid)

    def list_logs(self, attendance_id: int) -> Sequence[AttendanceLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, attendance_id, actor, logged_at, reason
                FROM attendance_logs
                WHERE attendance_id=%s
                ORDER BY log_id
                """,
                (int(attendance_id),),
            )
            return [
                AttendanceLogEntry(
                    log_id=int(r["log_id"]),
                    attendance_id=int(r["attendance_id"]),
                    actor=r["actor"],
                    logged_at=r["logged_at"],
                    reason=r["reason"],
                )
                for r in fetchall(cur)
            ]

    def link_exception(self, *, exception_id: int, on_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET exception_id=%s
                WHERE DATE(entry_time)=%s OR DATE(exit_time)=%s
                """,
                (int(exception_id), on_date, on_date),
            )
            return int(cur.rowcount)

    def list_for_manager(self, manager_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _RECORD_SELECT
                + """
                JOIN employees e ON e.employee_id = a.employee_id
                WHERE e.manager_id=%s AND e.employee_id<>%s
                  AND a.entry_time >= %s AND a.entry_time < %s
                ORDER BY e.full_name, a.entry_time DESC
                """,
                (LATE_ARRIVAL_REASON, int(manager_id), int(manager_id), start, end + timedelta(days=1)),
            )
            return [_to_record(r) for r in fetchall(cur)]
