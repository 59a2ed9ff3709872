from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ExceptionDayStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ExceptionDay
from .repository import ExceptionDayRepository

_COLUMNS = "exception_id, name, category, exception_date, status"


def _to_exception_day(r: Dict[str, Any]) -> ExceptionDay:
    return ExceptionDay(
        exception_id=int(r["exception_id"]),
        name=r["name"],
        category=r["category"],
        exception_date=r["exception_date"],
        status=ExceptionDayStatus(r["status"]),
    )


class MySQLExceptionDayRepository(ExceptionDayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, category: str, exception_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO exception_days(name, category, exception_date, status)
                VALUES(%s,%s,%s,%s)
                """,
                (name, category, exception_date, ExceptionDayStatus.ACTIVE.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, exception_id: int) -> Optional[ExceptionDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM exception_days WHERE exception_id=%s", (int(exception_id),))
            r = fetchone(cur)
            return _to_exception_day(r) if r else None

    def list_all(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Sequence[ExceptionDay]:
        clauses = ["1=1"]
        params: list[object] = []

        if start is not None:
            clauses.append("exception_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("exception_date <= %s")
            params.append(end)
        if category:
            clauses.append("category=%s")
            params.append(category)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM exception_days WHERE {where} ORDER BY exception_date DESC, exception_id DESC",
                tuple(params),
            )
            return [_to_exception_day(r) for r in fetchall(cur)]

    def exists_active_on(self, on_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM exception_days WHERE exception_date=%s AND status=%s LIMIT 1",
                (on_date, ExceptionDayStatus.ACTIVE.value),
            )
            return fetchone(cur) is not None
