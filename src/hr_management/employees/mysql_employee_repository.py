from __future__ import annotations

from typing import Mapping, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import EmployeeRoleRepository
from .roles import ROLE_PROFILES

_AUXILIARY_TABLES = {p.auxiliary_table for p in ROLE_PROFILES.values() if p.auxiliary_table}


def _checked_table(table: Optional[str]) -> Optional[str]:
    # Table names are interpolated, so only the known auxiliary tables pass.
    if table is not None and table not in _AUXILIARY_TABLES:
        raise ValueError(f"Unknown auxiliary table: {table}")
    return table


class MySQLEmployeeRoleRepository(EmployeeRoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_role(self, employee_id: int) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return Role(r["role"]) if r else None

    def replace_role(
        self,
        *,
        employee_id: int,
        role: Role,
        previous_table: Optional[str],
        table: Optional[str],
        attributes: Mapping[str, object],
    ) -> None:
        previous_table = _checked_table(previous_table)
        table = _checked_table(table)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET role=%s WHERE employee_id=%s", (role.value, int(employee_id)))
            if previous_table:
                cur.execute(f"DELETE FROM {previous_table} WHERE employee_id=%s", (int(employee_id),))
            if table:
                columns = ["employee_id", *attributes.keys()]
                placeholders = ",".join(["%s"] * len(columns))
                cur.execute(
                    f"INSERT INTO {table}({', '.join(columns)}) VALUES({placeholders})",
                    (int(employee_id), *attributes.values()),
                )
