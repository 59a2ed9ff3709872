from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeNode, HierarchyTableEntry
from .repository import HierarchyRepository

_NODE_COLUMNS = "employee_id, full_name, role, manager_id, department_id, is_active"


def _to_node(r: dict) -> EmployeeNode:
    return EmployeeNode(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
        department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLHierarchyRepository(HierarchyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_node(self, employee_id: int) -> Optional[EmployeeNode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_NODE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_node(r) if r else None

    def list_nodes(self) -> Sequence[EmployeeNode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_NODE_COLUMNS} FROM employees WHERE is_active=1 ORDER BY employee_id")
            return [_to_node(r) for r in fetchall(cur)]

    def load_manager_pointers(self, *, active_only: bool = False) -> dict[int, Optional[int]]:
        sql = "SELECT employee_id, manager_id FROM employees"
        if active_only:
            sql += " WHERE is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return {
                int(r["employee_id"]): (int(r["manager_id"]) if r.get("manager_id") is not None else None)
                for r in fetchall(cur)
            }

    def department_exists(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS ok FROM departments WHERE department_id=%s", (int(department_id),))
            return fetchone(cur) is not None

    def set_manager_and_department(
        self,
        *,
        employee_id: int,
        manager_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET manager_id=COALESCE(%s, manager_id),
                    department_id=COALESCE(%s, department_id)
                WHERE employee_id=%s
                """,
                (manager_id, department_id, int(employee_id)),
            )

    def replace_projection(self, entries: Sequence[HierarchyTableEntry]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employee_hierarchy")
            if entries:
                cur.executemany(
                    "INSERT INTO employee_hierarchy(employee_id, manager_id, hierarchy_level) VALUES(%s,%s,%s)",
                    [(e.employee_id, e.manager_id, e.hierarchy_level) for e in entries],
                )

    def list_projection(self) -> Sequence[HierarchyTableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, manager_id, hierarchy_level
                FROM employee_hierarchy
                ORDER BY hierarchy_level, employee_id
                """
            )
            return [
                HierarchyTableEntry(
                    employee_id=int(r["employee_id"]),
                    manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
                    hierarchy_level=int(r["hierarchy_level"]),
                )
                for r in fetchall(cur)
            ]

    def list_direct_reports(self, manager_id: int) -> Sequence[EmployeeNode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_NODE_COLUMNS}
                FROM employees
                WHERE manager_id=%s AND employee_id<>%s AND is_active=1
                ORDER BY full_name
                """,
                (int(manager_id), int(manager_id)),
            )
            return [_to_node(r) for r in fetchall(cur)]
