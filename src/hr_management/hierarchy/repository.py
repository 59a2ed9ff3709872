from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeNode, HierarchyTableEntry


class HierarchyRepository(Protocol):
    def get_node(self, employee_id: int) -> Optional[EmployeeNode]:
        raise NotImplementedError

    def list_nodes(self) -> Sequence[EmployeeNode]:
        raise NotImplementedError

    def load_manager_pointers(self, *, active_only: bool = False) -> dict[int, Optional[int]]:
        """Every employee's manager pointer; inactive employees included unless active_only."""

        raise NotImplementedError

    def department_exists(self, department_id: int) -> bool:
        raise NotImplementedError

    def set_manager_and_department(
        self,
        *,
        employee_id: int,
        manager_id: Optional[int] = None,
        department_id: Optional[int] = None,
    ) -> None:
        """Update whichever of the two fields is given; None leaves it unchanged."""

        raise NotImplementedError

    def replace_projection(self, entries: Sequence[HierarchyTableEntry]) -> None:
        raise NotImplementedError

    def list_projection(self) -> Sequence[HierarchyTableEntry]:
        raise NotImplementedError

    def list_direct_reports(self, manager_id: int) -> Sequence[EmployeeNode]:
        raise NotImplementedError
