from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ReassignmentState, Role


@dataclass(frozen=True)
class EmployeeNode:
    employee_id: int
    full_name: str
    role: Role
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class HierarchyTableEntry:
    employee_id: int
    manager_id: Optional[int]
    hierarchy_level: int


@dataclass
class HierarchyNode:
    employee_id: int
    full_name: str
    level: int
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    children: list["HierarchyNode"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "full_name": self.full_name,
            "level": self.level,
            "manager_id": self.manager_id,
            "department_id": self.department_id,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class ReassignmentOutcome:
    employee_id: int
    state: ReassignmentState
    notified: bool
    entries_rebuilt: int
