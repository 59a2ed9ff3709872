from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_positive_id
from ..core.constants import STRUCTURE_CHANGE_MESSAGE
from ..core.enums import NotificationUrgency, ReassignmentState, Role
from ..core.exceptions import HierarchyCycleError, ValidationError
from ..employees.roles import hierarchy_admin_roles, require_role
from ..notifications.service import NotificationService
from .graph import build_tree, children_index, compute_levels, descendants_of
from .model import EmployeeNode, HierarchyNode, HierarchyTableEntry, ReassignmentOutcome
from .repository import HierarchyRepository

logger = logging.getLogger(__name__)


class HierarchyService:
    """Keeps the manager relation acyclic and its level projection current."""

    def __init__(self, hierarchy: HierarchyRepository, notifications: NotificationService):
        self._hierarchy = hierarchy
        self._notifications = notifications

    def get_descendants(self, employee_id: int) -> set[int]:
        pointers = self._hierarchy.load_manager_pointers()
        return descendants_of(int(employee_id), children_index(pointers))

    def would_create_cycle(self, employee_id: int, proposed_manager_id: int) -> bool:
        if int(employee_id) == int(proposed_manager_id):
            return True
        return int(proposed_manager_id) in self.get_descendants(employee_id)

    def reassign(
        self,
        employee_id: int,
        new_department_id: Optional[int] = None,
        new_manager_id: Optional[int] = None,
        *,
        current_role: Role,
    ) -> ReassignmentOutcome:
        require_role(current_role, hierarchy_admin_roles())
        employee_id = require_positive_id(employee_id, "Employee")

        if new_manager_id is not None:
            if int(new_manager_id) == employee_id:
                raise ValidationError("An employee cannot be their own manager")
            if self.would_create_cycle(employee_id, new_manager_id):
                raise HierarchyCycleError(
                    f"Assigning manager {new_manager_id} to employee {employee_id} would create a circular hierarchy"
                )
        if new_manager_id is None and new_department_id is None:
            raise ValidationError("No changes specified")

        if self._hierarchy.get_node(employee_id) is None:
            raise ValidationError("Employee not found")
        if new_manager_id is not None:
            manager = self._hierarchy.get_node(int(new_manager_id))
            if manager is None:
                raise ValidationError("Manager not found")
            if not manager.is_active:
                raise ValidationError("Manager is not active")
        if new_department_id is not None and not self._hierarchy.department_exists(int(new_department_id)):
            raise ValidationError("Department not found")

        self._hierarchy.set_manager_and_department(
            employee_id=employee_id,
            manager_id=int(new_manager_id) if new_manager_id is not None else None,
            department_id=int(new_department_id) if new_department_id is not None else None,
        )
        logger.info(
            "Employee %s reassigned (manager=%s, department=%s)",
            employee_id,
            new_manager_id,
            new_department_id,
        )

        notified = self._notifications.notify_employee(
            employee_id,
            STRUCTURE_CHANGE_MESSAGE,
            notification_type="StructureChange",
            urgency=NotificationUrgency.NORMAL,
        )
        entries = self.rebuild_hierarchy()
        return ReassignmentOutcome(
            employee_id=employee_id,
            state=ReassignmentState.REBUILD_TRIGGERED,
            notified=notified,
            entries_rebuilt=len(entries),
        )

    def rebuild_hierarchy(self) -> list[HierarchyTableEntry]:
        """Recompute every level from the roots and replace the projection."""

        pointers = self._hierarchy.load_manager_pointers(active_only=True)
        entries, skipped = compute_levels(pointers)
        if skipped:
            logger.warning("Skipped %d employees unreachable from any root: %s", len(skipped), sorted(skipped))
        self._hierarchy.replace_projection(entries)
        logger.info("Hierarchy projection rebuilt with %d entries", len(entries))
        return entries

    def rebuild(self, *, current_role: Role) -> list[HierarchyTableEntry]:
        require_role(current_role, hierarchy_admin_roles())
        return self.rebuild_hierarchy()

    def get_projection(self) -> Sequence[HierarchyTableEntry]:
        return self._hierarchy.list_projection()

    def get_tree(self) -> list[HierarchyNode]:
        return build_tree(self._hierarchy.list_nodes())

    def get_direct_reports(self, manager_id: int) -> Sequence[EmployeeNode]:
        return self._hierarchy.list_direct_reports(require_positive_id(manager_id, "Manager"))
