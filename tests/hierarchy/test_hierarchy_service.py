from __future__ import annotations

from dataclasses import replace

import pytest

from hr_management.core.constants import STRUCTURE_CHANGE_MESSAGE
from hr_management.core.enums import ReassignmentState, Role
from hr_management.core.exceptions import AuthorizationError, DataStoreError, HierarchyCycleError, ValidationError
from hr_management.hierarchy.model import EmployeeNode
from hr_management.hierarchy.service import HierarchyService
from hr_management.notifications.service import NotificationService


class InMemoryHierarchy:
    def __init__(self, pointers: dict[int, int | None], departments=(1, 2), inactive=()):
        self.nodes = {
            e: EmployeeNode(
                employee_id=e,
                full_name=f"E{e}",
                role=Role.EMPLOYEE,
                manager_id=m,
                department_id=1,
                is_active=e not in inactive,
            )
            for e, m in pointers.items()
        }
        self.departments = set(departments)
        self.projection = []
        self.writes = 0

    def get_node(self, employee_id):
        return self.nodes.get(employee_id)

    def list_nodes(self):
        return [n for n in self.nodes.values() if n.is_active]

    def load_manager_pointers(self, *, active_only=False):
        return {e: n.manager_id for e, n in self.nodes.items() if n.is_active or not active_only}

    def department_exists(self, department_id):
        return department_id in self.departments

    def set_manager_and_department(self, *, employee_id, manager_id=None, department_id=None):
        node = self.nodes[employee_id]
        self.nodes[employee_id] = replace(
            node,
            manager_id=manager_id if manager_id is not None else node.manager_id,
            department_id=department_id if department_id is not None else node.department_id,
        )
        self.writes += 1

    def replace_projection(self, entries):
        self.projection = list(entries)

    def list_projection(self):
        return list(self.projection)

    def list_direct_reports(self, manager_id):
        return [n for n in self.nodes.values() if n.manager_id == manager_id and n.employee_id != manager_id]


class RecordingNotifications:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def create(self, *, employee_id, message, notification_type, urgency, sender_id=None):
        if self.fail:
            raise DataStoreError("notifications table locked")
        self.sent.append((employee_id, message))
        return len(self.sent)


ORG = {1: 1, 2: 1, 3: 1, 4: 2, 5: 2, 6: 4}


@pytest.fixture
def hierarchy():
    return InMemoryHierarchy(ORG)


@pytest.fixture
def notifications():
    return RecordingNotifications()


@pytest.fixture
def service(hierarchy, notifications):
    return HierarchyService(hierarchy, NotificationService(notifications))


def test_would_create_cycle(service):
    assert service.would_create_cycle(2, 2)
    assert service.would_create_cycle(2, 6)
    assert not service.would_create_cycle(6, 3)
    assert not service.would_create_cycle(4, 1)


def test_reassign_moves_employee_and_rebuilds(service, hierarchy, notifications):
    outcome = service.reassign(6, new_manager_id=3, current_role=Role.HR_ADMIN)

    assert outcome.state == ReassignmentState.REBUILD_TRIGGERED
    assert outcome.notified is True
    assert outcome.entries_rebuilt == 6
    assert hierarchy.nodes[6].manager_id == 3
    assert notifications.sent == [(6, STRUCTURE_CHANGE_MESSAGE)]
    levels = {e.employee_id: e.hierarchy_level for e in hierarchy.projection}
    assert levels[6] == 2


def test_self_assignment_rejected_without_writes(service, hierarchy):
    with pytest.raises(ValidationError):
        service.reassign(4, new_manager_id=4, current_role=Role.HR_ADMIN)
    assert hierarchy.writes == 0


def test_cycle_rejected_with_distinct_error(service, hierarchy):
    with pytest.raises(HierarchyCycleError):
        service.reassign(2, new_manager_id=6, current_role=Role.HR_ADMIN)
    assert hierarchy.writes == 0
    assert hierarchy.nodes[2].manager_id == 1


def test_noop_reassignment_rejected(service, hierarchy):
    with pytest.raises(ValidationError, match="No changes specified"):
        service.reassign(4, current_role=Role.HR_ADMIN)
    assert hierarchy.writes == 0
    assert hierarchy.projection == []


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(employee_id=99, new_manager_id=1),
        dict(employee_id=4, new_manager_id=99),
        dict(employee_id=4, new_department_id=42),
    ],
)
def test_unknown_references_rejected(service, hierarchy, kwargs):
    employee_id = kwargs.pop("employee_id")
    with pytest.raises(ValidationError):
        service.reassign(employee_id, current_role=Role.HR_ADMIN, **kwargs)
    assert hierarchy.writes == 0


def test_department_only_change(service, hierarchy):
    service.reassign(5, new_department_id=2, current_role=Role.SYSTEM_ADMIN)

    assert hierarchy.nodes[5].department_id == 2
    assert hierarchy.nodes[5].manager_id == 2


def test_notification_failure_keeps_reassignment(hierarchy, caplog):
    service = HierarchyService(hierarchy, NotificationService(RecordingNotifications(fail=True)))

    with caplog.at_level("WARNING"):
        outcome = service.reassign(6, new_manager_id=3, current_role=Role.HR_ADMIN)

    assert outcome.notified is False
    assert hierarchy.nodes[6].manager_id == 3
    assert len(hierarchy.projection) == 6
    assert "not delivered" in caplog.text


def test_reassign_needs_admin_role(service):
    with pytest.raises(AuthorizationError):
        service.reassign(6, new_manager_id=3, current_role=Role.LINE_MANAGER)


def test_rebuild_skips_legacy_cycle(caplog):
    hierarchy = InMemoryHierarchy({**ORG, 7: 8, 8: 7})
    service = HierarchyService(hierarchy, NotificationService(RecordingNotifications()))

    with caplog.at_level("WARNING"):
        entries = service.rebuild_hierarchy()

    assert {e.employee_id for e in entries} == set(ORG)
    assert "unreachable" in caplog.text


def test_rebuild_levels_match_tree_depth(service, hierarchy):
    service.rebuild_hierarchy()

    def depth(node, level=0):
        yield node.employee_id, level
        for child in node.children:
            yield from depth(child, level + 1)

    tree_levels = dict(pair for root in service.get_tree() for pair in depth(root))
    assert tree_levels == {e.employee_id: e.hierarchy_level for e in service.get_projection()}


def test_direct_reports(service):
    assert {n.employee_id for n in service.get_direct_reports(2)} == {4, 5}
    assert {n.employee_id for n in service.get_direct_reports(1)} == {2, 3}


def test_cycle_detected_through_inactive_manager():
    hierarchy = InMemoryHierarchy({1: None, 2: 1, 3: 2}, inactive={2})
    service = HierarchyService(hierarchy, NotificationService(RecordingNotifications()))

    assert service.would_create_cycle(1, 3)
    with pytest.raises(HierarchyCycleError):
        service.reassign(1, new_manager_id=3, current_role=Role.HR_ADMIN)
    assert hierarchy.writes == 0


def test_inactive_manager_rejected():
    hierarchy = InMemoryHierarchy({1: None, 2: 1, 3: 2, 4: 1}, inactive={2})
    service = HierarchyService(hierarchy, NotificationService(RecordingNotifications()))

    with pytest.raises(ValidationError, match="not active"):
        service.reassign(4, new_manager_id=2, current_role=Role.HR_ADMIN)
    assert hierarchy.writes == 0


def test_rebuild_leaves_out_inactive_employees():
    hierarchy = InMemoryHierarchy({1: None, 2: 1, 3: 1}, inactive={3})
    service = HierarchyService(hierarchy, NotificationService(RecordingNotifications()))

    entries = service.rebuild_hierarchy()

    assert {e.employee_id for e in entries} == {1, 2}
