"""Pure graph helpers over the manager relation.

The relation is given as ``{employee_id: manager_id}``. A manager pointer that
is missing, points at the employee itself or at an unknown employee marks a
root. All walks carry a visited set so corrupt cyclic data cannot loop.
"""

from __future__ import annotations

from collections import deque
from typing import Mapping, Optional, Sequence

from .model import EmployeeNode, HierarchyNode, HierarchyTableEntry

ManagerPointers = Mapping[int, Optional[int]]


def effective_manager(employee_id: int, manager_id: Optional[int], known: Mapping[int, object]) -> Optional[int]:
    if manager_id is None or manager_id == employee_id or manager_id not in known:
        return None
    return manager_id


def children_index(pointers: ManagerPointers) -> dict[int, list[int]]:
    children: dict[int, list[int]] = {}
    for employee_id in sorted(pointers):
        manager_id = effective_manager(employee_id, pointers[employee_id], pointers)
        if manager_id is not None:
            children.setdefault(manager_id, []).append(employee_id)
    return children


def roots_of(pointers: ManagerPointers) -> list[int]:
    return [e for e in sorted(pointers) if effective_manager(e, pointers[e], pointers) is None]


def descendants_of(employee_id: int, children: Mapping[int, Sequence[int]]) -> set[int]:
    """All transitive reports of ``employee_id``, excluding itself."""

    seen: set[int] = {employee_id}
    queue = deque([employee_id])
    while queue:
        current = queue.popleft()
        for child in children.get(current, ()):
            if child not in seen:
                seen.add(child)
                queue.append(child)
    seen.discard(employee_id)
    return seen


def compute_levels(pointers: ManagerPointers) -> tuple[list[HierarchyTableEntry], set[int]]:
    """Multi-source BFS from every root.

    Returns the projection entries (roots at level 0) and the ids that no root
    reaches, which only happens for employees caught in a manager cycle.
    """

    children = children_index(pointers)
    levels: dict[int, int] = {}
    queue: deque[int] = deque()
    for root in roots_of(pointers):
        levels[root] = 0
        queue.append(root)

    while queue:
        current = queue.popleft()
        for child in children.get(current, ()):
            if child not in levels:
                levels[child] = levels[current] + 1
                queue.append(child)

    entries = [
        HierarchyTableEntry(
            employee_id=e,
            manager_id=effective_manager(e, pointers[e], pointers),
            hierarchy_level=levels[e],
        )
        for e in sorted(levels)
    ]
    skipped = set(pointers) - set(levels)
    return entries, skipped


def build_tree(nodes: Sequence[EmployeeNode]) -> list[HierarchyNode]:
    by_id = {n.employee_id: n for n in nodes}
    pointers = {n.employee_id: n.manager_id for n in nodes}
    children = children_index(pointers)

    def _build(employee_id: int, level: int, seen: set[int]) -> HierarchyNode:
        seen.add(employee_id)
        emp = by_id[employee_id]
        node = HierarchyNode(
            employee_id=employee_id,
            full_name=emp.full_name,
            level=level,
            manager_id=effective_manager(employee_id, emp.manager_id, by_id),
            department_id=emp.department_id,
        )
        for child in children.get(employee_id, ()):
            if child not in seen:
                node.children.append(_build(child, level + 1, seen))
        return node

    seen: set[int] = set()
    return [_build(root, 0, seen) for root in roots_of(pointers)]
