"""Role profiles.

Every role maps to exactly one profile: the auxiliary table holding its extra
attributes (if any), the attribute names stored there and what it may do.
The mapping is decided once, when a role is assigned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class RoleProfile:
    role: Role
    auxiliary_table: Optional[str]
    auxiliary_attributes: tuple[str, ...]
    can_approve_corrections: bool = False
    can_manage_hierarchy: bool = False
    can_manage_rules: bool = False
    can_manage_shifts: bool = False
    can_assign_roles: bool = False


ROLE_PROFILES: dict[Role, RoleProfile] = {
    Role.SYSTEM_ADMIN: RoleProfile(
        role=Role.SYSTEM_ADMIN,
        auxiliary_table="system_administrators",
        auxiliary_attributes=("system_privilege_level", "configurable_fields", "audit_visibility_scope"),
        can_approve_corrections=True,
        can_manage_hierarchy=True,
        can_manage_rules=True,
        can_manage_shifts=True,
        can_assign_roles=True,
    ),
    Role.HR_ADMIN: RoleProfile(
        role=Role.HR_ADMIN,
        auxiliary_table="hr_administrators",
        auxiliary_attributes=("approval_level", "record_access_scope", "document_validation_rights"),
        can_approve_corrections=True,
        can_manage_hierarchy=True,
        can_manage_rules=True,
        can_manage_shifts=True,
    ),
    Role.LINE_MANAGER: RoleProfile(
        role=Role.LINE_MANAGER,
        auxiliary_table="line_managers",
        auxiliary_attributes=("team_size", "supervised_departments", "approval_limit"),
        can_approve_corrections=True,
    ),
    Role.PAYROLL_SPECIALIST: RoleProfile(
        role=Role.PAYROLL_SPECIALIST,
        auxiliary_table="payroll_specialists",
        auxiliary_attributes=("assigned_region", "processing_frequency", "last_processed_period"),
    ),
    Role.EMPLOYEE: RoleProfile(
        role=Role.EMPLOYEE,
        auxiliary_table=None,
        auxiliary_attributes=(),
    ),
}


def profile_for(role: Role) -> RoleProfile:
    return ROLE_PROFILES[Role(role)]


def require_role(current_role: Role, allowed: Iterable[Role]) -> None:
    if Role(current_role) not in set(allowed):
        raise AuthorizationError("You do not have permission for this action")


def approver_roles() -> set[Role]:
    return {r for r, p in ROLE_PROFILES.items() if p.can_approve_corrections}


def hierarchy_admin_roles() -> set[Role]:
    return {r for r, p in ROLE_PROFILES.items() if p.can_manage_hierarchy}


def rule_admin_roles() -> set[Role]:
    return {r for r, p in ROLE_PROFILES.items() if p.can_manage_rules}


def shift_admin_roles() -> set[Role]:
    return {r for r, p in ROLE_PROFILES.items() if p.can_manage_shifts}


def role_admin_roles() -> set[Role]:
    return {r for r, p in ROLE_PROFILES.items() if p.can_assign_roles}
