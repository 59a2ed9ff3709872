from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..common.validators import require_positive_id
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .repository import EmployeeRoleRepository
from .roles import RoleProfile, profile_for, require_role, role_admin_roles

logger = logging.getLogger(__name__)


class RoleService:
    """Use case: give an employee a role and its auxiliary profile row."""

    def __init__(self, employees: EmployeeRoleRepository):
        self._employees = employees

    def assign_role(
        self,
        *,
        current_role: Role,
        employee_id: int,
        role: Role | str,
        attributes: Optional[Mapping[str, object]] = None,
    ) -> RoleProfile:
        require_role(current_role, role_admin_roles())
        employee_id = require_positive_id(employee_id, "Employee")
        try:
            profile = profile_for(role)
        except ValueError:
            raise ValidationError("Role is invalid")

        attributes = dict(attributes or {})
        unknown = set(attributes) - set(profile.auxiliary_attributes)
        if unknown:
            raise ValidationError(f"Unknown attributes for {profile.role.value}: {', '.join(sorted(unknown))}")

        previous = self._employees.get_role(employee_id)
        if previous is None:
            raise ValidationError("Employee not found")

        self._employees.replace_role(
            employee_id=employee_id,
            role=profile.role,
            previous_table=profile_for(previous).auxiliary_table,
            table=profile.auxiliary_table,
            attributes={name: attributes.get(name) for name in profile.auxiliary_attributes},
        )
        logger.info("Employee %s role changed from %s to %s", employee_id, previous.value, profile.role.value)
        return profile
