from __future__ import annotations

from typing import Mapping, Optional, Protocol

from ..core.enums import Role


class EmployeeRoleRepository(Protocol):
    def get_role(self, employee_id: int) -> Optional[Role]:
        """The employee's current role, or None if the employee does not exist."""

        raise NotImplementedError

    def replace_role(
        self,
        *,
        employee_id: int,
        role: Role,
        previous_table: Optional[str],
        table: Optional[str],
        attributes: Mapping[str, object],
    ) -> None:
        """Switch the role and move the auxiliary row, in one transaction."""

        raise NotImplementedError
