from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import ShiftType
from .model import RotationStep, ShiftAssignment, ShiftDefinition


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[ShiftDefinition]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[ShiftDefinition]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        shift_type: ShiftType,
        start_time: time,
        end_time: time,
        break_minutes: int,
        break_start_time: Optional[time] = None,
        cycle_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get_active_assignment(self, employee_id: int, on_date: date) -> Optional[ShiftAssignment]:
        """Most recently started Active assignment covering on_date, if any."""

        raise NotImplementedError

    def get_rotation_steps(self, cycle_id: int) -> Sequence[RotationStep]:
        """Cycle steps ordered by order_number."""

        raise NotImplementedError

    def create_rotation_cycle(self, *, name: str, shift_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def assign_to_employee(
        self,
        *,
        employee_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        raise NotImplementedError

    def assign_to_department(
        self,
        *,
        department_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> int:
        """Create one assignment per department member. Returns how many were created."""

        raise NotImplementedError

    def list_assignments(self, employee_id: int) -> Sequence[ShiftAssignment]:
        raise NotImplementedError
