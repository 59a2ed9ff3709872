from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative, require_positive_id
from ..core.enums import Role, ShiftType
from ..core.exceptions import ValidationError
from ..employees.roles import require_role, shift_admin_roles
from .model import ShiftAssignment, ShiftDefinition
from .repository import ShiftRepository


class ShiftService:
    """Use case: define shifts and assign them (admin)."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    @staticmethod
    def _check_range(start_date: date, end_date: Optional[date]) -> None:
        if end_date is not None and end_date <= start_date:
            raise ValidationError("End date must be after start date")

    def create_shift(
        self,
        *,
        current_role: Role,
        name: str,
        shift_type: ShiftType,
        start_time: time,
        end_time: time,
        break_minutes: int = 0,
        break_start_time: Optional[time] = None,
        cycle_id: Optional[int] = None,
    ) -> int:
        require_role(current_role, shift_admin_roles())
        name = require_non_empty(name, "Shift name")
        break_minutes = require_non_negative(break_minutes, "Break duration")
        shift_type = ShiftType(shift_type)

        if start_time == end_time:
            raise ValidationError("Shift start and end cannot be equal")
        if shift_type == ShiftType.SPLIT and break_start_time is None:
            raise ValidationError("A split shift needs a break start time")
        if shift_type == ShiftType.ROTATIONAL and cycle_id is None:
            raise ValidationError("A rotational shift needs a rotation cycle")

        return self._shifts.create(
            name=name,
            shift_type=shift_type,
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
            break_start_time=break_start_time,
            cycle_id=cycle_id,
        )

    def configure_split_shift(
        self,
        *,
        current_role: Role,
        name: str,
        first_slot_start: time,
        first_slot_end: time,
        second_slot_start: time,
        second_slot_end: time,
    ) -> int:
        """Create a split shift from its two slots; the gap becomes the break."""

        if not (first_slot_start < first_slot_end <= second_slot_start < second_slot_end):
            raise ValidationError("Split shift slots must be ordered and must not overlap")

        gap = (second_slot_start.hour * 60 + second_slot_start.minute) - (
            first_slot_end.hour * 60 + first_slot_end.minute
        )
        return self.create_shift(
            current_role=current_role,
            name=name,
            shift_type=ShiftType.SPLIT,
            start_time=first_slot_start,
            end_time=second_slot_end,
            break_minutes=gap,
            break_start_time=first_slot_end,
        )

    def create_rotation_cycle(self, *, current_role: Role, name: str, shift_ids: Sequence[int]) -> int:
        require_role(current_role, shift_admin_roles())
        name = require_non_empty(name, "Cycle name")
        if not shift_ids:
            raise ValidationError("A rotation cycle needs at least one step")
        for shift_id in shift_ids:
            if not self._shifts.get_by_id(int(shift_id)):
                raise ValidationError(f"Shift {shift_id} does not exist")
        return self._shifts.create_rotation_cycle(name=name, shift_ids=[int(s) for s in shift_ids])

    def assign_to_employee(
        self,
        *,
        current_role: Role,
        employee_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> int:
        require_role(current_role, shift_admin_roles())
        require_positive_id(employee_id, "Employee")
        require_positive_id(shift_id, "Shift")
        self._check_range(start_date, end_date)

        shift = self._shifts.get_by_id(int(shift_id))
        if not shift or not shift.is_active:
            raise ValidationError("Shift does not exist or is inactive")

        return self._shifts.assign_to_employee(
            employee_id=int(employee_id),
            shift_id=int(shift_id),
            start_date=start_date,
            end_date=end_date,
        )

    def assign_rotational(
        self,
        *,
        current_role: Role,
        employee_id: int,
        rotational_shift_id: int,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> int:
        shift = self._shifts.get_by_id(int(rotational_shift_id))
        if not shift or shift.shift_type != ShiftType.ROTATIONAL:
            raise ValidationError("Shift is not a rotational shift")
        return self.assign_to_employee(
            current_role=current_role,
            employee_id=employee_id,
            shift_id=rotational_shift_id,
            start_date=start_date,
            end_date=end_date,
        )

    def assign_custom_shift(
        self,
        *,
        current_role: Role,
        employee_id: int,
        name: str,
        start_time: time,
        end_time: time,
        start_date: date,
        end_date: Optional[date] = None,
        break_minutes: int = 0,
    ) -> int:
        """Define a one-off Custom shift for a single employee and assign it."""

        require_role(current_role, shift_admin_roles())
        employee_id = require_positive_id(employee_id, "Employee")
        self._check_range(start_date, end_date)

        shift_id = self.create_shift(
            current_role=current_role,
            name=name,
            shift_type=ShiftType.CUSTOM,
            start_time=start_time,
            end_time=end_time,
            break_minutes=break_minutes,
        )
        return self._shifts.assign_to_employee(
            employee_id=employee_id,
            shift_id=shift_id,
            start_date=start_date,
            end_date=end_date,
        )

    def assign_to_department(
        self,
        *,
        current_role: Role,
        department_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date] = None,
    ) -> int:
        require_role(current_role, shift_admin_roles())
        require_positive_id(department_id, "Department")
        require_positive_id(shift_id, "Shift")
        self._check_range(start_date, end_date)

        if not self._shifts.get_by_id(int(shift_id)):
            raise ValidationError("Shift does not exist")

        return self._shifts.assign_to_department(
            department_id=int(department_id),
            shift_id=int(shift_id),
            start_date=start_date,
            end_date=end_date,
        )

    def list_shifts(self) -> Sequence[ShiftDefinition]:
        return self._shifts.list_all()

    def list_assignments(self, employee_id: int) -> Sequence[ShiftAssignment]:
        return self._shifts.list_assignments(int(employee_id))
