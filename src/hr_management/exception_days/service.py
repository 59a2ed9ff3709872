from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..employees.roles import require_role, shift_admin_roles
from .model import ExceptionDay
from .repository import ExceptionDayRepository

logger = logging.getLogger(__name__)


class ExceptionDayService:
    """Use case: holidays and closures that override normal attendance."""

    def __init__(self, exception_days: ExceptionDayRepository, attendance: AttendanceRepository):
        self._exception_days = exception_days
        self._attendance = attendance

    def create(self, *, current_role: Role, name: str, category: str, exception_date: date) -> int:
        """Record the exception day and link it to attendance already on that date."""

        require_role(current_role, shift_admin_roles())
        name = require_non_empty(name, "Name")
        category = require_non_empty(category, "Category")
        if exception_date is None:
            raise ValidationError("Date is required")

        exception_id = self._exception_days.create(name=name, category=category, exception_date=exception_date)
        linked = self._attendance.link_exception(exception_id=exception_id, on_date=exception_date)
        logger.info("Exception day %s (%s) created; %d attendance records linked", exception_id, name, linked)
        return exception_id

    def get(self, exception_id: int) -> Optional[ExceptionDay]:
        return self._exception_days.get_by_id(int(exception_id))

    def list_days(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Sequence[ExceptionDay]:
        if start is not None and end is not None and end < start:
            raise ValidationError("End date must not be before start date")
        return self._exception_days.list_all(start=start, end=end, category=category or None)

    def is_exception_date(self, on_date: date) -> bool:
        return self._exception_days.exists_active_on(on_date)
