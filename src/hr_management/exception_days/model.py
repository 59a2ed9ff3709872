from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import ExceptionDayStatus


@dataclass(frozen=True)
class ExceptionDay:
    """A holiday or closure that overrides normal attendance for one date."""

    exception_id: int
    name: str
    category: str
    exception_date: date
    status: ExceptionDayStatus = ExceptionDayStatus.ACTIVE
