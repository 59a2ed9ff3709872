from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ExceptionDay


class ExceptionDayRepository(Protocol):
    def create(self, *, name: str, category: str, exception_date: date) -> int:
        raise NotImplementedError

    def get_by_id(self, exception_id: int) -> Optional[ExceptionDay]:
        raise NotImplementedError

    def list_all(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        category: Optional[str] = None,
    ) -> Sequence[ExceptionDay]:
        """Newest first; every filter given narrows the result."""

        raise NotImplementedError

    def exists_active_on(self, on_date: date) -> bool:
        raise NotImplementedError
