from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CorrectionType
from .model import CorrectionApproval, CorrectionRequest


class CorrectionRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        target_date: date,
        correction_type: CorrectionType,
        reason: str,
        recorded_by: Optional[int] = None,
        proposed_time: Optional[datetime] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[CorrectionRequest]:
        raise NotImplementedError

    def list_pending(self, *, manager_id: Optional[int] = None, limit: int = 200) -> Sequence[CorrectionRequest]:
        """Pending requests, optionally only those of a manager's direct reports."""

        raise NotImplementedError

    def apply_approval(self, approval: CorrectionApproval) -> None:
        """Flip the request to Approved, overwrite the corrected column and log it.

        The duration is recomputed from the row as stored at write time, so a
        clock-out recorded after the approval was built is kept. All writes
        happen in one transaction. Implementations raise (and roll back) if the
        request is no longer Pending.
        """

        raise NotImplementedError

    def reject(self, *, request_id: int, decided_by: int, reason: str) -> bool:
        raise NotImplementedError
