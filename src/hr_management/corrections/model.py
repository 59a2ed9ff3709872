from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import CorrectionType, RequestStatus


@dataclass(frozen=True)
class CorrectionRequest:
    request_id: int
    employee_id: int
    target_date: date
    correction_type: CorrectionType
    reason: str
    status: RequestStatus
    recorded_by: Optional[int] = None
    proposed_time: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None


@dataclass(frozen=True)
class CorrectionApproval:
    """Everything one approval writes, applied together or not at all."""

    request_id: int
    approver_id: int
    actor: str
    log_reason: str
    attendance_id: Optional[int] = None
    correction_type: Optional[CorrectionType] = None
    corrected_time: Optional[datetime] = None

    @property
    def touches_attendance(self) -> bool:
        return self.attendance_id is not None and self.corrected_time is not None

    @property
    def corrects_exit(self) -> bool:
        return self.correction_type == CorrectionType.CHECK_OUT
