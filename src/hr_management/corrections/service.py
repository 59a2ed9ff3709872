from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import CORRECTION_APPROVED_REASON, DEFAULT_LIST_LIMIT
from ..core.enums import CorrectionType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, DataStoreError, OperationError, ValidationError
from ..employees.roles import approver_roles, require_role
from .model import CorrectionApproval, CorrectionRequest
from .repository import CorrectionRepository

logger = logging.getLogger(__name__)


class CorrectionService:
    """Use case: attendance correction requests (submit, approve, reject)."""

    def __init__(self, corrections: CorrectionRepository, attendance: AttendanceRepository):
        self._corrections = corrections
        self._attendance = attendance

    @staticmethod
    def _as_datetime(value: datetime | time | None, on_date: date) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        return datetime.combine(on_date, value)

    def submit(
        self,
        *,
        current_role: Role,
        actor_id: int,
        employee_id: int,
        target_date: date,
        correction_type: CorrectionType | str,
        reason: str,
        proposed_time: datetime | time | None = None,
        today: date | None = None,
    ) -> int:
        actor_id = require_positive_id(actor_id, "Actor")
        employee_id = require_positive_id(employee_id, "Employee")
        if target_date is None:
            raise ValidationError("Date is required")
        try:
            correction_type = CorrectionType(correction_type)
        except ValueError:
            raise ValidationError("Correction type is invalid")
        reason = require_non_empty(reason, "Reason")

        if Role(current_role) == Role.EMPLOYEE and employee_id != actor_id:
            raise AuthorizationError("Employees can only request corrections for themselves")

        today = today or now_local().date()
        if target_date > today:
            raise ValidationError("Cannot request a correction for a future date")

        return self._corrections.create(
            employee_id=employee_id,
            target_date=target_date,
            correction_type=correction_type,
            reason=reason,
            recorded_by=actor_id if actor_id != employee_id else None,
            proposed_time=self._as_datetime(proposed_time, target_date),
        )

    def approve(
        self,
        *,
        current_role: Role,
        request_id: int,
        approver_id: int,
        correct_time: datetime | time | None = None,
    ) -> None:
        require_role(current_role, approver_roles())

        req = self._corrections.get(int(request_id))
        if not req:
            raise ValidationError("Correction request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Correction request was already decided")

        approval = self._build_approval(req, int(approver_id), correct_time)

        try:
            self._corrections.apply_approval(approval)
        except DataStoreError as exc:
            logger.exception("Approval of correction %s rolled back", req.request_id)
            raise OperationError("Approving the correction failed; nothing was changed") from exc

        logger.info("Correction %s approved by %s", req.request_id, approver_id)

    def _build_approval(
        self,
        req: CorrectionRequest,
        approver_id: int,
        correct_time: datetime | time | None,
    ) -> CorrectionApproval:
        record = self._attendance.get_for_employee_and_date(req.employee_id, req.target_date)
        when = self._as_datetime(correct_time, req.target_date) or req.proposed_time

        approval = CorrectionApproval(
            request_id=req.request_id,
            approver_id=approver_id,
            actor=f"Manager {approver_id}",
            log_reason=CORRECTION_APPROVED_REASON,
            attendance_id=record.attendance_id if record else None,
        )
        if when is None:
            return approval
        if record is None:
            raise ValidationError("No attendance record found for the requested date")

        # Only the corrected column is written; the other one is re-read when applied.
        if req.correction_type == CorrectionType.CHECK_OUT:
            if when < record.entry_time:
                raise ValidationError("Check-out cannot be earlier than check-in")
        elif record.exit_time is not None and record.exit_time < when:
            raise ValidationError("Check-in cannot be later than check-out")

        return replace(approval, correction_type=req.correction_type, corrected_time=when)

    def reject(self, *, current_role: Role, request_id: int, approver_id: int, reason: str) -> None:
        require_role(current_role, approver_roles())
        reason = require_non_empty(reason, "Reason")

        if not self._corrections.reject(request_id=int(request_id), decided_by=int(approver_id), reason=reason):
            raise ValidationError("Correction request not found or already decided")

    def list_pending(self, *, current_role: Role, current_employee_id: int, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[CorrectionRequest]:
        role = Role(current_role)
        require_role(role, approver_roles())
        manager_id = int(current_employee_id) if role == Role.LINE_MANAGER else None
        return self._corrections.list_pending(manager_id=manager_id, limit=limit)
