from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_TEAM_DAYS, LATE_ARRIVAL_REASON, SYSTEM_ACTOR
from ..core.enums import ClockEventKind, ClockMethod, OfflineEventType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.roles import approver_roles, require_role, shift_admin_roles
from ..rules.service import GracePeriodProvider
from ..shifts.resolver import ResolvedShift, ShiftResolver
from .model import AttendanceLogEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatenessDecision:
    is_late: bool
    resolved: Optional[ResolvedShift] = None
    grace_minutes: Optional[int] = None
    deadline: Optional[datetime] = None


@dataclass(frozen=True)
class ClockEventResult:
    kind: ClockEventKind
    record: AttendanceRecord
    is_late: bool = False


@dataclass(frozen=True)
class OfflineClockEvent:
    clock_time: datetime
    event_type: OfflineEventType


@dataclass(frozen=True)
class OfflineSyncResult:
    applied: list[ClockEventResult]
    skipped: list[OfflineClockEvent]


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: ShiftResolver,
        grace: GracePeriodProvider,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._grace = grace

    def record_clock_event(
        self,
        employee_id: int,
        *,
        at: datetime | None = None,
        method: ClockMethod | str = ClockMethod.WEB,
    ) -> ClockEventResult:
        """Clock in when nothing is open, otherwise close the open record."""

        employee_id = require_positive_id(employee_id, "Employee")
        at = at or now_local()
        method = ClockMethod(method).value

        current = self._attendance.get_latest_for_employee(employee_id)
        if current is None or not current.is_open:
            return self._clock_in(employee_id, at, method)
        return self._clock_out(current, at, method)

    def _clock_in(self, employee_id: int, at: datetime, method: str) -> ClockEventResult:
        decision = self.check_lateness(employee_id, at)
        shift_id = decision.resolved.shift.shift_id if decision.resolved else None

        record = self._attendance.create_open(
            employee_id=employee_id,
            entry_time=at,
            method=method,
            shift_id=shift_id,
        )

        if decision.is_late:
            logger.info(
                "Late arrival: employee=%s at=%s deadline=%s",
                employee_id,
                at.isoformat(),
                decision.deadline.isoformat() if decision.deadline else "-",
            )
            self._attendance.append_log(
                attendance_id=record.attendance_id,
                actor=SYSTEM_ACTOR,
                reason=LATE_ARRIVAL_REASON,
            )
            record = replace(record, is_late=True)

        return ClockEventResult(kind=ClockEventKind.CLOCK_IN, record=record, is_late=decision.is_late)

    def _clock_out(self, current: AttendanceRecord, at: datetime, method: str) -> ClockEventResult:
        if at < current.entry_time:
            raise ValidationError("Clock-out cannot be earlier than clock-in")

        duration = hours_between(current.entry_time, at)
        if not self._attendance.close(
            attendance_id=current.attendance_id,
            exit_time=at,
            method=method,
            duration_hours=duration,
        ):
            raise ValidationError("Attendance record is already closed")

        closed = replace(current, exit_time=at, duration_hours=duration, logout_method=method)
        return ClockEventResult(kind=ClockEventKind.CLOCK_OUT, record=closed, is_late=current.is_late)

    def check_lateness(self, employee_id: int, at: datetime) -> LatenessDecision:
        resolved = self._resolver.resolve(employee_id, at)
        if resolved is None:
            return LatenessDecision(is_late=False)

        grace_minutes = self._grace.current_minutes()
        deadline = datetime.combine(at.date(), resolved.start_time) + timedelta(minutes=grace_minutes)
        return LatenessDecision(
            is_late=at > deadline,
            resolved=resolved,
            grace_minutes=grace_minutes,
            deadline=deadline,
        )

    def get_current(self, employee_id: int) -> Optional[AttendanceRecord]:
        record = self._attendance.get_latest_for_employee(int(employee_id))
        if record is None or not record.is_open:
            return None
        return record

    def get_logs(self, attendance_id: int) -> Sequence[AttendanceLogEntry]:
        return self._attendance.list_logs(require_positive_id(attendance_id, "Attendance"))

    def get_history(self, employee_id: int, *, days: int = DEFAULT_HISTORY_DAYS, today: date | None = None) -> Sequence[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.list_for_employee(int(employee_id), since=today - timedelta(days=int(days)))

    def apply_exception_day(self, *, current_role: Role, exception_id: int, on_date: date) -> int:
        require_role(current_role, shift_admin_roles())
        exception_id = require_positive_id(exception_id, "Exception day")
        return self._attendance.link_exception(exception_id=exception_id, on_date=on_date)

    def sync_offline(self, employee_id: int, events: Iterable[OfflineClockEvent]) -> OfflineSyncResult:
        """Replay clock events captured while offline, oldest first.

        Unlike record_clock_event the direction is explicit: an IN while a
        record is open, or an OUT with nothing open, cannot be applied and is
        reported back as skipped.
        """

        employee_id = require_positive_id(employee_id, "Employee")
        method = ClockMethod.OFFLINE_SYNC.value
        applied: list[ClockEventResult] = []
        skipped: list[OfflineClockEvent] = []

        for event in sorted(events, key=lambda e: e.clock_time):
            current = self._attendance.get_latest_for_employee(employee_id)
            is_open = current is not None and current.is_open
            direction = OfflineEventType(event.event_type)
            if direction == OfflineEventType.IN and not is_open:
                applied.append(self._clock_in(employee_id, event.clock_time, method))
            elif direction == OfflineEventType.OUT and is_open and event.clock_time >= current.entry_time:
                applied.append(self._clock_out(current, event.clock_time, method))
            else:
                skipped.append(event)

        if skipped:
            logger.warning("Offline sync for employee %s skipped %d events", employee_id, len(skipped))
        return OfflineSyncResult(applied=applied, skipped=skipped)

    def get_team_attendance(
        self,
        *,
        current_role: Role,
        current_employee_id: int,
        manager_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        today: date | None = None,
    ) -> Sequence[AttendanceRecord]:
        """Attendance of a manager's direct reports, the last week by default.

        Line managers only see their own team; admins may name any manager.
        """

        role = Role(current_role)
        require_role(role, approver_roles())
        if manager_id is None:
            manager_id = current_employee_id
        if role == Role.LINE_MANAGER and int(manager_id) != int(current_employee_id):
            raise AuthorizationError("Line managers can only view their own team")
        manager_id = require_positive_id(manager_id, "Manager")

        today = today or now_local().date()
        end = end or today
        start = start or end - timedelta(days=DEFAULT_TEAM_DAYS)
        if end < start:
            raise ValidationError("End date must not be before start date")
        return self._attendance.list_for_manager(manager_id, start=start, end=end)
