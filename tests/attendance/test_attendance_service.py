from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest

from hr_management.attendance.model import AttendanceLogEntry, AttendanceRecord
from hr_management.attendance.service import AttendanceService, OfflineClockEvent
from hr_management.core.constants import LATE_ARRIVAL_REASON, SYSTEM_ACTOR
from hr_management.core.enums import ClockEventKind, ClockMethod, OfflineEventType, Role
from hr_management.core.exceptions import AuthorizationError, DataStoreError, ValidationError
from hr_management.rules.service import GracePeriodProvider
from hr_management.shifts.resolver import ShiftResolver


class InMemoryAttendance:
    def __init__(self, reports=None):
        self.records: dict[int, AttendanceRecord] = {}
        self.logs: list[AttendanceLogEntry] = []
        self.reports = reports or {}

    def get_latest_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        mine = [r for r in self.records.values() if r.employee_id == employee_id]
        return max(mine, key=lambda r: (r.entry_time, r.attendance_id), default=None)

    def list_for_employee(self, employee_id: int, *, since: date):
        mine = [r for r in self.records.values() if r.employee_id == employee_id and r.entry_time.date() >= since]
        return sorted(mine, key=lambda r: r.entry_time, reverse=True)

    def create_open(self, *, employee_id, entry_time, method, shift_id=None):
        record = AttendanceRecord(
            attendance_id=len(self.records) + 1,
            employee_id=employee_id,
            shift_id=shift_id,
            entry_time=entry_time,
            exit_time=None,
            duration_hours=None,
            login_method=method,
        )
        self.records[record.attendance_id] = record
        return record

    def close(self, *, attendance_id, exit_time, method, duration_hours):
        record = self.records.get(attendance_id)
        if record is None or record.exit_time is not None:
            return False
        self.records[attendance_id] = replace(
            record, exit_time=exit_time, logout_method=method, duration_hours=duration_hours
        )
        return True

    def append_log(self, *, attendance_id, actor, reason):
        entry = AttendanceLogEntry(
            log_id=len(self.logs) + 1,
            attendance_id=attendance_id,
            actor=actor,
            logged_at=datetime(2026, 3, 2, 12, 0),
            reason=reason,
        )
        self.logs.append(entry)
        return entry.log_id

    def list_logs(self, attendance_id):
        return [log for log in self.logs if log.attendance_id == attendance_id]

    def link_exception(self, *, exception_id, on_date):
        touched = 0
        for rid, r in self.records.items():
            if r.entry_time.date() == on_date or (r.exit_time and r.exit_time.date() == on_date):
                self.records[rid] = replace(r, exception_id=exception_id)
                touched += 1
        return touched

    def list_for_manager(self, manager_id, *, start, end):
        team = self.reports.get(manager_id, set())
        return [
            r for r in self.records.values() if r.employee_id in team and start <= r.entry_time.date() <= end
        ]


class SingleAssignment:
    def __init__(self, assignment=None):
        self.assignment = assignment

    def get_active_assignment(self, employee_id, on_date):
        a = self.assignment
        if a is not None and a.employee_id == employee_id and a.covers(on_date):
            return a
        return None

    def get_rotation_steps(self, cycle_id):
        return []


class StaticRules:
    def __init__(self, grace=None, fail=False):
        self.grace = grace
        self.fail = fail

    def get_grace_period_minutes(self):
        if self.fail:
            raise DataStoreError("timeout")
        return self.grace


def _service(attendance, assignment=None, rules=None) -> AttendanceService:
    return AttendanceService(
        attendance,
        ShiftResolver(SingleAssignment(assignment)),
        GracePeriodProvider(rules or StaticRules()),
    )


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def on_day_shift(day_shift, assign):
    return assign(1, day_shift, date(2026, 1, 1))


def test_arrival_at_grace_boundary_is_on_time(attendance, on_day_shift):
    service = _service(attendance, on_day_shift)

    result = service.record_clock_event(1, at=datetime(2026, 3, 2, 9, 15, 0))

    assert result.kind == ClockEventKind.CLOCK_IN
    assert result.is_late is False
    assert attendance.logs == []


def test_arrival_one_second_after_grace_is_late(attendance, on_day_shift):
    service = _service(attendance, on_day_shift)

    result = service.record_clock_event(1, at=datetime(2026, 3, 2, 9, 15, 1))

    assert result.is_late is True
    assert result.record.is_late is True
    (log,) = attendance.logs
    assert log.attendance_id == result.record.attendance_id
    assert log.actor == SYSTEM_ACTOR
    assert log.reason == LATE_ARRIVAL_REASON
    assert service.get_logs(result.record.attendance_id) == [log]


def test_configured_grace_period_is_used(attendance, on_day_shift):
    service = _service(attendance, on_day_shift, StaticRules(grace=5))

    assert service.record_clock_event(1, at=datetime(2026, 3, 2, 9, 6)).is_late is True


def test_grace_falls_back_to_default_when_rules_unavailable(attendance, on_day_shift):
    service = _service(attendance, on_day_shift, StaticRules(grace=0, fail=True))

    decision = service.check_lateness(1, datetime(2026, 3, 2, 9, 10))

    assert decision.grace_minutes == 15
    assert decision.is_late is False


def test_no_shift_means_never_late(attendance):
    service = _service(attendance)

    result = service.record_clock_event(1, at=datetime(2026, 3, 2, 23, 0))

    assert result.is_late is False
    assert result.record.shift_id is None


def test_second_event_closes_open_record(attendance, on_day_shift, fixed_now):
    service = _service(attendance, on_day_shift)
    service.record_clock_event(1, at=fixed_now)

    result = service.record_clock_event(1, at=fixed_now + timedelta(hours=8, minutes=30), method=ClockMethod.DEVICE)

    assert result.kind == ClockEventKind.CLOCK_OUT
    assert result.record.exit_time == fixed_now + timedelta(hours=8, minutes=30)
    assert result.record.duration_hours == pytest.approx(8.5)
    assert result.record.logout_method == "Device"
    assert service.get_current(1) is None


def test_event_after_clock_out_opens_new_record(attendance, on_day_shift, fixed_now):
    service = _service(attendance, on_day_shift)
    service.record_clock_event(1, at=fixed_now)
    service.record_clock_event(1, at=fixed_now + timedelta(hours=4))

    result = service.record_clock_event(1, at=fixed_now + timedelta(hours=5))

    assert result.kind == ClockEventKind.CLOCK_IN
    assert len(attendance.records) == 2
    assert service.get_current(1).attendance_id == result.record.attendance_id


def test_clock_out_before_entry_rejected(attendance, fixed_now):
    service = _service(attendance)
    service.record_clock_event(1, at=fixed_now)

    with pytest.raises(ValidationError):
        service.record_clock_event(1, at=fixed_now - timedelta(minutes=1))


def test_history_limited_to_window(attendance, fixed_now):
    service = _service(attendance)
    attendance.create_open(employee_id=1, entry_time=fixed_now - timedelta(days=40), method="Web")
    attendance.create_open(employee_id=1, entry_time=fixed_now - timedelta(days=2), method="Web")

    history = service.get_history(1, days=30, today=fixed_now.date())

    assert len(history) == 1


def test_apply_exception_day_links_records(attendance, fixed_now):
    service = _service(attendance)
    service.record_clock_event(1, at=fixed_now)

    assert service.apply_exception_day(current_role=Role.HR_ADMIN, exception_id=4, on_date=fixed_now.date()) == 1
    assert attendance.records[1].exception_id == 4

    with pytest.raises(AuthorizationError):
        service.apply_exception_day(current_role=Role.EMPLOYEE, exception_id=4, on_date=fixed_now.date())


def test_lateness_uses_effective_split_slot(attendance, split_shift, assign):
    service = _service(attendance, assign(1, split_shift, date(2026, 1, 1)))

    decision = service.check_lateness(1, datetime(2026, 3, 2, 14, 10))

    assert decision.resolved.start_time == time(14, 0)
    assert decision.deadline == datetime(2026, 3, 2, 14, 15)
    assert decision.is_late is False


def test_offline_events_replayed_in_time_order(attendance, on_day_shift):
    service = _service(attendance, on_day_shift)
    events = [
        OfflineClockEvent(datetime(2026, 3, 2, 17, 0), OfflineEventType.OUT),
        OfflineClockEvent(datetime(2026, 3, 2, 9, 20), OfflineEventType.IN),
    ]

    result = service.sync_offline(1, events)

    assert [r.kind for r in result.applied] == [ClockEventKind.CLOCK_IN, ClockEventKind.CLOCK_OUT]
    assert result.skipped == []
    (record,) = attendance.records.values()
    assert record.login_method == ClockMethod.OFFLINE_SYNC.value
    assert record.logout_method == ClockMethod.OFFLINE_SYNC.value
    assert record.duration_hours == pytest.approx(7 + 40 / 60)
    assert [log.reason for log in attendance.logs] == [LATE_ARRIVAL_REASON]


def test_offline_events_that_do_not_fit_are_skipped(attendance, caplog):
    service = _service(attendance)
    dup_in = OfflineClockEvent(datetime(2026, 3, 2, 9, 5), OfflineEventType.IN)
    stray_out = OfflineClockEvent(datetime(2026, 3, 1, 18, 0), OfflineEventType.OUT)

    with caplog.at_level("WARNING"):
        result = service.sync_offline(
            1,
            [OfflineClockEvent(datetime(2026, 3, 2, 9, 0), OfflineEventType.IN), dup_in, stray_out],
        )

    assert len(result.applied) == 1
    assert result.skipped == [stray_out, dup_in]
    assert len(attendance.records) == 1
    assert "skipped 2 events" in caplog.text


def test_team_attendance_defaults_to_last_week(fixed_now):
    attendance = InMemoryAttendance(reports={10: {1, 2}})
    service = _service(attendance)
    attendance.create_open(employee_id=1, entry_time=fixed_now - timedelta(days=3), method="Web")
    attendance.create_open(employee_id=2, entry_time=fixed_now - timedelta(days=20), method="Web")
    attendance.create_open(employee_id=3, entry_time=fixed_now, method="Web")

    records = service.get_team_attendance(
        current_role=Role.LINE_MANAGER, current_employee_id=10, today=fixed_now.date()
    )

    assert [r.employee_id for r in records] == [1]


def test_line_manager_cannot_view_another_team(attendance):
    service = _service(attendance)

    with pytest.raises(AuthorizationError):
        service.get_team_attendance(current_role=Role.LINE_MANAGER, current_employee_id=10, manager_id=11)
    with pytest.raises(AuthorizationError):
        service.get_team_attendance(current_role=Role.EMPLOYEE, current_employee_id=10)


def test_team_attendance_rejects_inverted_range(attendance):
    service = _service(attendance)

    with pytest.raises(ValidationError):
        service.get_team_attendance(
            current_role=Role.HR_ADMIN,
            current_employee_id=3,
            manager_id=10,
            start=date(2026, 3, 2),
            end=date(2026, 3, 1),
        )
