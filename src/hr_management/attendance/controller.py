from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, parse_time_of_day
from ..common.web import current_employee_id, current_role, json_body, login_required, optional_id, to_json
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import ClockMethod, OfflineEventType
from ..core.exceptions import ValidationError
from .model import AttendanceRecord
from .service import OfflineClockEvent


def _record_json(record: AttendanceRecord) -> dict:
    data = to_json(asdict(record))
    data["status"] = record.status
    return data


def _parse_date(value) -> date:
    try:
        return parse_iso_date(str(value))
    except (TypeError, ValueError):
        raise ValidationError("Date must be formatted as YYYY-MM-DD")


def _optional_date(value):
    return _parse_date(value) if value not in (None, "") else None


def _parse_offline_event(item) -> OfflineClockEvent:
    if not isinstance(item, dict):
        raise ValidationError("Each offline event must be an object")
    try:
        clock_time = parse_iso_datetime(str(item.get("clock_time")))
        event_type = OfflineEventType(str(item.get("type") or "").upper())
    except ValueError:
        raise ValidationError("Offline event needs an ISO clock_time and a type of IN or OUT")
    return OfflineClockEvent(clock_time=clock_time, event_type=event_type)


def _parse_when(value):
    """Accept either a full ISO timestamp or a bare HH:MM[:SS]."""

    if value in (None, ""):
        return None
    text = str(value)
    try:
        return parse_iso_datetime(text) if "T" in text or "-" in text else parse_time_of_day(text)
    except ValueError:
        raise ValidationError("Time is invalid")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock", methods=["POST"], endpoint="attendance_clock")
    @login_required
    def clock():
        body = json_body()
        try:
            method = ClockMethod(body.get("method") or ClockMethod.WEB.value)
        except ValueError:
            raise ValidationError("Clock method is invalid")

        result = container.attendance_service.record_clock_event(current_employee_id(), method=method)
        return jsonify(
            {
                "kind": result.kind.value,
                "is_late": result.is_late,
                "record": _record_json(result.record),
            }
        )

    @app.route("/api/attendance/current", methods=["GET"], endpoint="attendance_current")
    @login_required
    def current():
        record = container.attendance_service.get_current(current_employee_id())
        return jsonify({"record": _record_json(record) if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        try:
            days = int(request.args.get("days", DEFAULT_HISTORY_DAYS))
        except ValueError:
            raise ValidationError("days must be a number")
        records = container.attendance_service.get_history(current_employee_id(), days=days)
        return jsonify({"records": [_record_json(r) for r in records]})

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="attendance_sync")
    @login_required
    def sync_offline():
        events = json_body().get("events")
        if not isinstance(events, list) or not events:
            raise ValidationError("events must be a non-empty list")

        result = container.attendance_service.sync_offline(
            current_employee_id(), [_parse_offline_event(e) for e in events]
        )
        return jsonify(
            {
                "applied": [
                    {"kind": r.kind.value, "is_late": r.is_late, "record": _record_json(r.record)} for r in result.applied
                ],
                "skipped": [to_json(asdict(e)) for e in result.skipped],
            }
        )

    @app.route("/api/attendance/team", methods=["GET"], endpoint="attendance_team")
    @login_required
    def team():
        manager_id = optional_id(request.args, "manager_id")
        records = container.attendance_service.get_team_attendance(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
            manager_id=manager_id,
            start=_optional_date(request.args.get("start")),
            end=_optional_date(request.args.get("end")),
        )
        return jsonify({"records": [_record_json(r) for r in records]})

    @app.route("/api/attendance/corrections", methods=["POST"], endpoint="corrections_submit")
    @login_required
    def submit_correction():
        body = json_body()
        actor_id = current_employee_id()
        request_id = container.correction_service.submit(
            current_role=current_role(),
            actor_id=actor_id,
            employee_id=optional_id(body, "employee_id") or actor_id,
            target_date=_parse_date(body.get("target_date")),
            correction_type=body.get("correction_type") or "",
            reason=body.get("reason") or "",
            proposed_time=_parse_when(body.get("proposed_time")),
        )
        return jsonify({"request_id": request_id}), 201

    @app.route("/api/attendance/corrections/pending", methods=["GET"], endpoint="corrections_pending")
    @login_required
    def pending_corrections():
        items = container.correction_service.list_pending(
            current_role=current_role(),
            current_employee_id=current_employee_id(),
        )
        return jsonify({"requests": [to_json(asdict(r)) for r in items]})

    @app.route("/api/attendance/corrections/<int:request_id>/approve", methods=["POST"], endpoint="corrections_approve")
    @login_required
    def approve_correction(request_id: int):
        body = json_body()
        container.correction_service.approve(
            current_role=current_role(),
            request_id=request_id,
            approver_id=current_employee_id(),
            correct_time=_parse_when(body.get("correct_time")),
        )
        return jsonify({"request_id": request_id, "status": "Approved"})

    @app.route("/api/attendance/corrections/<int:request_id>/reject", methods=["POST"], endpoint="corrections_reject")
    @login_required
    def reject_correction(request_id: int):
        container.correction_service.reject(
            current_role=current_role(),
            request_id=request_id,
            approver_id=current_employee_id(),
            reason=json_body().get("reason") or "",
        )
        return jsonify({"request_id": request_id, "status": "Rejected"})
