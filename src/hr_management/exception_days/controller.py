from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_role, json_body, login_required, to_json
from ..container import Container
from ..core.exceptions import ValidationError


def _date_or_none(value, *, required: bool = False):
    if value in (None, ""):
        if required:
            raise ValidationError("Date is required")
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError("Date must be formatted as YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/exception-days", methods=["GET"], endpoint="exception_days_list")
    @login_required
    def list_days():
        days = container.exception_day_service.list_days(
            start=_date_or_none(request.args.get("start")),
            end=_date_or_none(request.args.get("end")),
            category=request.args.get("category"),
        )
        return jsonify({"exception_days": [to_json(asdict(d)) for d in days]})

    @app.route("/api/exception-days", methods=["POST"], endpoint="exception_days_create")
    @login_required
    def create_day():
        body = json_body()
        exception_id = container.exception_day_service.create(
            current_role=current_role(),
            name=body.get("name") or "",
            category=body.get("category") or "",
            exception_date=_date_or_none(body.get("exception_date"), required=True),
        )
        return jsonify({"exception_id": exception_id}), 201
