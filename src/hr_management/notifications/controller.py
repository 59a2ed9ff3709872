from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_employee_id, current_role, json_body, login_required, to_json
from ..container import Container
from ..core.enums import NotificationUrgency
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def list_notifications():
        employee_id = current_employee_id()
        items = container.notification_service.list_for_employee(employee_id)
        return jsonify(
            {
                "unread": container.notification_service.unread_count(employee_id),
                "notifications": [to_json(asdict(n)) for n in items],
            }
        )

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @login_required
    def mark_read(notification_id: int):
        container.notification_service.mark_as_read(
            notification_id=notification_id,
            employee_id=current_employee_id(),
        )
        return jsonify({"notification_id": notification_id, "is_read": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def mark_all_read():
        updated = container.notification_service.mark_all_as_read(current_employee_id())
        return jsonify({"updated": updated})

    @app.route("/api/notifications/team", methods=["POST"], endpoint="notifications_team")
    @login_required
    def send_to_team():
        body = json_body()
        try:
            urgency = NotificationUrgency(body.get("urgency") or NotificationUrgency.NORMAL.value)
        except ValueError:
            raise ValidationError("Urgency is invalid")

        delivered = container.notification_service.send_team_notification(
            current_role=current_role(),
            manager_id=current_employee_id(),
            message=body.get("message") or "",
            urgency=urgency,
        )
        return jsonify({"delivered": delivered}), 201
