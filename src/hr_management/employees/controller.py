from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_role, json_body, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees/<int:employee_id>/role", methods=["POST"], endpoint="employees_assign_role")
    @login_required
    def assign_role(employee_id: int):
        body = json_body()
        attributes = body.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise ValidationError("attributes must be an object")

        profile = container.role_service.assign_role(
            current_role=current_role(),
            employee_id=employee_id,
            role=body.get("role") or "",
            attributes=attributes,
        )
        return jsonify(
            {
                "employee_id": employee_id,
                "role": profile.role.value,
                "auxiliary_table": profile.auxiliary_table,
            }
        )
