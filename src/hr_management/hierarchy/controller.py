from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_role, json_body, login_required, optional_id, to_json
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/hierarchy/reassign", methods=["POST"], endpoint="hierarchy_reassign")
    @login_required
    def reassign():
        body = json_body()
        employee_id = optional_id(body, "employee_id")
        if employee_id is None:
            raise ValidationError("employee_id is required")

        outcome = container.hierarchy_service.reassign(
            employee_id,
            new_department_id=optional_id(body, "new_department_id"),
            new_manager_id=optional_id(body, "new_manager_id"),
            current_role=current_role(),
        )
        return jsonify(to_json(asdict(outcome)))

    @app.route("/api/hierarchy/rebuild", methods=["POST"], endpoint="hierarchy_rebuild")
    @login_required
    def rebuild():
        entries = container.hierarchy_service.rebuild(current_role=current_role())
        return jsonify({"entries": len(entries)})

    @app.route("/api/hierarchy/projection", methods=["GET"], endpoint="hierarchy_projection")
    @login_required
    def projection():
        entries = container.hierarchy_service.get_projection()
        return jsonify({"entries": [asdict(e) for e in entries]})

    @app.route("/api/hierarchy/tree", methods=["GET"], endpoint="hierarchy_tree")
    @login_required
    def tree():
        return jsonify({"roots": [n.to_dict() for n in container.hierarchy_service.get_tree()]})

    @app.route("/api/hierarchy/<int:manager_id>/reports", methods=["GET"], endpoint="hierarchy_reports")
    @login_required
    def direct_reports(manager_id: int):
        reports = container.hierarchy_service.get_direct_reports(manager_id)
        return jsonify({"reports": [to_json(asdict(r)) for r in reports]})
