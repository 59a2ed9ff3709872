"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DataStoreError,
    HierarchyCycleError,
    OperationError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session or "role" not in session:
            return jsonify({"error": "unauthenticated", "message": "Please sign in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_employee_id() -> int:
    return int(session["employee_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Unknown role")


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def optional_id(body: dict, key: str):
    value = body.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def to_json(value: Any) -> Any:
    """Make dataclass field values JSON friendly."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_json(v) for v in value]
    return value


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(exc):
        return jsonify({"error": "validation", "message": str(exc)}), 400

    @app.errorhandler(AuthorizationError)
    def _forbidden(exc):
        return jsonify({"error": "forbidden", "message": str(exc)}), 403

    @app.errorhandler(HierarchyCycleError)
    def _cycle(exc):
        return jsonify({"error": "circular_hierarchy", "message": str(exc)}), 409

    @app.errorhandler(OperationError)
    @app.errorhandler(DataStoreError)
    def _server(exc):
        logger.error("Request failed: %s", exc)
        return jsonify({"error": "server", "message": "The operation could not be completed"}), 500
