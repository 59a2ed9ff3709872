from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_id(value: int, field_name: str) -> int:
    if value is None or int(value) <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return int(value)


def require_non_negative(value: int, field_name: str) -> int:
    if value is None or int(value) < 0:
        raise ValidationError(f"{field_name} must be zero or greater")
    return int(value)
