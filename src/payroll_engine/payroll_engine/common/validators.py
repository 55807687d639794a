from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def optional_text(value: Optional[str], field_name: str = "Value") -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    v = (value or "").strip()
    return v or None


def optional_int(value, field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_latitude(value: float) -> float:
    lat = float(value)
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude out of range: {value}")
    return lat


def require_longitude(value: float) -> float:
    lon = float(value)
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude out of range: {value}")
    return lon


def require_positive_decimal(value, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} is not a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount
