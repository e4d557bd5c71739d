from __future__ import annotations

from datetime import date

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_pin(value: str) -> str:
    pin = (value or "").strip()
    if len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be {PIN_LENGTH} digits")
    return pin


def require_iso_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date(require_non_empty(value, field_name))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None
