from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_hhmm(value: Optional[str], field_name: str) -> str:
    """Accept an empty value or a 24-hour HH:MM time."""
    v = str(value or "").strip()
    if not v:
        return ""
    if not _HHMM.match(v):
        raise ValidationError(f"{field_name} must be HH:MM")
    return v


def require_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be an integer")
    if number != value and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an integer")
    if number < 0:
        raise ValidationError(f"{field_name} must be >= 0")
    return number


def require_location(latitude: Any, longitude: Any, address: Any, field_name: str):
    """Latitude, longitude and address travel together: all three or none.

    Returns a (lat, lng, address) tuple or None.
    """
    parts = [latitude, longitude, address]
    given = [p is not None and p != "" for p in parts]
    if not any(given):
        return None
    if not all(given):
        raise ValidationError(f"{field_name} needs latitude, longitude and address together")
    try:
        lat = float(latitude)
        lng = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} coordinates must be numbers")
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError(f"{field_name} coordinates are out of range")
    return lat, lng, str(address).strip()
