"""Request/response schemas for the attendance HTTP boundary.

Each request body is parsed into a frozen dataclass by ``from_json``, which is
the validation step: anything that does not fit raises ``ValidationError``.
Unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import (
    require_hhmm,
    require_location,
    require_non_empty,
    require_non_negative_int,
)
from ..core.enums import ExceptionStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, Location


def _body(payload: Any) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _optional_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_date(value: Any, field_name: str) -> date:
    v = require_non_empty(value, field_name)
    try:
        return parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def _location(body: Mapping[str, Any], lat_key: str, lng_key: str, addr_key: str, field_name: str) -> Optional[Location]:
    parsed = require_location(body.get(lat_key), body.get(lng_key), body.get(addr_key), field_name)
    if parsed is None:
        return None
    lat, lng, address = parsed
    return Location(latitude=lat, longitude=lng, address=address)


@dataclass(frozen=True)
class AttendancePayload:
    """Body of POST /attendance and PUT /attendance/<id>."""

    employee_id: str
    employee_name: str
    date: date
    check_in: str
    check_out: str
    on_leave: bool
    location: Optional[Location]
    check_out_location: Optional[Location]
    device: Optional[str]

    @classmethod
    def from_json(cls, payload: Any) -> "AttendancePayload":
        body = _body(payload)
        check_in = require_hhmm(body.get("checkIn"), "checkIn")
        check_out = require_hhmm(body.get("checkOut"), "checkOut")
        on_leave = bool(body.get("onLeave")) or body.get("status") == "leave"
        if on_leave and check_in:
            raise ValidationError("A leave day cannot have a check-in")
        return cls(
            employee_id=_optional_str(body.get("employeeId")),
            employee_name=require_non_empty(body.get("employeeName"), "employeeName"),
            date=_parse_date(body.get("date"), "date"),
            check_in=check_in,
            check_out=check_out,
            on_leave=on_leave,
            location=_location(body, "latitude", "longitude", "locationAddress", "location"),
            check_out_location=_location(
                body, "checkOutLatitude", "checkOutLongitude", "checkOutLocationAddress", "checkOutLocation"
            ),
            device=_optional_str(body.get("device")) or None,
        )


@dataclass(frozen=True)
class CapturePayload:
    """Body of POST /attendance/check-in and /attendance/check-out."""

    location: Optional[Location]
    device: Optional[str]

    @classmethod
    def from_json(cls, payload: Any) -> "CapturePayload":
        body = _body(payload)
        return cls(
            location=_location(body, "latitude", "longitude", "locationAddress", "location"),
            device=_optional_str(body.get("device")) or None,
        )


@dataclass(frozen=True)
class ExceptionFilePayload:
    """Body of POST /attendance/exception."""

    reason: str
    attendance_id: Optional[str]
    employee_name: Optional[str]
    date: Optional[date]

    @classmethod
    def from_json(cls, payload: Any) -> "ExceptionFilePayload":
        body = _body(payload)
        raw_date = body.get("date")
        return cls(
            reason=require_non_empty(body.get("reason"), "reason"),
            attendance_id=_optional_str(body.get("attendanceId")) or None,
            employee_name=_optional_str(body.get("employeeName")) or None,
            date=_parse_date(raw_date, "date") if raw_date else None,
        )


@dataclass(frozen=True)
class ExceptionDecisionPayload:
    """Body of PUT /attendance/exception/<id>."""

    status: ExceptionStatus

    @classmethod
    def from_json(cls, payload: Any) -> "ExceptionDecisionPayload":
        body = _body(payload)
        raw = _optional_str(body.get("status"))
        if raw not in (ExceptionStatus.APPROVED.value, ExceptionStatus.REJECTED.value):
            raise ValidationError("status must be 'approved' or 'rejected'")
        return cls(status=ExceptionStatus(raw))


@dataclass(frozen=True)
class LateMinutesPayload:
    """Body of PUT /attendance/late/<id>."""

    late_minutes: int

    @classmethod
    def from_json(cls, payload: Any) -> "LateMinutesPayload":
        body = _body(payload)
        if "lateMinutes" not in body:
            raise ValidationError("lateMinutes is required")
        return cls(late_minutes=require_non_negative_int(body.get("lateMinutes"), "lateMinutes"))


def record_to_json(r: AttendanceRecord) -> dict:
    out = {
        "id": r.id,
        "employeeId": r.employee_id,
        "employeeName": r.employee_name,
        "date": r.date.strftime("%Y-%m-%d"),
        "checkIn": r.check_in,
        "checkOut": r.check_out,
        "status": r.status.value,
        "classification": r.classification.value,
        "lateMinutes": r.late_minutes,
        "workedMinutes": r.worked_minutes,
        "device": r.device,
        "exceptionReason": r.exception_reason,
        "exceptionStatus": r.exception_status.value if r.exception_status else None,
        "exceptionApprovedBy": r.exception_approved_by,
    }
    if r.location:
        out["latitude"] = r.location.latitude
        out["longitude"] = r.location.longitude
        out["locationAddress"] = r.location.address
    if r.check_out_location:
        out["checkOutLatitude"] = r.check_out_location.latitude
        out["checkOutLongitude"] = r.check_out_location.longitude
        out["checkOutLocationAddress"] = r.check_out_location.address
    return out
