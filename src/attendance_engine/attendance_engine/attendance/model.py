from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import worked_minutes
from ..core.enums import AttendanceStatus, Classification, ExceptionStatus


@dataclass(frozen=True)
class Location:
    """Geolocation captured with a check-in or check-out."""

    latitude: float
    longitude: float
    address: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for a single calendar day.

    The classification (present/late/absent/leave) is kept separately from the
    exception workflow so that filing an appeal never loses it; ``status`` is
    the combined label shown to users.
    """

    id: str
    employee_id: str
    employee_name: str
    date: date
    check_in: str
    check_out: str
    classification: Classification
    late_minutes: int = 0
    location: Optional[Location] = None
    check_out_location: Optional[Location] = None
    exception_reason: Optional[str] = None
    exception_status: Optional[ExceptionStatus] = None
    exception_approved_by: Optional[str] = None
    device: Optional[str] = None

    @property
    def status(self) -> AttendanceStatus:
        if self.exception_status in (ExceptionStatus.PENDING, ExceptionStatus.APPROVED):
            return AttendanceStatus.EXCEPTION
        return AttendanceStatus(self.classification.value)

    @property
    def worked_minutes(self) -> int:
        return worked_minutes(self.check_in, self.check_out)

    @property
    def has_exception(self) -> bool:
        return self.exception_reason is not None

    def belongs_to(self, employee_id: str, employee_name: str) -> bool:
        if employee_id and self.employee_id:
            return self.employee_id == employee_id
        return self.employee_name == employee_name

    def evolve(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)
