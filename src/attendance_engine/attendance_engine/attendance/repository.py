from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, ExceptionStatus
from .model import AttendanceRecord


@dataclass(frozen=True)
class RecordFilter:
    on_date: Optional[date] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    employee_name: Optional[str] = None
    search: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    exceptions_only: bool = False
    exception_status: Optional[ExceptionStatus] = None

    def matches(self, r: AttendanceRecord) -> bool:
        if self.on_date is not None and r.date != self.on_date:
            return False
        if self.date_from is not None and r.date < self.date_from:
            return False
        if self.date_to is not None and r.date > self.date_to:
            return False
        if self.employee_name is not None and r.employee_name != self.employee_name:
            return False
        if self.search and self.search.lower() not in r.employee_name.lower():
            return False
        if self.status is not None and r.status != self.status:
            return False
        if self.exceptions_only and not r.has_exception:
            return False
        if self.exception_status is not None and r.exception_status != self.exception_status:
            return False
        return True


class AttendanceRepository(Protocol):
    def list_records(self, record_filter: Optional[RecordFilter] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(
        self, *, employee_id: str, employee_name: str, work_date: date
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        """Store a new record; the repository assigns the id."""

        raise NotImplementedError

    def update(
        self, record_id: str, change: Callable[[AttendanceRecord], AttendanceRecord]
    ) -> Optional[AttendanceRecord]:
        """Apply `change` to the stored record atomically; None if the id is unknown.

        `change` sees the current stored version and may raise to abort.
        """

        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def decide_exception(self, *, record_id: str, status: ExceptionStatus, decided_by: str) -> bool:
        """Apply a decision only while the exception is still pending."""

        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError
