from __future__ import annotations

import threading
from datetime import date
from typing import Callable, Optional, Sequence

from ..core.enums import ExceptionStatus
from ..core.exceptions import ConflictError
from .model import AttendanceRecord
from .repository import AttendanceRepository, RecordFilter


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store guarded by a lock.

    One instance per application (or per test); nothing is shared through
    module globals. Not suitable for multi-process deployments.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[str, AttendanceRecord] = {}
        self._next_id = 1

    def list_records(self, record_filter: Optional[RecordFilter] = None) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = list(self._records.values())
        if record_filter is None:
            return items
        return [r for r in items if record_filter.matches(r)]

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._records.get(record_id)

    def get_for_employee_and_date(
        self, *, employee_id: str, employee_name: str, work_date: date
    ) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._find_same_day(employee_id, employee_name, work_date)

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            if self._find_same_day(record.employee_id, record.employee_name, record.date):
                raise ConflictError(
                    f"{record.employee_name} already has a record for {record.date.isoformat()}"
                )
            stored = record.evolve(id=f"a-{self._next_id}")
            self._next_id += 1
            self._records[stored.id] = stored
            return stored

    def update(
        self, record_id: str, change: Callable[[AttendanceRecord], AttendanceRecord]
    ) -> Optional[AttendanceRecord]:
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            record = change(current).evolve(id=record_id)
            clash = self._find_same_day(record.employee_id, record.employee_name, record.date)
            if clash and clash.id != record_id:
                raise ConflictError(
                    f"{record.employee_name} already has a record for {record.date.isoformat()}"
                )
            self._records[record_id] = record
            return record

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def decide_exception(self, *, record_id: str, status: ExceptionStatus, decided_by: str) -> bool:
        with self._lock:
            current = self._records.get(record_id)
            if not current or current.exception_status != ExceptionStatus.PENDING:
                return False
            self._records[record_id] = current.evolve(
                exception_status=status,
                exception_approved_by=decided_by,
            )
            return True

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._next_id = 1

    def close(self) -> None:
        self.clear()

    def _find_same_day(self, employee_id: str, employee_name: str, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._records.values():
            if r.date == work_date and r.belongs_to(employee_id, employee_name):
                return r
        return None
