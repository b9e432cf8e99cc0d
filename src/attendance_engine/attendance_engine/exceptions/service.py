from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository, RecordFilter
from ..common.auth import Actor
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import ExceptionStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class ExceptionService:
    """Appeal workflow attached to attendance records.

    none -> pending -> approved | rejected. Decided exceptions are terminal:
    a second decision is refused rather than overwriting the first.
    """

    def __init__(self, attendance: AttendanceRepository, *, strategy_factory: AttendanceStrategyFactory | None = None):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def file_exception(
        self,
        *,
        actor: Actor,
        reason: str,
        attendance_id: Optional[str] = None,
        employee_name: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> AttendanceRecord:
        reason = require_non_empty(reason, "Exception reason")

        if attendance_id:
            rec = self._attendance.get_by_id(attendance_id)
            if not rec:
                raise NotFoundError("Attendance record not found")
        else:
            name = employee_name or actor.name
            employee_id = actor.employee_id if name == actor.name else ""
            work_date = on_date or now_local().date()
            rec = self._attendance.get_for_employee_and_date(
                employee_id=employee_id, employee_name=name, work_date=work_date
            )
            if not rec:
                self._authorize_filing(actor, name)
                return self._file_on_new_record(actor, name, employee_id, work_date, reason)

        def open_exception(current: AttendanceRecord) -> AttendanceRecord:
            self._authorize_filing(actor, current.employee_name)
            if current.exception_status is not None:
                raise ConflictError("An exception has already been filed for this record")
            return current.evolve(
                exception_reason=reason,
                exception_status=ExceptionStatus.PENDING,
                exception_approved_by=None,
            )

        updated = self._attendance.update(rec.id, open_exception)
        if updated is None:
            raise NotFoundError("Attendance record not found")
        logger.info("exception filed on %s by %s", rec.id, actor.name)
        return updated

    def _file_on_new_record(
        self, actor: Actor, employee_name: str, employee_id: str, work_date: date, reason: str
    ) -> AttendanceRecord:
        decision = self._factory.classify(check_in="")
        rec = self._attendance.add(
            AttendanceRecord(
                id="",
                employee_id=employee_id,
                employee_name=employee_name,
                date=work_date,
                check_in="",
                check_out="",
                classification=decision.classification,
                exception_reason=reason,
                exception_status=ExceptionStatus.PENDING,
            )
        )
        logger.info("exception filed on new record %s by %s", rec.id, actor.name)
        return rec

    @staticmethod
    def _authorize_filing(actor: Actor, employee_name: str) -> None:
        if actor.is_approver:
            return
        if employee_name != actor.name:
            logger.warning("%s tried to file an exception for %s", actor.name, employee_name)
            raise AuthorizationError("You may only file exceptions for yourself")

    def decide(self, *, actor: Actor, record_id: str, status: ExceptionStatus) -> AttendanceRecord:
        if not actor.is_approver:
            raise AuthorizationError("You are not allowed to decide exceptions")
        if status not in (ExceptionStatus.APPROVED, ExceptionStatus.REJECTED):
            raise ValidationError("Decision must be approved or rejected")

        rec = self._attendance.get_by_id(record_id)
        if not rec:
            raise NotFoundError("Attendance record not found")
        if rec.exception_status is None:
            raise ValidationError("No exception has been filed for this record")

        decided = self._attendance.decide_exception(record_id=record_id, status=status, decided_by=actor.name)
        if not decided:
            logger.warning("refused re-decision of %s by %s", record_id, actor.name)
            raise ConflictError("This exception has already been decided")

        logger.info("exception on %s %s by %s", record_id, status.value, actor.name)
        return self._attendance.get_by_id(record_id)

    def list_exceptions(self, status: Optional[ExceptionStatus] = None) -> list[AttendanceRecord]:
        rows = self._attendance.list_records(RecordFilter(exceptions_only=True, exception_status=status))
        return sorted(rows, key=lambda r: (r.date, r.employee_name, r.id), reverse=True)

    def pending_count(self) -> int:
        return len(self.list_exceptions(ExceptionStatus.PENDING))
