from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.auth import Actor
from ..common.datetime_utils import format_hhmm, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Classification
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, Location
from .repository import AttendanceRepository, RecordFilter
from .schemas import AttendancePayload

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _require(self, record_id: str) -> AttendanceRecord:
        rec = self._attendance.get_by_id(record_id)
        if not rec:
            raise NotFoundError("Attendance record not found")
        return rec

    def check_in(
        self,
        *,
        employee_id: str,
        employee_name: str,
        now: datetime | None = None,
        location: Optional[Location] = None,
        device: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(
            employee_id=employee_id, employee_name=employee_name, work_date=today
        )
        if existing:
            raise ValidationError("You have already checked in today")

        check_in = format_hhmm(now)
        decision = self._factory.classify(check_in=check_in)
        rec = self._attendance.add(
            AttendanceRecord(
                id="",
                employee_id=employee_id,
                employee_name=employee_name,
                date=today,
                check_in=check_in,
                check_out="",
                classification=decision.classification,
                late_minutes=decision.late_minutes,
                location=location,
                device=device,
            )
        )
        logger.info(
            "check-in %s for %s at %s (%s, late=%d)",
            rec.id, employee_name, check_in, rec.classification.value, rec.late_minutes,
        )
        return rec

    def check_out(
        self,
        *,
        employee_id: str,
        employee_name: str,
        now: datetime | None = None,
        location: Optional[Location] = None,
        device: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        check_out = format_hhmm(now)

        record = self._attendance.get_for_employee_and_date(
            employee_id=employee_id, employee_name=employee_name, work_date=today
        )
        if not record:
            # Checkout without a check-in still records the day as present.
            rec = self._attendance.add(
                AttendanceRecord(
                    id="",
                    employee_id=employee_id,
                    employee_name=employee_name,
                    date=today,
                    check_in="",
                    check_out=check_out,
                    classification=Classification.PRESENT,
                    check_out_location=location,
                    device=device,
                )
            )
            logger.info("check-out %s for %s at %s without check-in", rec.id, employee_name, check_out)
            return rec

        def close_day(current: AttendanceRecord) -> AttendanceRecord:
            if current.check_out:
                raise ValidationError("You have already checked out today")
            return current.evolve(check_out=check_out, check_out_location=location)

        updated = self._attendance.update(record.id, close_day)
        if updated is None:
            raise NotFoundError("Attendance record not found")
        logger.info("check-out %s for %s at %s", record.id, employee_name, check_out)
        return updated

    def record_absence(
        self,
        *,
        employee_id: str,
        employee_name: str,
        on_date: date,
        on_leave: bool = False,
    ) -> AttendanceRecord:
        """Batch entry for a day without a check-in."""
        decision = self._factory.classify(check_in="", on_leave=on_leave)
        return self._attendance.add(
            AttendanceRecord(
                id="",
                employee_id=employee_id,
                employee_name=employee_name,
                date=on_date,
                check_in="",
                check_out="",
                classification=decision.classification,
            )
        )

    def create(self, *, actor: Actor, payload: AttendancePayload) -> AttendanceRecord:
        if not actor.is_approver and payload.employee_name != actor.name:
            raise AuthorizationError("You may only create your own attendance records")
        decision = self._factory.classify(check_in=payload.check_in, on_leave=payload.on_leave)
        rec = self._attendance.add(
            AttendanceRecord(
                id="",
                employee_id=payload.employee_id,
                employee_name=payload.employee_name,
                date=payload.date,
                check_in=payload.check_in,
                check_out=payload.check_out,
                classification=decision.classification,
                late_minutes=decision.late_minutes,
                location=payload.location,
                check_out_location=payload.check_out_location,
                device=payload.device,
            )
        )
        logger.info("created %s for %s on %s", rec.id, rec.employee_name, rec.date.isoformat())
        return rec

    def replace(self, *, actor: Actor, record_id: str, payload: AttendancePayload) -> AttendanceRecord:
        """Full replace; exception fields stay owned by the exception workflow. Last write wins."""
        if not actor.is_approver:
            raise AuthorizationError("You are not allowed to edit attendance records")
        decision = self._factory.classify(check_in=payload.check_in, on_leave=payload.on_leave)

        def overwrite(current: AttendanceRecord) -> AttendanceRecord:
            return current.evolve(
                employee_id=payload.employee_id,
                employee_name=payload.employee_name,
                date=payload.date,
                check_in=payload.check_in,
                check_out=payload.check_out,
                classification=decision.classification,
                late_minutes=decision.late_minutes,
                location=payload.location,
                check_out_location=payload.check_out_location,
                device=payload.device,
            )

        updated = self._attendance.update(record_id, overwrite)
        if updated is None:
            raise NotFoundError("Attendance record not found")
        return updated

    def adjust_late_minutes(self, *, actor: Actor, record_id: str, late_minutes: int) -> AttendanceRecord:
        if not actor.is_approver:
            raise AuthorizationError("You are not allowed to correct lateness")
        if late_minutes < 0:
            raise ValidationError("lateMinutes must be >= 0")

        def correct(current: AttendanceRecord) -> AttendanceRecord:
            if late_minutes > 0 and not current.check_in:
                raise ValidationError("Lateness requires a check-in time")
            classification = current.classification
            if late_minutes > 0 and classification == Classification.PRESENT:
                classification = Classification.LATE
            elif late_minutes == 0 and classification == Classification.LATE:
                classification = Classification.PRESENT
            return current.evolve(late_minutes=late_minutes, classification=classification)

        updated = self._attendance.update(record_id, correct)
        if updated is None:
            raise NotFoundError("Attendance record not found")
        logger.info("late minutes of %s set to %d by %s", record_id, late_minutes, actor.name)
        return updated

    def delete(self, *, actor: Actor, record_id: str) -> None:
        if not actor.is_approver:
            raise AuthorizationError("You are not allowed to delete attendance records")
        if not self._attendance.delete(record_id):
            raise NotFoundError("Attendance record not found")
        logger.info("deleted %s by %s", record_id, actor.name)

    def get(self, record_id: str) -> AttendanceRecord:
        return self._require(record_id)

    def list_records(self, record_filter: RecordFilter | None = None) -> list[AttendanceRecord]:
        rows = self._attendance.list_records(record_filter)
        return sorted(rows, key=lambda r: (r.date, r.employee_name, r.id), reverse=True)

    def history(self, employee_name: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self.list_records(RecordFilter(employee_name=employee_name))[:limit]
