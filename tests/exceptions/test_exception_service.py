from __future__ import annotations

from datetime import date

import pytest

from attendance_engine.common.auth import Actor
from attendance_engine.core.enums import AttendanceStatus, Classification, ExceptionStatus, Role
from attendance_engine.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from attendance_engine.exceptions.service import ExceptionService

from conftest import make_record


def _late_record(repo, name="Sara Ali"):
    return repo.add(make_record(name=name, check_in="08:25", classification=Classification.LATE, late_minutes=25))


def test_file_on_existing_record_marks_it_exception(exception_service, repo, employee):
    rec = _late_record(repo)

    filed = exception_service.file_exception(actor=employee, reason="Traffic accident", attendance_id=rec.id)

    assert filed.exception_status == ExceptionStatus.PENDING
    assert filed.exception_reason == "Traffic accident"
    assert filed.status == AttendanceStatus.EXCEPTION
    assert filed.classification == Classification.LATE
    assert repo.get_by_id(rec.id).exception_status == ExceptionStatus.PENDING


def test_file_without_record_creates_absent_day(exception_service, employee):
    filed = exception_service.file_exception(actor=employee, reason="Sick", on_date=date(2026, 2, 3))

    assert filed.employee_name == "Sara Ali"
    assert filed.employee_id == "e-2"
    assert filed.classification == Classification.ABSENT
    assert filed.exception_status == ExceptionStatus.PENDING


def test_blank_reason_is_rejected(exception_service, repo, employee):
    rec = _late_record(repo)
    with pytest.raises(ValidationError):
        exception_service.file_exception(actor=employee, reason="   ", attendance_id=rec.id)


def test_unknown_record(exception_service, employee):
    with pytest.raises(NotFoundError):
        exception_service.file_exception(actor=employee, reason="x", attendance_id="a-404")


def test_employee_cannot_file_for_colleague(exception_service, repo, employee):
    rec = _late_record(repo, name="Omar Youssef")

    with pytest.raises(AuthorizationError):
        exception_service.file_exception(actor=employee, reason="x", attendance_id=rec.id)
    with pytest.raises(AuthorizationError):
        exception_service.file_exception(actor=employee, reason="x", employee_name="Omar Youssef",
                                         on_date=date(2026, 2, 9))


def test_hr_can_file_for_anyone(exception_service, repo, hr_manager):
    rec = _late_record(repo, name="Omar Youssef")
    filed = exception_service.file_exception(actor=hr_manager, reason="Site visit", attendance_id=rec.id)
    assert filed.exception_status == ExceptionStatus.PENDING


def test_filing_twice_conflicts(exception_service, repo, employee):
    rec = _late_record(repo)
    exception_service.file_exception(actor=employee, reason="first", attendance_id=rec.id)

    with pytest.raises(ConflictError):
        exception_service.file_exception(actor=employee, reason="second", attendance_id=rec.id)


def test_approve_records_approver(exception_service, repo, employee, hr_manager):
    rec = _late_record(repo)
    exception_service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)

    decided = exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.APPROVED)

    assert decided.exception_status == ExceptionStatus.APPROVED
    assert decided.exception_approved_by == "Ahmed Hassan"
    assert decided.status == AttendanceStatus.EXCEPTION


def test_rejected_exception_falls_back_to_classification(exception_service, repo, employee, hr_manager):
    rec = _late_record(repo)
    exception_service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)

    decided = exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.REJECTED)

    assert decided.status == AttendanceStatus.LATE
    assert decided.late_minutes == 25


def test_decision_is_final(exception_service, repo, employee, hr_manager):
    rec = _late_record(repo)
    exception_service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)
    exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.APPROVED)

    with pytest.raises(ConflictError):
        exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.REJECTED)
    assert repo.get_by_id(rec.id).exception_status == ExceptionStatus.APPROVED


def test_only_approver_roles_decide(exception_service, repo, employee):
    rec = _late_record(repo)
    exception_service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)
    accountant = Actor(name="Khalid Jaber", role=Role.FINANCE_MANAGER)

    with pytest.raises(AuthorizationError):
        exception_service.decide(actor=employee, record_id=rec.id, status=ExceptionStatus.APPROVED)
    with pytest.raises(AuthorizationError):
        exception_service.decide(actor=accountant, record_id=rec.id, status=ExceptionStatus.APPROVED)


def test_decide_without_filed_exception(exception_service, repo, hr_manager):
    rec = _late_record(repo)

    with pytest.raises(ValidationError):
        exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.APPROVED)
    with pytest.raises(ValidationError):
        exception_service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.PENDING)
    with pytest.raises(NotFoundError):
        exception_service.decide(actor=hr_manager, record_id="a-404", status=ExceptionStatus.APPROVED)


def test_list_and_pending_count(exception_service, repo, employee, hr_manager):
    first = _late_record(repo)
    second = repo.add(make_record(on=date(2026, 2, 4), check_in="", check_out="", classification=Classification.ABSENT))
    exception_service.file_exception(actor=employee, reason="a", attendance_id=first.id)
    exception_service.file_exception(actor=employee, reason="b", attendance_id=second.id)
    exception_service.decide(actor=hr_manager, record_id=first.id, status=ExceptionStatus.APPROVED)

    assert [r.id for r in exception_service.list_exceptions()] == [second.id, first.id]
    assert [r.id for r in exception_service.list_exceptions(ExceptionStatus.PENDING)] == [second.id]
    assert exception_service.pending_count() == 1


class LosingRaceRepo:
    """Another approver decides between our read and our compare-and-set."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def decide_exception(self, *, record_id, status, decided_by):
        self._inner.decide_exception(record_id=record_id, status=ExceptionStatus.REJECTED, decided_by="Layla Ibrahim")
        return self._inner.decide_exception(record_id=record_id, status=status, decided_by=decided_by)


def test_concurrent_decision_loses_cleanly(repo, employee, hr_manager):
    rec = _late_record(repo)
    service = ExceptionService(LosingRaceRepo(repo))
    service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)

    with pytest.raises(ConflictError):
        service.decide(actor=hr_manager, record_id=rec.id, status=ExceptionStatus.APPROVED)
    assert repo.get_by_id(rec.id).exception_approved_by == "Layla Ibrahim"


class DecidedBeforeFilingRepo:
    """An approver files and approves on the record right after the service looked it up."""

    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def update(self, record_id, change):
        self._inner.update(
            record_id, lambda r: r.evolve(exception_reason="site visit", exception_status=ExceptionStatus.PENDING)
        )
        self._inner.decide_exception(record_id=record_id, status=ExceptionStatus.APPROVED, decided_by="Ahmed Hassan")
        return self._inner.update(record_id, change)


def test_filing_cannot_reopen_a_decided_exception(repo, employee):
    rec = _late_record(repo)
    service = ExceptionService(DecidedBeforeFilingRepo(repo))

    with pytest.raises(ConflictError):
        service.file_exception(actor=employee, reason="Bus", attendance_id=rec.id)

    stored = repo.get_by_id(rec.id)
    assert stored.exception_status == ExceptionStatus.APPROVED
    assert stored.exception_reason == "site visit"
