from __future__ import annotations

from datetime import date

import pytest

from attendance_engine.attendance.memory_repository import InMemoryAttendanceRepository
from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.attendance.service import AttendanceService
from attendance_engine.common.auth import Actor
from attendance_engine.core.enums import Classification, Role
from attendance_engine.exceptions.service import ExceptionService
from attendance_engine.main import create_app


@pytest.fixture
def repo():
    r = InMemoryAttendanceRepository()
    yield r
    r.close()


@pytest.fixture
def attendance_service(repo):
    return AttendanceService(repo)


@pytest.fixture
def exception_service(repo):
    return ExceptionService(repo)


@pytest.fixture
def hr_manager():
    return Actor(name="Ahmed Hassan", role=Role.HR_MANAGER, employee_id="e-1")


@pytest.fixture
def employee():
    return Actor(name="Sara Ali", role=Role.EMPLOYEE, employee_id="e-2")


@pytest.fixture
def app():
    app = create_app("config.testing")
    yield app
    app.extensions["attendance_container"].close()


@pytest.fixture
def client(app):
    return app.test_client()


def make_record(
    *,
    name: str = "Sara Ali",
    employee_id: str = "",
    on: date = date(2026, 2, 3),
    check_in: str = "07:50",
    check_out: str = "17:00",
    classification: Classification = Classification.PRESENT,
    late_minutes: int = 0,
    **extra,
) -> AttendanceRecord:
    return AttendanceRecord(
        id=extra.pop("id", ""),
        employee_id=employee_id,
        employee_name=name,
        date=on,
        check_in=check_in,
        check_out=check_out,
        classification=classification,
        late_minutes=late_minutes,
        **extra,
    )
