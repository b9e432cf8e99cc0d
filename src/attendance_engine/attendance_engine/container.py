from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .database.demo import seed_demo_data
from .exceptions.service import ExceptionService
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: InMemoryAttendanceRepository

    attendance_service: AttendanceService
    exception_service: ExceptionService
    report_service: AttendanceReportService

    def close(self) -> None:
        self.attendance_repo.close()


def build_container(*, seed_demo: bool = False, today: Optional[date] = None) -> Container:
    attendance_repo = InMemoryAttendanceRepository()
    factory = AttendanceStrategyFactory()

    if seed_demo:
        seed_demo_data(attendance_repo, today or now_local().date())

    return Container(
        attendance_repo=attendance_repo,
        attendance_service=AttendanceService(attendance_repo, strategy_factory=factory),
        exception_service=ExceptionService(attendance_repo, strategy_factory=factory),
        report_service=AttendanceReportService(attendance_repo),
    )
