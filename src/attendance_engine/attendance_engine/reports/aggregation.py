"""Read-side rollups over attendance records.

Every function here is pure and ignores the order of its input: counts and
integer sums only, with any listing sorted explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.constants import WEEKLY_TREND_DAYS
from ..core.enums import AttendanceStatus, ExceptionStatus

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class TrendBucket:
    date: date
    weekday: str
    present: int
    late: int
    absent: int


@dataclass(frozen=True)
class EmployeeRollup:
    employee_name: str
    total: int
    present_count: int
    late_count: int
    absent_count: int
    leave_count: int
    exception_count: int
    total_worked_minutes: int
    total_late_minutes: int
    attendance_rate: int


@dataclass(frozen=True)
class DaySummary:
    date: date
    counts: dict
    total_worked_minutes: int
    average_worked_minutes: float
    total_late_minutes: int
    attendance_rate: int


def _rate(attended: int, total: int) -> int:
    if total == 0:
        return 0
    # round half up, as the dashboards always have
    return (200 * attended + total) // (2 * total)


def status_counts(records: Iterable[AttendanceRecord]) -> dict[str, int]:
    counts = {s.value: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status.value] += 1
    return counts


def daily_counts(records: Iterable[AttendanceRecord], on_date: date) -> dict[str, int]:
    return status_counts(r for r in records if r.date == on_date)


def lateness_totals(records: Iterable[AttendanceRecord]) -> tuple[int, float]:
    """Return (total, mean) late minutes; the mean of an empty set is 0."""
    values = [r.late_minutes for r in records]
    total = sum(values)
    if not values:
        return 0, 0.0
    return total, total / len(values)


def attendance_rate(records: Iterable[AttendanceRecord]) -> int:
    counts = status_counts(records)
    total = sum(counts.values())
    return _rate(counts["present"] + counts["late"], total)


def weekly_trend(records: Iterable[AttendanceRecord], today: date) -> list[TrendBucket]:
    start = today - timedelta(days=WEEKLY_TREND_DAYS - 1)
    per_day = {start + timedelta(days=i): status_counts([]) for i in range(WEEKLY_TREND_DAYS)}
    for r in records:
        if r.date in per_day:
            per_day[r.date][r.status.value] += 1

    return [
        TrendBucket(
            date=d,
            weekday=_WEEKDAYS[d.weekday()],
            present=per_day[d]["present"],
            late=per_day[d]["late"],
            absent=per_day[d]["absent"],
        )
        for d in sorted(per_day)
    ]


def employee_rollup(records: Iterable[AttendanceRecord], employee_name: str) -> EmployeeRollup:
    mine = [r for r in records if r.employee_name == employee_name]
    counts = status_counts(mine)
    return EmployeeRollup(
        employee_name=employee_name,
        total=len(mine),
        present_count=counts["present"],
        late_count=counts["late"],
        absent_count=counts["absent"],
        leave_count=counts["leave"],
        exception_count=sum(1 for r in mine if r.has_exception),
        total_worked_minutes=sum(r.worked_minutes for r in mine),
        total_late_minutes=sum(r.late_minutes for r in mine),
        attendance_rate=_rate(counts["present"] + counts["late"], len(mine)),
    )


def employee_rollups(records: Iterable[AttendanceRecord]) -> list[EmployeeRollup]:
    records = list(records)
    names = sorted({r.employee_name for r in records})
    return [employee_rollup(records, name) for name in names]


def exception_counts(records: Iterable[AttendanceRecord]) -> dict[str, int]:
    counts = {s.value: 0 for s in ExceptionStatus}
    for r in records:
        if r.exception_status is not None:
            counts[r.exception_status.value] += 1
    return counts


def day_summary(records: Iterable[AttendanceRecord], on_date: date) -> DaySummary:
    records = list(records)
    today = [r for r in records if r.date == on_date]
    worked = sum(r.worked_minutes for r in today)
    late_total, _ = lateness_totals(today)
    return DaySummary(
        date=on_date,
        counts=daily_counts(records, on_date),
        total_worked_minutes=worked,
        average_worked_minutes=worked / len(today) if today else 0.0,
        total_late_minutes=late_total,
        attendance_rate=attendance_rate(today),
    )
