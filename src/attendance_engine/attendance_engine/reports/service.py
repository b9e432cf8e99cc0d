from __future__ import annotations

import calendar
import csv
import io
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository, RecordFilter
from ..common.datetime_utils import format_duration, parse_iso_date
from ..core.constants import REPORT_EPOCH, WEEKLY_TREND_DAYS
from ..core.exceptions import ValidationError
from . import aggregation

PERIODS = ("week", "month", "all")

CSV_FIELDS = [
    "date",
    "employee_name",
    "check_in",
    "check_out",
    "worked_hours",
    "late_minutes",
    "status",
    "exception_status",
]


def _one_month_back(today: date) -> date:
    year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def period_range(period: str, today: date) -> tuple[date, date]:
    if period == "week":
        return today - timedelta(days=7), today
    if period == "month":
        return _one_month_back(today), today
    if period == "all":
        return parse_iso_date(REPORT_EPOCH), today
    raise ValidationError(f"period must be one of {', '.join(PERIODS)}")


@dataclass(frozen=True)
class ReportData:
    start: date
    end: date
    rows: list[dict]
    summary: list[dict]
    totals: dict


class AttendanceReportService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def records_between(
        self, *, start: date, end: date, employee_name: Optional[str] = None
    ) -> list[AttendanceRecord]:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        rows = self._attendance.list_records(
            RecordFilter(date_from=start, date_to=end, employee_name=employee_name)
        )
        return sorted(rows, key=lambda r: (r.date, r.employee_name), reverse=True)

    def build_report(
        self,
        *,
        start: date,
        end: date,
        employee_name: Optional[str] = None,
    ) -> ReportData:
        records = self.records_between(start=start, end=end, employee_name=employee_name)

        out_rows = [self._to_row(r) for r in records]
        summary = [
            {
                "employee_name": s.employee_name,
                "present": s.present_count,
                "late": s.late_count,
                "absent": s.absent_count,
                "leave": s.leave_count,
                "exceptions": s.exception_count,
                "worked_minutes": s.total_worked_minutes,
                "total_hours": format_duration(s.total_worked_minutes),
                "late_minutes": s.total_late_minutes,
                "attendance_rate": s.attendance_rate,
            }
            for s in aggregation.employee_rollups(records)
        ]

        late_total, late_mean = aggregation.lateness_totals(records)
        totals = {
            "records": len(records),
            "counts": aggregation.status_counts(records),
            "exceptions": aggregation.exception_counts(records),
            "late_minutes": late_total,
            "average_late_minutes": round(late_mean, 2),
            "attendance_rate": aggregation.attendance_rate(records),
        }
        return ReportData(start=start, end=end, rows=out_rows, summary=summary, totals=totals)

    def trend(self, *, today: date) -> list[aggregation.TrendBucket]:
        start = today - timedelta(days=WEEKLY_TREND_DAYS - 1)
        return aggregation.weekly_trend(self.records_between(start=start, end=today), today)

    def today_summary(self, *, today: date) -> aggregation.DaySummary:
        return aggregation.day_summary(self.records_between(start=today, end=today), today)

    @staticmethod
    def _to_row(r: AttendanceRecord) -> dict:
        return {
            "date": r.date.strftime("%Y-%m-%d"),
            "employee_name": r.employee_name,
            "check_in": r.check_in or "-",
            "check_out": r.check_out or "-",
            "worked_hours": format_duration(r.worked_minutes),
            "late_minutes": r.late_minutes,
            "status": r.status.value,
            "exception_status": r.exception_status.value if r.exception_status else "",
        }

    def export_csv(self, records: Iterable[AttendanceRecord]) -> bytes:
        """Write report rows as CSV (BOM so spreadsheet apps keep Arabic text)."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in records:
            writer.writerow(self._to_row(r))
        return out.getvalue().encode("utf-8-sig")
