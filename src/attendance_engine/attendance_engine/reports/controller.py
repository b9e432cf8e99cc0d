from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_duration, now_local
from ..common.http import query_date
from ..container import Container
from ..core.exceptions import ValidationError
from .service import period_range


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _range() -> tuple[date, date]:
        today = query_date("today") or now_local().date()
        start = query_date("from")
        end = query_date("to")
        if start or end:
            if not (start and end):
                raise ValidationError("from and to must be given together")
            return start, end
        return period_range((request.args.get("period") or "month").strip(), today)

    @app.route("/attendance/reports/summary", methods=["GET"], endpoint="report_summary")
    def report_summary():
        start, end = _range()
        employee = (request.args.get("employee") or "").strip() or None
        data = service.build_report(start=start, end=end, employee_name=employee)
        return jsonify(
            {
                "start": data.start.strftime("%Y-%m-%d"),
                "end": data.end.strftime("%Y-%m-%d"),
                "rows": data.rows,
                "summary": data.summary,
                "totals": data.totals,
            }
        )

    @app.route("/attendance/reports/employees", methods=["GET"], endpoint="report_employees")
    def report_employees():
        start, end = _range()
        data = service.build_report(start=start, end=end)
        return jsonify({"items": data.summary, "total": len(data.summary)})

    @app.route("/attendance/reports/trend", methods=["GET"], endpoint="report_trend")
    def report_trend():
        today = query_date("today") or now_local().date()
        buckets = [
            {**asdict(b), "date": b.date.strftime("%Y-%m-%d")}
            for b in service.trend(today=today)
        ]
        return jsonify({"items": buckets})

    @app.route("/attendance/reports/today", methods=["GET"], endpoint="report_today")
    def report_today():
        today = query_date("today") or now_local().date()
        s = service.today_summary(today=today)
        return jsonify(
            {
                "date": s.date.strftime("%Y-%m-%d"),
                "counts": s.counts,
                "total_worked_minutes": s.total_worked_minutes,
                "average_worked": format_duration(round(s.average_worked_minutes)),
                "total_late_minutes": s.total_late_minutes,
                "attendance_rate": s.attendance_rate,
            }
        )

    @app.route("/attendance/reports/export.csv", methods=["GET"], endpoint="report_csv")
    def report_csv():
        start, end = _range()
        employee = (request.args.get("employee") or "").strip() or None
        records = service.records_between(start=start, end=end, employee_name=employee)
        filename = f"attendance_report_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            service.export_csv(records),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
