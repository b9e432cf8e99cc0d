from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import current_actor, json_body, query_date
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .repository import RecordFilter
from .schemas import AttendancePayload, CapturePayload, LateMinutesPayload, record_to_json


def _items(records) -> dict:
    items = [record_to_json(r) for r in records]
    return {"items": items, "total": len(items)}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        raw_status = (request.args.get("status") or "").strip()
        status = None
        if raw_status and raw_status != "all":
            try:
                status = AttendanceStatus(raw_status)
            except ValueError:
                raise ValidationError(f"Unknown status: {raw_status}")

        # from/to only apply together
        date_from = query_date("from")
        date_to = query_date("to")
        if not (date_from and date_to):
            date_from = date_to = None

        record_filter = RecordFilter(
            on_date=query_date("date"),
            date_from=date_from,
            date_to=date_to,
            employee_name=(request.args.get("employee") or "").strip() or None,
            search=(request.args.get("search") or "").strip() or None,
            status=status,
        )
        return jsonify(_items(service.list_records(record_filter)))

    @app.route("/attendance/<record_id>", methods=["GET"], endpoint="get_attendance")
    def get_attendance(record_id: str):
        return jsonify(record_to_json(service.get(record_id)))

    @app.route("/attendance/employee/<name>", methods=["GET"], endpoint="employee_attendance")
    def employee_attendance(name: str):
        return jsonify(_items(service.list_records(RecordFilter(employee_name=name))))

    @app.route("/attendance", methods=["POST"], endpoint="create_attendance")
    def create_attendance():
        actor = current_actor()
        payload = AttendancePayload.from_json(json_body())
        rec = service.create(actor=actor, payload=payload)
        return jsonify(record_to_json(rec)), 201

    @app.route("/attendance/<record_id>", methods=["PUT"], endpoint="replace_attendance")
    def replace_attendance(record_id: str):
        actor = current_actor()
        payload = AttendancePayload.from_json(json_body())
        rec = service.replace(actor=actor, record_id=record_id, payload=payload)
        return jsonify(record_to_json(rec))

    @app.route("/attendance/<record_id>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(record_id: str):
        service.delete(actor=current_actor(), record_id=record_id)
        return jsonify({"success": True})

    @app.route("/attendance/check-in", methods=["POST"], endpoint="checkin")
    def checkin():
        actor = current_actor()
        capture = CapturePayload.from_json(json_body())
        rec = service.check_in(
            employee_id=actor.employee_id,
            employee_name=actor.name,
            now=now_local(),
            location=capture.location,
            device=capture.device,
        )
        return jsonify(record_to_json(rec)), 201

    @app.route("/attendance/check-out", methods=["POST"], endpoint="checkout")
    def checkout():
        actor = current_actor()
        capture = CapturePayload.from_json(json_body())
        rec = service.check_out(
            employee_id=actor.employee_id,
            employee_name=actor.name,
            now=now_local(),
            location=capture.location,
            device=capture.device,
        )
        return jsonify(record_to_json(rec))

    @app.route("/attendance/late/<record_id>", methods=["PUT"], endpoint="adjust_late")
    def adjust_late(record_id: str):
        actor = current_actor()
        payload = LateMinutesPayload.from_json(json_body())
        rec = service.adjust_late_minutes(actor=actor, record_id=record_id, late_minutes=payload.late_minutes)
        return jsonify(record_to_json(rec))
