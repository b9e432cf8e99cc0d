from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.schemas import ExceptionDecisionPayload, ExceptionFilePayload, record_to_json
from ..common.http import current_actor, json_body
from ..container import Container
from ..core.enums import ExceptionStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.exception_service

    @app.route("/attendance/exceptions", methods=["GET"], endpoint="list_exceptions")
    def list_exceptions():
        raw = (request.args.get("status") or "").strip()
        status = None
        if raw:
            try:
                status = ExceptionStatus(raw)
            except ValueError:
                raise ValidationError(f"Unknown exception status: {raw}")
        items = [record_to_json(r) for r in service.list_exceptions(status)]
        return jsonify({"items": items, "total": len(items), "pending": service.pending_count()})

    @app.route("/attendance/exception", methods=["POST"], endpoint="file_exception")
    def file_exception():
        actor = current_actor()
        payload = ExceptionFilePayload.from_json(json_body())
        rec = service.file_exception(
            actor=actor,
            reason=payload.reason,
            attendance_id=payload.attendance_id,
            employee_name=payload.employee_name,
            on_date=payload.date,
        )
        return jsonify(record_to_json(rec)), 201

    @app.route("/attendance/exception/<record_id>", methods=["PUT"], endpoint="decide_exception")
    def decide_exception(record_id: str):
        actor = current_actor()
        payload = ExceptionDecisionPayload.from_json(json_body())
        rec = service.decide(actor=actor, record_id=record_id, status=payload.status)
        return jsonify(record_to_json(rec))
