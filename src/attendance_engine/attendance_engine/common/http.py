from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError
from .auth import Actor, actor_from_headers
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "message": message}), status


def current_actor() -> Actor:
    return actor_from_headers(request.headers)


def json_body() -> dict:
    return request.get_json(silent=True)


def query_date(name: str) -> Optional[date]:
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), status=e.status_code)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", status=500)
