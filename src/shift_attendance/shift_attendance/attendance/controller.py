from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import Conflict, DomainError, NotFound, PolicyRejected, StoreUnavailable, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, 400),
    (PolicyRejected, 403),
    (NotFound, 404),
    (Conflict, 409),
    (StoreUnavailable, 503),
)


def _fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _client_time(value):
    if not value:
        return None
    text = str(value).strip()
    # fromisoformat only learned the "Z" suffix in 3.11.
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid client time: {value!r}") from exc


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        for exc_type, status in ERROR_STATUS:
            if isinstance(exc, exc_type):
                if status == 503:
                    logger.error("store unavailable on %s %s: %s", request.method, request.path, exc)
                return _fail(str(exc), status)
        return _fail(str(exc), 400)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return _fail("Server error", 500)

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    def checkin():
        data = request.get_json(silent=True) or {}
        result = service.check_in(
            data.get("employee_id"),
            data.get("latitude"),
            data.get("longitude"),
            client_time=_client_time(data.get("client_time")),
        )
        return jsonify({"success": True, "message": "Check-in recorded", **result.to_dict()}), 200

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    def checkout():
        data = request.get_json(silent=True) or {}
        result = service.check_out(data.get("employee_id"), data.get("latitude"), data.get("longitude"))
        return jsonify({"success": True, "message": "Check-out recorded", **result.to_dict()}), 200

    @app.route("/api/attendance/<employee_id>", methods=["GET"], endpoint="api_history")
    def history(employee_id: str):
        limit = request.args.get("limit", default=DEFAULT_HISTORY_LIMIT, type=int)
        records = service.get_history(employee_id, limit=limit)
        return jsonify({"success": True, "data": [r.to_dict() for r in records]}), 200

    @app.route("/api/admin/attendance/initialize", methods=["POST"], endpoint="api_admin_initialize")
    def initialize():
        data = request.get_json(silent=True) or {}
        business_date = parse_iso_date(data["date"]) if data.get("date") else None
        inserted = service.initialize_day(business_date)
        return jsonify({"success": True, "message": "Attendance initialized", "inserted": inserted}), 200

    @app.route("/api/admin/attendance/date/<day>", methods=["GET"], endpoint="api_admin_by_date")
    def by_date(day: str):
        records = service.get_by_date(parse_iso_date(day))
        return jsonify({"success": True, "data": [r.to_dict() for r in records]}), 200

    @app.route("/api/admin/attendance/summary/<day>", methods=["GET"], endpoint="api_admin_summary")
    def summary(day: str):
        return jsonify({"success": True, "data": service.get_summary(parse_iso_date(day)).to_dict()}), 200
