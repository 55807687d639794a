from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_duration, parse_iso_date
from ..common.http import error_response, parse_location, point_to_dict
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceEvent


def event_to_dict(e: AttendanceEvent) -> dict:
    return {
        "id": e.event_id,
        "company_id": e.company_id,
        "employee_id": e.employee_id,
        "user_id": e.user_id,
        "status": e.status.value,
        "check_in_time": e.check_in_time.isoformat(),
        "check_out_time": e.check_out_time.isoformat() if e.check_out_time else None,
        "check_in_location": point_to_dict(e.check_in_location),
        "check_out_location": point_to_dict(e.check_out_location),
        "is_within_geofence": e.is_within_geofence.value,
        "is_within_geofence_checkout": e.is_within_geofence_checkout.value,
        "matched_geofence_type": e.matched_geofence_type.value if e.matched_geofence_type else None,
        "total_hours": str(e.total_hours),
        "work_report": e.work_report,
        "needs_review": e.needs_review,
        "review_reason": e.review_reason,
        "auto_closed": e.auto_closed,
    }


def register(app: Flask, container: Container) -> None:
    def _payload() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        try:
            data = _payload()
            event = container.attendance_service.record_check_in(
                require_non_empty(data.get("employee_id") or "", "employee_id"),
                location=parse_location(data.get("location")),
                evidence_photo_ref=data.get("photo_ref"),
            )
            return jsonify({"success": True, "event": event_to_dict(event)}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out():
        try:
            data = _payload()
            event = container.attendance_service.record_check_out(
                require_non_empty(data.get("employee_id") or "", "employee_id"),
                location=parse_location(data.get("location")),
                evidence_photo_ref=data.get("photo_ref"),
                work_report=data.get("work_report"),
            )
            return jsonify({"success": True, "event": event_to_dict(event)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/<employee_id>/today", methods=["GET"], endpoint="api_attendance_today")
    def api_attendance_today(employee_id: str):
        try:
            summary = container.attendance_service.today_summary(employee_id)
            earnings = container.payroll_report_service.estimate_today_earnings(employee_id)
            return jsonify(
                {
                    "success": True,
                    "employee_id": summary.employee_id,
                    "state": summary.state.value,
                    "completed_hours": str(summary.completed_hours),
                    "live_hours": str(summary.live_hours),
                    "working_hours_today": format_duration(summary.total_hours),
                    "open_check_in_time": summary.open_check_in_time.isoformat() if summary.open_check_in_time else None,
                    "estimated_earnings": str(earnings),
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/<employee_id>/geofence-stats", methods=["GET"], endpoint="api_geofence_stats")
    def api_geofence_stats(employee_id: str):
        try:
            try:
                start = parse_iso_date(request.args.get("start", ""))
                end = parse_iso_date(request.args.get("end", ""))
            except ValueError:
                raise ValidationError("start and end must be YYYY-MM-DD")
            stats = container.attendance_service.geofence_compliance(employee_id, start=start, end=end)
            return jsonify({"success": True, "employee_id": employee_id, "stats": asdict(stats)})
        except Exception as e:
            return error_response(e)
