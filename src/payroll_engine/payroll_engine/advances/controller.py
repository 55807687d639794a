from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import error_response
from ..common.validators import require_non_empty
from ..container import Container
from .model import Advance


def advance_to_dict(a: Advance) -> dict:
    return {
        "id": a.advance_id,
        "employee_id": a.employee_id,
        "amount": str(a.amount),
        "reason": a.reason,
        "status": a.status.value,
        "date_requested": a.date_requested.isoformat(),
        "date_processed": a.date_processed.isoformat() if a.date_processed else None,
        "applies_year": a.applies_year,
        "applies_month": a.applies_month,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/advances", methods=["POST"], endpoint="api_request_advance")
    def api_request_advance():
        try:
            data = request.get_json(silent=True) or {}
            advance = container.advance_service.request_advance(
                employee_id=require_non_empty(str(data.get("employee_id") or ""), "employee_id"),
                amount=data.get("amount"),
                reason=data.get("reason") or "",
            )
            return jsonify({"success": True, "advance": advance_to_dict(advance)}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/advances/<int:advance_id>/approve", methods=["POST"], endpoint="api_approve_advance")
    def api_approve_advance(advance_id: int):
        try:
            data = request.get_json(silent=True) or {}
            advance = container.advance_service.approve(
                advance_id,
                applies_year=data.get("applies_year"),
                applies_month=data.get("applies_month"),
            )
            return jsonify({"success": True, "advance": advance_to_dict(advance)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/advances/<int:advance_id>/reject", methods=["POST"], endpoint="api_reject_advance")
    def api_reject_advance(advance_id: int):
        try:
            advance = container.advance_service.reject(advance_id)
            return jsonify({"success": True, "advance": advance_to_dict(advance)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/advances/employee/<employee_id>", methods=["GET"], endpoint="api_list_advances")
    def api_list_advances(employee_id: str):
        try:
            advances = container.advance_service.list_for_employee(employee_id)
            return jsonify({"success": True, "advances": [advance_to_dict(a) for a in advances]})
        except Exception as e:
            return error_response(e)
