from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<employee_id>/<int:year>/<int:month>", methods=["GET"], endpoint="api_payroll_report")
    def api_payroll_report(employee_id: str, year: int, month: int):
        try:
            report = container.payroll_report_service.monthly_report(employee_id, year, month)
            return jsonify({"success": True, "report": report.to_dict()})
        except Exception as e:
            return error_response(e)
