from __future__ import annotations

import hmac

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.http import error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/jobs/close-stale-sessions", methods=["POST"], endpoint="job_close_stale_sessions")
    def job_close_stale_sessions():
        """Entry point for the external daily scheduler."""
        try:
            expected = container.settings.job_token.encode("utf-8")
            provided = request.headers.get("X-Job-Token", "").encode("utf-8")
            if not expected or not hmac.compare_digest(provided, expected):
                return jsonify({"success": False, "error": "Forbidden", "message": "Invalid job token"}), 403

            report = container.stale_session_closer.run(now_local(container.settings.tz_name))
            return jsonify({"success": not report.companies_failed, "report": report.to_dict()})
        except Exception as e:
            return error_response(e)
