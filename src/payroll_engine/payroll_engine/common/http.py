from __future__ import annotations

import logging
from typing import Any, Optional

from flask import jsonify

from ..core.exceptions import (
    AdvanceNotFound,
    AlreadyCheckedIn,
    CompanyNotFound,
    DomainError,
    EmployeeNotFound,
    NoOpenSession,
    ValidationError,
)
from ..geofence.model import GeoPoint

logger = logging.getLogger(__name__)


def error_response(e: Exception):
    """Map an exception raised by a service to a JSON error response."""
    if isinstance(e, (AlreadyCheckedIn, NoOpenSession)):
        status = 409
    elif isinstance(e, ValidationError):
        status = 400
    elif isinstance(e, (EmployeeNotFound, CompanyNotFound, AdvanceNotFound)):
        status = 404
    elif isinstance(e, DomainError):
        status = 422
    else:
        logger.exception("Unhandled error while serving request")
        return jsonify({"success": False, "error": "InternalError", "message": "Internal server error"}), 500

    return jsonify({"success": False, "error": e.__class__.__name__, "message": str(e)}), status


def parse_location(payload: Any) -> Optional[GeoPoint]:
    """Read an optional ``{"latitude", "longitude", "accuracy"}`` object."""
    if not payload:
        return None
    if not isinstance(payload, dict):
        raise ValidationError("Location must be an object")
    try:
        lat = payload["latitude"]
        lon = payload["longitude"]
    except KeyError:
        raise ValidationError("Location requires latitude and longitude")
    if lat is None or lon is None:
        return None
    try:
        accuracy = payload.get("accuracy")
        return GeoPoint(
            latitude=float(lat),
            longitude=float(lon),
            accuracy=float(accuracy) if accuracy is not None else None,
        )
    except (TypeError, ValueError):
        raise ValidationError("Location coordinates must be numbers")


def point_to_dict(point: Optional[GeoPoint]) -> Optional[dict]:
    if point is None:
        return None
    return {"latitude": point.latitude, "longitude": point.longitude, "accuracy": point.accuracy}
