from __future__ import annotations

import math
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.enums import GeofenceKind, GeofenceVerdict
from .model import GeoPoint, Geofence, GeofenceResult

# Lower rank wins when several zones contain the point.
_KIND_PRECEDENCE = {
    GeofenceKind.OFFICE: 0,
    GeofenceKind.REMOTE: 1,
}


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(h)))


def evaluate(point: Optional[GeoPoint], zones: Iterable[Geofence]) -> GeofenceResult:
    """Decide whether ``point`` lies inside any of ``zones``.

    A missing point yields ``UNKNOWN`` instead of ``OUTSIDE``. When several
    zones match, the office zone is reported. ``distances`` holds the
    shortest distance seen per zone kind.
    """
    if point is None:
        return GeofenceResult(verdict=GeofenceVerdict.UNKNOWN)

    distances: dict[GeofenceKind, float] = {}
    matched: Optional[GeofenceKind] = None

    for zone in zones:
        dist = haversine_meters(point, zone.center)
        if zone.kind not in distances or dist < distances[zone.kind]:
            distances[zone.kind] = dist

        if dist <= float(zone.radius_meters):
            if matched is None or _KIND_PRECEDENCE[zone.kind] < _KIND_PRECEDENCE[matched]:
                matched = zone.kind

    verdict = GeofenceVerdict.INSIDE if matched is not None else GeofenceVerdict.OUTSIDE
    return GeofenceResult(verdict=verdict, matched_kind=matched, distances=distances)
