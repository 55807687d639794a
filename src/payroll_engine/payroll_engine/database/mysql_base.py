from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..core.enums import GeofenceKind
from ..geofence.model import GeoPoint, Geofence
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Normalize DECIMAL/float/str column values to Decimal."""

    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def point_from_row(row: Dict[str, Any], prefix: str) -> Optional[GeoPoint]:
    """Build a GeoPoint from ``<prefix>_lat``/``_lon``/``_accuracy`` columns."""

    lat = row.get(f"{prefix}_lat")
    lon = row.get(f"{prefix}_lon")
    if lat is None or lon is None:
        return None
    accuracy = row.get(f"{prefix}_accuracy")
    return GeoPoint(
        latitude=float(lat),
        longitude=float(lon),
        accuracy=float(accuracy) if accuracy is not None else None,
    )


def point_params(point: Optional[GeoPoint]) -> tuple:
    if point is None:
        return (None, None, None)
    return (point.latitude, point.longitude, point.accuracy)


def zone_from_row(row: Dict[str, Any], prefix: str, kind: GeofenceKind) -> Optional[Geofence]:
    center = point_from_row(row, prefix)
    radius = row.get(f"{prefix}_radius")
    if center is None or radius is None or float(radius) <= 0:
        return None
    return Geofence(kind=kind, center=center, radius_meters=float(radius))
