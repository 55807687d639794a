from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.validators import require_latitude, require_longitude
from ..core.enums import GeofenceKind, GeofenceVerdict
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GeoPoint:
    """A reported device position; accuracy is the device's radius in meters."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    def __post_init__(self):
        require_latitude(self.latitude)
        require_longitude(self.longitude)
        if self.accuracy is not None and float(self.accuracy) < 0:
            raise ValidationError("Accuracy must not be negative")


@dataclass(frozen=True)
class Geofence:
    """Circular zone owned by a company (office) or an employee (remote)."""

    kind: GeofenceKind
    center: GeoPoint
    radius_meters: float

    def __post_init__(self):
        if float(self.radius_meters) <= 0:
            raise ValidationError("Geofence radius must be greater than 0")


@dataclass(frozen=True)
class GeofenceResult:
    verdict: GeofenceVerdict
    matched_kind: Optional[GeofenceKind] = None
    distances: dict[GeofenceKind, float] = field(default_factory=dict)

    @property
    def within_any(self) -> Optional[bool]:
        if self.verdict == GeofenceVerdict.UNKNOWN:
            return None
        return self.verdict == GeofenceVerdict.INSIDE
