"""Conversion between shapely points and Places API coordinates.

Shapely points are ordered ``(x=lng, y=lat)`` while the Places API speaks
``(lat, lng)``. Every crossing between the two goes through this module.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping

from shapely.geometry import Point

from grocery_places.core.errors import ProtocolViolationError


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def to_param(self) -> str:
        """Render the ``location`` query parameter, e.g. ``"37.8,-122.4"``."""
        return f"{self.lat!r},{self.lng!r}"


def to_service(point: Point) -> LatLng:
    return LatLng(lat=point.y, lng=point.x)


def from_service(latlng: LatLng) -> Point:
    return Point(latlng.lng, latlng.lat)


def is_valid_point(point: Any) -> bool:
    if not isinstance(point, Point) or point.is_empty:
        return False
    lng, lat = point.x, point.y
    if not (math.isfinite(lng) and math.isfinite(lat)):
        return False
    return -180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0


def latlng_from_payload(location: Mapping[str, Any]) -> LatLng:
    """Read a Places ``geometry.location`` mapping; coordinates must be finite numbers."""
    try:
        lat, lng = location["lat"], location["lng"]
        if isinstance(lat, bool) or isinstance(lng, bool):
            raise TypeError("boolean coordinate")
        latlng = LatLng(lat=float(lat), lng=float(lng))
    except (KeyError, TypeError, ValueError) as exc:
        raise ProtocolViolationError(f"Malformed location in Places response: {location!r}") from exc
    if not (math.isfinite(latlng.lat) and math.isfinite(latlng.lng)):
        raise ProtocolViolationError(f"Non-finite location in Places response: {location!r}")
    return latlng
