# ==============================================================================
# Geo Math
# ==============================================================================
"""
Great-circle distance helpers for location deduplication.

Location payloads are loose JSON maps; extract_coordinate() pulls a
GeoPoint out of them and returns None when the shape is wrong, so callers
can decide how to fail.
"""

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt
from typing import Any

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlat = radians(b.lat - a.lat)
    dlng = radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def _as_degrees(value: Any) -> float | None:
    # bool is an int subclass; a JSON true is not a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def extract_coordinate(location: Any) -> GeoPoint | None:
    """
    Extract the coordinate from a location map.

    Expects ``{"coordinate": {"lat": <number>, "lng": <number>}, ...}``.

    Args:
        location: Location map (any other fields are ignored)

    Returns:
        GeoPoint, or None if the coordinate is missing or malformed
    """
    if not isinstance(location, dict):
        return None
    coordinate = location.get("coordinate")
    if not isinstance(coordinate, dict):
        return None
    lat = _as_degrees(coordinate.get("lat"))
    lng = _as_degrees(coordinate.get("lng"))
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)
