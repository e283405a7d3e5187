from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import EARTH_RADIUS_M
from .model import GeoPoint


def _coordinate(value: Any, limit: float) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or abs(number) > limit:
        return None
    return number


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in metres on a spherical earth."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)
    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_within(center: GeoPoint, radius_m: float, point: Optional[GeoPoint]) -> bool:
    """True when ``point`` lies inside the circle; any bad coordinate is outside."""
    if point is None or center is None:
        return False

    lat = _coordinate(getattr(point, "latitude", None), 90.0)
    lon = _coordinate(getattr(point, "longitude", None), 180.0)
    c_lat = _coordinate(getattr(center, "latitude", None), 90.0)
    c_lon = _coordinate(getattr(center, "longitude", None), 180.0)
    radius = _coordinate(radius_m, math.inf)
    if None in (lat, lon, c_lat, c_lon, radius) or radius < 0:
        return False

    return haversine_distance(GeoPoint(c_lat, c_lon), GeoPoint(lat, lon)) <= radius


class Geofence:
    """Circular work-site area: a center and a radius in metres."""

    def __init__(self, center: GeoPoint, radius_m: float):
        self.center = center
        self.radius_m = float(radius_m)

    def contains(self, point: Optional[GeoPoint]) -> bool:
        return is_within(self.center, self.radius_m, point)

    def distance_to(self, point: GeoPoint) -> float:
        return haversine_distance(self.center, point)
