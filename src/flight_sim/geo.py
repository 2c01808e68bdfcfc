"""Great-circle distance and small coordinate helpers."""

import math
from typing import Sequence

from src.flight_sim.config import EARTH_RADIUS_M
from src.flight_sim.models import LatLng


def haversine_distance(a: LatLng, b: LatLng) -> float:
    """Distance in meters between two points on a spherical Earth.

    Invalid coordinates yield 0.0 so callers can detect a degenerate route
    without a NaN leaking into progress arithmetic.
    """
    if a is None or b is None or not a.is_valid() or not b.is_valid():
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def interpolate(a: LatLng, b: LatLng, fraction: float) -> LatLng:
    """Straight-line (lat/lng space) interpolation from *a* to *b*."""
    return LatLng(
        lat=a.lat + (b.lat - a.lat) * fraction,
        lng=a.lng + (b.lng - a.lng) * fraction,
    )


def point_in_polygon(point: LatLng, polygon: Sequence[LatLng]) -> bool:
    """Ray-casting containment test; polygons under 3 vertices contain nothing."""
    if len(polygon) < 3 or not point.is_valid():
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        pi, pj = polygon[i], polygon[j]
        if (pi.lat > point.lat) != (pj.lat > point.lat):
            crossing = (pj.lng - pi.lng) * (point.lat - pi.lat) / (pj.lat - pi.lat) + pi.lng
            if point.lng < crossing:
                inside = not inside
        j = i
    return inside
