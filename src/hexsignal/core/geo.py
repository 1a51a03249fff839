from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, pi, sin, sqrt

"""
Geospatial helpers.

Spherical-earth math only: degree/radian conversion and haversine distance.
The grid engine calls these for every distance it computes, so they stay free of
GIS dependencies and side effects.
"""

EARTH_RADIUS_M = 6_371_000


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def degrees_to_radians(deg: float) -> float:
    return deg * pi / 180


def great_circle_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute great-circle distance in meters between two lat/lon pairs.

    NaN inputs yield NaN; identical points yield 0.
    """
    phi1 = degrees_to_radians(lat1)
    phi2 = degrees_to_radians(lat2)
    dphi = degrees_to_radians(lat2 - lat1)
    dlmb = degrees_to_radians(lon2 - lon1)

    h = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlmb / 2) ** 2
    # Rounding can push h just past 1 for antipodal points.
    if h > 1.0:
        h = 1.0
    elif h < 0.0:
        h = 0.0
    return 2 * EARTH_RADIUS_M * atan2(sqrt(h), sqrt(1 - h))


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    return great_circle_distance_m(a.lat, a.lon, b.lat, b.lon)
