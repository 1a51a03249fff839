"""
Nearest-measurement search.

An exhaustive scan: filter by operator, then keep the candidate with the smallest
haversine distance. Ties keep the first candidate in load order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from hexsignal.core.geo import GeoPoint, haversine_m
from hexsignal.domain.models import Measurement


@dataclass(frozen=True)
class MatchResult:
    measurement: Measurement
    distance_m: float


def operator_matches(candidate: str, wanted: str) -> bool:
    """Case-insensitive exact operator comparison."""
    return candidate.lower() == wanted.lower()


def filter_by_operator(measurements: Iterable[Measurement], operator: str) -> list[Measurement]:
    return [m for m in measurements if operator_matches(m.operator, operator)]


def nearest_measurement(point: GeoPoint, candidates: Iterable[Measurement]) -> MatchResult | None:
    """Return the candidate closest to `point`, or None when there are no candidates."""
    best: Measurement | None = None
    best_d = math.inf
    for m in candidates:
        d = haversine_m(point, GeoPoint(lat=m.latitude, lon=m.longitude))
        if d < best_d:
            best_d = d
            best = m
    if best is None:
        return None
    return MatchResult(measurement=best, distance_m=best_d)
