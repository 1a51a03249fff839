"""
Flat-top hexagon tessellation over a small lat/lon rectangle.

Distances are converted to degrees with a local flat-earth approximation around
the query center (1 degree latitude ~ `km_per_degree` km, longitude scaled by
cos(center latitude)). The error grows with the area size and with latitude; for
the few-kilometre areas this service draws it stays well below one hex.

Layout: columns of hexagons spaced `1.5 * radius` apart, rows spaced
`sqrt(3) * radius` apart, odd columns shifted up by half a row so they interlock.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

from hexsignal.core.geo import GeoPoint, degrees_to_radians

LonLat = tuple[float, float]


class GridTooLargeError(ValueError):
    """Raised when a query would enumerate more cells than the configured cap."""


@dataclass(frozen=True)
class HexLayout:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float
    # Hex radius (center to vertex) in degrees, per axis.
    side_lat: float
    side_lon: float
    dx: float
    dy: float
    cols: int
    rows: int

    @property
    def candidate_count(self) -> int:
        """Upper bound on emitted cells (every (col, row) pair before clipping)."""
        return self.cols * self.rows


@dataclass(frozen=True)
class HexCell:
    center: LonLat
    ring: tuple[LonLat, ...]


def resolve_hex_size_km(hex_size_km: float | None, *, default_km: float) -> float:
    """Fall back to `default_km` when the size is unset or zero."""
    return hex_size_km or default_km


def build_layout(
    center: GeoPoint,
    area_width_km: float,
    area_height_km: float,
    hex_size_km: float,
    *,
    km_per_degree: float = 111.0,
) -> HexLayout:
    """Compute bounding box, hex radius in degrees, column/row steps and counts.

    Raises:
        GridTooLargeError: If the column/row counts are not representable.
    """
    deg_per_km_lat = 1 / km_per_degree
    deg_per_km_lon = 1 / (km_per_degree * math.cos(degrees_to_radians(center.lat)))

    half_width_deg = (area_width_km / 2) * deg_per_km_lon
    half_height_deg = (area_height_km / 2) * deg_per_km_lat

    min_lat = center.lat - half_height_deg
    max_lat = center.lat + half_height_deg
    min_lon = center.lon - half_width_deg
    max_lon = center.lon + half_width_deg

    side_lat = hex_size_km * deg_per_km_lat
    side_lon = hex_size_km * deg_per_km_lon

    dx = 1.5 * side_lon
    dy = math.sqrt(3) * side_lat

    # A hex size that underflows to 0, or an area/hex ratio past float range,
    # cannot be enumerated at all.
    if not (dx > 0 and dy > 0):
        raise GridTooLargeError("hex_size is too small to lay out a grid.")
    col_span = (max_lon - min_lon) / dx
    row_span = (max_lat - min_lat) / dy
    if not (math.isfinite(col_span) and math.isfinite(row_span)):
        raise GridTooLargeError("Requested area is too large for the hex size; increase hex_size or shrink the area.")

    # +2 overshoot so the clipped grid still reaches the box edges.
    cols = math.floor(col_span) + 2
    rows = math.floor(row_span) + 2

    return HexLayout(
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=min_lon,
        max_lon=max_lon,
        side_lat=side_lat,
        side_lon=side_lon,
        dx=dx,
        dy=dy,
        cols=cols,
        rows=rows,
    )


def iter_hex_centers(layout: HexLayout) -> Iterator[LonLat]:
    """Yield `(lon, lat)` hex centers column by column.

    Candidates past `max_lon` or `max_lat` are dropped, not clipped. Centers start
    at `(min_lon, min_lat)` and only grow, so no lower-bound check is needed.
    """
    for col in range(layout.cols):
        for row in range(layout.rows):
            lon = layout.min_lon + col * layout.dx
            lat = layout.min_lat + row * layout.dy
            if col % 2 == 1:
                lat += layout.dy / 2
            if lon <= layout.max_lon and lat <= layout.max_lat:
                yield lon, lat


def hex_ring(center: LonLat, layout: HexLayout) -> tuple[LonLat, ...]:
    """Return the 6 vertices at 0, 60, ... 300 degrees plus the first one again."""
    lon, lat = center
    vertices = [
        (
            lon + layout.side_lon * math.cos(degrees_to_radians(60 * j)),
            lat + layout.side_lat * math.sin(degrees_to_radians(60 * j)),
        )
        for j in range(6)
    ]
    vertices.append(vertices[0])
    return tuple(vertices)


def generate_hex_cells(layout: HexLayout) -> list[HexCell]:
    return [HexCell(center=c, ring=hex_ring(c, layout)) for c in iter_hex_centers(layout)]
