from __future__ import annotations

# Grid & match orchestration.
# Wires together:
# - the hex tessellation (hexgrid)
# - the nearest-measurement scan (matching)
# - result assembly into the FeatureCollection contract (HexGridResult)
#
# The measurement set is passed in by the caller; nothing here holds state between queries.

import logging
from typing import Iterable

from hexsignal.config.settings import Settings, get_settings
from hexsignal.core.geo import GeoPoint
from hexsignal.domain.models import (
    HexFeature,
    HexGridRequest,
    HexGridResult,
    HexProperties,
    MatchMode,
    Measurement,
    NearestPoint,
    PolygonGeometry,
)
from hexsignal.grid.hexgrid import (
    GridTooLargeError,
    HexCell,
    build_layout,
    generate_hex_cells,
    resolve_hex_size_km,
)
from hexsignal.grid.matching import MatchResult, filter_by_operator, nearest_measurement

logger = logging.getLogger(__name__)


def _feature(cell: HexCell, *, value: float | None, is_nearest: bool | None = None) -> HexFeature:
    return HexFeature(
        geometry=PolygonGeometry(coordinates=[list(cell.ring)]),
        properties=HexProperties(value=value, center=cell.center, is_nearest=is_nearest),
    )


def _is_match_location(cell: HexCell, match: MatchResult | None) -> bool:
    # Exact float equality against synthetic grid centers; effectively never true
    # unless a measurement sits exactly on a generated center.
    if match is None:
        return False
    lon, lat = cell.center
    return lon == match.measurement.longitude and lat == match.measurement.latitude


def _assemble_nearest_to_user(
    cells: list[HexCell], candidates: list[Measurement], user_point: GeoPoint
) -> HexGridResult:
    match = nearest_measurement(user_point, candidates)
    value = match.measurement.rsrp if match else None
    features = [_feature(cell, value=value, is_nearest=_is_match_location(cell, match)) for cell in cells]
    nearest = None
    if match is not None:
        m = match.measurement
        nearest = NearestPoint(center=(m.longitude, m.latitude), value=m.rsrp)
        logger.debug("Nearest measurement at %.1f m from user point", match.distance_m)
    return HexGridResult(features=features, nearest=nearest, match_mode="nearest_to_user")


def _assemble_nearest_to_hex_center(cells: list[HexCell], candidates: list[Measurement]) -> HexGridResult:
    features = []
    for cell in cells:
        lon, lat = cell.center
        match = nearest_measurement(GeoPoint(lat=lat, lon=lon), candidates)
        features.append(_feature(cell, value=match.measurement.rsrp if match else None))
    return HexGridResult(features=features, match_mode="nearest_to_hex_center")


def generate_hex_grid(
    center: GeoPoint,
    area_width_km: float,
    area_height_km: float,
    hex_size_km: float | None,
    user_point: GeoPoint,
    operator: str,
    measurements: Iterable[Measurement],
    *,
    match_mode: MatchMode | None = None,
    settings: Settings | None = None,
) -> HexGridResult:
    """Tessellate the area around `center` and annotate each hex with a matched RSRP.

    Match modes:
    - `nearest_to_user`: one measurement (closest to `user_point`) colors every hex;
      the result also carries it as `nearest`.
    - `nearest_to_hex_center`: each hex gets the measurement closest to its own center.

    Only measurements whose operator equals `operator` (case-insensitively) qualify.
    With no qualifying measurement every value is None.

    Raises:
        GridTooLargeError: If the layout exceeds `grid.max_cells`.
    """
    settings = settings or get_settings()
    grid = settings.grid
    mode = match_mode or grid.default_match_mode

    size_km = resolve_hex_size_km(hex_size_km, default_km=grid.default_hex_size_km)
    layout = build_layout(center, area_width_km, area_height_km, size_km, km_per_degree=grid.km_per_degree)
    if layout.candidate_count > grid.max_cells:
        raise GridTooLargeError(
            f"Requested grid needs {layout.candidate_count} cells (limit {grid.max_cells}); "
            "increase hex_size or shrink the area."
        )

    cells = generate_hex_cells(layout)
    candidates = filter_by_operator(measurements, operator)
    logger.debug(
        "Hex layout cols=%d rows=%d cells=%d candidates=%d mode=%s",
        layout.cols,
        layout.rows,
        len(cells),
        len(candidates),
        mode,
    )

    if mode == "nearest_to_hex_center":
        return _assemble_nearest_to_hex_center(cells, candidates)
    return _assemble_nearest_to_user(cells, candidates, user_point)


def generate_from_request(
    request: HexGridRequest,
    measurements: Iterable[Measurement],
    *,
    settings: Settings | None = None,
) -> HexGridResult:
    """Run `generate_hex_grid` for a validated API/CLI request."""
    return generate_hex_grid(
        GeoPoint(lat=request.lat, lon=request.lon),
        request.width,
        request.height,
        request.hex_size,
        GeoPoint(lat=request.user_lat, lon=request.user_lon),
        request.operator,
        measurements,
        match_mode=request.match_mode,
        settings=settings,
    )
