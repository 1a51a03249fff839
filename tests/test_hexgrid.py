import math

import pytest

from hexsignal.core.geo import GeoPoint
from hexsignal.grid.hexgrid import (
    GridTooLargeError,
    build_layout,
    generate_hex_cells,
    hex_ring,
    iter_hex_centers,
    resolve_hex_size_km,
)

NORWICH = GeoPoint(lat=52.62, lon=1.29)


def test_resolve_hex_size_falls_back_for_zero_or_unset():
    assert resolve_hex_size_km(0, default_km=0.05) == 0.05
    assert resolve_hex_size_km(0.0, default_km=0.05) == 0.05
    assert resolve_hex_size_km(None, default_km=0.05) == 0.05
    assert resolve_hex_size_km(0.2, default_km=0.05) == 0.2


def test_layout_steps_follow_flat_top_packing():
    layout = build_layout(NORWICH, 1.0, 1.0, 0.05)

    deg_per_km_lon = 1 / (111 * math.cos(math.radians(52.62)))
    assert layout.side_lat == pytest.approx(0.05 / 111)
    assert layout.side_lon == pytest.approx(0.05 * deg_per_km_lon)
    assert layout.dx == pytest.approx(1.5 * layout.side_lon)
    assert layout.dy == pytest.approx(math.sqrt(3) * layout.side_lat)
    assert layout.max_lon - layout.min_lon == pytest.approx(deg_per_km_lon)
    assert layout.max_lat - layout.min_lat == pytest.approx(1 / 111)
    # floor(1 / 0.075) + 2 and floor(1 / (sqrt(3) * 0.05)) + 2
    assert layout.cols == 15
    assert layout.rows == 13


def test_one_km_area_cell_count():
    layout = build_layout(NORWICH, 1.0, 1.0, 0.05)
    cells = generate_hex_cells(layout)
    # 14 surviving columns, 12 surviving rows in both even and odd columns.
    assert len(cells) == 168


def test_cell_count_matches_surviving_col_row_pairs():
    layout = build_layout(GeoPoint(lat=-12.5, lon=130.8), 2.3, 0.7, 0.08)

    expected = 0
    for col in range(layout.cols):
        if layout.min_lon + col * layout.dx > layout.max_lon:
            continue
        offset = layout.dy / 2 if col % 2 == 1 else 0.0
        expected += sum(
            1 for row in range(layout.rows) if layout.min_lat + row * layout.dy + offset <= layout.max_lat
        )

    centers = list(iter_hex_centers(layout))
    assert len(centers) == expected
    assert len(centers) <= layout.candidate_count


def test_centers_stay_inside_bounding_box():
    layout = build_layout(NORWICH, 3.0, 2.0, 0.1)
    for lon, lat in iter_hex_centers(layout):
        assert layout.min_lon <= lon <= layout.max_lon
        assert layout.min_lat <= lat <= layout.max_lat


def test_odd_columns_are_offset_by_half_a_row():
    layout = build_layout(NORWICH, 1.0, 1.0, 0.05)
    centers = list(iter_hex_centers(layout))
    first_even = centers[0]
    first_odd = next(c for c in centers if c[0] > first_even[0])
    assert first_even == (layout.min_lon, layout.min_lat)
    assert first_odd[1] == pytest.approx(layout.min_lat + layout.dy / 2)
    assert first_odd[0] == pytest.approx(layout.min_lon + layout.dx)


def test_rings_are_closed_with_seven_points():
    layout = build_layout(NORWICH, 1.0, 1.0, 0.05)
    for cell in generate_hex_cells(layout):
        assert len(cell.ring) == 7
        assert cell.ring[0] == cell.ring[-1]


def test_ring_vertices_sit_on_the_hex_radius():
    layout = build_layout(NORWICH, 1.0, 1.0, 0.05)
    lon, lat = NORWICH.lon, NORWICH.lat
    ring = hex_ring((lon, lat), layout)

    assert ring[0] == pytest.approx((lon + layout.side_lon, lat))
    assert ring[1] == pytest.approx((lon + layout.side_lon / 2, lat + layout.side_lat * math.sqrt(3) / 2))
    assert ring[3] == pytest.approx((lon - layout.side_lon, lat))
    assert ring[4] == pytest.approx((lon - layout.side_lon / 2, lat - layout.side_lat * math.sqrt(3) / 2))


def test_zero_area_still_yields_one_cell():
    layout = build_layout(NORWICH, 0.0, 0.0, 0.05)
    cells = generate_hex_cells(layout)
    assert len(cells) == 1
    assert cells[0].center == (NORWICH.lon, NORWICH.lat)


@pytest.mark.parametrize(
    "width_km, hex_size_km",
    [
        (1e308, 0.05),
        (1.0, 1e-310),
        (1.0, 5e-324),
    ],
)
def test_unrepresentable_layouts_raise_grid_too_large(width_km, hex_size_km):
    with pytest.raises(GridTooLargeError):
        build_layout(NORWICH, width_km, 1.0, hex_size_km)
