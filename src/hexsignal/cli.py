"""
HexSignal CLI entrypoint.

Runs hex grid queries against a local measurement CSV without starting the API.
All grid logic is delegated to `hexsignal.grid.engine.generate_from_request`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from hexsignal.config.settings import get_settings
from hexsignal.core.logging import configure_logging
from hexsignal.domain.models import HexGridRequest
from hexsignal.grid.engine import generate_from_request
from hexsignal.measurements.loader import MeasurementSet, load_measurements


def _load(args: argparse.Namespace) -> MeasurementSet:
    settings = get_settings()
    path = args.measurements or settings.data.measurements_path
    return load_measurements(path, columns=settings.data.columns)


def _cmd_grid(args: argparse.Namespace) -> int:
    """Handle the `grid` subcommand."""
    settings = get_settings()
    request = HexGridRequest(
        lat=args.lat,
        lon=args.lon,
        width=args.width,
        height=args.height,
        hex_size=args.hex_size,
        user_lat=args.user_lat,
        user_lon=args.user_lon,
        network=args.network,
        operator=args.operator,
        match_mode=args.match_mode,
    )
    result = generate_from_request(request, _load(args), settings=settings)

    if args.json:
        print(json.dumps(result.to_geojson(), ensure_ascii=False, indent=2))
        return 0

    print(f"Cells: {len(result.features)}  mode={result.match_mode}")
    if result.match_mode == "nearest_to_user":
        if result.nearest is None:
            print(f"Nearest {args.operator!r} measurement: NO MATCH")
        else:
            lon, lat = result.nearest.center
            print(f"Nearest {args.operator!r} measurement: lat={lat:.6f} lon={lon:.6f} rsrp={result.nearest.value}")
        return 0

    values = [f.properties.value for f in result.features if f.properties.value is not None]
    if not values:
        print(f"No {args.operator!r} measurements; all cells empty.")
        return 0
    print(f"RSRP per cell: min={min(values)} max={max(values)} distinct={len(set(values))}")
    return 0


def _cmd_measurements_report(args: argparse.Namespace) -> int:
    print(json.dumps(_load(args).meta(), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the HexSignal CLI."""
    parser = argparse.ArgumentParser(prog="hexsignal")
    sub = parser.add_subparsers(dest="command", required=True)

    grid = sub.add_parser("grid", help="Generate a hex grid and resolve the nearest operator measurement.")
    grid.add_argument("--lat", required=True, type=float, help="Center latitude")
    grid.add_argument("--lon", required=True, type=float, help="Center longitude")
    grid.add_argument("--width", required=True, type=float, help="Area width in km")
    grid.add_argument("--height", required=True, type=float, help="Area height in km")
    grid.add_argument("--hex-size", type=float, default=0.0, help="Hex radius in km (0 = configured default)")
    grid.add_argument("--user-lat", required=True, type=float)
    grid.add_argument("--user-lon", required=True, type=float)
    grid.add_argument("--operator", required=True, type=str)
    grid.add_argument("--network", type=str, default=None)
    grid.add_argument(
        "--match-mode",
        choices=["nearest_to_user", "nearest_to_hex_center"],
        default=None,
        help="Defaults to grid.default_match_mode from settings",
    )
    grid.add_argument("--measurements", type=str, default=None, help="CSV path (overrides settings)")
    grid.add_argument("--json", action="store_true", help="Output the FeatureCollection as JSON")
    grid.set_defaults(func=_cmd_grid)

    rep = sub.add_parser("measurements-report", help="Summarize the measurement CSV (rows per operator).")
    rep.add_argument("--measurements", type=str, default=None, help="CSV path (overrides settings)")
    rep.set_defaults(func=_cmd_measurements_report)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m hexsignal.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except ValueError as e:
        # Pydantic validation errors and oversized grids; exits with status 2.
        parser.error(str(e))


if __name__ == "__main__":
    raise SystemExit(main())
