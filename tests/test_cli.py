import json

import pytest

from hexsignal.cli import main

CSV = (
    "latitude,longitude,operator,rsrp\n"
    "52.621,1.291,EE,-90\n"
    "52.6201,1.2901,Vodafone,-70\n"
    "bad,1.29,EE,-80\n"
)

GRID_ARGS = [
    "grid",
    "--lat", "52.62",
    "--lon", "1.29",
    "--width", "1",
    "--height", "1",
    "--user-lat", "52.62",
    "--user-lon", "1.29",
    "--operator", "ee",
]


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "measurements.csv"
    path.write_text(CSV, encoding="utf-8")
    return str(path)


def test_grid_json_output(csv_path, capsys):
    assert main([*GRID_ARGS, "--measurements", csv_path, "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["type"] == "FeatureCollection"
    assert data["nearest"]["value"] == -90
    assert len(data["features"]) == 168


def test_grid_summary_output(csv_path, capsys):
    assert main([*GRID_ARGS, "--measurements", csv_path]) == 0
    out = capsys.readouterr().out
    assert "Cells: 168" in out
    assert "rsrp=-90.0" in out


def test_grid_per_hex_summary(csv_path, capsys):
    assert main([*GRID_ARGS, "--measurements", csv_path, "--match-mode", "nearest_to_hex_center"]) == 0
    out = capsys.readouterr().out
    assert "mode=nearest_to_hex_center" in out
    assert "distinct=1" in out


def test_grid_rejects_out_of_range_latitude(csv_path):
    args = list(GRID_ARGS)
    args[args.index("--lat") + 1] = "95"
    with pytest.raises(SystemExit) as exc:
        main([*args, "--measurements", csv_path])
    assert exc.value.code == 2


def test_measurements_report(csv_path, capsys):
    assert main(["measurements-report", "--measurements", csv_path]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["measurement_count"] == 2
    assert data["dropped_rows"] == 1
    assert data["operators"] == {"EE": 1, "Vodafone": 1}
