from __future__ import annotations

import pytest

from hexsignal.config.settings import get_settings


@pytest.fixture
def fresh_settings():
    # `get_settings` is lru_cached; clear before and after so env changes don't leak across tests.
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_packaged_defaults(fresh_settings):
    settings = fresh_settings()
    assert settings.grid.default_hex_size_km == 0.05
    assert settings.grid.km_per_degree == 111.0
    assert settings.grid.default_match_mode == "nearest_to_user"
    assert settings.data.columns.rsrp == "rsrp"
    assert settings.api.cors_origins == ["*"]


def test_env_overrides(fresh_settings, monkeypatch):
    monkeypatch.setenv("HEXSIGNAL_LOG_LEVEL", "debug")
    monkeypatch.setenv("HEXSIGNAL_MEASUREMENTS_PATH", "/srv/data/norwich.csv")
    monkeypatch.setenv("HEXSIGNAL_CORS_ORIGINS", "http://localhost:3000, https://maps.example.org,")

    settings = fresh_settings()
    assert settings.app.log_level == "debug"
    assert settings.data.measurements_path == "/srv/data/norwich.csv"
    assert settings.api.cors_origins == ["http://localhost:3000", "https://maps.example.org"]


def test_external_config_file_replaces_defaults(fresh_settings, monkeypatch, tmp_path):
    path = tmp_path / "hexsignal.yaml"
    path.write_text("grid:\n  default_hex_size_km: 0.2\n  default_match_mode: nearest_to_hex_center\n", encoding="utf-8")
    monkeypatch.setenv("HEXSIGNAL_CONFIG_PATH", str(path))

    settings = fresh_settings()
    assert settings.grid.default_hex_size_km == 0.2
    assert settings.grid.default_match_mode == "nearest_to_hex_center"
    # Sections missing from the file fall back to model defaults.
    assert settings.grid.max_cells == 250_000
    assert settings.data.measurements_path == "data/measurements.csv"


def test_invalid_config_values_are_rejected(fresh_settings, monkeypatch, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("grid:\n  default_match_mode: nearest_to_everything\n", encoding="utf-8")
    monkeypatch.setenv("HEXSIGNAL_CONFIG_PATH", str(path))

    with pytest.raises(ValueError):
        fresh_settings()
