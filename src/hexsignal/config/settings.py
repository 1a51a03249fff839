# src/hexsignal/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/hexsignal/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `HEXSIGNAL_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `HEXSIGNAL_LOG_LEVEL`, `HEXSIGNAL_MEASUREMENTS_PATH`)

Design rule:
- Grid constants (default hex size, km per degree, cell cap) live in YAML, not in the engine.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from hexsignal.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field

from hexsignal.domain.models import MatchMode


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `hexsignal.config`."""
    text = resources.files("hexsignal.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "HexSignal"
    log_level: str = "INFO"


class MeasurementColumns(BaseModel):
    """CSV header names for the measurement fields."""

    latitude: str = "latitude"
    longitude: str = "longitude"
    operator: str = "operator"
    rsrp: str = "rsrp"


class DataSettings(BaseModel):
    measurements_path: str = "data/measurements.csv"
    columns: MeasurementColumns = Field(default_factory=MeasurementColumns)


class GridSettings(BaseModel):
    default_hex_size_km: float = Field(0.05, gt=0)
    km_per_degree: float = Field(111.0, gt=0)
    default_match_mode: MatchMode = "nearest_to_user"
    max_cells: int = Field(250_000, ge=1)


class ApiSettings(BaseModel):
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    data: DataSettings = Field(default_factory=DataSettings)
    grid: GridSettings = Field(default_factory=GridSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("HEXSIGNAL_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    measurements_path = os.getenv("HEXSIGNAL_MEASUREMENTS_PATH")
    if measurements_path:
        data.setdefault("data", {})["measurements_path"] = measurements_path

    cors_origins = os.getenv("HEXSIGNAL_CORS_ORIGINS")
    if cors_origins:
        data.setdefault("api", {})["cors_origins"] = [
            s.strip() for s in cors_origins.split(",") if s.strip()
        ]

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("HEXSIGNAL_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
