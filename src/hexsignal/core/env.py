"""
Data-path anchoring and `.env` loading.

`data.measurements_path` is normally relative (`data/measurements.csv`). The API,
the CLI and the test suite each start from different working directories, so a
relative path is resolved against the HexSignal checkout: the nearest directory
holding both `pyproject.toml` and `data/`, or `HEXSIGNAL_PROJECT_ROOT` when set.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _is_checkout(path: Path) -> bool:
    return (path / "pyproject.toml").is_file() and (path / "data").is_dir()


@lru_cache
def project_root() -> Path:
    """Directory that relative data paths are anchored at (cached)."""
    override = os.getenv("HEXSIGNAL_PROJECT_ROOT")
    if override:
        return Path(override).expanduser().resolve()
    cwd = Path.cwd().resolve()
    return next((p for p in (cwd, *cwd.parents) if _is_checkout(p)), cwd)


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load `<project root>/.env` once, without overriding the process environment."""
    env_path = project_root() / ".env"
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_data_path(path: str | Path) -> Path:
    """Return `path` unchanged if absolute, else anchored at `project_root()`."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (project_root() / p).resolve()
