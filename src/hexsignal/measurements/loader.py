"""
Measurement loader.

Signal measurements come from a local CSV (default: `data/measurements.csv`) with
one row per sample: latitude, longitude, operator, rsrp. Rows whose numeric fields
do not parse are dropped; the rest become immutable `Measurement` models held in a
read-only `MeasurementSet` that the grid engine scans per query.
"""

from __future__ import annotations

import csv
import logging
import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, overload

from hexsignal.core.env import resolve_data_path
from hexsignal.config.settings import MeasurementColumns
from hexsignal.domain.models import Measurement

logger = logging.getLogger(__name__)


class MeasurementSet(Sequence[Measurement]):
    """Immutable, ordered collection of measurements loaded once at startup."""

    def __init__(self, items: Iterable[Measurement], *, source: str | None = None, dropped: int = 0):
        self._items: tuple[Measurement, ...] = tuple(items)
        self._source = source
        self._dropped = int(dropped)

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def dropped(self) -> int:
        """Number of input rows discarded because a numeric field did not parse."""
        return self._dropped

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> Measurement: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Measurement, ...]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self) -> Iterator[Measurement]:
        return iter(self._items)

    def operator_counts(self) -> dict[str, int]:
        """Return measurement counts per operator, most frequent first."""
        counts: dict[str, int] = {}
        for m in self._items:
            counts[m.operator] = counts.get(m.operator, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def meta(self) -> dict[str, Any]:
        return {
            "source": self._source,
            "measurement_count": len(self._items),
            "dropped_rows": self._dropped,
            "operators": self.operator_counts(),
        }


def _as_float(v: Any) -> float | None:
    s = str(v).strip() if v is not None else ""
    if not s:
        return None
    try:
        x = float(s)
    except ValueError:
        return None
    if not math.isfinite(x):
        return None
    return x


def parse_measurement_rows(
    rows: Iterable[Mapping[str, Any]],
    *,
    columns: MeasurementColumns | None = None,
) -> tuple[list[Measurement], int]:
    """Convert raw CSV rows into measurements; returns `(measurements, dropped_count)`."""
    cols = columns or MeasurementColumns()
    out: list[Measurement] = []
    dropped = 0
    for row in rows:
        lat = _as_float(row.get(cols.latitude))
        lon = _as_float(row.get(cols.longitude))
        rsrp = _as_float(row.get(cols.rsrp))
        if lat is None or lon is None or rsrp is None:
            dropped += 1
            continue
        operator = str(row.get(cols.operator) or "").strip()
        out.append(Measurement(latitude=lat, longitude=lon, operator=operator, rsrp=rsrp))
    return out, dropped


def load_measurements(path: str | Path, *, columns: MeasurementColumns | None = None) -> MeasurementSet:
    """Load a measurement CSV into a `MeasurementSet`.

    Raises:
        FileNotFoundError: If the CSV does not exist.
    """
    resolved = resolve_data_path(path)
    with resolved.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        measurements, dropped = parse_measurement_rows(reader, columns=columns)

    logger.info("Loaded %d measurements from %s", len(measurements), resolved)
    if dropped:
        logger.warning("Dropped %d measurement rows with unparseable numeric fields.", dropped)
    return MeasurementSet(measurements, source=str(resolved), dropped=dropped)
