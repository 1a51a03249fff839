"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- ingestion output (`Measurement`)
- API/CLI input (`HexGridRequest`)
- the GeoJSON-shaped grid output (`HexGridResult`)

Keeping these models in one place helps:
- validation (reject bad inputs before the engine runs),
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MatchMode = Literal["nearest_to_user", "nearest_to_hex_center"]

# JSON numbers only: no numeric strings, no booleans, no NaN/Infinity.
StrictNumber = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class Measurement(BaseModel):
    """One signal-strength sample loaded from the measurement CSV."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    operator: str = ""
    rsrp: float


class HexGridRequest(BaseModel):
    """Request payload for `POST /api/generate-hexgrid`.

    Field names follow the wire format used by existing map frontends.
    """

    lat: StrictNumber = Field(..., gt=-90, lt=90)
    lon: StrictNumber
    width: StrictNumber = Field(..., ge=0)
    height: StrictNumber = Field(..., ge=0)
    hex_size: StrictNumber = Field(..., ge=0)
    user_lat: StrictNumber = Field(..., ge=-90, le=90)
    user_lon: StrictNumber

    # Accepted for wire compatibility; nothing reads it.
    network: Any = None
    operator: str = ""
    match_mode: MatchMode | None = None


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[tuple[float, float]]]


class HexProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: float | None
    center: tuple[float, float]
    is_nearest: bool | None = Field(default=None, alias="isNearest")


class HexFeature(BaseModel):
    """One hexagon polygon with its resolved RSRP value."""

    type: Literal["Feature"] = "Feature"
    geometry: PolygonGeometry
    properties: HexProperties


class NearestPoint(BaseModel):
    """The matched measurement as `[lon, lat]` plus its RSRP."""

    center: tuple[float, float]
    value: float


class HexGridResult(BaseModel):
    """Hex tessellation plus match annotations."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[HexFeature]
    nearest: NearestPoint | None = None
    match_mode: MatchMode = Field("nearest_to_user", exclude=True)

    def to_geojson(self) -> dict[str, Any]:
        """Return the wire payload.

        `nearest` and `isNearest` only exist for `nearest_to_user`; per-hex matching
        has no single global match to report.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if self.match_mode == "nearest_to_hex_center":
            data.pop("nearest", None)
            for feature in data["features"]:
                feature["properties"].pop("isNearest", None)
        return data
