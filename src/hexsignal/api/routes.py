"""
API routes.

Endpoints:
- POST `/api/generate-hexgrid`: hex tessellation annotated with the matched RSRP.
- GET  `/api/measurements/meta`: what the loaded measurement set contains.
- GET  `/api/settings`: public grid defaults for map frontends.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from hexsignal.config.settings import get_settings
from hexsignal.domain.models import HexGridRequest
from hexsignal.grid.engine import generate_from_request
from hexsignal.measurements.loader import MeasurementSet, load_measurements

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _measurements() -> MeasurementSet:
    """Load the configured measurement CSV once per process."""
    settings = get_settings()
    return load_measurements(settings.data.measurements_path, columns=settings.data.columns)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Invalid input. " + "; ".join(parts)


@router.post("/api/generate-hexgrid")
def post_generate_hexgrid(payload: Any = Body(default=None)) -> dict:
    """Validate the query, build the hex grid and resolve the nearest measurement."""
    try:
        request = HexGridRequest.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": _validation_message(e)},
        ) from e

    settings = get_settings()
    try:
        result = generate_from_request(request, _measurements(), settings=settings)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        logger.exception("Hex grid generation failed")
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e

    if result.match_mode == "nearest_to_user":
        nearest = result.nearest
        logger.info("Nearest point found: %s", nearest.model_dump(mode="json") if nearest else None)
        logger.info("Nearest RSRP: %s", nearest.value if nearest else "NO MATCH")
    else:
        logger.info("Per-hex match over %d cells for operator=%r", len(result.features), request.operator)

    return result.to_geojson()


@router.get("/api/measurements/meta")
def get_measurements_meta() -> dict:
    """Return counts for the loaded measurement set (per operator, dropped rows)."""
    return _measurements().meta()


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return grid defaults for UI forms."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name},
        "grid": settings.grid.model_dump(mode="json"),
    }
