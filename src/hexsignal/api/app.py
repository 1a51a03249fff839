# src/hexsignal/api/app.py
"""
FastAPI application wiring.

This file creates the `FastAPI` instance, configures CORS and loads the measurement
set before the app starts serving. Request handling lives in `hexsignal.api.routes`.

Run locally with any ASGI server, e.g. `uvicorn hexsignal.api.app:app --port 5000`.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from hexsignal.config.settings import get_settings
from hexsignal.core.logging import configure_logging

from . import routes

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Queries need the full measurement set; a missing CSV fails startup here.
    routes._measurements()
    yield


app = FastAPI(title="HexSignal API", version="0.1.0", lifespan=lifespan)

# CORS: open by default (map frontends are served from other origins).
# Restrict with HEXSIGNAL_CORS_ORIGINS="http://localhost:3000,https://maps.example.org".
cors_origins = get_settings().api.cors_origins
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(routes.router)
