# app/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from .api.routers import enrich, health, properties, providers


def create_app() -> FastAPI:
    app = FastAPI(title="CodeWatch - Violation Aggregator")

    # Routers
    app.include_router(health.router)
    app.include_router(properties.router)
    app.include_router(providers.router)
    app.include_router(enrich.router)

    return app
