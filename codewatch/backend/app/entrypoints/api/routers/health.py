# app/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from ....config import integrations_configured, settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config")
def debug_config() -> dict[str, Any]:
    """
    Reads the *running server's* settings, not your shell's.
    Secrets are never echoed, only whether they are set.
    """
    return {
        "ENV": settings.ENV,
        "MOCK_MODE": settings.MOCK_MODE,
        "PROVIDER_SOURCE": settings.PROVIDER_SOURCE,
        "PROVIDERS_FIXTURES_DIR": settings.PROVIDERS_FIXTURES_DIR,
        "SOCRATA_APP_TOKEN_SET": bool(settings.SOCRATA_APP_TOKEN),
        "DETROIT_VIOLATIONS_URL": settings.DETROIT_VIOLATIONS_URL,
        "integrations": integrations_configured(settings),
    }
