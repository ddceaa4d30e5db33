# app/entrypoints/api/deps.py
from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Awaitable, TypeVar

from fastapi import Request

from ...service_layer.aggregator import ViolationAggregator
from ...service_layer.enrichment import EnrichmentOrchestrator
from ...service_layer.registry import ProviderRegistry, build_default_registry

log = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_S = 0.25


@lru_cache(maxsize=1)
def get_registry() -> ProviderRegistry:
    return build_default_registry()


def get_aggregator() -> ViolationAggregator:
    return ViolationAggregator(registry=get_registry())


def get_orchestrator() -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator()


async def cancel_on_disconnect(request: Request, aw: Awaitable[T]) -> T:
    """
    Run `aw`, cancelling it (and every fan-out branch under it) if the client goes away.
    """
    work = asyncio.ensure_future(aw)

    async def _watch() -> None:
        while not work.done():
            if await request.is_disconnected():
                log.info("client disconnected, cancelling %s", request.url.path)
                work.cancel()
                return
            await asyncio.sleep(DISCONNECT_POLL_S)

    watcher = asyncio.ensure_future(_watch())
    try:
        return await work
    finally:
        watcher.cancel()
