# app/entrypoints/api/routers/providers.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ....schemas import ProvidersOut
from ....service_layer.aggregator import ViolationAggregator
from ..deps import get_aggregator

router = APIRouter(prefix="/api", tags=["providers"])


@router.get("/providers", response_model=ProvidersOut)
def list_providers(aggregator: ViolationAggregator = Depends(get_aggregator)) -> ProvidersOut:
    return ProvidersOut.model_validate({"providers": aggregator.list_provider_summaries()})
