# app/entrypoints/api/routers/properties.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from ....config import settings
from ....domain.filters import normalize_filters
from ....schemas import ViolationsOut
from ....service_layer.aggregator import ViolationAggregator
from ..deps import cancel_on_disconnect, get_aggregator

router = APIRouter(prefix="/api", tags=["properties"])


@router.get("/properties", response_model=ViolationsOut)
async def list_properties(
    request: Request,
    response: Response,
    city: str | None = Query(default=None),
    state: str | None = Query(default=None),
    query: str | None = Query(default=None),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    status: str | None = Query(default=None),
    # raw string on purpose: garbage falls back to the default limit instead of a 422
    limit: str | None = Query(default=None),
    aggregator: ViolationAggregator = Depends(get_aggregator),
) -> ViolationsOut:
    filters = normalize_filters(
        query=query,
        city=city,
        state=state,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    result = await cancel_on_disconnect(
        request,
        aggregator.fetch_violations(filters, mock_mode=settings.MOCK_MODE),
    )
    response.headers["Cache-Control"] = "no-store"
    return ViolationsOut.from_domain(result)
