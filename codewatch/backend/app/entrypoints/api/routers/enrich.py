# app/entrypoints/api/routers/enrich.py
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from ....config import settings
from ....domain.errors import ValidationError
from ....domain.types import EnrichmentRequest
from ....schemas import EnrichIn, EnrichmentOut
from ....service_layer.enrichment import EnrichmentOrchestrator
from ..deps import cancel_on_disconnect, get_orchestrator

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["enrich"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


@router.post("/enrich", response_model=EnrichmentOut)
async def enrich(
    request: Request,
    orchestrator: EnrichmentOrchestrator = Depends(get_orchestrator),
) -> EnrichmentOut | JSONResponse:
    # body parsed by hand so every input problem maps to the same 400 shape
    try:
        body = EnrichIn.model_validate(json.loads(await request.body() or b"null") or {})
    except (ValueError, SchemaError) as e:
        log.info("enrich: malformed body: %s", e)
        return _bad_request("invalid JSON body")

    req = EnrichmentRequest(
        address=(body.address or "").strip(),
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        owner_name=body.owner_name,
    )

    try:
        result = await cancel_on_disconnect(
            request,
            orchestrator.enrich_property(req, mock_mode=settings.MOCK_MODE),
        )
    except ValidationError as e:
        log.info("enrich: rejected: %s", e)
        return _bad_request(str(e))

    return EnrichmentOut.from_domain(result)
