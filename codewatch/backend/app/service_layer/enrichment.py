# app/service_layer/enrichment.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..config import Settings, integrations_configured, settings
from ..domain.errors import ValidationError
from ..domain.types import (
    AddressInfo,
    EnrichmentRequest,
    ImageRef,
    MortgageStatus,
    OwnerContact,
    OwnerLookup,
    PropertyEnrichment,
)
from ..adapters.enrichment.google_drive import find_property_image
from ..adapters.enrichment.mortgage import fetch_mortgage_status
from ..adapters.enrichment.skip_trace import skip_trace_owner
from .mock_data import mock_fetch_mortgage_status, mock_find_property_image, mock_skip_trace_owner
from .settle import settle_all

log = logging.getLogger(__name__)

OWNER_FAILED = "Skip tracing is temporarily unavailable. Try again later."
MORTGAGE_FAILED = "Mortgage data is temporarily unavailable. Try again later."


@dataclass(frozen=True)
class EnrichmentCapabilities:
    find_property_image: Callable[[str], Awaitable[ImageRef | None]]
    skip_trace_owner: Callable[[OwnerLookup], Awaitable[OwnerContact | None]]
    fetch_mortgage_status: Callable[[AddressInfo], Awaitable[MortgageStatus | None]]


LIVE_CAPABILITIES = EnrichmentCapabilities(
    find_property_image=find_property_image,
    skip_trace_owner=skip_trace_owner,
    fetch_mortgage_status=fetch_mortgage_status,
)

MOCK_CAPABILITIES = EnrichmentCapabilities(
    find_property_image=mock_find_property_image,
    skip_trace_owner=mock_skip_trace_owner,
    fetch_mortgage_status=mock_fetch_mortgage_status,
)


def image_query(req: EnrichmentRequest) -> str:
    return " ".join(f"{req.address} {req.city or ''} {req.state or ''}".split())


def validate_request(req: EnrichmentRequest) -> EnrichmentRequest:
    address = (req.address or "").strip()
    if not address:
        raise ValidationError("address is required")
    return req


@dataclass
class EnrichmentOrchestrator:
    live: EnrichmentCapabilities = LIVE_CAPABILITIES
    mock: EnrichmentCapabilities = MOCK_CAPABILITIES
    settings: Settings = field(default_factory=lambda: settings)

    async def enrich_property(self, req: EnrichmentRequest, *, mock_mode: bool = False) -> PropertyEnrichment:
        """
        Image, owner and mortgage lookups run in parallel; each one settles on its own.

        Only a missing address fails the whole call (before any outbound request).
        A failed branch becomes None (image) or an "unavailable" entity with a
        message (owner, mortgage); the others are returned untouched.
        """
        validate_request(req)
        caps = self.mock if mock_mode else self.live

        image_o, owner_o, mortgage_o = await settle_all(
            [
                caps.find_property_image(image_query(req)),
                caps.skip_trace_owner(
                    OwnerLookup(
                        full_name=req.owner_name,
                        address=req.address,
                        city=req.city,
                        state=req.state,
                        postal_code=req.postal_code,
                    )
                ),
                caps.fetch_mortgage_status(
                    AddressInfo(
                        address=req.address,
                        city=req.city,
                        state=req.state,
                        postal_code=req.postal_code,
                    )
                ),
            ]
        )

        image = image_o.value if image_o.ok else None
        owner = owner_o.value if owner_o.ok else OwnerContact.unavailable(OWNER_FAILED)
        mortgage = mortgage_o.value if mortgage_o.ok else MortgageStatus.unavailable(MORTGAGE_FAILED)

        for branch, o in (("image", image_o), ("owner", owner_o), ("mortgage", mortgage_o)):
            if not o.ok:
                log.warning("enrichment branch %s failed for %r: %s: %s", branch, req.address, type(o.error).__name__, o.error)

        return PropertyEnrichment(
            image=image,
            owner=owner,
            mortgage=mortgage,
            integrations={**integrations_configured(self.settings), "mockMode": bool(mock_mode)},
        )
