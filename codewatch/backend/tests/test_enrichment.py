import asyncio
from datetime import date

import pytest

from app.config import Settings
from app.domain.errors import EnrichmentBranchError, ValidationError
from app.domain.types import (
    UNAVAILABLE,
    AddressInfo,
    EnrichmentRequest,
    ImageRef,
    MortgageStatus,
    OwnerContact,
    OwnerLookup,
)
from app.service_layer.enrichment import EnrichmentCapabilities, EnrichmentOrchestrator, image_query


class Recorder:
    """Capabilities double that records every call and can fail per branch."""

    def __init__(self, fail: set[str] | None = None) -> None:
        self.fail = fail or set()
        self.calls: list[tuple[str, object]] = []

    async def image(self, q: str) -> ImageRef | None:
        self.calls.append(("image", q))
        if "image" in self.fail:
            raise EnrichmentBranchError("image", "drive 500")
        return ImageRef(id="img-1", name="front.jpg")

    async def owner(self, lookup: OwnerLookup) -> OwnerContact | None:
        self.calls.append(("owner", lookup))
        if "owner" in self.fail:
            raise EnrichmentBranchError("owner", "vendor timeout")
        return OwnerContact(full_name="Pat Owner", emails=("pat@example.com",))

    async def mortgage(self, info: AddressInfo) -> MortgageStatus | None:
        self.calls.append(("mortgage", info))
        if "mortgage" in self.fail:
            raise RuntimeError("mortgage api down")
        return MortgageStatus(is_delinquent=False, last_payment_date=date(2024, 4, 1))

    @property
    def caps(self) -> EnrichmentCapabilities:
        return EnrichmentCapabilities(
            find_property_image=self.image,
            skip_trace_owner=self.owner,
            fetch_mortgage_status=self.mortgage,
        )


def _orchestrator(rec: Recorder, **settings_kw) -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator(live=rec.caps, mock=rec.caps, settings=Settings(**settings_kw))


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["", "   "])
async def test_missing_address_fails_before_any_call(address):
    rec = Recorder()
    with pytest.raises(ValidationError):
        await _orchestrator(rec).enrich_property(EnrichmentRequest(address=address))
    assert rec.calls == []


@pytest.mark.asyncio
async def test_mortgage_failure_is_isolated():
    rec = Recorder(fail={"mortgage"})
    out = await _orchestrator(rec).enrich_property(EnrichmentRequest(address="1 Main St", city="Austin", state="TX"))

    assert out.image is not None and out.image.id == "img-1"
    assert out.owner is not None and out.owner.full_name == "Pat Owner"
    assert out.mortgage is not None
    assert out.mortgage.source == UNAVAILABLE
    assert out.mortgage.message


@pytest.mark.asyncio
async def test_every_branch_failing_still_returns_composite():
    rec = Recorder(fail={"image", "owner", "mortgage"})
    out = await _orchestrator(rec).enrich_property(EnrichmentRequest(address="1 Main St"))

    assert out.image is None
    assert out.owner is not None and out.owner.source == UNAVAILABLE
    assert out.mortgage is not None and out.mortgage.source == UNAVAILABLE
    assert len(rec.calls) == 3


@pytest.mark.asyncio
async def test_branch_inputs_built_from_request():
    rec = Recorder()
    req = EnrichmentRequest(address="12 Elm St", city="Boston", state="MA", postal_code="02116", owner_name="Sam Lee")
    await _orchestrator(rec).enrich_property(req)

    calls = dict(rec.calls)
    assert calls["image"] == "12 Elm St Boston MA"
    assert calls["owner"] == OwnerLookup(
        address="12 Elm St", full_name="Sam Lee", city="Boston", state="MA", postal_code="02116"
    )
    assert calls["mortgage"] == AddressInfo(address="12 Elm St", city="Boston", state="MA", postal_code="02116")


def test_image_query_skips_missing_parts():
    assert image_query(EnrichmentRequest(address="12 Elm St")) == "12 Elm St"
    assert image_query(EnrichmentRequest(address="12 Elm St", state="MA")) == "12 Elm St MA"


@pytest.mark.asyncio
async def test_integrations_map_reflects_settings():
    rec = Recorder()
    orch = _orchestrator(
        rec,
        GOOGLE_DRIVE_API_KEY="k",
        GOOGLE_DRIVE_FOLDER_ID="f",
        SKIP_TRACE_API_KEY=None,
        SKIP_TRACE_BASE_URL=None,
        MORTGAGE_API_KEY="m",
        MORTGAGE_BASE_URL="https://mortgage.example.com",
    )
    out = await orch.enrich_property(EnrichmentRequest(address="1 Main St"), mock_mode=True)
    assert out.integrations == {"googleDrive": True, "skipTrace": False, "mortgage": True, "mockMode": True}


@pytest.mark.asyncio
async def test_mock_mode_uses_mock_capabilities():
    live, mock = Recorder(), Recorder()
    orch = EnrichmentOrchestrator(live=live.caps, mock=mock.caps, settings=Settings())
    await orch.enrich_property(EnrichmentRequest(address="1 Main St"), mock_mode=True)
    assert live.calls == []
    assert len(mock.calls) == 3


@pytest.mark.asyncio
async def test_default_mock_capabilities_return_fixtures():
    out = await EnrichmentOrchestrator(settings=Settings()).enrich_property(
        EnrichmentRequest(address="1 Main St", city="Austin", state="TX"), mock_mode=True
    )
    assert out.image is not None
    assert out.owner is not None and out.owner.phones
    assert out.mortgage is not None and out.mortgage.is_delinquent is True


@pytest.mark.asyncio
async def test_lookups_run_concurrently():
    gate = asyncio.Event()

    async def image(q):
        await gate.wait()
        return None

    async def owner(lookup):
        return None

    async def mortgage(info):
        gate.set()
        return None

    caps = EnrichmentCapabilities(find_property_image=image, skip_trace_owner=owner, fetch_mortgage_status=mortgage)
    orch = EnrichmentOrchestrator(live=caps, mock=caps, settings=Settings())
    out = await asyncio.wait_for(orch.enrich_property(EnrichmentRequest(address="1 Main St")), timeout=2)
    assert out.image is None and out.owner is None and out.mortgage is None
