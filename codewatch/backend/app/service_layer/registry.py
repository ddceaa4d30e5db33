# app/service_layer/registry.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from ..config import Settings, settings
from ..domain.types import JurisdictionCoverage, ProviderDescriptor, ViolationFilters
from ..adapters.providers.base import ProviderAdapter
from ..adapters.providers.html_table import HtmlTableViolationsAdapter
from ..adapters.providers.socrata import SocrataFieldMap, SocrataViolationsAdapter
from ..adapters.providers.stub_json import StubJsonViolationsAdapter


@dataclass(frozen=True)
class RegisteredProvider:
    descriptor: ProviderDescriptor
    adapter: ProviderAdapter

    @property
    def id(self) -> str:
        return self.descriptor.id


def _norm(s: str | None) -> str:
    return (s or "").strip().lower()


def covers(descriptor: ProviderDescriptor, *, state: str | None, city: str | None) -> bool:
    """
    Does this provider's declared coverage match the filter's state/city?

    - nationwide ("*") always matches
    - state given: entry state must match; if city also given the entry must be
      statewide (no city) or name the same city
    - only city given: entry must name that city
    """
    st, ct = _norm(state), _norm(city)
    if not st and not ct:
        return True

    for cov in descriptor.jurisdiction:
        if cov.nationwide:
            return True
        if st and _norm(cov.state) != st:
            continue
        if ct:
            if cov.city is None:
                if st:
                    return True
                continue
            if _norm(cov.city) != ct:
                continue
        return True
    return False


class ProviderRegistry:
    """Static catalog: descriptors + adapter references, in registration order."""

    def __init__(self, providers: Iterable[RegisteredProvider] = ()) -> None:
        self._providers: list[RegisteredProvider] = []
        for p in providers:
            self.register(p.descriptor, p.adapter)

    def register(self, descriptor: ProviderDescriptor, adapter: ProviderAdapter) -> None:
        if any(p.id == descriptor.id for p in self._providers):
            raise ValueError(f"Duplicate provider id: {descriptor.id!r}")
        self._providers.append(RegisteredProvider(descriptor=descriptor, adapter=adapter))

    def __len__(self) -> int:
        return len(self._providers)

    def list_providers(self) -> list[ProviderDescriptor]:
        return [p.descriptor for p in self._providers]

    def providers_covering_filters(self, filters: ViolationFilters) -> list[RegisteredProvider]:
        return [p for p in self._providers if covers(p.descriptor, state=filters.state, city=filters.city)]

    def list_provider_summaries(self) -> list[dict[str, Any]]:
        return [
            {
                "id": d.id,
                "name": d.name,
                "jurisdiction": [{"state": c.state, "city": c.city} for c in d.jurisdiction],
            }
            for d in self.list_providers()
        ]


# -------------------------
# Default catalog
# -------------------------

def _live_adapters(s: Settings) -> list[tuple[ProviderDescriptor, ProviderAdapter]]:
    out: list[tuple[ProviderDescriptor, ProviderAdapter]] = [
        (
            ProviderDescriptor(
                id="chicago_buildings",
                name="Chicago Department of Buildings",
                jurisdiction=(JurisdictionCoverage(state="IL", city="Chicago"),),
            ),
            SocrataViolationsAdapter(
                provider_id="chicago_buildings",
                domain="data.cityofchicago.org",
                dataset_id="22u3-xenr",
                fields=SocrataFieldMap(
                    source_id=("id", "violation_code"),
                    address=("address",),
                    date_column="violation_date",
                    status=("violation_status",),
                    description=("violation_description", "violation_inspector_comments"),
                ),
                default_city="Chicago",
                default_state="IL",
            ),
        ),
        (
            ProviderDescriptor(
                id="austin_code",
                name="Austin Code Department",
                jurisdiction=(JurisdictionCoverage(state="TX", city="Austin"),),
            ),
            SocrataViolationsAdapter(
                provider_id="austin_code",
                domain="data.austintexas.gov",
                dataset_id="6wtj-zbtb",
                fields=SocrataFieldMap(
                    source_id=("case_id", "casenumber"),
                    address=("address", "location_address"),
                    date_column="opened_date",
                    zip=("zip_code", "zipcode"),
                    status=("status",),
                    description=("description", "case_type"),
                ),
                default_city="Austin",
                default_state="TX",
            ),
        ),
        (
            ProviderDescriptor(
                id="cincinnati_code",
                name="Cincinnati Code Enforcement",
                jurisdiction=(JurisdictionCoverage(state="OH", city="Cincinnati"),),
            ),
            SocrataViolationsAdapter(
                provider_id="cincinnati_code",
                domain="data.cincinnati-oh.gov",
                dataset_id="cncm-znd6",
                fields=SocrataFieldMap(
                    source_id=("number_key",),
                    address=("full_address", "street_address"),
                    date_column="entered_date",
                    status=("data_status_display", "status_class"),
                    description=("comp_type_desc", "sub_type_desc"),
                ),
                default_city="Cincinnati",
                default_state="OH",
            ),
        ),
    ]

    if s.DETROIT_VIOLATIONS_URL:
        out.append(
            (
                ProviderDescriptor(
                    id="detroit_bseed",
                    name="Detroit BSEED Violations",
                    jurisdiction=(JurisdictionCoverage(state="MI", city="Detroit"),),
                ),
                HtmlTableViolationsAdapter(
                    provider_id="detroit_bseed",
                    url=s.DETROIT_VIOLATIONS_URL,
                    default_city="Detroit",
                    default_state="MI",
                    search_param="q",
                ),
            )
        )
    return out


def build_default_registry(s: Settings = settings) -> ProviderRegistry:
    """
    Registry builder that will NOT brick local dev.

    PROVIDER_SOURCE=stub_json keeps the same descriptors but swaps every
    adapter for the JSON fixture reader.
    """
    src = (s.PROVIDER_SOURCE or "").strip()
    if src not in ("live", "stub_json"):
        if s.ENV.lower() in ("dev", "local", "test"):
            src = "stub_json"
        else:
            raise ValueError(f"Unknown PROVIDER_SOURCE={src!r}. Use live or stub_json.")

    reg = ProviderRegistry()
    for descriptor, adapter in _live_adapters(s):
        if src == "stub_json":
            adapter = StubJsonViolationsAdapter.from_settings(descriptor.id)
        reg.register(descriptor, adapter)
    return reg
