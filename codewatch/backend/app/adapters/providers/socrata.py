# app/adapters/providers/socrata.py
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any

import httpx

from ...config import settings
from ...domain.errors import ProviderError
from ...domain.parsing import get_first, to_date, to_str
from ...domain.types import PropertyViolation, ViolationFilters
from ..clients.http_resilience import resilient_request
from .base import violation_id


@dataclass(frozen=True)
class SocrataFieldMap:
    """
    Column names for one Socrata dataset. Every city names these differently.

    Each entry may list several candidates; the first non-empty one wins.
    `date_column` is the single column used for SoQL date push-down.
    """

    source_id: tuple[str, ...]
    address: tuple[str, ...]
    date_column: str
    city: tuple[str, ...] = ()
    state: tuple[str, ...] = ()
    zip: tuple[str, ...] = ()
    status: tuple[str, ...] = ()
    description: tuple[str, ...] = ()


def _soql_quote(s: str) -> str:
    return "'" + s.replace("'", "''") + "'"


@dataclass
class SocrataViolationsAdapter:
    """
    Open-data portals on Socrata (data.cityofchicago.org, data.cityofnewyork.us, ...).

    Dialect: SoQL via $where / $q / $limit / $order.
    City/state are fixed per dataset unless the dataset carries them as columns.
    """

    provider_id: str
    domain: str
    dataset_id: str
    fields: SocrataFieldMap
    default_city: str
    default_state: str
    app_token: str | None = None
    # how many raw rows to pull vs the requested limit; central filters may drop some
    overfetch: int = 2
    extra_where: tuple[str, ...] = field(default_factory=tuple)

    @property
    def url(self) -> str:
        return f"https://{self.domain}/resource/{self.dataset_id}.json"

    def build_params(self, filters: ViolationFilters) -> dict[str, Any]:
        where: list[str] = list(self.extra_where)
        col = self.fields.date_column
        if filters.start_date:
            where.append(f"{col} >= {_soql_quote(filters.start_date.isoformat() + 'T00:00:00')}")
        if filters.end_date:
            where.append(f"{col} <= {_soql_quote(filters.end_date.isoformat() + 'T23:59:59')}")

        params: dict[str, Any] = {
            "$limit": max(1, filters.limit * self.overfetch),
            "$order": f"{col} DESC",
        }
        if where:
            params["$where"] = " AND ".join(where)
        if filters.query:
            params["$q"] = filters.query
        return params

    async def query(self, filters: ViolationFilters) -> list[PropertyViolation]:
        headers: dict[str, str] = {}
        token = self.app_token or settings.SOCRATA_APP_TOKEN
        if token:
            headers["X-App-Token"] = token

        try:
            resp = await resilient_request("GET", self.url, headers=headers, params=self.build_params(filters))
            rows = resp.json()
        except httpx.HTTPError as e:
            raise ProviderError(self.provider_id, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise ProviderError(self.provider_id, f"bad json: {e}") from e

        if not isinstance(rows, list):
            raise ProviderError(self.provider_id, f"unexpected payload type {type(rows).__name__}")

        return [v for v in (self._to_violation(r) for r in rows if isinstance(r, dict)) if v is not None]

    def _to_violation(self, row: dict[str, Any]) -> PropertyViolation | None:
        f = self.fields
        address = to_str(get_first(row, *f.address))
        if not address:
            return None

        source_ref = to_str(get_first(row, *f.source_id))
        if source_ref is None:
            source_ref = hashlib.sha256(json.dumps(row, sort_keys=True, default=str).encode("utf-8")).hexdigest()[:16]

        return PropertyViolation(
            id=violation_id(self.provider_id, source_ref),
            address=address,
            city=to_str(get_first(row, *f.city)) or self.default_city,
            state=(to_str(get_first(row, *f.state)) or self.default_state).upper(),
            zip=to_str(get_first(row, *f.zip)),
            status=to_str(get_first(row, *f.status)),
            violation_date=to_date(get_first(row, f.date_column)),
            description=to_str(get_first(row, *f.description)),
            source=self.provider_id,
        )
