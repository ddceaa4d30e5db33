# app/service_layer/aggregator.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..domain.filters import matches_filters, renormalize, sort_by_date_desc
from ..domain.types import AggregationResult, PropertyViolation, ViolationFilters
from .mock_data import MOCK_PROVIDER_ID, MOCK_VIOLATIONS
from .registry import ProviderRegistry
from .settle import settle_all

log = logging.getLogger(__name__)


def _dedupe(items: Iterable[PropertyViolation]) -> list[PropertyViolation]:
    seen: set[str] = set()
    out: list[PropertyViolation] = []
    for v in items:
        if v.id in seen:
            continue
        seen.add(v.id)
        out.append(v)
    return out


def _finalize(items: Iterable[PropertyViolation], filters: ViolationFilters) -> list[PropertyViolation]:
    # adapters may or may not have pushed filters down; re-apply centrally either way
    kept = [v for v in _dedupe(items) if matches_filters(v, filters)]
    return sort_by_date_desc(kept)[: filters.limit]


@dataclass
class ViolationAggregator:
    """
    Fan one filter set out to every provider covering it, then merge.

      0) normalize filters (limit default/clamp, blanks, state case)
      1) pick candidates from the registry (state/city; all when neither given)
      2) query them concurrently, settle-all (one failure never sinks the rest)
      3) provenance: every candidate is "queried"; "matched" only if it returned >= 1 item
      4) merge -> dedupe -> filter -> sort newest first (undated last) -> truncate
    """

    registry: ProviderRegistry

    async def fetch_violations(self, filters: ViolationFilters, *, mock_mode: bool = False) -> AggregationResult:
        filters = renormalize(filters)
        if mock_mode:
            return AggregationResult(
                items=_finalize(MOCK_VIOLATIONS, filters),
                providers_queried=[MOCK_PROVIDER_ID],
                providers_matched=[MOCK_PROVIDER_ID],
            )

        candidates = self.registry.providers_covering_filters(filters)
        if not candidates:
            log.info("no providers cover state=%r city=%r", filters.state, filters.city)

        outcomes = await settle_all(p.adapter.query(filters) for p in candidates)

        queried: list[str] = []
        matched: list[str] = []
        merged: list[PropertyViolation] = []

        for provider, outcome in zip(candidates, outcomes):
            queried.append(provider.id)
            if not outcome.ok:
                log.warning(
                    "provider %s failed: %s: %s",
                    provider.id,
                    type(outcome.error).__name__,
                    outcome.error,
                )
                continue

            items = list(outcome.value or [])
            if items:
                matched.append(provider.id)
                merged.extend(items)

        result = AggregationResult(
            items=_finalize(merged, filters),
            providers_queried=queried,
            providers_matched=matched,
        )
        log.debug(
            "aggregated %d items (queried=%s matched=%s)",
            len(result.items),
            result.providers_queried,
            result.providers_matched,
        )
        return result

    def list_provider_summaries(self) -> list[dict[str, Any]]:
        return self.registry.list_provider_summaries()
