# app/adapters/providers/base.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...domain.types import PropertyViolation, ViolationFilters


@runtime_checkable
class ProviderAdapter(Protocol):
    """
    One instance per violation provider.

    Contract:
      - translate normalized filters into the provider's own dialect
      - return normalized PropertyViolation records (source = provider id)
      - raise ProviderError on network/parse/rate-limit/auth failure

    Push-down of filters is optional; the aggregator re-applies all of them.
    """

    async def query(self, filters: ViolationFilters) -> list[PropertyViolation]:
        ...


def violation_id(source: str, source_id: str) -> str:
    return f"{source}:{source_id}"
