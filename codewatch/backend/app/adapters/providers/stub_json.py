# app/adapters/providers/stub_json.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...config import settings
from ...domain.errors import ProviderError
from ...domain.parsing import get_first, to_date, to_str
from ...domain.types import PropertyViolation, ViolationFilters
from .base import violation_id


def _as_list_of_dicts(payload: Any) -> list[dict[str, Any]]:
    """
    Accept either:
      - list[dict]
      - {"value": list[dict]} / {"items": list[dict]}
    """
    if isinstance(payload, list):
        return [x for x in payload if isinstance(x, dict)]
    if isinstance(payload, dict):
        for key in ("value", "items"):
            v = payload.get(key)
            if isinstance(v, list):
                return [x for x in v if isinstance(x, dict)]
    return []


@dataclass
class StubJsonViolationsAdapter:
    """
    Offline provider for development/testing.

    Reads violation payloads from:
      backend/data/violations/<provider_id>.json

    A missing fixture file means "no violations", not an error.
    """

    provider_id: str
    fixtures_dir: Path

    @classmethod
    def from_settings(cls, provider_id: str) -> "StubJsonViolationsAdapter":
        # uvicorn is typically launched from backend/
        return cls(provider_id=provider_id, fixtures_dir=Path(settings.PROVIDERS_FIXTURES_DIR))

    async def query(self, filters: ViolationFilters) -> list[PropertyViolation]:
        path = self.fixtures_dir / f"{self.provider_id}.json"
        if not path.exists():
            return []

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ProviderError(self.provider_id, f"unreadable fixture {path}: {e}") from e

        out: list[PropertyViolation] = []
        for i, it in enumerate(_as_list_of_dicts(raw)):
            v = self._canonicalize(it, fallback_ref=str(i))
            if v is not None:
                out.append(v)
        return out

    def _canonicalize(self, it: dict[str, Any], *, fallback_ref: str) -> PropertyViolation | None:
        address = to_str(get_first(it, "address", "addressLine", "address.line1"))
        if not address:
            return None

        return PropertyViolation(
            id=violation_id(self.provider_id, to_str(get_first(it, "id", "caseNumber", "sourceId")) or fallback_ref),
            address=address,
            city=to_str(get_first(it, "city", "address.city")) or "",
            state=(to_str(get_first(it, "state", "address.state")) or "").upper(),
            zip=to_str(get_first(it, "zip", "zipCode", "postalCode")),
            status=to_str(get_first(it, "status")),
            violation_date=to_date(get_first(it, "violationDate", "date")),
            description=to_str(get_first(it, "description")),
            source=self.provider_id,
        )
