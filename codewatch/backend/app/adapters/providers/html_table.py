# app/adapters/providers/html_table.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

import httpx
from bs4 import BeautifulSoup

from ...domain.errors import ProviderError
from ...domain.parsing import to_date, to_str
from ...domain.types import PropertyViolation, ViolationFilters
from ..clients.http_resilience import resilient_request
from .base import violation_id


def _norm_header(s: str) -> str:
    return " ".join(s.lower().replace(":", " ").split())


def _sha(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()[:16]


@dataclass
class HtmlTableViolationsAdapter:
    """
    Jurisdictions that only publish a public HTML listing (no API).

    Rules:
      - public pages only, no login/CAPTCHA bypass
      - headers are matched by name, not by position (sites reorder columns)
      - the search box param, if the site has one, gets the query text

    `columns` maps our field name -> accepted header labels (lower-case).
    """

    provider_id: str
    url: str
    default_city: str
    default_state: str
    search_param: str | None = None
    table_selector: str = "table"
    columns: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {
            "source_id": ("case number", "case #", "case no", "complaint number", "id"),
            "address": ("address", "property address", "location", "site address"),
            "status": ("status", "case status"),
            "violation_date": ("date", "violation date", "date opened", "opened", "inspection date"),
            "description": ("description", "violation", "violation type", "type"),
            "zip": ("zip", "zip code", "postal code"),
        }
    )

    async def query(self, filters: ViolationFilters) -> list[PropertyViolation]:
        params: dict[str, Any] = {}
        if self.search_param and filters.query:
            params[self.search_param] = filters.query

        try:
            resp = await resilient_request("GET", self.url, params=params or None, headers={"accept": "text/html"})
        except httpx.HTTPError as e:
            raise ProviderError(self.provider_id, f"{type(e).__name__}: {e}") from e

        return self.parse(resp.text)

    def parse(self, html: str) -> list[PropertyViolation]:
        soup = BeautifulSoup(html, "lxml")
        table = soup.select_one(self.table_selector)
        if table is None:
            raise ProviderError(self.provider_id, f"no table matching {self.table_selector!r}")

        rows = table.select("tr")
        if not rows:
            return []

        header_cells = rows[0].select("th") or rows[0].select("td")
        headers = [_norm_header(c.get_text(" ", strip=True)) for c in header_cells]
        index: dict[str, int] = {}
        for name, labels in self.columns.items():
            for i, h in enumerate(headers):
                if h in labels:
                    index[name] = i
                    break

        if "address" not in index:
            raise ProviderError(self.provider_id, f"address column not found in headers={headers}")

        out: list[PropertyViolation] = []
        for tr in rows[1:]:
            tds = [td.get_text(" ", strip=True) for td in tr.select("td")]
            if not tds:
                continue

            def cell(name: str) -> str | None:
                i = index.get(name)
                if i is None or i >= len(tds):
                    return None
                return to_str(tds[i])

            address = cell("address")
            if not address:
                continue

            out.append(
                PropertyViolation(
                    id=violation_id(self.provider_id, cell("source_id") or _sha(" | ".join(tds))),
                    address=address,
                    city=self.default_city,
                    state=self.default_state,
                    zip=cell("zip"),
                    status=cell("status"),
                    violation_date=to_date(cell("violation_date")),
                    description=cell("description"),
                    source=self.provider_id,
                )
            )
        return out
