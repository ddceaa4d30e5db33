# scripts/smoke_fetch_violations.py
from __future__ import annotations

import argparse
import asyncio
import logging

from app.config import settings
from app.domain.filters import normalize_filters
from app.service_layer.aggregator import ViolationAggregator
from app.service_layer.registry import build_default_registry


def _quiet_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def main() -> None:
    ap = argparse.ArgumentParser(description="Run one aggregation and print the merged page.")
    ap.add_argument("--state")
    ap.add_argument("--city")
    ap.add_argument("--query")
    ap.add_argument("--status")
    ap.add_argument("--start-date")
    ap.add_argument("--end-date")
    ap.add_argument("--limit", default="10")
    ap.add_argument("--mock", action="store_true", default=settings.MOCK_MODE)
    args = ap.parse_args()

    _quiet_logging()

    filters = normalize_filters(
        query=args.query,
        city=args.city,
        state=args.state,
        status=args.status,
        start_date=args.start_date,
        end_date=args.end_date,
        limit=args.limit,
    )
    agg = ViolationAggregator(registry=build_default_registry())
    result = await agg.fetch_violations(filters, mock_mode=args.mock)

    print("queried:", ", ".join(result.providers_queried) or "-")
    print("matched:", ", ".join(result.providers_matched) or "-")
    for v in result.items:
        print(v.violation_date or "----------", v.source, v.status or "?", v.address, v.city, v.state)


if __name__ == "__main__":
    asyncio.run(main())
