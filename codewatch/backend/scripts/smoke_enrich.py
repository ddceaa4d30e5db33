# scripts/smoke_enrich.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict

from app.config import settings
from app.domain.types import EnrichmentRequest
from app.service_layer.enrichment import EnrichmentOrchestrator


async def main() -> None:
    ap = argparse.ArgumentParser(description="Enrich one address and dump the composite as JSON.")
    ap.add_argument("address")
    ap.add_argument("--city")
    ap.add_argument("--state")
    ap.add_argument("--postal-code")
    ap.add_argument("--owner-name")
    ap.add_argument("--mock", action="store_true", default=settings.MOCK_MODE)
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)

    req = EnrichmentRequest(
        address=args.address,
        city=args.city,
        state=args.state,
        postal_code=args.postal_code,
        owner_name=args.owner_name,
    )
    result = await EnrichmentOrchestrator().enrich_property(req, mock_mode=args.mock)
    print(json.dumps(asdict(result), indent=2, default=str))


if __name__ == "__main__":
    asyncio.run(main())
