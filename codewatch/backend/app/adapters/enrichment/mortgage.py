# app/adapters/enrichment/mortgage.py
from __future__ import annotations

from typing import Any

import httpx

from ...config import settings
from ...domain.errors import EnrichmentBranchError
from ...domain.parsing import get_first, to_date, to_float, to_str
from ...domain.types import AddressInfo, MortgageStatus
from ..clients.http_resilience import resilient_request

NOT_CONFIGURED = "Mortgage data is not configured. Set MORTGAGE_API_KEY and MORTGAGE_BASE_URL to enable delinquency checks."


def _to_bool(x: Any) -> bool | None:
    if isinstance(x, bool):
        return x
    s = to_str(x)
    if s is None:
        return None
    s = s.lower()
    if s in ("true", "yes", "y", "1", "delinquent", "default"):
        return True
    if s in ("false", "no", "n", "0", "current", "performing"):
        return False
    return None


def parse_mortgage(body: dict[str, Any]) -> MortgageStatus | None:
    rec: Any = body.get("mortgage") or body.get("loan")
    if rec is None:
        loans = body.get("loans")
        if isinstance(loans, list) and loans:
            rec = loans[0]
    if rec is None:
        rec = body
    if not isinstance(rec, dict):
        return None

    status = MortgageStatus(
        is_delinquent=_to_bool(get_first(rec, "isDelinquent", "delinquent", "status")),
        last_payment_date=to_date(get_first(rec, "lastPaymentDate", "last_payment_date")),
        current_lender=to_str(get_first(rec, "currentLender", "lender", "lenderName")),
        loan_amount=to_float(get_first(rec, "loanAmount", "originalAmount", "amount")),
        delinquent_amount=to_float(get_first(rec, "delinquentAmount", "pastDueAmount", "amountPastDue")),
        notes=to_str(get_first(rec, "notes", "summary")),
        source="mortgage",
    )
    if all(
        v is None
        for v in (
            status.is_delinquent,
            status.last_payment_date,
            status.current_lender,
            status.loan_amount,
            status.delinquent_amount,
        )
    ):
        return None
    return status


async def fetch_mortgage_status(info: AddressInfo) -> MortgageStatus | None:
    if not (settings.MORTGAGE_API_KEY and settings.MORTGAGE_BASE_URL):
        return MortgageStatus.unavailable(NOT_CONFIGURED)

    url = f"{settings.MORTGAGE_BASE_URL.rstrip('/')}/mortgage/status"
    params = {
        "address": info.address,
        "city": info.city,
        "state": info.state,
        "postalCode": info.postal_code,
    }
    headers = {"X-Api-Key": settings.MORTGAGE_API_KEY}

    try:
        resp = await resilient_request("GET", url, headers=headers, params={k: v for k, v in params.items() if v})
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            return None
        raise EnrichmentBranchError("mortgage", f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise EnrichmentBranchError("mortgage", f"{type(e).__name__}: {e}") from e

    try:
        body = resp.json()
    except ValueError as e:
        raise EnrichmentBranchError("mortgage", f"bad json: {e}") from e

    if not isinstance(body, dict):
        return None
    return parse_mortgage(body)
