# app/adapters/enrichment/skip_trace.py
from __future__ import annotations

from typing import Any

import httpx

from ...config import settings
from ...domain.errors import EnrichmentBranchError
from ...domain.parsing import get_first, to_float, to_str
from ...domain.types import OwnerContact, OwnerLookup, Phone
from ..clients.http_resilience import resilient_request

NOT_CONFIGURED = "Skip tracing is not configured. Set SKIP_TRACE_API_KEY and SKIP_TRACE_BASE_URL to enable owner lookups."


def _phones(raw: Any) -> tuple[Phone, ...]:
    out: list[Phone] = []
    for p in raw or []:
        if isinstance(p, str):
            num, kind = p, None
        elif isinstance(p, dict):
            num = get_first(p, "number", "phone", "phoneNumber")
            kind = get_first(p, "type", "lineType")
        else:
            continue
        num_s = to_str(num)
        if num_s:
            out.append(Phone(number=num_s, type=to_str(kind)))
    return tuple(out)


def _emails(raw: Any) -> tuple[str, ...]:
    out: list[str] = []
    for e in raw or []:
        v = e if isinstance(e, str) else (get_first(e, "email", "address") if isinstance(e, dict) else None)
        s = to_str(v)
        if s:
            out.append(s)
    return tuple(out)


def _confidence(raw: Any) -> float | None:
    c = to_float(raw)
    if c is None:
        return None
    # some vendors report 0-100
    if c > 1:
        c = c / 100.0
    return max(0.0, min(1.0, c))


def parse_owner(body: dict[str, Any]) -> OwnerContact | None:
    """
    Vendors wrap the person differently:
      {"owner": {...}} | {"results": [{...}, ...]} | {"persons": [...]} | {...}
    """
    person: Any = body.get("owner")
    if person is None:
        for key in ("results", "persons", "data"):
            v = body.get(key)
            if isinstance(v, list) and v:
                person = v[0]
                break
    if person is None and any(k in body for k in ("fullName", "name", "phones")):
        person = body
    if not isinstance(person, dict):
        return None

    mailing = get_first(person, "mailingAddress", "mailing_address", "mailingAddress.full")
    if isinstance(mailing, dict):
        mailing = ", ".join(str(x) for x in mailing.values() if x)

    return OwnerContact(
        full_name=to_str(get_first(person, "fullName", "name", "full_name")),
        phones=_phones(get_first(person, "phones", "phoneNumbers")),
        emails=_emails(get_first(person, "emails", "emailAddresses")),
        mailing_address=to_str(mailing),
        confidence=_confidence(get_first(person, "confidence", "score")),
        source="skip_trace",
    )


async def skip_trace_owner(lookup: OwnerLookup) -> OwnerContact | None:
    if not (settings.SKIP_TRACE_API_KEY and settings.SKIP_TRACE_BASE_URL):
        return OwnerContact.unavailable(NOT_CONFIGURED)

    url = f"{settings.SKIP_TRACE_BASE_URL.rstrip('/')}/skip-trace"
    payload = {
        "fullName": lookup.full_name,
        "address": lookup.address,
        "city": lookup.city,
        "state": lookup.state,
        "postalCode": lookup.postal_code,
    }
    headers = {"Authorization": f"Bearer {settings.SKIP_TRACE_API_KEY}"}

    try:
        resp = await resilient_request("POST", url, headers=headers, json={k: v for k, v in payload.items() if v})
        body = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise EnrichmentBranchError("owner", f"{type(e).__name__}: {e}") from e

    if not isinstance(body, dict):
        return None
    return parse_owner(body)
