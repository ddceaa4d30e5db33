# app/domain/filters.py
from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from .parsing import to_date, to_int, to_str
from .types import DEFAULT_LIMIT, MAX_LIMIT, PropertyViolation, StatusBucket, ViolationFilters

# Provider status vocab is all over the place; collapse it into the two search buckets.
_OPEN_WORDS = ("open", "active", "pending", "in violation", "referred", "hearing")
_OPEN_OVERRIDES = ("non-compliance", "noncompliance", "not complied")
_CLOSED_WORDS = ("closed", "resolved", "complied", "compliance", "complete", "dismissed", "abated", "cured", "cancel")


def clamp_limit(limit: Any) -> int:
    n = to_int(limit)
    if n is None or n <= 0:
        return DEFAULT_LIMIT
    return min(n, MAX_LIMIT)


def normalize_filters(
    *,
    query: Any = None,
    city: Any = None,
    state: Any = None,
    status: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    limit: Any = None,
) -> ViolationFilters:
    """
    Build ViolationFilters from loosely-typed input (query strings, dicts).

    Never raises: blanks become None, bad dates are dropped, a bad/missing
    limit falls back to the default.
    """
    st = to_str(state)
    return ViolationFilters(
        query=to_str(query),
        city=to_str(city),
        state=st.upper() if st else None,
        status=to_str(status),
        start_date=to_date(start_date),
        end_date=to_date(end_date),
        limit=clamp_limit(limit),
    )


def renormalize(filters: ViolationFilters) -> ViolationFilters:
    """Re-run normalization on filters built directly (not via normalize_filters)."""
    return normalize_filters(
        query=filters.query,
        city=filters.city,
        state=filters.state,
        status=filters.status,
        start_date=filters.start_date,
        end_date=filters.end_date,
        limit=filters.limit,
    )


def status_bucket(status: str | None) -> StatusBucket | None:
    if not status:
        return None
    s = status.strip().lower()
    if any(w in s for w in _OPEN_OVERRIDES):
        return StatusBucket.open
    if any(w in s for w in _CLOSED_WORDS):
        return StatusBucket.closed
    if any(w in s for w in _OPEN_WORDS):
        return StatusBucket.open
    return None


def _same(a: str | None, b: str | None) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


def _in_range(d: date | None, start: date | None, end: date | None) -> bool:
    if start is None and end is None:
        return True
    if d is None:
        return False
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


def matches_filters(v: PropertyViolation, f: ViolationFilters) -> bool:
    if f.query:
        needle = f.query.lower()
        hay = f"{v.address} {v.description or ''}".lower()
        if needle not in hay:
            return False

    if f.state and not _same(v.state, f.state):
        return False
    if f.city and not _same(v.city, f.city):
        return False

    if f.status:
        wanted = status_bucket(f.status)
        if wanted is None:
            # unknown bucket name -> plain case-insensitive compare
            if not _same(v.status, f.status):
                return False
        elif status_bucket(v.status) != wanted:
            return False

    return _in_range(v.violation_date, f.start_date, f.end_date)


def sort_by_date_desc(items: Iterable[PropertyViolation]) -> list[PropertyViolation]:
    """Newest first; undated records keep their relative order at the end."""
    items = list(items)
    dated = [v for v in items if v.violation_date is not None]
    undated = [v for v in items if v.violation_date is None]
    dated.sort(key=lambda v: v.violation_date, reverse=True)  # type: ignore[arg-type, return-value]
    return dated + undated
