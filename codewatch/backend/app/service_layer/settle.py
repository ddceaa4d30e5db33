# app/service_layer/settle.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    ok: bool
    value: T | None = None
    error: Exception | None = None


async def settle_all(aws: Iterable[Awaitable[T]]) -> list[Outcome[T]]:
    """
    Run every awaitable concurrently and wait for all of them.

    One Outcome per input, same order. A failing branch never cancels or
    short-circuits its siblings. Only Exception subclasses are captured;
    anything else is re-raised once every branch has settled. Cancelling
    the caller cancels every branch still running (asyncio.gather does that
    for us) and re-raises.
    """
    tasks: list[Awaitable[Any]] = [asyncio.ensure_future(a) for a in aws]
    if not tasks:
        return []

    results = await asyncio.gather(*tasks, return_exceptions=True)

    out: list[Outcome[T]] = []
    for r in results:
        if isinstance(r, Exception):
            out.append(Outcome(ok=False, error=r))
        elif isinstance(r, BaseException):
            # KeyboardInterrupt, SystemExit, a cancelled branch: not a provider failure
            raise r
        else:
            out.append(Outcome(ok=True, value=r))
    return out
