# app/domain/errors.py
from __future__ import annotations


class CodeWatchError(Exception):
    """Base for every error raised by the aggregation/enrichment core."""


class ValidationError(CodeWatchError, ValueError):
    """Bad or missing required input. Aborts the whole operation."""


class ProviderError(CodeWatchError):
    """
    A provider adapter failed (network, parse, rate-limit, auth).

    The aggregator swallows these; they only show up as the provider being
    absent from providersMatched.
    """

    def __init__(self, provider_id: str, message: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"[{provider_id}] {message}")


class EnrichmentBranchError(CodeWatchError):
    """One of the enrichment lookups (image/owner/mortgage) failed."""

    def __init__(self, branch: str, message: str) -> None:
        self.branch = branch
        super().__init__(f"{branch}: {message}")
