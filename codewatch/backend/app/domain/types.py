# app/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

DEFAULT_LIMIT = 25
MAX_LIMIT = 100

NATIONWIDE = "*"
UNAVAILABLE = "unavailable"


class StatusBucket(str, Enum):
    open = "OPEN"
    closed = "CLOSED"


@dataclass(frozen=True)
class ViolationFilters:
    query: str | None = None
    city: str | None = None
    state: str | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    limit: int = DEFAULT_LIMIT


@dataclass(frozen=True)
class PropertyViolation:
    id: str
    address: str
    city: str
    state: str
    source: str
    zip: str | None = None
    status: str | None = None
    violation_date: date | None = None
    description: str | None = None


@dataclass(frozen=True)
class JurisdictionCoverage:
    state: str
    city: str | None = None

    @property
    def nationwide(self) -> bool:
        return self.state == NATIONWIDE


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    name: str
    jurisdiction: tuple[JurisdictionCoverage, ...] = ()


@dataclass(frozen=True)
class AggregationResult:
    items: list[PropertyViolation]
    providers_queried: list[str]
    providers_matched: list[str]


@dataclass(frozen=True)
class EnrichmentRequest:
    address: str
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    owner_name: str | None = None


@dataclass(frozen=True)
class OwnerLookup:
    address: str
    full_name: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None


@dataclass(frozen=True)
class AddressInfo:
    address: str
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None


@dataclass(frozen=True)
class ImageRef:
    id: str
    name: str
    thumbnail_link: str | None = None
    web_view_link: str | None = None


@dataclass(frozen=True)
class Phone:
    number: str
    type: str | None = None


@dataclass(frozen=True)
class OwnerContact:
    full_name: str | None = None
    phones: tuple[Phone, ...] = ()
    emails: tuple[str, ...] = ()
    mailing_address: str | None = None
    confidence: float | None = None
    source: str | None = None
    message: str | None = None

    @classmethod
    def unavailable(cls, message: str) -> "OwnerContact":
        return cls(source=UNAVAILABLE, message=message)


@dataclass(frozen=True)
class MortgageStatus:
    is_delinquent: bool | None = None
    last_payment_date: date | None = None
    current_lender: str | None = None
    loan_amount: float | None = None
    delinquent_amount: float | None = None
    notes: str | None = None
    source: str | None = None
    message: str | None = None

    @classmethod
    def unavailable(cls, message: str) -> "MortgageStatus":
        return cls(source=UNAVAILABLE, message=message)


@dataclass(frozen=True)
class PropertyEnrichment:
    image: ImageRef | None
    owner: OwnerContact | None
    mortgage: MortgageStatus | None
    integrations: dict[str, bool] = field(default_factory=dict)
