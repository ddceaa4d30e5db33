from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .domain.types import (
    AggregationResult,
    ImageRef,
    MortgageStatus,
    OwnerContact,
    PropertyEnrichment,
    PropertyViolation,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ViolationOut(_CamelModel):
    id: str
    address: str
    city: str
    state: str
    zip: str | None = None
    status: str | None = None
    violation_date: date | None = None
    description: str | None = None
    source: str

    @classmethod
    def from_domain(cls, v: PropertyViolation) -> "ViolationOut":
        return cls(
            id=v.id,
            address=v.address,
            city=v.city,
            state=v.state,
            zip=v.zip,
            status=v.status,
            violation_date=v.violation_date,
            description=v.description,
            source=v.source,
        )


class ViolationsOut(_CamelModel):
    items: list[ViolationOut]
    providers_queried: list[str]
    providers_matched: list[str]

    @classmethod
    def from_domain(cls, r: AggregationResult) -> "ViolationsOut":
        return cls(
            items=[ViolationOut.from_domain(v) for v in r.items],
            providers_queried=list(r.providers_queried),
            providers_matched=list(r.providers_matched),
        )


class JurisdictionOut(BaseModel):
    state: str
    city: str | None = None


class ProviderSummaryOut(BaseModel):
    id: str
    name: str
    jurisdiction: list[JurisdictionOut]


class ProvidersOut(BaseModel):
    providers: list[ProviderSummaryOut]


class EnrichIn(_CamelModel):
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    owner_name: str | None = None


class ImageOut(_CamelModel):
    id: str
    name: str
    thumbnail_link: str | None = None
    web_view_link: str | None = None


class PhoneOut(BaseModel):
    number: str
    type: str | None = None


class OwnerOut(_CamelModel):
    full_name: str | None = None
    phones: list[PhoneOut] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    mailing_address: str | None = None
    confidence: float | None = None
    source: str | None = None
    message: str | None = None


class MortgageOut(_CamelModel):
    is_delinquent: bool | None = None
    last_payment_date: date | None = None
    current_lender: str | None = None
    loan_amount: float | None = None
    delinquent_amount: float | None = None
    notes: str | None = None
    source: str | None = None
    message: str | None = None


class IntegrationsOut(_CamelModel):
    google_drive: bool
    skip_trace: bool
    mortgage: bool
    mock_mode: bool


class EnrichmentOut(_CamelModel):
    image: ImageOut | None = None
    owner: OwnerOut | None = None
    mortgage: MortgageOut | None = None
    integrations: IntegrationsOut

    @classmethod
    def from_domain(cls, e: PropertyEnrichment) -> "EnrichmentOut":
        return cls(
            image=_image(e.image),
            owner=_owner(e.owner),
            mortgage=_mortgage(e.mortgage),
            integrations=IntegrationsOut(
                google_drive=bool(e.integrations.get("googleDrive")),
                skip_trace=bool(e.integrations.get("skipTrace")),
                mortgage=bool(e.integrations.get("mortgage")),
                mock_mode=bool(e.integrations.get("mockMode")),
            ),
        )


def _image(i: ImageRef | None) -> ImageOut | None:
    if i is None:
        return None
    return ImageOut(id=i.id, name=i.name, thumbnail_link=i.thumbnail_link, web_view_link=i.web_view_link)


def _owner(o: OwnerContact | None) -> OwnerOut | None:
    if o is None:
        return None
    return OwnerOut(
        full_name=o.full_name,
        phones=[PhoneOut(number=p.number, type=p.type) for p in o.phones],
        emails=list(o.emails),
        mailing_address=o.mailing_address,
        confidence=o.confidence,
        source=o.source,
        message=o.message,
    )


def _mortgage(m: MortgageStatus | None) -> MortgageOut | None:
    if m is None:
        return None
    return MortgageOut(
        is_delinquent=m.is_delinquent,
        last_payment_date=m.last_payment_date,
        current_lender=m.current_lender,
        loan_amount=m.loan_amount,
        delinquent_amount=m.delinquent_amount,
        notes=m.notes,
        source=m.source,
        message=m.message,
    )
