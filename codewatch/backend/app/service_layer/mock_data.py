# app/service_layer/mock_data.py
from __future__ import annotations

from datetime import date

from ..domain.types import (
    AddressInfo,
    ImageRef,
    MortgageStatus,
    OwnerContact,
    OwnerLookup,
    Phone,
    PropertyViolation,
)

MOCK_PROVIDER_ID = "mock"

MOCK_VIOLATIONS: tuple[PropertyViolation, ...] = (
    PropertyViolation(
        id="mock:CE-2024-0192",
        address="1420 W Grand Ave",
        city="Chicago",
        state="IL",
        zip="60642",
        status="OPEN",
        violation_date=date(2024, 5, 14),
        description="Exterior wall deterioration; loose masonry over public way",
        source=MOCK_PROVIDER_ID,
    ),
    PropertyViolation(
        id="mock:CE-2024-0087",
        address="3817 S Normandie Ave",
        city="Los Angeles",
        state="CA",
        zip="90037",
        status="OPEN",
        violation_date=date(2024, 4, 2),
        description="Overgrown vegetation and inoperable vehicle in front yard",
        source=MOCK_PROVIDER_ID,
    ),
    PropertyViolation(
        id="mock:CE-2024-0040",
        address="915 E 7th St",
        city="Austin",
        state="TX",
        zip="78702",
        status="CLOSED",
        violation_date=date(2024, 2, 21),
        description="Unpermitted accessory structure; complied after inspection",
        source=MOCK_PROVIDER_ID,
    ),
    PropertyViolation(
        id="mock:CE-2023-1177",
        address="212 Boylston St",
        city="Boston",
        state="MA",
        zip="02116",
        status="CLOSED",
        violation_date=date(2023, 11, 9),
        description="Smoke detectors missing in common hallway",
        source=MOCK_PROVIDER_ID,
    ),
    PropertyViolation(
        id="mock:CE-UNDATED-01",
        address="48 Orchard Ln",
        city="Detroit",
        state="MI",
        zip="48209",
        status="OPEN",
        violation_date=None,
        description="Vacant structure open to entry",
        source=MOCK_PROVIDER_ID,
    ),
)


async def mock_find_property_image(query: str) -> ImageRef | None:
    return ImageRef(
        id="mock-image-1",
        name=f"{query.strip() or 'property'}.jpg",
        thumbnail_link="https://example.com/mock/thumb.jpg",
        web_view_link="https://example.com/mock/view",
    )


async def mock_skip_trace_owner(lookup: OwnerLookup) -> OwnerContact | None:
    return OwnerContact(
        full_name=lookup.full_name or "Jordan Example",
        phones=(Phone(number="(555) 010-2030", type="mobile"), Phone(number="(555) 010-4050", type="landline")),
        emails=("owner@example.com",),
        mailing_address=", ".join(x for x in (lookup.address, lookup.city, lookup.state, lookup.postal_code) if x),
        confidence=0.82,
        source=MOCK_PROVIDER_ID,
    )


async def mock_fetch_mortgage_status(info: AddressInfo) -> MortgageStatus | None:
    return MortgageStatus(
        is_delinquent=True,
        last_payment_date=date(2024, 1, 1),
        current_lender="Example Federal Savings",
        loan_amount=245000.0,
        delinquent_amount=7350.0,
        notes="Mock data: three payments past due.",
        source=MOCK_PROVIDER_ID,
    )
