"""Booking <-> Stripe Checkout metadata mapping.

The metadata bag is the only durable record of what the guest asked for
until the payment confirmation webhook writes the booking row, so its keys
are a closed, versioned set. Bump METADATA_VERSION on any key change.

Values are strings (Stripe requirement): dates as YYYY-MM-DD, booleans as
"true"/"false", money in cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from .models import (
    AddOnSelection,
    BookingRequest,
    GuestContact,
    PriceQuote,
    RentalUnit,
    ValidatedCoupon,
)

METADATA_VERSION = "1"


class MetadataField(str, Enum):
    SCHEMA_VERSION = "schema_version"
    APARTMENT_ID = "apartment_id"
    APARTMENT_NAME = "apartment_name"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    GUEST_NAME = "guest_name"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    COUNTRY = "country"
    NUMBER_OF_GUESTS = "number_of_guests"
    HAS_PETS = "has_pets"
    EXTRA_BED = "extra_bed"
    PRICE_CENTS = "price_cents"
    ACCEPTED_RULES = "accepted_rules"
    COUPON_CODE = "coupon_code"
    DISCOUNT_PERCENT = "discount_percent"


# Only present when a coupon was applied.
OPTIONAL_FIELDS = frozenset({MetadataField.COUPON_CODE, MetadataField.DISCOUNT_PERCENT})
REQUIRED_FIELDS = frozenset(MetadataField) - OPTIONAL_FIELDS


@dataclass(frozen=True)
class CheckoutMetadata:
    apartment_id: str
    apartment_name: str
    check_in: date
    check_out: date
    guest: GuestContact
    add_ons: AddOnSelection
    price_cents: int
    accepted_rules: bool
    coupon_code: str | None = None
    discount_percent: Decimal | None = None


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(value: str) -> bool:
    if value not in ("true", "false"):
        raise ValueError(f"not a metadata boolean: {value!r}")
    return value == "true"


def build_checkout_metadata(
    request: BookingRequest,
    unit: RentalUnit,
    quote: PriceQuote,
    coupon: ValidatedCoupon | None = None,
) -> dict[str, str]:
    """Flatten a priced booking into Stripe metadata.

    The request must carry a complete selection.
    """
    selection = request.selection
    if not selection.is_complete:
        raise ValueError("selection must be complete")

    fields: dict[MetadataField, str] = {
        MetadataField.SCHEMA_VERSION: METADATA_VERSION,
        MetadataField.APARTMENT_ID: unit.id,
        MetadataField.APARTMENT_NAME: unit.name,
        MetadataField.CHECK_IN: selection.check_in.isoformat(),
        MetadataField.CHECK_OUT: selection.check_out.isoformat(),
        MetadataField.GUEST_NAME: request.guest.name,
        MetadataField.EMAIL: request.guest.email,
        MetadataField.PHONE_NUMBER: request.guest.phone,
        MetadataField.COUNTRY: request.guest.country,
        MetadataField.NUMBER_OF_GUESTS: str(request.add_ons.guest_count),
        MetadataField.HAS_PETS: _bool(request.add_ons.has_pets),
        MetadataField.EXTRA_BED: _bool(request.add_ons.extra_bed),
        MetadataField.PRICE_CENTS: str(quote.total_cents),
        MetadataField.ACCEPTED_RULES: _bool(request.rules_accepted),
    }
    if coupon is not None:
        fields[MetadataField.COUPON_CODE] = coupon.code
        fields[MetadataField.DISCOUNT_PERCENT] = str(coupon.discount_percent)

    return {key.value: value for key, value in fields.items()}


def parse_checkout_metadata(metadata: dict[str, str]) -> CheckoutMetadata:
    """Rebuild booking fields from a Stripe metadata bag.

    Raises:
        ValueError: Unknown schema version, missing key or malformed value.
    """
    version = metadata.get(MetadataField.SCHEMA_VERSION.value)
    if version != METADATA_VERSION:
        raise ValueError(f"unsupported metadata version: {version!r}")

    missing = sorted(f.value for f in REQUIRED_FIELDS if f.value not in metadata)
    if missing:
        raise ValueError(f"missing metadata keys: {', '.join(missing)}")

    def get(field: MetadataField) -> str:
        return metadata[field.value]

    coupon_code = metadata.get(MetadataField.COUPON_CODE.value)
    raw_percent = metadata.get(MetadataField.DISCOUNT_PERCENT.value)

    return CheckoutMetadata(
        apartment_id=get(MetadataField.APARTMENT_ID),
        apartment_name=get(MetadataField.APARTMENT_NAME),
        check_in=date.fromisoformat(get(MetadataField.CHECK_IN)),
        check_out=date.fromisoformat(get(MetadataField.CHECK_OUT)),
        guest=GuestContact(
            name=get(MetadataField.GUEST_NAME),
            email=get(MetadataField.EMAIL),
            phone=get(MetadataField.PHONE_NUMBER),
            country=get(MetadataField.COUNTRY),
        ),
        add_ons=AddOnSelection(
            has_pets=_parse_bool(get(MetadataField.HAS_PETS)),
            extra_bed=_parse_bool(get(MetadataField.EXTRA_BED)),
            guest_count=int(get(MetadataField.NUMBER_OF_GUESTS)),
        ),
        price_cents=int(get(MetadataField.PRICE_CENTS)),
        accepted_rules=_parse_bool(get(MetadataField.ACCEPTED_RULES)),
        coupon_code=coupon_code,
        discount_percent=Decimal(raw_percent) if raw_percent is not None else None,
    )
