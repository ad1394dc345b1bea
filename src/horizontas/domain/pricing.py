"""Pricing calculator.

Pure calculation, no DB access. Amounts are euro cents.

    base      = nights * nightly rate
    add-ons   = pet fee and/or extra-bed fee, once per booking
    discount  = (base + add-ons) * percent / 100, rounded half-up to a cent
    total     = base + add-ons - discount
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .models import AddOnSelection, PriceQuote, RentalUnit, ValidatedCoupon

PET_FEE_CENTS = 1000
EXTRA_BED_FEE_CENTS = 1500

_HUNDRED = Decimal(100)


def nights_between(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def discount_for(subtotal_cents: int, percent: Decimal) -> int:
    """Percentage of a subtotal, rounded half-up to whole cents."""
    if percent < 0 or percent > _HUNDRED:
        raise ValueError("discount percent must be between 0 and 100")
    raw = Decimal(subtotal_cents) * percent / _HUNDRED
    return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def calculate_price(
    unit: RentalUnit,
    nights: int,
    add_ons: AddOnSelection,
    coupon: ValidatedCoupon | None = None,
) -> PriceQuote:
    """Price a stay.

    Args:
        unit: The unit being booked (source of the nightly rate).
        nights: Number of nights, >= 1.
        add_ons: Pet / extra-bed flags. Extra bed is ignored when the unit
            does not offer one.
        coupon: A coupon already validated by the coupon validator.

    Returns:
        Itemized PriceQuote.

    Raises:
        ValueError: If nights < 1.
    """
    if nights < 1:
        raise ValueError("nights must be >= 1")

    base_cents = nights * unit.nightly_rate_cents
    pet_fee_cents = PET_FEE_CENTS if add_ons.has_pets else 0
    extra_bed_fee_cents = (
        EXTRA_BED_FEE_CENTS if add_ons.extra_bed and unit.allows_extra_bed else 0
    )
    subtotal_cents = base_cents + pet_fee_cents + extra_bed_fee_cents

    percent = coupon.discount_percent if coupon is not None else Decimal(0)
    discount_cents = discount_for(subtotal_cents, percent)

    return PriceQuote(
        nights=nights,
        nightly_rate_cents=unit.nightly_rate_cents,
        base_cents=base_cents,
        pet_fee_cents=pet_fee_cents,
        extra_bed_fee_cents=extra_bed_fee_cents,
        subtotal_cents=subtotal_cents,
        discount_percent=percent,
        discount_cents=discount_cents,
        total_cents=max(subtotal_cents - discount_cents, 0),
    )
