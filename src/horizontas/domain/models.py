"""Value types shared by the booking engine.

All money is integer euro cents. All instances are immutable; the selection
reducer and the submission guard return new values instead of mutating.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum

MIN_GUESTS = 1
MAX_GUESTS = 12


@dataclass(frozen=True)
class RentalUnit:
    """A bookable apartment or house, as stored in `apartments`."""

    id: str
    name: str
    nightly_rate_cents: int
    description: str | None = None
    image_url: str | None = None
    allows_extra_bed: bool = False

    def __post_init__(self) -> None:
        if self.nightly_rate_cents < 0:
            raise ValueError("nightly_rate_cents must be >= 0")


@dataclass(frozen=True)
class Reservation:
    """Occupied range for a unit. check_in inclusive, check_out exclusive."""

    unit_id: str
    check_in: date
    check_out: date


class SelectionPhase(str, Enum):
    EMPTY = "empty"
    CHECK_IN_ONLY = "check_in_only"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SelectionState:
    """In-progress date range for one browsing session."""

    check_in: date | None = None
    check_out: date | None = None

    @property
    def phase(self) -> SelectionPhase:
        if self.check_in is None:
            return SelectionPhase.EMPTY
        if self.check_out is None:
            return SelectionPhase.CHECK_IN_ONLY
        return SelectionPhase.COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.phase is SelectionPhase.COMPLETE

    def reset(self) -> SelectionState:
        return SelectionState()

    def with_check_in(self, day: date) -> SelectionState:
        return replace(self, check_in=day, check_out=None)

    def with_check_out(self, day: date) -> SelectionState:
        return replace(self, check_out=day)


@dataclass(frozen=True)
class AddOnSelection:
    has_pets: bool = False
    extra_bed: bool = False
    guest_count: int = 2

    def __post_init__(self) -> None:
        if not MIN_GUESTS <= self.guest_count <= MAX_GUESTS:
            raise ValueError(
                f"guest_count must be between {MIN_GUESTS} and {MAX_GUESTS}"
            )


@dataclass(frozen=True)
class ValidatedCoupon:
    """A coupon that was active and unexpired when it was checked."""

    code: str
    discount_percent: Decimal


@dataclass(frozen=True)
class GuestContact:
    name: str
    email: str
    phone: str
    country: str


@dataclass(frozen=True)
class BookingRequest:
    """Everything the visitor submits when confirming a booking.

    The price is deliberately absent: it is recomputed by the submission
    guard from the stored nightly rate.
    """

    unit_id: str
    selection: SelectionState
    add_ons: AddOnSelection
    guest: GuestContact
    rules_accepted: bool
    coupon_code: str | None = None


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate_cents: int
    base_cents: int
    pet_fee_cents: int
    extra_bed_fee_cents: int
    subtotal_cents: int
    discount_percent: Decimal
    discount_cents: int
    total_cents: int


@dataclass(frozen=True)
class CheckoutHandle:
    """Where to send the visitor to finish paying."""

    session_id: str
    checkout_url: str
    amount_cents: int
