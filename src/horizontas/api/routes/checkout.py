"""Checkout endpoint: re-check the booking and open a Stripe Checkout Session.

Lives server side so the Stripe secret key never reaches the browser.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from fastapi import APIRouter
from pydantic import BaseModel, Field

from horizontas.api.errors import to_http_exception
from horizontas.domain.booking import submit_booking
from horizontas.domain.errors import BookingError, MissingRequiredField
from horizontas.domain.models import (
    MAX_GUESTS,
    MIN_GUESTS,
    AddOnSelection,
    BookingRequest,
    GuestContact,
    SelectionState,
)
from horizontas.observability.correlation import get_correlation_id
from horizontas.observability.logging import get_logger

if TYPE_CHECKING:
    from horizontas.stripe.client import StripeClient

router = APIRouter(prefix="/checkout", tags=["checkout"])

logger = get_logger(__name__)

# Module-level stripe client (lazy init, can be overridden for tests)
_stripe_client: StripeClient | None = None


def _get_stripe_client() -> StripeClient:
    """Get stripe client (allows override in tests)."""
    global _stripe_client
    if _stripe_client is None:
        from horizontas.stripe.client import StripeClient
        _stripe_client = StripeClient()
    return _stripe_client


class CheckoutRequest(BaseModel):
    """Fields are optional at the schema level so that absent ones are
    reported as missing_required_field by the booking guard."""

    apartment_id: str
    check_in: date | None = None
    check_out: date | None = None
    guest_name: str = ""
    email: str = ""
    phone_number: str = ""
    country: str = ""
    number_of_guests: int | None = Field(default=None, ge=MIN_GUESTS, le=MAX_GUESTS)
    has_pets: bool = False
    extra_bed: bool = False
    accepted_rules: bool = False
    coupon_code: str | None = None

    def to_booking_request(self) -> BookingRequest:
        if self.number_of_guests is None:
            raise MissingRequiredField("guest_count")
        return BookingRequest(
            unit_id=self.apartment_id,
            selection=SelectionState(check_in=self.check_in, check_out=self.check_out),
            add_ons=AddOnSelection(
                has_pets=self.has_pets,
                extra_bed=self.extra_bed,
                guest_count=self.number_of_guests,
            ),
            guest=GuestContact(
                name=self.guest_name.strip(),
                email=self.email.strip(),
                phone=self.phone_number.strip(),
                country=self.country.strip(),
            ),
            rules_accepted=self.accepted_rules,
            coupon_code=self.coupon_code,
        )


@router.post("")
def post_checkout(body: CheckoutRequest) -> dict:
    """Validate, re-check availability, price, and return the payment URL.

    Errors:
        409 dates_no_longer_available (with action=reselect_dates),
        422 missing_required_field / rules_not_accepted / invalid_range /
            invalid_or_expired, 404 unit_not_found,
        503 lookup_failed, 502 gateway_error.
    """
    try:
        request = body.to_booking_request()
        handle = submit_booking(
            request,
            stripe_client=_get_stripe_client(),
            correlation_id=get_correlation_id() or None,
        )
    except BookingError as exc:
        logger.info(
            "checkout rejected",
            extra={"extra_fields": {"apartment_id": body.apartment_id, "kind": exc.kind}},
        )
        raise to_http_exception(exc) from exc

    return {
        "checkout_url": handle.checkout_url,
        "session_id": handle.session_id,
        "amount_cents": handle.amount_cents,
    }
