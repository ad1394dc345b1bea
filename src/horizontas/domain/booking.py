"""Booking submission guard.

Last step before the guest is sent to Stripe. The calendar the guest browsed
may be stale, so availability is re-read from the store and the price is
recomputed from the stored rate; nothing cached on the client is trusted.

This narrows the double-booking window but cannot close it: the `bookings`
overlap constraint in the database is the final arbiter.

Every failure is terminal for the attempt. There is no retry here; a new
submit_booking() call re-checks from scratch.
"""

from __future__ import annotations

import logging
import os
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

import psycopg2

from horizontas.infra.db import txn
from horizontas.infra.repositories.apartments_repository import get_apartment
from horizontas.infra.repositories.bookings_repository import list_reservations
from horizontas.infra.time import property_today, utc_now
from horizontas.stripe.client import StripeGatewayError

from .availability import first_unavailable, unavailable_dates
from .checkout_metadata import build_checkout_metadata
from .coupons import validate_coupon
from .errors import (
    DatesNoLongerAvailable,
    GatewayError,
    InvalidRange,
    LookupFailed,
    MissingRequiredField,
    RulesNotAccepted,
    UnitNotFound,
)
from .models import BookingRequest, CheckoutHandle, PriceQuote, RentalUnit, ValidatedCoupon
from .pricing import calculate_price, nights_between

if TYPE_CHECKING:
    from horizontas.stripe.client import StripeClient

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "eur"
_DEFAULT_SITE_URL = "http://localhost:5173"


def _redirect_urls() -> tuple[str, str]:
    site = os.environ.get("PUBLIC_SITE_URL", _DEFAULT_SITE_URL).rstrip("/")
    success = os.environ.get("STRIPE_SUCCESS_URL", f"{site}/success")
    cancel = os.environ.get("STRIPE_CANCEL_URL", f"{site}/fail")
    return success, cancel


def _checkout_currency() -> str:
    return os.environ.get("CHECKOUT_CURRENCY", DEFAULT_CURRENCY).lower()


def validate_request_fields(request: BookingRequest) -> None:
    """Reject incomplete requests before touching the store.

    Raises:
        MissingRequiredField: A date, contact field or the guest count is absent.
        InvalidRange: check_out is not after check_in.
        RulesNotAccepted: House rules were not accepted.
    """
    selection = request.selection
    if selection.check_in is None:
        raise MissingRequiredField("check_in")
    if selection.check_out is None:
        raise MissingRequiredField("check_out")

    guest = request.guest
    for field in ("name", "email", "phone", "country"):
        value = getattr(guest, field)
        if value is None or not str(value).strip():
            raise MissingRequiredField(field)
    if not request.add_ons.guest_count:
        raise MissingRequiredField("guest_count")

    if selection.check_out <= selection.check_in:
        raise InvalidRange("check_out must be after check_in")

    if not request.rules_accepted:
        raise RulesNotAccepted("House rules must be accepted before booking")


def _recheck_and_price(
    request: BookingRequest,
    *,
    today: date,
    now: datetime,
) -> tuple[RentalUnit, PriceQuote, ValidatedCoupon | None]:
    check_in = request.selection.check_in
    check_out = request.selection.check_out

    try:
        with txn() as cur:
            unit = get_apartment(cur, request.unit_id)
            if unit is None:
                raise UnitNotFound(f"Unknown apartment: {request.unit_id}")

            reservations = list_reservations(cur, unit.id, since=check_in)
            blocked = first_unavailable(
                check_in,
                check_out,
                unavailable_dates(reservations),
                today=today,
                inclusive_end=False,
            )
            if blocked is not None:
                logger.warning(
                    "dates no longer available",
                    extra={
                        "extra_fields": {
                            "apartment_id": unit.id,
                            "check_in": check_in.isoformat(),
                            "check_out": check_out.isoformat(),
                            "blocked_date": blocked.isoformat(),
                        },
                    },
                )
                raise DatesNoLongerAvailable(
                    "Selected dates are no longer available. Please choose different dates.",
                    blocked_date=blocked.isoformat(),
                )

            coupon = None
            if request.coupon_code is not None:
                coupon = validate_coupon(request.coupon_code, now=now, cur=cur)
    except psycopg2.Error as exc:
        logger.error(
            "availability re-check failed",
            extra={"extra_fields": {"error_type": type(exc).__name__}},
        )
        raise LookupFailed("Could not verify availability") from exc

    quote = calculate_price(unit, nights_between(check_in, check_out), request.add_ons, coupon)
    return unit, quote, coupon


def submit_booking(
    request: BookingRequest,
    *,
    stripe_client: StripeClient,
    today: date | None = None,
    now: datetime | None = None,
    correlation_id: str | None = None,
) -> CheckoutHandle:
    """Re-check a booking and open a Stripe Checkout Session for it.

    Args:
        request: The guest's booking request.
        stripe_client: Stripe client instance.
        today: Property-local calendar day. Defaults to property_today().
        now: Instant used for coupon expiry. Defaults to utc_now().
        correlation_id: Optional correlation ID for tracing.

    Returns:
        CheckoutHandle with the URL to redirect the guest to.

    Raises:
        MissingRequiredField, InvalidRange, RulesNotAccepted: Bad request.
        UnitNotFound: The apartment does not exist.
        DatesNoLongerAvailable: Part of the range was booked meanwhile.
        InvalidOrExpired: The coupon stopped being valid.
        LookupFailed: The record store could not be queried.
        GatewayError: Stripe refused or could not be reached.
    """
    validate_request_fields(request)

    now = now or utc_now()
    today = today or property_today(now)

    unit, quote, coupon = _recheck_and_price(request, today=today, now=now)

    metadata = build_checkout_metadata(request, unit, quote, coupon)
    success_url, cancel_url = _redirect_urls()
    attempt_id = str(uuid.uuid4())

    try:
        session = stripe_client.create_checkout_session(
            amount_cents=quote.total_cents,
            currency=_checkout_currency(),
            product_name=unit.name,
            customer_email=request.guest.email,
            idempotency_key=f"booking:{attempt_id}:checkout_session",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            correlation_id=correlation_id,
        )
    except StripeGatewayError as exc:
        raise GatewayError("Failed to create checkout session") from exc

    if not session.get("url"):
        raise GatewayError("Checkout session has no redirect URL")

    logger.info(
        "checkout_session_opened",
        extra={
            "extra_fields": {
                "apartment_id": unit.id,
                "session_id": session["session_id"],
                "amount_cents": quote.total_cents,
                "nights": quote.nights,
                "coupon_applied": coupon is not None,
                "correlation_id": correlation_id,
            },
        },
    )

    return CheckoutHandle(
        session_id=session["session_id"],
        checkout_url=session["url"],
        amount_cents=quote.total_cents,
    )
