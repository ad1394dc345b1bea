"""Apartment catalogue, availability calendar, date selection and quotes."""

from __future__ import annotations

from datetime import date, timedelta

import psycopg2
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from horizontas.api.errors import to_http_exception
from horizontas.domain.availability import unavailable_dates, unavailable_in_window
from horizontas.domain.coupons import validate_coupon
from horizontas.domain.errors import BookingError, InvalidRange, LookupFailed
from horizontas.domain.models import (
    MAX_GUESTS,
    MIN_GUESTS,
    AddOnSelection,
    RentalUnit,
    SelectionState,
)
from horizontas.domain.pricing import calculate_price, nights_between
from horizontas.domain.selection import pick_date
from horizontas.infra.db import txn
from horizontas.infra.repositories.apartments_repository import (
    get_apartment,
    list_apartments,
)
from horizontas.infra.repositories.bookings_repository import list_reservations
from horizontas.infra.time import property_today
from horizontas.observability.logging import get_logger

router = APIRouter(prefix="/apartments", tags=["apartments"])

logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 60
MAX_WINDOW_DAYS = 366


# ── Schemas ───────────────────────────────────────────────


class SelectionBody(BaseModel):
    check_in: date | None = None
    check_out: date | None = None


class PickDateRequest(BaseModel):
    state: SelectionBody = Field(default_factory=SelectionBody)
    day: date
    rules_accepted: bool = False


class QuoteRequest(BaseModel):
    check_in: date
    check_out: date
    has_pets: bool = False
    extra_bed: bool = False
    number_of_guests: int = Field(default=2, ge=MIN_GUESTS, le=MAX_GUESTS)
    coupon_code: str | None = None


# ── Helpers ───────────────────────────────────────────────


def _unit_to_dict(unit: RentalUnit) -> dict:
    return {
        "id": unit.id,
        "name": unit.name,
        "description": unit.description,
        "price_per_night_cents": unit.nightly_rate_cents,
        "image_url": unit.image_url,
        "allows_extra_bed": unit.allows_extra_bed,
    }


def _selection_to_dict(state: SelectionState) -> dict:
    return {
        "check_in": state.check_in.isoformat() if state.check_in else None,
        "check_out": state.check_out.isoformat() if state.check_out else None,
        "phase": state.phase.value,
    }


def _load_calendar(apartment_id: str, *, today: date) -> tuple[RentalUnit, frozenset[date]]:
    """Fetch the unit and recompute its unavailable days."""
    try:
        with txn() as cur:
            unit = get_apartment(cur, apartment_id)
            if unit is None:
                raise HTTPException(status_code=404, detail={"kind": "unit_not_found"})
            reservations = list_reservations(cur, apartment_id, since=today)
    except psycopg2.Error as exc:
        logger.error(
            "calendar lookup failed",
            extra={"extra_fields": {"apartment_id": apartment_id, "error_type": type(exc).__name__}},
        )
        raise to_http_exception(LookupFailed("Failed to fetch available dates")) from exc
    return unit, unavailable_dates(reservations)


# ── GET /apartments ───────────────────────────────────────


@router.get("")
def get_apartments() -> list[dict]:
    try:
        with txn() as cur:
            units = list_apartments(cur)
    except psycopg2.Error as exc:
        raise to_http_exception(LookupFailed("Failed to load apartments")) from exc
    return [_unit_to_dict(unit) for unit in units]


@router.get("/{apartment_id}")
def get_apartment_detail(apartment_id: str) -> dict:
    try:
        with txn() as cur:
            unit = get_apartment(cur, apartment_id)
    except psycopg2.Error as exc:
        raise to_http_exception(LookupFailed("Failed to load apartment")) from exc
    if unit is None:
        raise HTTPException(status_code=404, detail={"kind": "unit_not_found"})
    return _unit_to_dict(unit)


# ── GET /apartments/{id}/availability ─────────────────────


@router.get("/{apartment_id}/availability")
def get_availability(
    apartment_id: str,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> dict:
    """Days a calendar should disable between start and end (inclusive).

    Defaults to the next 60 days. Past days are always reported.
    Max range: 366 days.
    """
    today = property_today()
    start = start or today
    end = end or start + timedelta(days=DEFAULT_WINDOW_DAYS)

    if end < start:
        raise HTTPException(status_code=400, detail="end must be >= start")
    if (end - start).days > MAX_WINDOW_DAYS:
        raise HTTPException(status_code=400, detail="max range: 366 days")

    _unit, unavailable = _load_calendar(apartment_id, today=min(start, today))
    days = unavailable_in_window(unavailable, start=start, end=end, today=today)

    return {
        "apartment_id": apartment_id,
        "today": today.isoformat(),
        "start": start.isoformat(),
        "end": end.isoformat(),
        "unavailable_dates": [day.isoformat() for day in days],
    }


# ── POST /apartments/{id}/selection ───────────────────────


@router.post("/{apartment_id}/selection")
def post_selection(apartment_id: str, body: PickDateRequest) -> dict:
    """Apply one date pick to the client's current selection.

    The server keeps no session state: the client sends its selection and
    receives the next one. A rejected pick returns 409/422 and the client
    keeps the selection it sent.
    """
    today = property_today()
    _unit, unavailable = _load_calendar(apartment_id, today=today)

    state = SelectionState(check_in=body.state.check_in, check_out=body.state.check_out)
    try:
        next_state = pick_date(
            state,
            body.day,
            unavailable=unavailable,
            today=today,
            rules_accepted=body.rules_accepted,
        )
    except BookingError as exc:
        raise to_http_exception(exc) from exc

    return _selection_to_dict(next_state)


# ── POST /apartments/{id}/quote ───────────────────────────


@router.post("/{apartment_id}/quote")
def post_quote(apartment_id: str, body: QuoteRequest) -> dict:
    """Itemized price for a stay. Informational; checkout reprices."""
    nights = nights_between(body.check_in, body.check_out)
    try:
        if nights < 1:
            raise InvalidRange("check_out must be after check_in")
        coupon = None
        if body.coupon_code is not None:
            coupon = validate_coupon(body.coupon_code)
    except BookingError as exc:
        raise to_http_exception(exc) from exc

    try:
        with txn() as cur:
            unit = get_apartment(cur, apartment_id)
    except psycopg2.Error as exc:
        raise to_http_exception(LookupFailed("Failed to load apartment")) from exc
    if unit is None:
        raise HTTPException(status_code=404, detail={"kind": "unit_not_found"})

    add_ons = AddOnSelection(
        has_pets=body.has_pets,
        extra_bed=body.extra_bed,
        guest_count=body.number_of_guests,
    )
    quote = calculate_price(unit, nights, add_ons, coupon)

    return {
        "apartment_id": unit.id,
        "check_in": body.check_in.isoformat(),
        "check_out": body.check_out.isoformat(),
        "nights": quote.nights,
        "nightly_rate_cents": quote.nightly_rate_cents,
        "base_cents": quote.base_cents,
        "pet_fee_cents": quote.pet_fee_cents,
        "extra_bed_fee_cents": quote.extra_bed_fee_cents,
        "subtotal_cents": quote.subtotal_cents,
        "coupon_code": coupon.code if coupon else None,
        "discount_percent": str(quote.discount_percent),
        "discount_cents": quote.discount_cents,
        "total_cents": quote.total_cents,
    }
