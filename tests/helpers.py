"""Shared test helper functions.

Regular functions and fakes (not fixtures) importable from conftest.py and
individual test files.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

from horizontas.domain.models import (
    AddOnSelection,
    BookingRequest,
    GuestContact,
    RentalUnit,
    Reservation,
    SelectionState,
)


def fake_txn(cur: Any | None = None):
    """Build a drop-in replacement for infra.db.txn yielding `cur`."""
    cur = cur if cur is not None else MagicMock()

    @contextmanager
    def _txn(conn=None):
        yield cur

    return _txn


def failing_txn(exc: Exception):
    """txn replacement whose connection attempt raises `exc`."""

    @contextmanager
    def _txn(conn=None):
        raise exc
        yield  # pragma: no cover

    return _txn


def make_unit(**overrides) -> RentalUnit:
    fields = {
        "id": "gintaras",
        "name": 'Senovinis medinis namas "Gintaras"',
        "nightly_rate_cents": 15000,
        "allows_extra_bed": False,
    }
    fields.update(overrides)
    return RentalUnit(**fields)


def make_reservation(check_in: date, check_out: date, unit_id: str = "gintaras") -> Reservation:
    return Reservation(unit_id=unit_id, check_in=check_in, check_out=check_out)


def make_request(**overrides) -> BookingRequest:
    fields = {
        "unit_id": "gintaras",
        "selection": SelectionState(check_in=date(2025, 6, 1), check_out=date(2025, 6, 4)),
        "add_ons": AddOnSelection(),
        "guest": GuestContact(
            name="Ona Petraitė",
            email="ona@example.com",
            phone="+37060000000",
            country="LT",
        ),
        "rules_accepted": True,
        "coupon_code": None,
    }
    fields.update(overrides)
    return BookingRequest(**fields)


def coupon_row(code: str = "SUMMER10", percent: str = "10") -> dict:
    return {"code": code, "discount_percent": Decimal(percent), "expires_at": None}


class FakeStripeClient:
    """Records checkout calls and returns deterministic sessions."""

    def __init__(self, *, error: Exception | None = None, url: str | None = "auto") -> None:
        self.calls: list[dict[str, Any]] = []
        self._error = error
        self._url = url

    def create_checkout_session(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        session_id = f"cs_test_{len(self.calls)}"
        url = f"https://checkout.stripe.com/c/pay/{session_id}" if self._url == "auto" else self._url
        return {"session_id": session_id, "url": url, "status": "open"}
