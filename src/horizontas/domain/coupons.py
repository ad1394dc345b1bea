"""Coupon validation.

A coupon is usable iff a row with exactly this code exists, is active and
expires strictly after `now`. A store failure is reported as LookupFailed,
never as "no such coupon" and never as a zero discount.
"""

from __future__ import annotations

import logging
from datetime import datetime

import psycopg2
from psycopg2.extensions import cursor as PgCursor

from horizontas.infra.db import txn
from horizontas.infra.repositories.coupons_repository import find_valid_coupon
from horizontas.infra.time import utc_now

from .errors import EmptyCode, InvalidOrExpired, LookupFailed
from .models import ValidatedCoupon

logger = logging.getLogger(__name__)


def _lookup(cur: PgCursor | None, code: str, now: datetime) -> dict | None:
    if cur is not None:
        return find_valid_coupon(cur, code, now=now)
    with txn() as own_cur:
        return find_valid_coupon(own_cur, code, now=now)


def validate_coupon(
    code: str | None,
    *,
    now: datetime | None = None,
    cur: PgCursor | None = None,
) -> ValidatedCoupon:
    """Check a visitor-supplied coupon code.

    Args:
        code: Raw code as typed. Surrounding whitespace is ignored.
        now: Validation instant. Defaults to utc_now().
        cur: Optional cursor to run inside an existing transaction.

    Returns:
        ValidatedCoupon with the stored code and discount percent.

    Raises:
        EmptyCode: Blank input; the store is not queried.
        InvalidOrExpired: No active, unexpired coupon with this code.
        LookupFailed: The store could not be queried.
    """
    normalized = (code or "").strip()
    if not normalized:
        raise EmptyCode("Please enter a coupon code")

    now = now or utc_now()

    try:
        row = _lookup(cur, normalized, now)
    except psycopg2.Error as exc:
        logger.error(
            "coupon lookup failed",
            extra={"extra_fields": {"error_type": type(exc).__name__}},
        )
        raise LookupFailed("Failed to validate coupon") from exc

    if row is None:
        logger.info("coupon rejected", extra={"extra_fields": {"reason": "invalid_or_expired"}})
        raise InvalidOrExpired("Invalid or expired coupon code")

    return ValidatedCoupon(code=row["code"], discount_percent=row["discount_percent"])
