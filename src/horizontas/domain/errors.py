"""Booking engine error kinds.

Every rejection is an exception with a stable snake_case `kind`, which the
API returns verbatim as `detail`. Callers must never treat one of these as
a success with default values.
"""

from __future__ import annotations

from typing import Any


class BookingError(Exception):
    kind = "booking_error"

    def __init__(self, message: str | None = None, **meta: Any) -> None:
        self.meta = meta
        super().__init__(message or self.kind)


# Range selection. Recoverable: the previous selection state stays valid.


class SelectionRejected(BookingError):
    kind = "selection_rejected"


class DateUnavailable(SelectionRejected):
    kind = "date_unavailable"


class RangeContainsUnavailableDates(SelectionRejected):
    kind = "range_contains_unavailable_dates"


class InvalidRange(SelectionRejected):
    kind = "invalid_range"


# Coupon validation and checkout submission.


class CouponError(BookingError):
    kind = "coupon_error"


class SubmissionError(BookingError):
    kind = "submission_error"


class RulesNotAccepted(SelectionRejected, SubmissionError):
    kind = "rules_not_accepted"


class EmptyCode(CouponError):
    kind = "empty_code"


class InvalidOrExpired(CouponError, SubmissionError):
    kind = "invalid_or_expired"


class LookupFailed(CouponError, SubmissionError):
    """The record store could not be queried. Not the same as 'not found'."""

    kind = "lookup_failed"


class MissingRequiredField(SubmissionError):
    kind = "missing_required_field"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}", field=field)


class UnitNotFound(SubmissionError):
    kind = "unit_not_found"


class DatesNoLongerAvailable(SubmissionError):
    """Someone else booked part of the range after it was selected."""

    kind = "dates_no_longer_available"


class GatewayError(SubmissionError):
    kind = "gateway_error"
