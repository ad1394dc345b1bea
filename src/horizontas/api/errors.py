"""Translate booking engine errors into HTTP responses.

Body shape: {"detail": {"kind": <error kind>, ...extra fields}}.
"""

from __future__ import annotations

from fastapi import HTTPException

from horizontas.domain.errors import BookingError, DatesNoLongerAvailable

_STATUS_BY_KIND: dict[str, int] = {
    "date_unavailable": 409,
    "range_contains_unavailable_dates": 409,
    "dates_no_longer_available": 409,
    "invalid_range": 422,
    "rules_not_accepted": 422,
    "missing_required_field": 422,
    "empty_code": 422,
    "invalid_or_expired": 422,
    "unit_not_found": 404,
    "lookup_failed": 503,
    "gateway_error": 502,
}


def to_http_exception(exc: BookingError) -> HTTPException:
    detail = {"kind": exc.kind, **exc.meta}
    if isinstance(exc, DatesNoLongerAvailable):
        # Stale selection: the client must return to the calendar.
        detail["action"] = "reselect_dates"
    return HTTPException(status_code=_STATUS_BY_KIND.get(exc.kind, 400), detail=detail)
