"""Availability index: which calendar days of a unit are already taken.

A reservation occupies the nights [check_in, check_out). The departure day
itself stays free, so a new stay may start on the day another one ends.

A day is selectable when it is not occupied and not before today. No DB
access here; callers fetch reservations and pass them in.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Iterator

from .models import Reservation

_ONE_DAY = timedelta(days=1)


def _as_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def iter_days(start: date, end: date, *, inclusive_end: bool = False) -> Iterator[date]:
    """Yield each calendar day from start to end."""
    current = _as_date(start)
    stop = _as_date(end)
    if inclusive_end:
        stop += _ONE_DAY
    while current < stop:
        yield current
        current += _ONE_DAY


def stay_nights(check_in: date, check_out: date) -> list[date]:
    """Nights occupied by a stay, i.e. [check_in, check_out)."""
    return list(iter_days(check_in, check_out))


def unavailable_dates(reservations: Iterable[Reservation]) -> frozenset[date]:
    """Union of occupied nights across reservations.

    Reservations with an empty or inverted range contribute nothing.
    """
    taken: set[date] = set()
    for reservation in reservations:
        taken.update(iter_days(reservation.check_in, reservation.check_out))
    return frozenset(taken)


def is_available(day: date, unavailable: frozenset[date], *, today: date) -> bool:
    day = _as_date(day)
    return day >= today and day not in unavailable


def first_unavailable(
    start: date,
    end: date,
    unavailable: frozenset[date],
    *,
    today: date,
    inclusive_end: bool = True,
) -> date | None:
    """Return the first blocking day in the range, or None if all are free."""
    for day in iter_days(start, end, inclusive_end=inclusive_end):
        if not is_available(day, unavailable, today=today):
            return day
    return None


def unavailable_in_window(
    unavailable: frozenset[date],
    *,
    start: date,
    end: date,
    today: date,
) -> list[date]:
    """Days in [start, end] a calendar should grey out, sorted.

    Past days are included alongside booked ones.
    """
    return [
        day
        for day in iter_days(start, end, inclusive_end=True)
        if not is_available(day, unavailable, today=today)
    ]
