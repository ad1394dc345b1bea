"""Range selector: turns single date picks into a check-in/check-out pair.

Pure reducer over SelectionState. A rejected pick raises a SelectionRejected
subclass; since states are immutable the caller simply keeps the one it had.

Transitions for pick_date(state, day):

    EMPTY / COMPLETE  --available day-->           CHECK_IN_ONLY(day)
    CHECK_IN_ONLY(c)  --day > c, [c, day] free-->  COMPLETE(c, day)
    CHECK_IN_ONLY(c)  --day <= c, day free-->      CHECK_IN_ONLY(day)

The closed interval [c, day] is checked, departure day included.
"""

from __future__ import annotations

import logging
from datetime import date

from .availability import first_unavailable, is_available
from .errors import (
    DateUnavailable,
    InvalidRange,
    RangeContainsUnavailableDates,
    RulesNotAccepted,
)
from .models import SelectionPhase, SelectionState

logger = logging.getLogger(__name__)


def _require_rules(rules_accepted: bool) -> None:
    if not rules_accepted:
        raise RulesNotAccepted("House rules must be accepted before picking dates")


def _start_at(day: date, unavailable: frozenset[date], today: date) -> SelectionState:
    if not is_available(day, unavailable, today=today):
        raise DateUnavailable(f"{day.isoformat()} is not available", date=day.isoformat())
    return SelectionState(check_in=day)


def pick_date(
    state: SelectionState,
    day: date,
    *,
    unavailable: frozenset[date],
    today: date,
    rules_accepted: bool = True,
) -> SelectionState:
    """Apply one date pick and return the next selection state.

    Raises:
        RulesNotAccepted: rules flag is off; no pick is considered.
        DateUnavailable: day is booked or in the past.
        RangeContainsUnavailableDates: [check_in, day] crosses a booked day.
    """
    _require_rules(rules_accepted)

    if state.phase is not SelectionPhase.CHECK_IN_ONLY:
        return _start_at(day, unavailable, today)

    check_in = state.check_in
    if day <= check_in:
        return _start_at(day, unavailable, today)

    blocked = first_unavailable(check_in, day, unavailable, today=today)
    if blocked is not None:
        logger.info(
            "range pick rejected",
            extra={
                "extra_fields": {
                    "check_in": check_in.isoformat(),
                    "check_out": day.isoformat(),
                    "blocked_date": blocked.isoformat(),
                },
            },
        )
        raise RangeContainsUnavailableDates(
            "Some days in this range are already booked",
            blocked_date=blocked.isoformat(),
        )

    return state.with_check_out(day)


def select_range(
    start: date,
    end: date,
    *,
    unavailable: frozenset[date],
    today: date,
    rules_accepted: bool = True,
) -> SelectionState:
    """Select a whole range at once (date pickers in range mode)."""
    _require_rules(rules_accepted)
    if end <= start:
        raise InvalidRange("check_out must be after check_in")

    state = pick_date(
        SelectionState(), start, unavailable=unavailable, today=today
    )
    return pick_date(state, end, unavailable=unavailable, today=today)
