"""Tests for the range selector reducer."""

from datetime import date, timedelta

import pytest

from horizontas.domain.errors import (
    DateUnavailable,
    InvalidRange,
    RangeContainsUnavailableDates,
    RulesNotAccepted,
)
from horizontas.domain.models import SelectionPhase, SelectionState
from horizontas.domain.selection import pick_date, select_range

TODAY = date(2025, 5, 1)
BOOKED = frozenset({date(2025, 6, 10), date(2025, 6, 11)})


def pick(state, day, **kwargs):
    kwargs.setdefault("unavailable", BOOKED)
    kwargs.setdefault("today", TODAY)
    return pick_date(state, day, **kwargs)


class TestFromEmpty:
    def test_available_day_becomes_check_in(self):
        state = pick(SelectionState(), date(2025, 6, 1))
        assert state.phase is SelectionPhase.CHECK_IN_ONLY
        assert state.check_in == date(2025, 6, 1)
        assert state.check_out is None

    def test_booked_day_rejected(self):
        empty = SelectionState()
        with pytest.raises(DateUnavailable):
            pick(empty, date(2025, 6, 10))
        assert empty.phase is SelectionPhase.EMPTY

    def test_past_day_rejected(self):
        with pytest.raises(DateUnavailable):
            pick(SelectionState(), TODAY - timedelta(days=1))


class TestFromCheckInOnly:
    def test_forward_pick_completes_range(self):
        state = pick(SelectionState(check_in=date(2025, 6, 1)), date(2025, 6, 4))
        assert state.phase is SelectionPhase.COMPLETE
        assert (state.check_in, state.check_out) == (date(2025, 6, 1), date(2025, 6, 4))

    def test_range_over_booked_day_stays_check_in_only(self):
        start = SelectionState(check_in=date(2025, 6, 8))
        with pytest.raises(RangeContainsUnavailableDates) as exc_info:
            pick(start, date(2025, 6, 14))
        assert exc_info.value.meta["blocked_date"] == "2025-06-10"
        assert start.phase is SelectionPhase.CHECK_IN_ONLY

    def test_check_out_on_booked_day_rejected(self):
        # The closed interval is checked, so the departure day must be free too.
        with pytest.raises(RangeContainsUnavailableDates):
            pick(SelectionState(check_in=date(2025, 6, 7)), date(2025, 6, 10))

    def test_earlier_pick_restarts_range(self):
        state = pick(SelectionState(check_in=date(2025, 6, 5)), date(2025, 6, 2))
        assert state == SelectionState(check_in=date(2025, 6, 2))

    def test_same_day_pick_restarts_range(self):
        state = pick(SelectionState(check_in=date(2025, 6, 5)), date(2025, 6, 5))
        assert state.phase is SelectionPhase.CHECK_IN_ONLY

    def test_earlier_pick_on_booked_day_rejected(self):
        with pytest.raises(DateUnavailable):
            pick(SelectionState(check_in=date(2025, 6, 15)), date(2025, 6, 11))

    @pytest.mark.parametrize("offset", [0, -1, -5])
    def test_never_completes_backwards(self, offset):
        check_in = date(2025, 6, 20)
        state = pick(SelectionState(check_in=check_in), check_in + timedelta(days=offset))
        assert state.phase is not SelectionPhase.COMPLETE


class TestFromComplete:
    def test_third_pick_starts_new_range(self):
        complete = SelectionState(check_in=date(2025, 6, 1), check_out=date(2025, 6, 4))
        state = pick(complete, date(2025, 6, 20))
        assert state == SelectionState(check_in=date(2025, 6, 20))

    def test_reset(self):
        complete = SelectionState(check_in=date(2025, 6, 1), check_out=date(2025, 6, 4))
        assert complete.reset().phase is SelectionPhase.EMPTY


class TestRulesGate:
    @pytest.mark.parametrize(
        "state",
        [
            SelectionState(),
            SelectionState(check_in=date(2025, 6, 1)),
            SelectionState(check_in=date(2025, 6, 1), check_out=date(2025, 6, 3)),
        ],
    )
    def test_pick_blocked_until_rules_accepted(self, state):
        with pytest.raises(RulesNotAccepted):
            pick(state, date(2025, 6, 5), rules_accepted=False)


class TestSelectRange:
    def test_valid_range(self):
        state = select_range(date(2025, 6, 1), date(2025, 6, 4), unavailable=BOOKED, today=TODAY)
        assert state.is_complete

    def test_check_out_before_check_in(self):
        # No complete selection, so nothing to price.
        with pytest.raises(InvalidRange):
            select_range(date(2025, 6, 4), date(2025, 6, 1), unavailable=BOOKED, today=TODAY)

    def test_range_through_booking(self):
        with pytest.raises(RangeContainsUnavailableDates):
            select_range(date(2025, 6, 9), date(2025, 6, 12), unavailable=BOOKED, today=TODAY)

    def test_rules_required(self):
        with pytest.raises(RulesNotAccepted):
            select_range(
                date(2025, 6, 1), date(2025, 6, 4),
                unavailable=BOOKED, today=TODAY, rules_accepted=False,
            )
