from __future__ import annotations

import math

import pytest

from handrecorder.core.models import CALL, CHECK, FOLD, RAISE, PlayerAction
from handrecorder.engine.tracker import StreetActionTracker

PREFLOP_ORDER = ("UTG", "HJ", "CO", "BTN", "SB", "BB")
POSTFLOP_ORDER = ("SB", "BB", "UTG", "HJ", "CO", "BTN")


def _preflop() -> StreetActionTracker:
    return StreetActionTracker("preflop", PREFLOP_ORDER, big_blind=2)


@pytest.mark.parametrize("amount", [0, -5, None, "abc", math.nan, math.inf, -math.inf, "inf"])
def test_invalid_raise_amounts_leave_action_unset(amount) -> None:
    tracker = _preflop()
    outcome = tracker.set_action("UTG", RAISE, amount)
    assert outcome.accepted is False
    assert outcome.reason
    assert tracker.action_for("UTG").action is None
    assert tracker.highest_bet == 2


def test_preflop_raise_must_exceed_current_bet() -> None:
    tracker = _preflop()
    assert tracker.set_action("UTG", RAISE, 2).accepted is False
    assert tracker.set_action("UTG", RAISE, 6).accepted is True
    assert tracker.set_action("HJ", RAISE, 5).accepted is False
    assert tracker.set_action("HJ", RAISE, 18).accepted is True
    assert tracker.highest_bet == 18
    # UTG now faces the 18 re-raise.
    assert tracker.set_action("UTG", RAISE, 10).accepted is False
    assert tracker.set_action("UTG", RAISE, 40).accepted is True


def test_seat_may_lower_its_own_raise_above_the_floor() -> None:
    tracker = _preflop()
    tracker.set_action("UTG", RAISE, 10)
    outcome = tracker.set_action("UTG", RAISE, 6)
    assert outcome.accepted is True
    assert tracker.highest_bet == 6


def test_postflop_raises_only_need_to_be_positive() -> None:
    tracker = StreetActionTracker("flop", POSTFLOP_ORDER, big_blind=2)
    assert tracker.enforce_raise_floor is False
    assert tracker.set_action("SB", RAISE, 1).accepted is True
    assert tracker.set_action("BB", RAISE, 0.5).accepted is True
    assert tracker.set_action("UTG", RAISE, 0).accepted is False
    assert tracker.set_action("HJ", RAISE, float("inf")).accepted is False
    assert tracker.highest_bet == 2


def test_raise_floor_can_be_requested_after_the_flop() -> None:
    tracker = StreetActionTracker("flop", POSTFLOP_ORDER, big_blind=2, enforce_raise_floor=True)
    assert tracker.set_action("SB", RAISE, 1).accepted is False


def test_call_records_the_amount_to_match() -> None:
    tracker = _preflop()
    tracker.set_action("UTG", CALL)
    assert tracker.action_for("UTG") == PlayerAction("UTG", CALL, 2.0)
    tracker.set_action("HJ", RAISE, 7)
    tracker.set_action("CO", CALL)
    assert tracker.action_for("CO").amount == 7


def test_repeating_an_action_toggles_it_off() -> None:
    tracker = _preflop()
    tracker.set_action("UTG", FOLD)
    assert tracker.action_for("UTG").action == FOLD
    outcome = tracker.set_action("UTG", FOLD)
    assert outcome.accepted is True
    assert tracker.action_for("UTG").action is None


def test_preflop_check_is_reserved_for_unraised_big_blind() -> None:
    tracker = _preflop()
    assert tracker.set_action("UTG", CHECK).accepted is False
    assert tracker.set_action("BB", CHECK).accepted is True
    tracker.set_action("BB", CHECK)  # toggle back off
    tracker.set_action("CO", RAISE, 6)
    assert tracker.set_action("BB", CHECK).accepted is False


def test_postflop_check_is_open_to_everyone() -> None:
    tracker = StreetActionTracker("turn", POSTFLOP_ORDER, big_blind=2)
    assert tracker.set_action("UTG", CHECK).accepted is True


def test_carried_folds_are_locked() -> None:
    tracker = StreetActionTracker("flop", POSTFLOP_ORDER, carried_folds={"UTG", "SB", "XX"})
    assert tracker.carried_folds == frozenset({"UTG", "SB"})
    assert tracker.active_seats == ("BB", "HJ", "CO", "BTN")
    assert tracker.action_for("UTG").action == FOLD
    outcome = tracker.set_action("UTG", CALL)
    assert outcome.accepted is False
    assert tracker.action_for("UTG").action == FOLD
    assert tracker.clear("UTG") is None


def test_unknown_seat_and_action_are_rejected() -> None:
    tracker = _preflop()
    assert tracker.set_action("LJ", FOLD).accepted is False
    assert tracker.set_action("UTG", "Bet").accepted is False
    with pytest.raises(KeyError):
        tracker.action_for("LJ")


def test_duplicate_seats_are_rejected() -> None:
    with pytest.raises(ValueError):
        StreetActionTracker("preflop", ("BTN", "BTN", "BB"))


def test_clear_returns_discarded_action_and_recomputes_bet() -> None:
    tracker = _preflop()
    tracker.set_action("UTG", RAISE, 6)
    dropped = tracker.clear("UTG")
    assert dropped == PlayerAction("UTG", RAISE, 6.0)
    assert tracker.highest_bet == 2
    assert tracker.clear("UTG") is None


def test_restore_skips_carried_and_unknown_seats() -> None:
    tracker = StreetActionTracker("flop", POSTFLOP_ORDER, carried_folds={"UTG"})
    tracker.restore([PlayerAction("UTG", CHECK), PlayerAction("BB", CHECK), PlayerAction("LJ", CALL, 3)])
    assert tracker.action_for("UTG").action == FOLD
    assert tracker.action_for("BB").action == CHECK
    assert tracker.folded_seats == frozenset({"UTG"})
