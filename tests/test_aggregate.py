from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from handrecorder.core.cards import parse_cards
from handrecorder.core.models import CALL, CHECK, FOLD, RAISE, PlayerAction
from handrecorder.engine.aggregate import HandAggregate, StreetResult
from handrecorder.engine.setup import build_setup
from handrecorder.core.record import HandRecord

PREFLOP_ORDER = ("UTG", "HJ", "CO", "BTN", "SB", "BB")
POSTFLOP_ORDER = ("SB", "BB", "UTG", "HJ", "CO", "BTN")


def _start() -> HandAggregate:
    return HandAggregate.start(build_setup(game_style="cash", table_size=6, hero_seat="BTN", stack_size=200, blinds="1/2"))


def _preflop() -> StreetResult:
    actions = (
        PlayerAction("UTG", FOLD),
        PlayerAction("HJ", FOLD),
        PlayerAction("CO", CALL, 2),
        PlayerAction("BTN", RAISE, 6),
        PlayerAction("SB", FOLD),
        PlayerAction("BB", CALL, 6),
    )
    return StreetResult("preflop", tuple(parse_cards(["As", "Kd"])), actions, "tight table")


def test_merge_keeps_earlier_streets() -> None:
    base = _start()
    after_preflop = base.merge(_preflop())
    assert base.actions == {}
    flop_actions = tuple(PlayerAction(seat, FOLD if seat in {"SB", "UTG", "HJ"} else CHECK) for seat in POSTFLOP_ORDER)
    after_flop = after_preflop.merge(StreetResult("flop", tuple(parse_cards(["2c", "7d", "9h"])), flop_actions))
    assert after_flop.recorded_streets == ("preflop", "flop")
    assert after_flop.hole_cards == after_preflop.hole_cards
    assert after_flop.observations_for("preflop") == "tight table"
    assert after_flop.folded_before("turn") == frozenset({"UTG", "HJ", "SB"})
    assert after_flop.used_cards(exclude="flop") == frozenset(parse_cards(["As", "Kd"]))


def test_reopened_street_folds_carry_into_recorded_streets() -> None:
    agg = _start().merge(_preflop())
    flop_actions = tuple(PlayerAction(seat, FOLD if seat in {"SB", "UTG", "HJ"} else CHECK) for seat in POSTFLOP_ORDER)
    agg = agg.merge(StreetResult("flop", tuple(parse_cards(["2c", "7d", "9h"])), flop_actions))
    edited = list(_preflop().actions)
    edited[2] = PlayerAction("CO", FOLD)
    agg = agg.merge(StreetResult("preflop", agg.hole_cards, tuple(edited)))
    assert agg.actions_for("flop")[POSTFLOP_ORDER.index("CO")].action == FOLD


def test_missing_fields_on_fresh_hand() -> None:
    missing = _start().missing_fields()
    assert "gameStyle" not in missing
    assert "blinds" not in missing
    assert missing[:2] == ["holeCards", "preflopActions"]
    assert "riverCard" in missing and "riverActions" in missing


def test_partial_actions_are_missing() -> None:
    actions = list(_preflop().actions)
    actions[-1] = PlayerAction("BB", None)
    agg = _start().merge(StreetResult("preflop", tuple(parse_cards(["As", "Kd"])), tuple(actions)))
    assert "preflopActions" in agg.missing_fields()
    assert "holeCards" not in agg.missing_fields()


def test_record_keys_and_reload() -> None:
    agg = _start().merge(_preflop())
    record = agg.to_record()
    assert record["positions"] == list(PREFLOP_ORDER)
    assert record["holeCards"] == [{"rank": "A", "suit": "s"}, {"rank": "K", "suit": "d"}]
    assert record["preflopActions"][0] == {"position": "UTG", "action": "Fold"}
    assert record["preflopActions"][3] == {"position": "BTN", "action": "Raise", "amount": 6.0}
    assert record["turnCard"] is None

    wire = HandRecord.model_validate(json.loads(json.dumps(record))).to_dict()
    assert HandAggregate.from_record(wire) == agg


def test_undone_fold_is_cleared_from_later_streets() -> None:
    agg = _start().merge(_preflop())
    carried = {"SB", "UTG", "HJ"}
    flop_actions = tuple(PlayerAction(seat, FOLD if seat in carried else CHECK) for seat in POSTFLOP_ORDER)
    agg = agg.merge(StreetResult("flop", tuple(parse_cards(["2c", "7d", "9h"])), flop_actions))
    agg = agg.merge(StreetResult("turn", tuple(parse_cards(["Qs"])), flop_actions))

    edited = list(_preflop().actions)
    edited[0] = PlayerAction("UTG", CALL, 2)
    agg = agg.merge(StreetResult("preflop", agg.hole_cards, tuple(edited)))

    for street in ("flop", "turn"):
        actions = {entry.seat: entry.action for entry in agg.actions_for(street)}
        assert actions["UTG"] is None
        assert actions["HJ"] == FOLD and actions["SB"] == FOLD
        assert actions["BTN"] == CHECK
    assert agg.folded_before("river") == frozenset({"HJ", "SB"})
    assert "flopActions" in agg.missing_fields()


def test_user_folds_on_later_streets_survive_an_edit() -> None:
    agg = _start().merge(_preflop())
    flop_actions = tuple(PlayerAction(seat, FOLD if seat in {"SB", "UTG", "HJ", "CO"} else CHECK) for seat in POSTFLOP_ORDER)
    agg = agg.merge(StreetResult("flop", tuple(parse_cards(["2c", "7d", "9h"])), flop_actions))
    edited = list(_preflop().actions)
    edited[0] = PlayerAction("UTG", CALL, 2)
    agg = agg.merge(StreetResult("preflop", agg.hole_cards, tuple(edited)))
    actions = {entry.seat: entry.action for entry in agg.actions_for("flop")}
    assert actions["CO"] == FOLD


def test_record_matches_its_schema() -> None:
    record = _start().merge(_preflop()).to_record()
    assert HandRecord.model_validate(record).to_dict() == record
    assert "flopActions" not in record


@pytest.mark.parametrize(
    "change",
    [
        {"smallBlind": float("inf")},
        {"holeCards": [{"rank": "Z", "suit": "s"}]},
        {"preflopActions": [{"position": "UTG", "action": "Shove"}]},
        {"turnCard": "??"},
    ],
)
def test_schema_rejects_bad_records(change) -> None:
    record = _start().merge(_preflop()).to_record()
    with pytest.raises(ValidationError):
        HandRecord.model_validate({**record, **change})


def test_from_record_accepts_card_labels() -> None:
    record = {**_start().merge(_preflop()).to_record(), "holeCards": ["A♠", "kd"], "turnCard": "10h"}
    agg = HandAggregate.from_record(record)
    assert agg.hole_cards == tuple(parse_cards(["As", "Kd"]))
    assert agg.turn_cards == tuple(parse_cards(["Th"]))
