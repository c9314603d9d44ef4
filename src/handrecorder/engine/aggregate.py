"""Cross-street record of one hand.

``HandAggregate`` is immutable: each completed street produces a new
aggregate through :meth:`HandAggregate.merge`.  Earlier streets are never
dropped by a merge, and folds are carried forward into any later street that
already holds data.  The record shape produced by :meth:`to_record` is the
persisted :class:`~handrecorder.core.record.HandRecord` and round-trips
through :meth:`from_record`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..core.cards import Card
from ..core.models import CASH, FLOP, FOLD, PREFLOP, REQUIRED_CARDS, RIVER, STREETS, TURN, PlayerAction, street_index
from ..core.record import HandRecord, RecordAction, RecordCard
from .folds import folded_seats
from .seating import layout_for, street_order
from .setup import TableSetup

__all__ = ["HandAggregate", "StreetResult"]

_CARD_FIELDS = {PREFLOP: "hole_cards", FLOP: "flop_cards", TURN: "turn_cards", RIVER: "river_cards"}
_RECORD_CARD_KEYS = {PREFLOP: "holeCards", FLOP: "flopCards", TURN: "turnCard", RIVER: "riverCard"}


@dataclass(frozen=True)
class StreetResult:
    street: str
    cards: tuple[Card, ...]
    actions: tuple[PlayerAction, ...]
    observations: str = ""


@dataclass(frozen=True)
class HandAggregate:
    game_style: str | None = None
    blinds: str | None = None
    small_blind: float = 0.0
    big_blind: float = 0.0
    table_size: int = 6
    hero_seat: str | None = None
    stack_size: float | None = None
    hole_cards: tuple[Card, ...] = ()
    flop_cards: tuple[Card, ...] = ()
    turn_cards: tuple[Card, ...] = ()
    river_cards: tuple[Card, ...] = ()
    actions: Mapping[str, tuple[PlayerAction, ...]] = field(default_factory=dict)
    observations: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def start(cls, setup: TableSetup) -> HandAggregate:
        return cls(
            game_style=setup.game_style,
            blinds=setup.blinds,
            small_blind=setup.small_blind,
            big_blind=setup.big_blind,
            table_size=setup.table_size,
            hero_seat=setup.hero_seat,
            stack_size=setup.stack_size,
        )

    # ------------------------------------------------------------------ reads
    @property
    def positions(self) -> tuple[str, ...]:
        return layout_for(self.table_size)

    @property
    def recorded_streets(self) -> tuple[str, ...]:
        return tuple(street for street in STREETS if street in self.actions)

    def cards_for(self, street: str) -> tuple[Card, ...]:
        street_index(street)
        return getattr(self, _CARD_FIELDS[street])

    def actions_for(self, street: str) -> tuple[PlayerAction, ...]:
        return tuple(self.actions.get(street, ()))

    def observations_for(self, street: str) -> str:
        return self.observations.get(street, "")

    def folded_before(self, street: str) -> frozenset[str]:
        idx = street_index(street)
        return folded_seats(self.actions_for(prior) for prior in STREETS[:idx])

    def used_cards(self, *, exclude: str | None = None) -> frozenset[Card]:
        used: set[Card] = set()
        for street in STREETS:
            if street != exclude:
                used.update(self.cards_for(street))
        return frozenset(used)

    # ---------------------------------------------------------------- updates
    def merge(self, result: StreetResult) -> HandAggregate:
        """Return a new aggregate holding ``result``; other streets are kept."""

        idx = street_index(result.street)
        actions = dict(self.actions)
        actions[result.street] = tuple(result.actions)
        # Later streets already recorded follow the new folds: carried entries whose
        # fold was undone go back to no action, so the seat has to be recorded again.
        for pos in range(idx + 1, len(STREETS)):
            later = STREETS[pos]
            if later not in actions:
                continue
            carried = folded_seats(actions[street] for street in STREETS[:pos] if street in actions)
            was_carried = self.folded_before(later)
            actions[later] = tuple(_carry(entry, carried, was_carried) for entry in actions[later])
        observations = dict(self.observations)
        observations[result.street] = result.observations
        return replace(
            self,
            **{_CARD_FIELDS[result.street]: tuple(result.cards)},
            actions=actions,
            observations=observations,
        )

    # ------------------------------------------------------------- validation
    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.game_style:
            missing.append("gameStyle")
        if self.game_style == CASH and not self.blinds and not (self.small_blind and self.big_blind):
            missing.append("blinds")
        if not self.hero_seat:
            missing.append("position")
        if not self.stack_size:
            missing.append("stackSize")
        for street in STREETS:
            if len(self.cards_for(street)) != REQUIRED_CARDS[street]:
                missing.append(_RECORD_CARD_KEYS[street])
            if not self._street_actions_complete(street):
                missing.append(f"{street}Actions")
        return missing

    def _street_actions_complete(self, street: str) -> bool:
        recorded = self.actions_for(street)
        order = street_order(self.table_size, street)
        if [entry.seat for entry in recorded] != list(order):
            return False
        return all(entry.action is not None for entry in recorded)

    # ------------------------------------------------------------ record I/O
    def to_model(self) -> HandRecord:
        fields: dict[str, Any] = {
            "game_style": self.game_style,
            "blinds": self.blinds,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "player_count": self.table_size,
            "positions": list(self.positions),
            "position": self.hero_seat,
            "stack_size": self.stack_size,
            "hole_cards": [RecordCard.from_card(card) for card in self.hole_cards],
            "flop_cards": [RecordCard.from_card(card) for card in self.flop_cards],
            "turn_card": RecordCard.from_card(self.turn_cards[0]) if self.turn_cards else None,
            "river_card": RecordCard.from_card(self.river_cards[0]) if self.river_cards else None,
        }
        for street in STREETS:
            if street in self.actions:
                fields[f"{street}_actions"] = [_record_action(entry) for entry in self.actions[street]]
            if street in self.observations:
                fields[f"{street}_observations"] = self.observations[street]
        return HandRecord(**fields)

    def to_record(self) -> dict[str, Any]:
        return self.to_model().to_dict()

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | HandRecord) -> HandAggregate:
        model = record if isinstance(record, HandRecord) else HandRecord.model_validate(record)
        actions: dict[str, tuple[PlayerAction, ...]] = {}
        observations: dict[str, str] = {}
        for street in STREETS:
            recorded = model.actions_for(street)
            if recorded is not None:
                actions[street] = tuple(PlayerAction(item.position, item.action, item.amount) for item in recorded)
            notes = model.observations_for(street)
            if notes is not None:
                observations[street] = notes
        return cls(
            game_style=model.game_style,
            blinds=model.blinds,
            small_blind=model.small_blind,
            big_blind=model.big_blind,
            table_size=model.player_count,
            hero_seat=model.position,
            stack_size=model.stack_size,
            hole_cards=tuple(card.to_card() for card in model.hole_cards),
            flop_cards=tuple(card.to_card() for card in model.flop_cards),
            turn_cards=(model.turn_card.to_card(),) if model.turn_card else (),
            river_cards=(model.river_card.to_card(),) if model.river_card else (),
            actions=actions,
            observations=observations,
        )


def _carry(entry: PlayerAction, carried: frozenset[str], was_carried: frozenset[str]) -> PlayerAction:
    if entry.seat in carried:
        return PlayerAction(entry.seat, FOLD)
    if entry.seat in was_carried:
        return PlayerAction(entry.seat, None)
    return entry


def _record_action(entry: PlayerAction) -> RecordAction:
    if entry.amount is None:
        return RecordAction(position=entry.seat, action=entry.action)
    return RecordAction(position=entry.seat, action=entry.action, amount=entry.amount)
