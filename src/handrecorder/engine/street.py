"""One street of the recording wizard.

A :class:`StreetSession` wires the shared pieces together for a single
street: acting order from :mod:`.seating`, carried folds from the aggregate,
a :class:`StreetActionTracker` seeded with them, and a :class:`StepSequencer`
over the seats still in the hand.  Every user input goes through one of the
methods below and comes back as a result object; nothing here raises for bad
input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core import feature_flags
from ..core.cards import Card
from ..core.models import (
    FLOP,
    PREFLOP,
    RAISE,
    REQUIRED_CARDS,
    RIVER,
    STEP_ACTION,
    STEP_CARDS,
    STEP_OBSERVATIONS,
    TURN,
    PlayerAction,
    Step,
)
from .aggregate import HandAggregate, StreetResult
from .card_selection import CardSelection, SelectionOutcome
from .seating import street_order
from .steps import Advance, Retreat, StepSequencer, build_steps
from .tracker import ActionOutcome, StreetActionTracker

__all__ = ["StreetSession", "TableView"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableView:
    """Read-only snapshot for whatever draws the table."""

    street: str
    positions: tuple[str, ...]
    actions: tuple[PlayerAction, ...]
    step_kind: str
    step_index: int
    steps: tuple[Step, ...]
    acting_seat: str | None
    hero_seat: str | None
    hole_cards: tuple[Card, ...]
    community_cards: tuple[Card, ...]
    selected_cards: tuple[Card, ...]
    stack_size: float | None
    small_blind: float
    big_blind: float
    pending_raise_seat: str | None = None
    highest_bet: float = 0.0
    observations: str = ""
    card_target: int = 0


class StreetSession:
    def __init__(self, street: str, aggregate: HandAggregate) -> None:
        self.street = street
        self.aggregate = aggregate
        self.order = street_order(aggregate.table_size, street)
        carried = aggregate.folded_before(street)
        enforce_floor = True if street == PREFLOP else feature_flags.is_enabled(feature_flags.POSTFLOP_RAISE_FLOOR)
        self.tracker = StreetActionTracker(
            street,
            self.order,
            carried_folds=carried,
            big_blind=aggregate.big_blind,
            enforce_raise_floor=enforce_floor,
        )
        self.selection = CardSelection(REQUIRED_CARDS[street])
        self.observations = ""
        self.pending_raise_seat: str | None = None
        self._reentered = bool(aggregate.cards_for(street)) or street in aggregate.actions
        if self._reentered:
            for card in aggregate.cards_for(street):
                self.selection.toggle(card)
            self.tracker.restore(aggregate.actions_for(street))
            self.observations = aggregate.observations_for(street)
        self.sequencer = StepSequencer(build_steps(self.tracker.active_seats), self)
        if self._reentered:
            self.sequencer.seek_first_incomplete()
        logger.debug(
            "street started",
            extra={"street": street, "order": self.order, "carried_folds": sorted(carried), "reentered": self._reentered},
        )

    # ----------------------------------------------------- StepData protocol
    def is_step_complete(self, step: Step) -> bool:
        if step.kind == STEP_CARDS:
            return self.selection.complete
        if step.kind == STEP_ACTION and step.seat is not None:
            return self.tracker.action_for(step.seat).action is not None
        return step.kind == STEP_OBSERVATIONS

    def discard(self, step: Step) -> list[str]:
        if step.kind == STEP_CARDS:
            return [card.label for card in self.selection.clear()]
        if step.kind == STEP_ACTION and step.seat is not None:
            if self.pending_raise_seat == step.seat:
                self.pending_raise_seat = None
            dropped = self.tracker.clear(step.seat)
            return [f"{dropped.seat} {dropped.action}"] if dropped else []
        return []

    # ------------------------------------------------------------------ reads
    @property
    def current_step(self) -> Step:
        return self.sequencer.current

    @property
    def acting_seat(self) -> str | None:
        return self.sequencer.current_seat

    @property
    def complete(self) -> bool:
        return self.sequencer.all_complete()

    def result(self) -> StreetResult:
        return StreetResult(
            street=self.street,
            cards=self.selection.cards,
            actions=self.tracker.actions,
            observations=self.observations,
        )

    def view(self) -> TableView:
        board: list[Card] = []
        if self.street != PREFLOP:
            for prior in (FLOP, TURN, RIVER):
                if prior == self.street:
                    board.extend(self.selection.cards)
                    break
                board.extend(self.aggregate.cards_for(prior))
        hole = self.selection.cards if self.street == PREFLOP else self.aggregate.hole_cards
        step = self.sequencer.current
        return TableView(
            street=self.street,
            positions=self.order,
            actions=self.tracker.actions,
            step_kind=step.kind,
            step_index=self.sequencer.index,
            steps=tuple(self.sequencer.steps),
            acting_seat=self.acting_seat,
            hero_seat=self.aggregate.hero_seat,
            hole_cards=tuple(hole),
            community_cards=tuple(board),
            selected_cards=self.selection.cards,
            stack_size=self.aggregate.stack_size,
            small_blind=self.aggregate.small_blind,
            big_blind=self.aggregate.big_blind,
            pending_raise_seat=self.pending_raise_seat,
            highest_bet=self.tracker.highest_bet,
            observations=self.observations,
            card_target=REQUIRED_CARDS[self.street],
        )

    # ----------------------------------------------------------------- input
    def select_card(self, card: Card) -> SelectionOutcome:
        step = self.sequencer.current
        if step.kind != STEP_CARDS:
            return SelectionOutcome(False, self.selection.cards, reason="cards are locked for this street")
        if card not in self.selection and feature_flags.is_enabled(feature_flags.UNIQUE_CARDS):
            if card in self.aggregate.used_cards(exclude=self.street):
                return SelectionOutcome(False, self.selection.cards, reason=f"{card.label} is already in this hand")
        outcome = self.selection.toggle(card)
        if self.selection.complete:
            self.sequencer.advance()
        return outcome

    def choose_action(self, action: str) -> ActionOutcome:
        """Record ``action`` for the acting seat; a raise waits for its amount."""

        seat = self.acting_seat
        if seat is None:
            return ActionOutcome(False, "", reason="no seat is acting on this step")
        if action == RAISE:
            self.pending_raise_seat = seat
            return ActionOutcome(True, seat, self.tracker.action_for(seat), reason="raise amount required")
        self.pending_raise_seat = None
        outcome = self.tracker.set_action(seat, action)
        if outcome.accepted:
            self.sequencer.advance()
        return outcome

    def submit_raise(self, amount: float | None) -> ActionOutcome:
        seat = self.pending_raise_seat
        if seat is None:
            return ActionOutcome(False, self.acting_seat or "", reason="no raise is waiting for an amount")
        outcome = self.tracker.set_action(seat, RAISE, amount)
        if outcome.accepted:
            self.pending_raise_seat = None
            self.sequencer.advance()
        return outcome

    def cancel_raise(self) -> None:
        self.pending_raise_seat = None

    def set_observations(self, text: str | None) -> None:
        self.observations = (text or "").strip()

    def advance(self) -> Advance:
        return self.sequencer.advance()

    def retreat(self) -> Retreat:
        self.pending_raise_seat = None
        return self.sequencer.retreat()
