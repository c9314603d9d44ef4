"""Per-street action state.

The tracker owns one :class:`PlayerAction` per seat in the street's acting
order.  Seats that folded on an earlier street start (and stay) folded.  All
user input is validated here and answered with an :class:`ActionOutcome`;
rejected input never changes state.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..core.models import ACTIONS, BB, CALL, CHECK, FOLD, PREFLOP, RAISE, PlayerAction

__all__ = ["ActionOutcome", "StreetActionTracker"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    accepted: bool
    seat: str
    action: PlayerAction | None = None
    reason: str | None = None


class StreetActionTracker:
    def __init__(
        self,
        street: str,
        order: Sequence[str],
        *,
        carried_folds: Iterable[str] = (),
        big_blind: float = 0.0,
        enforce_raise_floor: bool | None = None,
    ) -> None:
        if len(set(order)) != len(order):
            raise ValueError("seat order must not contain duplicates")
        self.street = street
        self.order: tuple[str, ...] = tuple(order)
        self.big_blind = float(big_blind)
        # Only preflop tracks a running bet unless explicitly requested.
        self.enforce_raise_floor = street == PREFLOP if enforce_raise_floor is None else enforce_raise_floor
        self._carried = frozenset(seat for seat in carried_folds if seat in self.order)
        self._actions: dict[str, PlayerAction] = {
            seat: PlayerAction(seat, FOLD if seat in self._carried else None) for seat in self.order
        }

    # ------------------------------------------------------------------ views
    @property
    def actions(self) -> tuple[PlayerAction, ...]:
        return tuple(self._actions[seat] for seat in self.order)

    @property
    def carried_folds(self) -> frozenset[str]:
        return self._carried

    @property
    def active_seats(self) -> tuple[str, ...]:
        return tuple(seat for seat in self.order if seat not in self._carried)

    @property
    def folded_seats(self) -> frozenset[str]:
        return frozenset(seat for seat, entry in self._actions.items() if entry.is_fold)

    @property
    def highest_raise(self) -> float:
        raises = [entry.amount for entry in self._actions.values() if entry.action == RAISE and entry.amount]
        return max(raises, default=0.0)

    @property
    def highest_bet(self) -> float:
        """Current outstanding bet: the larger of the big blind and any raise."""

        return max(self.big_blind, self.highest_raise)

    def action_for(self, seat: str) -> PlayerAction:
        try:
            return self._actions[seat]
        except KeyError:
            raise KeyError(f"seat '{seat}' is not seated on this street") from None

    def call_amount(self) -> float:
        highest = self.highest_raise
        return highest if highest > 0 else self.big_blind

    def check_allowed(self, seat: str) -> bool:
        if self.street != PREFLOP:
            return True
        return seat == BB and self.highest_raise <= 0

    # -------------------------------------------------------------- mutation
    def set_action(self, seat: str, action: str, amount: float | None = None) -> ActionOutcome:
        if seat not in self._actions:
            return ActionOutcome(False, seat, reason=f"seat '{seat}' is not seated on this street")
        if seat in self._carried:
            return ActionOutcome(False, seat, self._actions[seat], reason="seat folded on an earlier street")
        if action not in ACTIONS:
            return ActionOutcome(False, seat, self._actions[seat], reason=f"unknown action '{action}'")

        if action == RAISE:
            return self._raise(seat, amount)
        if action == CHECK and not self.check_allowed(seat):
            return ActionOutcome(False, seat, self._actions[seat], reason="check is only available to the big blind")

        current = self._actions[seat]
        if current.action == action:
            updated = PlayerAction(seat, None)
        elif action == CALL:
            updated = PlayerAction(seat, CALL, self.call_amount())
        else:
            updated = PlayerAction(seat, action)
        self._actions[seat] = updated
        logger.debug(
            "action recorded",
            extra={"street": self.street, "seat": seat, "action": updated.action, "amount": updated.amount},
        )
        return ActionOutcome(True, seat, updated)

    def _raise(self, seat: str, amount: float | None) -> ActionOutcome:
        current = self._actions[seat]
        if amount is None:
            return ActionOutcome(False, seat, current, reason="raise amount required")
        try:
            value = float(amount)
        except (TypeError, ValueError):
            return ActionOutcome(False, seat, current, reason="raise amount must be a number")
        if not math.isfinite(value) or value <= 0:
            return ActionOutcome(False, seat, current, reason="raise amount must be a positive finite number")
        if self.enforce_raise_floor:
            # The seat's own earlier raise is not a bet it has to beat.
            floor = max(
                [self.big_blind]
                + [
                    entry.amount
                    for other, entry in self._actions.items()
                    if other != seat and entry.action == RAISE and entry.amount
                ]
            )
            if value <= floor:
                return ActionOutcome(
                    False,
                    seat,
                    current,
                    reason=f"raise must be greater than the current bet of {floor:g}",
                )
        updated = PlayerAction(seat, RAISE, value)
        self._actions[seat] = updated
        logger.debug("raise recorded", extra={"street": self.street, "seat": seat, "amount": value})
        return ActionOutcome(True, seat, updated)

    def clear(self, seat: str) -> PlayerAction | None:
        """Reset ``seat`` to no action and return what was discarded."""

        if seat in self._carried or seat not in self._actions:
            return None
        previous = self._actions[seat]
        self._actions[seat] = PlayerAction(seat, None)
        return previous if previous.action is not None else None

    def restore(self, entries: Iterable[PlayerAction]) -> None:
        """Seed non-carried seats from previously recorded actions (street re-entry)."""

        for entry in entries:
            if entry.seat in self._actions and entry.seat not in self._carried:
                self._actions[entry.seat] = entry
