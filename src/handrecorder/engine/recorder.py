"""Drives a whole hand from preflop to the saved record.

Exactly one :class:`StreetSession` is live at a time.  When its last step is
passed the street's result is merged into the aggregate and the next street
starts from that aggregate.  Once the river is done the hand can be
finalized, which hands the record to the persistence collaborator once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.cards import Card
from ..core.models import PREFLOP, STREETS, next_street, street_index
from ..storage.base import HandStore, SaveResult
from .aggregate import HandAggregate
from .card_selection import SelectionOutcome
from .setup import TableSetup
from .steps import Advance, Retreat
from .street import StreetSession
from .tracker import ActionOutcome

__all__ = ["HandRecorder", "StreetChange"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreetChange:
    """Reported when an input finished a street."""

    completed: str
    next_street: str | None


class HandRecorder:
    def __init__(self, setup: TableSetup | None = None, *, aggregate: HandAggregate | None = None) -> None:
        if aggregate is None:
            if setup is None:
                raise ValueError("a table setup or an aggregate is required")
            aggregate = HandAggregate.start(setup)
        self._aggregate = aggregate
        self._session: StreetSession | None = StreetSession(PREFLOP, aggregate)
        self._last_change: StreetChange | None = None
        self.saved: SaveResult | None = None

    # ------------------------------------------------------------------ reads
    @property
    def aggregate(self) -> HandAggregate:
        """Completed streets only; see :meth:`snapshot` for work in progress."""

        return self._aggregate

    @property
    def session(self) -> StreetSession | None:
        return self._session

    @property
    def street(self) -> str | None:
        return self._session.street if self._session else None

    @property
    def ready(self) -> bool:
        return self._session is None

    @property
    def finalized(self) -> bool:
        return bool(self.saved and self.saved.ok)

    @property
    def last_change(self) -> StreetChange | None:
        return self._last_change

    def snapshot(self) -> HandAggregate:
        if self._session is None:
            return self._aggregate
        return self._aggregate.merge(self._session.result())

    # ----------------------------------------------------------------- input
    def _require_session(self) -> StreetSession:
        if self._session is None:
            raise ValueError("all streets are recorded; finalize the hand")
        return self._session

    def select_card(self, card: Card) -> SelectionOutcome:
        outcome = self._require_session().select_card(card)
        self._settle()
        return outcome

    def choose_action(self, action: str) -> ActionOutcome:
        outcome = self._require_session().choose_action(action)
        self._settle()
        return outcome

    def submit_raise(self, amount: float | None) -> ActionOutcome:
        outcome = self._require_session().submit_raise(amount)
        self._settle()
        return outcome

    def cancel_raise(self) -> None:
        self._require_session().cancel_raise()

    def set_observations(self, text: str | None) -> None:
        self._require_session().set_observations(text)

    def advance(self) -> Advance:
        result = self._require_session().advance()
        self._settle()
        return result

    def retreat(self) -> Retreat:
        return self._require_session().retreat()

    def back_to_street(self, street: str) -> StreetSession:
        """Re-open ``street`` (already recorded or current) for editing."""

        target = street_index(street)
        current = street_index(self.street) if self.street else len(STREETS)
        if target > current:
            raise ValueError(f"cannot jump ahead to {street}")
        if self._session is not None:
            self._aggregate = self._aggregate.merge(self._session.result())
        self._session = StreetSession(street, self._aggregate)
        self._last_change = None
        logger.debug("street re-opened", extra={"street": street})
        return self._session

    def _settle(self) -> None:
        session = self._session
        self._last_change = None
        if session is None or not session.complete:
            return
        self._aggregate = self._aggregate.merge(session.result())
        following = next_street(session.street)
        self._last_change = StreetChange(completed=session.street, next_street=following)
        self._session = StreetSession(following, self._aggregate) if following else None
        logger.debug("street completed", extra={"street": session.street, "next_street": following})

    # --------------------------------------------------------------- finalize
    def missing_fields(self) -> list[str]:
        return self.snapshot().missing_fields()

    def finalize(self, store: HandStore) -> SaveResult:
        """Hand the finished record to ``store``; failures come back unchanged."""

        if self.finalized:
            return SaveResult.failure("hand already saved")
        missing = self.missing_fields()
        if self._session is not None:
            missing = missing or [f"{self._session.street}Observations"]
        if missing:
            return SaveResult.failure("hand is incomplete", missing=tuple(missing))
        result = store.save_hand(self._aggregate.to_record())
        if not result.ok:
            logger.warning("Saving hand failed: %s", result.error)
        self.saved = result
        return result
