from __future__ import annotations

import logging
import secrets
import string
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ...core.cards import cards_to_labels, parse_card
from ...engine.recorder import HandRecorder
from ...engine.setup import build_setup
from ...engine.street import TableView
from ...storage import HandStore, InMemoryHandStore, SaveResult
from .concurrency import run_blocking
from .schemas import (
    ActionPayload,
    HandStatePayload,
    InputResult,
    SaveOutcomePayload,
    StepPayload,
    TableViewPayload,
)

__all__ = [
    "HandConfig",
    "RecorderSessionManager",
    "SessionState",
    "_state_payload",
    "_view_payload",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandConfig:
    """Table setup for a new recording session."""

    game_style: str | None
    table_size: int | None
    hero_seat: str | None
    stack_size: float | None
    blinds: str | None = None
    small_blind: float | None = None
    big_blind: float | None = None


@dataclass
class SessionState:
    config: HandConfig
    recorder: HandRecorder


def _view_payload(view: TableView) -> TableViewPayload:
    return TableViewPayload(
        street=view.street,
        positions=list(view.positions),
        actions=[ActionPayload(position=a.seat, action=a.action, amount=a.amount) for a in view.actions],
        step_kind=view.step_kind,
        step_index=view.step_index,
        steps=[StepPayload(id=s.id, kind=s.kind, seat=s.seat, complete=s.complete) for s in view.steps],
        acting_seat=view.acting_seat,
        hero_seat=view.hero_seat,
        hole_cards=cards_to_labels(view.hole_cards),
        community_cards=cards_to_labels(view.community_cards),
        selected_cards=cards_to_labels(view.selected_cards),
        card_target=view.card_target,
        stack_size=view.stack_size,
        small_blind=view.small_blind,
        big_blind=view.big_blind,
        highest_bet=view.highest_bet,
        pending_raise_seat=view.pending_raise_seat,
        observations=view.observations,
    )


def _state_payload(session_id: str, state: SessionState) -> HandStatePayload:
    recorder = state.recorder
    session = recorder.session
    return HandStatePayload(
        session=session_id,
        street=recorder.street,
        ready=recorder.ready,
        finalized=recorder.finalized,
        view=_view_payload(session.view()) if session else None,
        missing=recorder.missing_fields() if recorder.ready else [],
    )


class RecorderSessionManager:
    """Owns in-flight hands independent of the presentation layer."""

    def __init__(self, store: HandStore | None = None) -> None:
        self._sessions: dict[str, SessionState] = {}
        self._lock = threading.Lock()
        self.store: HandStore = store if store is not None else InMemoryHandStore()

    def create_session(self, config: HandConfig) -> str:
        setup = build_setup(
            game_style=config.game_style,
            table_size=config.table_size,
            hero_seat=config.hero_seat,
            stack_size=config.stack_size,
            blinds=config.blinds,
            small_blind=config.small_blind,
            big_blind=config.big_blind,
        )
        session_id = _sid()
        with self._lock:
            self._sessions[session_id] = SessionState(config=config, recorder=HandRecorder(setup))
        logger.debug("hand session created", extra={"session_id": session_id, "table_size": setup.table_size})
        return session_id

    async def create_session_async(self, config: HandConfig) -> str:
        return await run_blocking(self.create_session, config)

    def state(self, session_id: str) -> HandStatePayload:
        with self._lock:
            return _state_payload(session_id, self._require_session(session_id))

    async def state_async(self, session_id: str) -> HandStatePayload:
        return await run_blocking(self.state, session_id)

    def _apply(self, session_id: str, fn: Callable[[HandRecorder], Any]) -> InputResult:
        with self._lock:
            state = self._require_session(session_id)
            outcome = fn(state.recorder)
            change = state.recorder.last_change
            return InputResult(
                accepted=_accepted(outcome),
                reason=getattr(outcome, "reason", None),
                discarded=list(getattr(outcome, "discarded", []) or []) or None,
                street_completed=change.completed if change else None,
                next_street=change.next_street if change else None,
                state=_state_payload(session_id, state),
            )

    def select_card(self, session_id: str, card: str) -> InputResult:
        parsed = parse_card(card)
        return self._apply(session_id, lambda recorder: recorder.select_card(parsed))

    async def select_card_async(self, session_id: str, card: str) -> InputResult:
        return await run_blocking(self.select_card, session_id, card)

    def act(self, session_id: str, action: str) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.choose_action(action))

    async def act_async(self, session_id: str, action: str) -> InputResult:
        return await run_blocking(self.act, session_id, action)

    def submit_raise(self, session_id: str, amount: float | None) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.submit_raise(amount))

    async def submit_raise_async(self, session_id: str, amount: float | None) -> InputResult:
        return await run_blocking(self.submit_raise, session_id, amount)

    def cancel_raise(self, session_id: str) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.cancel_raise())

    async def cancel_raise_async(self, session_id: str) -> InputResult:
        return await run_blocking(self.cancel_raise, session_id)

    def observe(self, session_id: str, text: str | None) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.set_observations(text))

    async def observe_async(self, session_id: str, text: str | None) -> InputResult:
        return await run_blocking(self.observe, session_id, text)

    def advance(self, session_id: str) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.advance())

    async def advance_async(self, session_id: str) -> InputResult:
        return await run_blocking(self.advance, session_id)

    def retreat(self, session_id: str) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.retreat())

    async def retreat_async(self, session_id: str) -> InputResult:
        return await run_blocking(self.retreat, session_id)

    def reopen(self, session_id: str, street: str) -> InputResult:
        return self._apply(session_id, lambda recorder: recorder.back_to_street(street))

    async def reopen_async(self, session_id: str, street: str) -> InputResult:
        return await run_blocking(self.reopen, session_id, street)

    def finalize(self, session_id: str) -> SaveOutcomePayload:
        with self._lock:
            state = self._require_session(session_id)
            result: SaveResult = state.recorder.finalize(self.store)
        logger.debug("hand finalize", extra={"session_id": session_id, "ok": result.ok, "hand_id": result.hand_id})
        return SaveOutcomePayload(ok=result.ok, hand_id=result.hand_id, error=result.error, missing=list(result.missing))

    async def finalize_async(self, session_id: str) -> SaveOutcomePayload:
        return await run_blocking(self.finalize, session_id)

    def discard_session(self, session_id: str) -> None:
        with self._lock:
            self._require_session(session_id)
            self._sessions.pop(session_id, None)

    def _require_session(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise KeyError(f"session '{session_id}' not found")
        return state


def _accepted(outcome: Any) -> bool:
    # Selection/action outcomes carry ``accepted``; step moves carry ``moved``.
    accepted = getattr(outcome, "accepted", None)
    if accepted is not None:
        return bool(accepted)
    if getattr(outcome, "street_complete", False):
        return True
    return bool(getattr(outcome, "moved", True))


def _sid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))
