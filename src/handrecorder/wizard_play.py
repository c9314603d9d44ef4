"""Terminal front end for the recording wizard."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .core.cards import parse_card
from .core.models import CALL, CASH, CHECK, FOLD, RAISE, STEP_ACTION, STEP_CARDS, TOURNAMENT
from .engine.recorder import HandRecorder
from .engine.seating import DEFAULT_TABLE_SIZE, layout_for
from .engine.setup import BLIND_PRESETS, TableSetup, build_setup
from .storage import HandStore, SaveResult
from .ui.presenters import RichPresenter

logger = logging.getLogger(__name__)

_ACTION_KEYS = {"f": FOLD, "c": CALL, "k": CHECK, "r": RAISE}


class _Quit(Exception):
    pass


def _ask(input_fn: Callable[[str], str], prompt: str) -> str:
    try:
        raw = input_fn(prompt)
    except EOFError:
        raise _Quit() from None
    raw = raw.strip()
    if raw.lower() == "q":
        raise _Quit()
    return raw


def _number(raw: str) -> float | None:
    try:
        return float(raw)
    except ValueError:
        return None


def _prompt_setup(presenter: RichPresenter, input_fn: Callable[[str], str]) -> TableSetup:
    while True:
        style = (_ask(input_fn, f"Game style [{CASH}/{TOURNAMENT}] ({CASH}): ") or CASH).lower()
        blinds: str | None = None
        small: float | None = None
        big: float | None = None
        if style == CASH:
            presets = ", ".join(BLIND_PRESETS)
            blinds = _ask(input_fn, f"Blinds [{presets}] (1/2): ") or "1/2"
        else:
            small = _number(_ask(input_fn, "Small blind: "))
            big = _number(_ask(input_fn, "Big blind: "))
        size_raw = _ask(input_fn, f"Players [2-9] ({DEFAULT_TABLE_SIZE}): ")
        size = int(size_raw) if size_raw.isdigit() else DEFAULT_TABLE_SIZE
        seats = "/".join(layout_for(size))
        position = _ask(input_fn, f"Your position [{seats}]: ").upper()
        stack = _number(_ask(input_fn, "Stack size: "))
        try:
            return build_setup(
                game_style=style,
                table_size=size,
                hero_seat=position,
                stack_size=stack,
                blinds=blinds,
                small_blind=small,
                big_blind=big,
            )
        except ValueError as exc:
            for problem in str(exc).split("; "):
                presenter.warn(problem)


def _enter_cards(recorder: HandRecorder, presenter: RichPresenter, raw: str) -> None:
    street = recorder.street
    if not raw:
        presenter.warn("Enter at least one card, e.g. As")
        return
    for token in raw.split():
        try:
            card = parse_card(token)
        except ValueError as exc:
            presenter.warn(str(exc))
            return
        outcome = recorder.select_card(card)
        if not outcome.accepted:
            presenter.warn(outcome.reason or "card rejected")
            return
        session = recorder.session
        if recorder.street != street or session is None or session.current_step.kind != STEP_CARDS:
            return


def _enter_action(recorder: HandRecorder, presenter: RichPresenter, raw: str, pending: bool) -> None:
    parts = raw.split()
    if pending:
        amount = _number(parts[0]) if parts else None
        outcome = recorder.submit_raise(amount)
        if not outcome.accepted:
            presenter.warn(outcome.reason or "raise rejected")
        return
    action = _ACTION_KEYS.get(parts[0].lower()) if parts else None
    if action is None:
        presenter.warn("Choose f, c, k or r <amount>")
        return
    outcome = recorder.choose_action(action)
    if not outcome.accepted:
        presenter.warn(outcome.reason or "action rejected")
        return
    if action == RAISE and len(parts) > 1:
        _enter_action(recorder, presenter, parts[1], pending=True)


def record_hand(
    recorder: HandRecorder,
    presenter: RichPresenter,
    input_fn: Callable[[str], str] = input,
) -> bool:
    """Drive ``recorder`` until every street is recorded; False when the user quits."""

    try:
        while not recorder.ready:
            session = recorder.session
            assert session is not None
            view = session.view()
            presenter.show_view(view)
            raw = _ask(input_fn, presenter.prompt_for(view))
            if raw.lower() == "b":
                if view.pending_raise_seat:
                    recorder.cancel_raise()
                    continue
                back = recorder.retreat()
                if not back.moved:
                    presenter.warn(back.reason or "cannot go back")
                elif back.discarded:
                    presenter.message("Cleared " + ", ".join(back.discarded))
                continue
            if view.step_kind == STEP_CARDS:
                _enter_cards(recorder, presenter, raw)
            elif view.step_kind == STEP_ACTION:
                _enter_action(recorder, presenter, raw, pending=bool(view.pending_raise_seat))
            else:
                if raw:
                    recorder.set_observations(raw)
                step = recorder.advance()
                if not step.moved and not step.street_complete:
                    presenter.warn(step.reason or "cannot continue")
            change = recorder.last_change
            if change is not None:
                presenter.message(f"{change.completed.capitalize()} recorded")
    except _Quit:
        return False
    return True


def run_record(
    store: HandStore,
    *,
    no_color: bool = False,
    _input_fn: Callable[[str], str] = input,
) -> SaveResult | None:
    presenter = RichPresenter(no_color=no_color)
    presenter.start_hand()
    try:
        setup = _prompt_setup(presenter, _input_fn)
    except _Quit:
        presenter.message("Nothing saved.")
        return None
    recorder = HandRecorder(setup)
    if not record_hand(recorder, presenter, _input_fn):
        presenter.message("Nothing saved.")
        return None
    result = recorder.finalize(store)
    if result.ok:
        presenter.saved(result.hand_id)
    else:
        presenter.warn(result.error or "save failed")
        for field in result.missing:
            presenter.warn(f"missing: {field}")
    return result
