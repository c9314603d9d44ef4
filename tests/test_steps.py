from __future__ import annotations

from handrecorder.core.models import STEP_ACTION, STEP_CARDS, STEP_OBSERVATIONS, Step
from handrecorder.engine.steps import StepSequencer, build_steps


class _Data:
    def __init__(self) -> None:
        self.done: set[int] = set()
        self.discarded: list[int] = []

    def is_step_complete(self, step: Step) -> bool:
        return step.id in self.done

    def discard(self, step: Step) -> list[str]:
        self.done.discard(step.id)
        self.discarded.append(step.id)
        return [f"step {step.id}"]


def test_build_steps_layout() -> None:
    steps = build_steps(["BB", "BTN"])
    assert [(s.id, s.kind, s.seat) for s in steps] == [
        (1, STEP_CARDS, None),
        (2, STEP_ACTION, "BB"),
        (3, STEP_ACTION, "BTN"),
        (4, STEP_OBSERVATIONS, None),
    ]


def test_advance_is_blocked_until_current_step_is_complete() -> None:
    data = _Data()
    seq = StepSequencer(build_steps(["BB", "BTN"]), data)
    blocked = seq.advance()
    assert blocked.moved is False
    assert blocked.reason
    assert seq.index == 0

    data.done.add(1)
    assert seq.advance().index == 1
    assert seq.current_seat == "BB"


def test_street_completes_only_after_leaving_observations() -> None:
    data = _Data()
    data.done.update({1, 2, 3})
    seq = StepSequencer(build_steps(["BB", "BTN"]), data)
    # Completed steps are skipped on the way forward.
    assert seq.advance().index == 3
    assert seq.current.kind == STEP_OBSERVATIONS
    assert seq.all_complete() is False

    done = seq.advance()
    assert done.street_complete is True
    assert seq.all_complete() is True


def test_retreat_discards_the_step_it_lands_on() -> None:
    data = _Data()
    data.done.update({1, 2})
    seq = StepSequencer(build_steps(["BB", "BTN"]), data)
    assert seq.advance().index == 2

    back = seq.retreat()
    assert back.moved is True
    assert back.index == 1
    assert back.step is not None and back.step.seat == "BB"
    assert back.discarded == ["step 2"]
    assert data.discarded == [2]
    assert seq.steps[1].complete is False
    assert seq.advance().moved is False


def test_retreat_then_reenter_restores_position() -> None:
    data = _Data()
    data.done.add(1)
    seq = StepSequencer(build_steps(["BB", "BTN"]), data)
    seq.advance()
    data.done.add(2)
    assert seq.advance().index == 2
    seq.retreat()
    assert seq.index == 1
    data.done.add(2)
    assert seq.advance().index == 2


def test_retreat_at_first_step_is_rejected() -> None:
    data = _Data()
    seq = StepSequencer(build_steps(["BB"]), data)
    back = seq.retreat()
    assert back.moved is False
    assert back.reason
    assert data.discarded == []


def test_seek_first_incomplete() -> None:
    data = _Data()
    data.done.update({1, 2})
    seq = StepSequencer(build_steps(["BB", "BTN"]), data)
    assert seq.seek_first_incomplete() == 2
    data.done.add(3)
    assert seq.seek_first_incomplete() == 3
