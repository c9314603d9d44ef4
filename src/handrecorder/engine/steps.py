"""Linear, re-enterable street wizard.

A street is recorded as an ordered list of steps: the cards, one action per
seat still in the hand, then free-text observations.  The sequencer only
tracks the position; whether a step's data is complete and how that data is
thrown away belong to its owner (see :class:`StepData`).

Each step carries a ``complete`` flag.  Cards and action steps mirror their
data.  The observations step is optional, so it never blocks, but it only
counts as done once the user moves past it.

Going back is destructive: :meth:`StepSequencer.retreat` discards the data of
the step it lands on so the user re-enters it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol

from ..core.models import STEP_ACTION, STEP_CARDS, STEP_OBSERVATIONS, Step

__all__ = ["Advance", "Retreat", "StepData", "StepSequencer", "build_steps"]

logger = logging.getLogger(__name__)


class StepData(Protocol):
    def is_step_complete(self, step: Step) -> bool: ...

    def discard(self, step: Step) -> list[str]: ...


@dataclass(frozen=True)
class Advance:
    moved: bool
    index: int
    street_complete: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class Retreat:
    moved: bool
    index: int
    step: Step | None = None
    discarded: list[str] = field(default_factory=list)
    reason: str | None = None


def build_steps(active_seats: Sequence[str]) -> list[Step]:
    steps = [Step(id=1, kind=STEP_CARDS)]
    steps.extend(Step(id=2 + idx, kind=STEP_ACTION, seat=seat) for idx, seat in enumerate(active_seats))
    steps.append(Step(id=2 + len(active_seats), kind=STEP_OBSERVATIONS))
    return steps


class StepSequencer:
    def __init__(self, steps: Sequence[Step], data: StepData) -> None:
        if not steps:
            raise ValueError("a street needs at least one step")
        self._steps = [replace(step) for step in steps]
        self._data = data
        self._index = 0
        self.sync()

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Step:
        self.sync()
        return replace(self._steps[self._index])

    @property
    def steps(self) -> list[Step]:
        self.sync()
        return [replace(step) for step in self._steps]

    @property
    def current_seat(self) -> str | None:
        step = self._steps[self._index]
        return step.seat if step.kind == STEP_ACTION else None

    def is_step_complete(self, step: Step) -> bool:
        """Whether ``step`` holds everything it needs to move on."""

        if step.kind == STEP_OBSERVATIONS:
            return True
        return self._data.is_step_complete(step)

    def sync(self) -> None:
        for step in self._steps:
            if step.kind != STEP_OBSERVATIONS:
                step.complete = self._data.is_step_complete(step)

    def all_complete(self) -> bool:
        self.sync()
        return all(step.complete for step in self._steps)

    def seek_first_incomplete(self) -> int:
        """Jump to the first incomplete step (or the last step when all are done)."""

        self.sync()
        for idx, step in enumerate(self._steps):
            if not step.complete:
                self._index = idx
                break
        else:
            self._index = len(self._steps) - 1
        return self._index

    def advance(self) -> Advance:
        self.sync()
        current = self._steps[self._index]
        if not self.is_step_complete(current):
            return Advance(False, self._index, reason="current step is incomplete")
        current.complete = True
        for idx in range(self._index + 1, len(self._steps)):
            if not self._steps[idx].complete:
                logger.debug("step advanced", extra={"from_index": self._index, "to_index": idx})
                self._index = idx
                return Advance(True, idx)
        if all(step.complete for step in self._steps):
            return Advance(False, self._index, street_complete=True)
        return Advance(False, self._index, reason="earlier steps are incomplete")

    def retreat(self) -> Retreat:
        """Step back once, discarding the data captured by the step we land on."""

        if self._index == 0:
            return Retreat(False, 0, reason="already at the first step")
        self._index -= 1
        target = self._steps[self._index]
        discarded = self._data.discard(replace(target))
        target.complete = False
        logger.debug(
            "step retreated",
            extra={"index": self._index, "kind": target.kind, "seat": target.seat, "discarded": discarded},
        )
        return Retreat(True, self._index, replace(target), discarded)
