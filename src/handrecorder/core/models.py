from __future__ import annotations

from dataclasses import dataclass

# Seat labels, earliest position first.
UTG = "UTG"
UTG1 = "UTG+1"
UTG2 = "UTG+2"
LJ = "LJ"
HJ = "HJ"
CO = "CO"
BTN = "BTN"
SB = "SB"
BB = "BB"

PREFLOP = "preflop"
FLOP = "flop"
TURN = "turn"
RIVER = "river"

STREETS: tuple[str, ...] = (PREFLOP, FLOP, TURN, RIVER)

# Cards the user enters on each street: hole cards preflop, then the board.
REQUIRED_CARDS: dict[str, int] = {PREFLOP: 2, FLOP: 3, TURN: 1, RIVER: 1}

PHASE_PREFLOP = "preflop"
PHASE_POSTFLOP = "postflop"

FOLD = "Fold"
CALL = "Call"
RAISE = "Raise"
CHECK = "Check"

ACTIONS: tuple[str, ...] = (FOLD, CALL, RAISE, CHECK)

STEP_CARDS = "cards"
STEP_ACTION = "action"
STEP_OBSERVATIONS = "observations"

CASH = "cash"
TOURNAMENT = "tournament"

GAME_STYLES: tuple[str, ...] = (CASH, TOURNAMENT)


def street_index(street: str) -> int:
    try:
        return STREETS.index(street)
    except ValueError:
        raise ValueError(f"unknown street '{street}'") from None


def next_street(street: str) -> str | None:
    idx = street_index(street)
    return STREETS[idx + 1] if idx + 1 < len(STREETS) else None


@dataclass(frozen=True)
class PlayerAction:
    """One seat's action on a street; ``amount`` is only kept for calls and raises."""

    seat: str
    action: str | None = None
    amount: float | None = None

    def __post_init__(self) -> None:
        if self.action not in (CALL, RAISE) and self.amount is not None:
            object.__setattr__(self, "amount", None)

    @property
    def is_fold(self) -> bool:
        return self.action == FOLD


@dataclass
class Step:
    """One unit of the street wizard."""

    id: int
    kind: str
    seat: str | None = None
    complete: bool = False
