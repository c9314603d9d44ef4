"""Seat layouts and acting order shared by every street.

Each table size uses a fixed subset of the nine seat labels.  The acting
order for a street is that layout rotated to start at the first seat to act:
the earliest position preflop, the small blind after the flop.  Keeping the
rules here means the street controllers never re-derive them.
"""

from __future__ import annotations

from ..core.models import (
    BB,
    BTN,
    CO,
    FLOP,
    HJ,
    LJ,
    PHASE_POSTFLOP,
    PHASE_PREFLOP,
    PREFLOP,
    RIVER,
    SB,
    STREETS,
    TURN,
    UTG,
    UTG1,
    UTG2,
)

DEFAULT_TABLE_SIZE = 6

TABLE_LAYOUTS: dict[int, tuple[str, ...]] = {
    2: (BTN, BB),
    3: (BTN, SB, BB),
    4: (CO, BTN, SB, BB),
    5: (HJ, CO, BTN, SB, BB),
    6: (UTG, HJ, CO, BTN, SB, BB),
    7: (UTG, UTG1, HJ, CO, BTN, SB, BB),
    8: (UTG, UTG1, LJ, HJ, CO, BTN, SB, BB),
    9: (UTG, UTG1, UTG2, LJ, HJ, CO, BTN, SB, BB),
}

_PHASES = {PREFLOP: PHASE_PREFLOP, FLOP: PHASE_POSTFLOP, TURN: PHASE_POSTFLOP, RIVER: PHASE_POSTFLOP}


def layout_for(table_size: int) -> tuple[str, ...]:
    """Return the fixed seat layout, falling back to six-max for unsupported sizes."""

    return TABLE_LAYOUTS.get(table_size, TABLE_LAYOUTS[DEFAULT_TABLE_SIZE])


def phase_for(street: str) -> str:
    try:
        return _PHASES[street]
    except KeyError:
        raise ValueError(f"unknown street '{street}'; expected one of {STREETS}") from None


def _rotate(layout: tuple[str, ...], start: int) -> tuple[str, ...]:
    return layout[start:] + layout[:start]


def seat_order(table_size: int, phase: str) -> tuple[str, ...]:
    """Acting order for ``table_size`` seats in ``phase``."""

    layout = layout_for(table_size)
    if phase == PHASE_PREFLOP:
        # Short-handed layouts have no UTG; their first seat already opens the action.
        if UTG not in layout:
            return layout
        return _rotate(layout, layout.index(UTG))
    if phase == PHASE_POSTFLOP:
        # Heads-up has no SB label (the button posts it); the raw layout is kept.
        if len(layout) == 2:
            return layout
        return _rotate(layout, layout.index(SB))
    raise ValueError(f"unknown phase '{phase}'")


def street_order(table_size: int, street: str) -> tuple[str, ...]:
    return seat_order(table_size, phase_for(street))
