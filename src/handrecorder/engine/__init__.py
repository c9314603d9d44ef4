"""Street sequencing and acting-order engine."""

from .aggregate import HandAggregate, StreetResult
from .card_selection import CardSelection, SelectionOutcome
from .folds import folded_seats
from .recorder import HandRecorder, StreetChange
from .seating import TABLE_LAYOUTS, layout_for, phase_for, seat_order, street_order
from .setup import BLIND_PRESETS, TableSetup, build_setup, validate_setup
from .steps import Advance, Retreat, StepSequencer, build_steps
from .street import StreetSession, TableView
from .tracker import ActionOutcome, StreetActionTracker

__all__ = [
    "ActionOutcome",
    "Advance",
    "BLIND_PRESETS",
    "CardSelection",
    "HandAggregate",
    "HandRecorder",
    "Retreat",
    "SelectionOutcome",
    "StepSequencer",
    "StreetActionTracker",
    "StreetChange",
    "StreetResult",
    "StreetSession",
    "TABLE_LAYOUTS",
    "TableSetup",
    "TableView",
    "build_setup",
    "build_steps",
    "folded_seats",
    "layout_for",
    "phase_for",
    "seat_order",
    "street_order",
    "validate_setup",
]
