from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...core.record import HandRecord, RecordAction, RecordCard

__all__ = [
    "ActionPayload",
    "HandRecord",
    "HandStatePayload",
    "InputResult",
    "RecordAction",
    "RecordCard",
    "SaveOutcomePayload",
    "StepPayload",
    "StoredHandPayload",
    "TableViewPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ActionPayload(_APIModel):
    position: str
    action: str | None = None
    amount: float | None = None


class StepPayload(_APIModel):
    id: int
    kind: str
    seat: str | None = None
    complete: bool


class TableViewPayload(_APIModel):
    street: str
    positions: list[str]
    actions: list[ActionPayload]
    step_kind: str
    step_index: int
    steps: list[StepPayload]
    acting_seat: str | None = None
    hero_seat: str | None = None
    hole_cards: list[str]
    community_cards: list[str]
    selected_cards: list[str]
    card_target: int
    stack_size: float | None = None
    small_blind: float
    big_blind: float
    highest_bet: float
    pending_raise_seat: str | None = None
    observations: str = ""


class HandStatePayload(_APIModel):
    session: str
    street: str | None = None
    ready: bool
    finalized: bool
    view: TableViewPayload | None = None
    missing: list[str] = Field(default_factory=list)


class InputResult(_APIModel):
    accepted: bool
    reason: str | None = None
    discarded: list[str] | None = None
    street_completed: str | None = None
    next_street: str | None = None
    state: HandStatePayload


class SaveOutcomePayload(_APIModel):
    ok: bool
    hand_id: str | None = None
    error: str | None = None
    missing: list[str] = Field(default_factory=list)


class StoredHandPayload(_APIModel):
    id: str
    created_at: str
    input: HandRecord
