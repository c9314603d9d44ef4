"""Persisted hand record.

Field aliases are the stored keys.  Every record a store receives is the
``to_dict()`` of a validated :class:`HandRecord`, and stored records are read
back through the same model.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .cards import Card, parse_card
from .models import ACTIONS

__all__ = ["HandRecord", "RecordAction", "RecordCard"]


class _RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    def to_dict(self) -> dict[str, Any]:
        # Unset keys stay out of the record; explicit nulls are kept.
        return self.model_dump(by_alias=True, exclude_unset=True)


class RecordCard(_RecordModel):
    rank: str
    suit: str

    @model_validator(mode="before")
    @classmethod
    def _from_label(cls, data: Any) -> Any:
        if isinstance(data, str):
            card = parse_card(data)
            return {"rank": card.rank, "suit": card.suit}
        return data

    @model_validator(mode="after")
    def _check_card(self) -> RecordCard:
        card = parse_card(f"{self.rank}{self.suit}")
        self.rank, self.suit = card.rank, card.suit
        return self

    @classmethod
    def from_card(cls, card: Card) -> RecordCard:
        return cls(rank=card.rank, suit=card.suit)

    def to_card(self) -> Card:
        return Card(self.rank, self.suit)


class RecordAction(_RecordModel):
    position: str
    action: str | None = None
    amount: float | None = None

    @field_validator("action")
    @classmethod
    def _known_action(cls, value: str | None) -> str | None:
        if value is not None and value not in ACTIONS:
            raise ValueError(f"unknown action '{value}'")
        return value


class HandRecord(_RecordModel):
    game_style: str | None = Field(None, alias="gameStyle")
    blinds: str | None = None
    small_blind: float = Field(0.0, alias="smallBlind")
    big_blind: float = Field(0.0, alias="bigBlind")
    player_count: int = Field(6, alias="playerCount")
    positions: list[str] = Field(default_factory=list)
    position: str | None = None
    stack_size: float | None = Field(None, alias="stackSize")
    hole_cards: list[RecordCard] = Field(default_factory=list, alias="holeCards")
    flop_cards: list[RecordCard] = Field(default_factory=list, alias="flopCards")
    turn_card: RecordCard | None = Field(None, alias="turnCard")
    river_card: RecordCard | None = Field(None, alias="riverCard")
    preflop_actions: list[RecordAction] | None = Field(None, alias="preflopActions")
    flop_actions: list[RecordAction] | None = Field(None, alias="flopActions")
    turn_actions: list[RecordAction] | None = Field(None, alias="turnActions")
    river_actions: list[RecordAction] | None = Field(None, alias="riverActions")
    preflop_observations: str | None = Field(None, alias="preflopObservations")
    flop_observations: str | None = Field(None, alias="flopObservations")
    turn_observations: str | None = Field(None, alias="turnObservations")
    river_observations: str | None = Field(None, alias="riverObservations")

    def actions_for(self, street: str) -> list[RecordAction] | None:
        return getattr(self, f"{street}_actions")

    def observations_for(self, street: str) -> str | None:
        return getattr(self, f"{street}_observations")
