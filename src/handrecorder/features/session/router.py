from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...core.models import STREETS
from .service import HandConfig, RecorderSessionManager

__all__ = [
    "ActionRequest",
    "CardRequest",
    "CreateHandRequest",
    "ObservationsRequest",
    "RaiseRequest",
    "ReopenRequest",
    "create_session_routers",
]

T = TypeVar("T")


class CreateHandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    game_style: str | None = Field(None, alias="gameStyle")
    blinds: str | None = None
    small_blind: float | None = Field(None, alias="smallBlind")
    big_blind: float | None = Field(None, alias="bigBlind")
    player_count: int | None = Field(None, alias="playerCount")
    position: str | None = None
    stack_size: float | None = Field(None, alias="stackSize")

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: dict[str, object]) -> dict[str, object]:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for key in ("smallBlind", "bigBlind", "playerCount", "stackSize"):
            value = cleaned.get(key)
            if value == "":
                cleaned[key] = None
        for key in ("gameStyle", "position", "blinds"):
            value = cleaned.get(key)
            if isinstance(value, str):
                value = value.strip()
                cleaned[key] = value or None
        return cleaned

    @model_validator(mode="after")
    def _normalize(self) -> CreateHandRequest:
        if self.game_style:
            self.game_style = self.game_style.lower()
        if self.position:
            self.position = self.position.upper()
        return self

    def to_config(self) -> HandConfig:
        return HandConfig(
            game_style=self.game_style,
            table_size=self.player_count,
            hero_seat=self.position,
            stack_size=self.stack_size,
            blinds=self.blinds,
            small_blind=self.small_blind,
            big_blind=self.big_blind,
        )


class CardRequest(BaseModel):
    card: str


class ActionRequest(BaseModel):
    action: str

    @model_validator(mode="after")
    def _normalize(self) -> ActionRequest:
        self.action = self.action.strip().capitalize()
        return self


class RaiseRequest(BaseModel):
    amount: float | None = None


class ObservationsRequest(BaseModel):
    text: str | None = None


class ReopenRequest(BaseModel):
    street: str


async def _guard(call: Callable[[], Awaitable[T]]) -> T:
    try:
        return await call()
    except KeyError as exc:
        raise HTTPException(404, str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


def _json(data: dict[str, object]) -> JSONResponse:
    return JSONResponse(data)


def create_session_routers(manager: RecorderSessionManager) -> tuple[APIRouter, APIRouter]:
    router_v1 = APIRouter(prefix="/api/v1/hand", tags=["hand"])
    router_legacy = APIRouter(prefix="/api/hand", tags=["hand-legacy"])

    for router in (router_v1, router_legacy):
        _register(router, manager)
    return router_v1, router_legacy


def _register(router: APIRouter, manager: RecorderSessionManager) -> None:
    @router.post("")
    async def create_hand(body: CreateHandRequest) -> JSONResponse:
        sid = await _guard(lambda: manager.create_session_async(body.to_config()))
        state = await manager.state_async(sid)
        return _json({"session": sid, "state": state.to_dict()})

    @router.get("/{sid}")
    async def get_state(sid: str) -> JSONResponse:
        state = await _guard(lambda: manager.state_async(sid))
        return _json(state.to_dict())

    @router.post("/{sid}/card")
    async def select_card(sid: str, body: CardRequest) -> JSONResponse:
        result = await _guard(lambda: manager.select_card_async(sid, body.card))
        return _json(result.to_dict())

    @router.post("/{sid}/action")
    async def choose_action(sid: str, body: ActionRequest) -> JSONResponse:
        result = await _guard(lambda: manager.act_async(sid, body.action))
        return _json(result.to_dict())

    @router.post("/{sid}/raise")
    async def submit_raise(sid: str, body: RaiseRequest) -> JSONResponse:
        result = await _guard(lambda: manager.submit_raise_async(sid, body.amount))
        return _json(result.to_dict())

    @router.post("/{sid}/raise/cancel")
    async def cancel_raise(sid: str) -> JSONResponse:
        result = await _guard(lambda: manager.cancel_raise_async(sid))
        return _json(result.to_dict())

    @router.post("/{sid}/observations")
    async def observe(sid: str, body: ObservationsRequest) -> JSONResponse:
        result = await _guard(lambda: manager.observe_async(sid, body.text))
        return _json(result.to_dict())

    @router.post("/{sid}/advance")
    async def advance(sid: str) -> JSONResponse:
        result = await _guard(lambda: manager.advance_async(sid))
        return _json(result.to_dict())

    @router.post("/{sid}/retreat")
    async def retreat(sid: str) -> JSONResponse:
        result = await _guard(lambda: manager.retreat_async(sid))
        return _json(result.to_dict())

    @router.post("/{sid}/reopen")
    async def reopen(sid: str, body: ReopenRequest) -> JSONResponse:
        street = body.street.strip().lower()
        if street not in STREETS:
            raise HTTPException(400, f"unknown street '{body.street}'")
        result = await _guard(lambda: manager.reopen_async(sid, street))
        return _json(result.to_dict())

    @router.post("/{sid}/finalize")
    async def finalize(sid: str) -> JSONResponse:
        outcome = await _guard(lambda: manager.finalize_async(sid))
        return _json(outcome.to_dict())
