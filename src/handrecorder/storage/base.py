from __future__ import annotations

import secrets
import string
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from ..core.record import HandRecord

__all__ = ["HandStore", "SaveResult", "StoredHand", "checked_record", "new_hand_id", "utc_now"]


@dataclass(frozen=True)
class SaveResult:
    """Outcome of handing a finished hand to a store."""

    ok: bool
    hand_id: str | None = None
    error: str | None = None
    missing: tuple[str, ...] = ()

    @classmethod
    def failure(cls, error: str, *, missing: tuple[str, ...] = ()) -> SaveResult:
        return cls(ok=False, error=error, missing=missing)


@dataclass(frozen=True)
class StoredHand:
    id: str
    created_at: str
    input: dict[str, Any] = field(default_factory=dict)


class HandStore(Protocol):
    def save_hand(self, record: Mapping[str, Any]) -> SaveResult: ...

    def list_hands(self) -> list[StoredHand]: ...

    def get_hand(self, hand_id: str) -> StoredHand | None: ...


def new_hand_id(length: int = 12) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def checked_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Normalise ``record`` through :class:`HandRecord`; raises ``pydantic.ValidationError``."""

    return HandRecord.model_validate(dict(record) if isinstance(record, Mapping) else record).to_dict()
