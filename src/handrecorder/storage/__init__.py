"""Persistence collaborators for finished hands."""

from __future__ import annotations

import os
from pathlib import Path

from .base import HandStore, SaveResult, StoredHand
from .jsonl import JsonlHandStore
from .memory import InMemoryHandStore

__all__ = [
    "HandStore",
    "InMemoryHandStore",
    "JsonlHandStore",
    "SaveResult",
    "StoredHand",
    "store_from_env",
]

_ENV_VAR = "HANDRECORDER_STORE"


def store_from_env() -> HandStore:
    """JSONL store at ``$HANDRECORDER_STORE`` when set, otherwise in memory."""

    raw = os.environ.get(_ENV_VAR, "").strip()
    if raw:
        return JsonlHandStore(Path(raw).expanduser())
    return InMemoryHandStore()
