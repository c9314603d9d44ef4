from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .base import SaveResult, StoredHand, checked_record, new_hand_id, utc_now

logger = logging.getLogger(__name__)


class InMemoryHandStore:
    """Process-local store; the default when no file is configured."""

    def __init__(self) -> None:
        self._hands: list[StoredHand] = []
        self._lock = threading.Lock()

    def save_hand(self, record: Mapping[str, Any]) -> SaveResult:
        try:
            data = checked_record(record)
        except ValidationError as exc:
            logger.warning("Refusing invalid hand record: %s", exc)
            return SaveResult.failure(f"invalid hand record ({exc.error_count()} problems)")
        stored = StoredHand(id=new_hand_id(), created_at=utc_now(), input=data)
        with self._lock:
            self._hands.append(stored)
        logger.debug("hand saved", extra={"hand_id": stored.id})
        return SaveResult(ok=True, hand_id=stored.id)

    def list_hands(self) -> list[StoredHand]:
        with self._lock:
            return list(reversed(self._hands))

    def get_hand(self, hand_id: str) -> StoredHand | None:
        with self._lock:
            return next((hand for hand in self._hands if hand.id == hand_id), None)
