from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .base import SaveResult, StoredHand, checked_record, new_hand_id, utc_now

logger = logging.getLogger(__name__)


class JsonlHandStore:
    """Append-only store: one ``{"id", "created_at", "input"}`` object per line."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def save_hand(self, record: Mapping[str, Any]) -> SaveResult:
        try:
            data = checked_record(record)
        except ValidationError as exc:
            logger.warning("Refusing invalid hand record: %s", exc)
            return SaveResult.failure(f"invalid hand record ({exc.error_count()} problems)")
        stored = StoredHand(id=new_hand_id(), created_at=utc_now(), input=data)
        line = json.dumps({"id": stored.id, "created_at": stored.created_at, "input": stored.input}, ensure_ascii=False)
        try:
            with self._lock:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
        except OSError as exc:
            logger.warning("Failed to save hand to %s: %s", self.path, exc)
            return SaveResult.failure(f"could not write {self.path}: {exc}")
        logger.debug("hand saved", extra={"hand_id": stored.id, "path": str(self.path)})
        return SaveResult(ok=True, hand_id=stored.id)

    def _load(self) -> list[StoredHand]:
        if not self.path.exists():
            return []
        hands: list[StoredHand] = []
        with self._lock, self.path.open("r", encoding="utf-8") as fh:
            for lineno, raw in enumerate(fh, 1):
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    data = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning("Skipping malformed line %d in %s", lineno, self.path)
                    continue
                if not isinstance(data, dict) or "id" not in data:
                    logger.warning("Skipping malformed line %d in %s", lineno, self.path)
                    continue
                try:
                    record = checked_record(data.get("input") or {})
                except ValidationError:
                    logger.warning("Skipping invalid hand record on line %d in %s", lineno, self.path)
                    continue
                hands.append(StoredHand(id=str(data["id"]), created_at=str(data.get("created_at", "")), input=record))
        return hands

    def list_hands(self) -> list[StoredHand]:
        return sorted(self._load(), key=lambda hand: hand.created_at, reverse=True)

    def get_hand(self, hand_id: str) -> StoredHand | None:
        return next((hand for hand in self._load() if hand.id == hand_id), None)
