from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..core.cards import Card

__all__ = ["CardSelection", "SelectionOutcome"]


@dataclass(frozen=True)
class SelectionOutcome:
    accepted: bool
    cards: tuple[Card, ...]
    reason: str | None = None
    removed: Card | None = None
    replaced: Card | None = None

    @property
    def count(self) -> int:
        return len(self.cards)


class CardSelection:
    """Cards picked for one cards step, capped at ``max_cards``.

    Picking a selected card removes it.  At the cap the most recent pick is
    replaced so earlier picks stay put: hole cards keep the first card, the
    flop keeps its first two, turn and river simply swap their one card.
    """

    def __init__(self, max_cards: int, cards: Iterable[Card] = ()) -> None:
        if max_cards < 1:
            raise ValueError("max_cards must be positive")
        self.max_cards = max_cards
        self._cards: list[Card] = []
        for card in cards:
            self.toggle(card)

    @property
    def cards(self) -> tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def complete(self) -> bool:
        return len(self._cards) == self.max_cards

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def toggle(self, card: Card) -> SelectionOutcome:
        if card in self._cards:
            self._cards.remove(card)
            return SelectionOutcome(True, self.cards, removed=card)
        replaced = None
        if len(self._cards) >= self.max_cards:
            replaced = self._cards.pop()
        self._cards.append(card)
        return SelectionOutcome(True, self.cards, replaced=replaced)

    def clear(self) -> list[Card]:
        dropped = list(self._cards)
        self._cards.clear()
        return dropped
