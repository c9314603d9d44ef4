from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

RANKS = "AKQJT98765432"
SUITS = "shdc"  # spades, hearts, diamonds, clubs

_SUIT_SYMBOLS = {"♠": "s", "♥": "h", "♦": "d", "♣": "c"}
_SYMBOL_FOR_SUIT = {value: key for key, value in _SUIT_SYMBOLS.items()}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def symbol(self) -> str:
        return _SYMBOL_FOR_SUIT[self.suit]

    def __str__(self) -> str:
        return self.label


def parse_card(raw: str) -> Card:
    """Parse ``"As"``, ``"aS"``, ``"A♠"`` or ``"10h"`` into a :class:`Card`."""

    token = (raw or "").strip()
    if len(token) < 2:
        raise ValueError(f"Invalid card label: {raw!r}")
    rank, suit = token[:-1].upper(), token[-1]
    if rank == "10":
        rank = "T"
    suit = _SUIT_SYMBOLS.get(suit, suit.lower())
    return Card(rank, suit)


def parse_cards(raw: Iterable[str]) -> list[Card]:
    return [parse_card(token) for token in raw]


def cards_to_labels(cards: Iterable[Card]) -> list[str]:
    return [card.label for card in cards]

