"""Card and deck utilities."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .errors import EmptyDeckError

SUITS = ("Hearts", "Diamonds", "Clubs", "Spades")
RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
SUIT_SYMBOLS = {"Hearts": "♥", "Diamonds": "♦", "Clubs": "♣", "Spades": "♠"}
SUIT_CODES = {"H": "Hearts", "D": "Diamonds", "C": "Clubs", "S": "Spades"}


@dataclass(frozen=True)
class Card:
    """Representation of a standard playing card."""

    rank: str
    suit: str

    def __str__(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


def create_cards() -> List[Card]:
    """Return the 52 cards in canonical, unshuffled order."""

    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


class Deck:
    """A single 52-card deck, drawn from the end."""

    def __init__(self, cards: Optional[Iterable[Card]] = None, *, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        if cards is None:
            self._cards = create_cards()
            self.shuffle()
        else:
            self._cards = list(cards)

    def shuffle(self) -> None:
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]

    def draw(self) -> Card:
        if not self._cards:
            raise EmptyDeckError("The deck is empty")
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    def remaining(self) -> Sequence[Card]:
        return tuple(self._cards)


def parse_cards(repr_cards: Iterable[str]) -> List[Card]:
    """Parse tokens such as ``"10H"`` or ``"As"`` into :class:`Card` objects."""

    cards = []
    for token in repr_cards:
        rank, suit_code = token[:-1].upper(), token[-1].upper()
        if rank not in RANKS or suit_code not in SUIT_CODES:
            raise ValueError(f"Unrecognised card token: {token!r}")
        cards.append(Card(rank, SUIT_CODES[suit_code]))
    return cards


__all__ = ["Card", "Deck", "create_cards", "parse_cards", "SUITS", "RANKS"]
