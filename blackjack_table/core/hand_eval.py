"""Hand totals for blackjack."""
from __future__ import annotations

from typing import Sequence

from .cards import Card

FACE_RANKS = frozenset({"J", "Q", "K"})


def card_value(card: Card) -> int:
    if card.rank == "A":
        return 11
    if card.rank in FACE_RANKS:
        return 10
    return int(card.rank)


def _total_and_soft_aces(cards: Sequence[Card]) -> tuple[int, int]:
    total = sum(card_value(card) for card in cards)
    soft_aces = sum(1 for card in cards if card.rank == "A")
    while total > 21 and soft_aces:
        total -= 10
        soft_aces -= 1
    return total, soft_aces


def hand_total(cards: Sequence[Card]) -> int:
    """Return the best total for ``cards``.

    Aces count 11 and are demoted to 1, one at a time, while the hand is
    over 21. The result is the highest total not above 21 when one exists,
    otherwise the fully hard total.
    """

    return _total_and_soft_aces(cards)[0]


def is_soft(cards: Sequence[Card]) -> bool:
    """True when at least one Ace is still counted as 11."""

    return _total_and_soft_aces(cards)[1] > 0


def is_bust(cards: Sequence[Card]) -> bool:
    return hand_total(cards) > 21


def is_pair(cards: Sequence[Card]) -> bool:
    return len(cards) == 2 and cards[0].rank == cards[1].rank


__all__ = ["card_value", "hand_total", "is_soft", "is_bust", "is_pair"]
