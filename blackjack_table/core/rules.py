"""Blackjack table rules and the dealer's drawing policy."""
from __future__ import annotations

from typing import Sequence

from .cards import Card
from .hand_eval import hand_total

BLACKJACK_TOTAL = 21
DEALER_STAND_TOTAL = 17
# Blackjack pays 5:2 of the stake back, i.e. 2.5x the bet.
BLACKJACK_PAYOUT = (5, 2)
WIN_PAYOUT = 2
PUSH_PAYOUT = 1
MIN_BET = 1


def dealer_should_hit(cards: Sequence[Card]) -> bool:
    """Dealer draws below 17 and stands on every 17, soft or hard."""

    return hand_total(cards) < DEALER_STAND_TOTAL


def blackjack_payout(bet: int) -> int:
    numerator, denominator = BLACKJACK_PAYOUT
    return bet * numerator // denominator


def bet_is_valid(amount: int, balance: int) -> bool:
    return MIN_BET <= amount <= balance


__all__ = [
    "BLACKJACK_TOTAL",
    "DEALER_STAND_TOTAL",
    "BLACKJACK_PAYOUT",
    "WIN_PAYOUT",
    "PUSH_PAYOUT",
    "MIN_BET",
    "dealer_should_hit",
    "blackjack_payout",
    "bet_is_valid",
]
