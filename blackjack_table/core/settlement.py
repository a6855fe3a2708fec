"""Per-hand outcome and payout accounting."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from .rules import BLACKJACK_TOTAL, PUSH_PAYOUT, WIN_PAYOUT


class Outcome(Enum):
    BLACKJACK = "Blackjack"
    BUST = "Bust"
    WIN = "Win"
    LOSE = "Lose"
    TIE = "Tie"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class HandResult:
    label: str
    outcome: Outcome
    payout: int

    def describe(self) -> str:
        return f"{self.label}: {self.outcome.label}"


def settle_hand(player_total: int, dealer_total: int, bet: int) -> Tuple[Outcome, int]:
    """Compare one player hand against the dealer's final total."""

    if player_total > BLACKJACK_TOTAL:
        return Outcome.BUST, 0
    if dealer_total > BLACKJACK_TOTAL or player_total > dealer_total:
        return Outcome.WIN, WIN_PAYOUT * bet
    if player_total < dealer_total:
        return Outcome.LOSE, 0
    return Outcome.TIE, PUSH_PAYOUT * bet


def summarize(results: Iterable[HandResult]) -> str:
    return "\n".join(result.describe() for result in results)


__all__ = ["Outcome", "HandResult", "settle_hand", "summarize"]
