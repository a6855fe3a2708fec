"""Read-only views of the round handed to the presentation layer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .cards import Card
from .game import Phase, PlayerHand, RoundState
from .hand_eval import hand_total

BANKRUPT_STATUS = "bankrupt"


@dataclass(frozen=True)
class HandView:
    label: str
    cards: Tuple[Card, ...]
    total: int
    bet: int
    outcome: Optional[str]
    payout: int

    @classmethod
    def from_hand(cls, hand: PlayerHand) -> "HandView":
        return cls(
            label=hand.label,
            cards=tuple(hand.cards),
            total=hand.total,
            bet=hand.bet,
            outcome=hand.outcome.label if hand.outcome else None,
            payout=hand.payout,
        )


@dataclass(frozen=True)
class TableSnapshot:
    """Everything a view needs to render one moment of the round."""

    round_number: int
    phase: Phase
    status: str
    active_hand: int
    hands: Tuple[HandView, ...]
    dealer_cards: Tuple[Optional[Card], ...]
    dealer_hidden: bool
    dealer_total: int
    balance: int
    message: str
    legal_actions: FrozenSet[str]

    @property
    def bets(self) -> Tuple[int, ...]:
        return tuple(hand.bet for hand in self.hands)

    @property
    def is_bankrupt(self) -> bool:
        return self.status == BANKRUPT_STATUS

    def can(self, action: str) -> bool:
        return action in self.legal_actions


def take_snapshot(state: RoundState) -> TableSnapshot:
    """Capture ``state``; the dealer's hole card is masked as ``None`` until revealed."""

    hidden = not state.dealer_revealed
    if hidden:
        dealer_cards = tuple(card if idx != 1 else None for idx, card in enumerate(state.dealer_cards))
        dealer_total = hand_total(state.dealer_cards[:1])
    else:
        dealer_cards = tuple(state.dealer_cards)
        dealer_total = state.dealer_total
    return TableSnapshot(
        round_number=state.round_number,
        phase=state.phase,
        status=BANKRUPT_STATUS if state.is_bankrupt else state.phase.name.lower(),
        active_hand=state.active_hand,
        hands=tuple(HandView.from_hand(hand) for hand in state.hands),
        dealer_cards=dealer_cards,
        dealer_hidden=hidden,
        dealer_total=dealer_total,
        balance=state.balance,
        message=state.message,
        legal_actions=state.legal_actions(),
    )


__all__ = ["HandView", "TableSnapshot", "take_snapshot", "BANKRUPT_STATUS"]
