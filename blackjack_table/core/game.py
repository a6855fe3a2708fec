"""Round state representation and transitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, List, Optional

from .cards import Card, Deck
from .errors import (
    EmptyDeckError,
    IllegalActionError,
    InsufficientFundsForSplitError,
    InvalidBetError,
)
from .hand_eval import hand_total, is_pair
from .rules import BLACKJACK_TOTAL, bet_is_valid, blackjack_payout, dealer_should_hit
from .settlement import HandResult, Outcome, settle_hand, summarize

MAIN_HAND = "Main hand"
SPLIT_HAND = "Split hand"

PLACE_BET = "place_bet"
HIT = "hit"
STAND = "stand"
ACCEPT_SPLIT = "accept_split"
DECLINE_SPLIT = "decline_split"

BUST_MESSAGE = "BUST"
BLACKJACK_MESSAGE = "BLACKJACK"
DEALER_TURN_MESSAGE = "Dealer's turn..."
SPLIT_OFFER_MESSAGE = "Split your pair?"
BANKRUPT_MESSAGE = "You are out of money"


class Phase(Enum):
    BETTING = auto()
    PLAYER_TURN = auto()
    SPLIT_DECISION = auto()
    DEALER_TURN = auto()
    SETTLEMENT = auto()


@dataclass
class PlayerHand:
    label: str
    cards: List[Card] = field(default_factory=list)
    bet: int = 0
    outcome: Optional[Outcome] = None
    payout: int = 0

    @property
    def total(self) -> int:
        return hand_total(self.cards)

    @property
    def resolved(self) -> bool:
        return self.outcome is not None

    def result(self) -> HandResult:
        if self.outcome is None:
            raise IllegalActionError(f"{self.label} has not been resolved")
        return HandResult(self.label, self.outcome, self.payout)


@dataclass
class RoundState:
    """Mutable state for a single-player blackjack table.

    Every public transition either completes fully or raises a
    :class:`~blackjack_table.core.errors.GameError` before touching any
    field, so a caller never sees a half-applied action.
    """

    balance: int
    deck: Deck = field(default_factory=Deck)
    phase: Phase = Phase.BETTING
    hands: List[PlayerHand] = field(default_factory=lambda: [PlayerHand(MAIN_HAND)])
    active_hand: int = 0
    dealer_cards: List[Card] = field(default_factory=list)
    dealer_revealed: bool = False
    split_offered: bool = False
    message: str = ""
    round_number: int = 0

    # -- round lifecycle -------------------------------------------------

    def new_round(self, deck: Optional[Deck] = None) -> None:
        """Reset everything except the balance and deal the opening cards."""

        deck = deck if deck is not None else Deck()
        if len(deck) < 4:
            raise EmptyDeckError("Not enough cards to deal a round")
        player = [deck.draw(), deck.draw()]
        dealer = [deck.draw(), deck.draw()]
        self.deck = deck
        self.hands = [PlayerHand(MAIN_HAND, player)]
        self.dealer_cards = dealer
        self.active_hand = 0
        self.dealer_revealed = False
        self.split_offered = False
        self.phase = Phase.BETTING
        self.round_number += 1
        self.message = BANKRUPT_MESSAGE if self.is_bankrupt else ""

    def abort_round(self, reason: str) -> None:
        """Refund every open bet and close the round without a result."""

        if self.phase in (Phase.PLAYER_TURN, Phase.SPLIT_DECISION, Phase.DEALER_TURN):
            for hand in self.hands:
                if not hand.resolved:
                    self.balance += hand.bet
                    hand.payout = hand.bet
        self.phase = Phase.SETTLEMENT
        self.message = reason

    # -- queries ---------------------------------------------------------

    @property
    def is_split(self) -> bool:
        return len(self.hands) > 1

    @property
    def is_bankrupt(self) -> bool:
        return self.phase == Phase.BETTING and self.balance <= 0

    @property
    def current_hand(self) -> PlayerHand:
        return self.hands[self.active_hand]

    @property
    def dealer_total(self) -> int:
        return hand_total(self.dealer_cards)

    def legal_actions(self) -> FrozenSet[str]:
        if self.phase == Phase.BETTING:
            return frozenset() if self.is_bankrupt else frozenset({PLACE_BET})
        if self.phase == Phase.PLAYER_TURN:
            return frozenset({HIT, STAND})
        if self.phase == Phase.SPLIT_DECISION:
            return frozenset({ACCEPT_SPLIT, DECLINE_SPLIT})
        return frozenset()

    def _require(self, phase: Phase, action: str) -> None:
        if self.phase != phase:
            raise IllegalActionError(f"Cannot {action.replace('_', ' ')} during {self.phase.name.lower()}")

    # -- player actions --------------------------------------------------

    def place_bet(self, amount: int) -> None:
        self._require(Phase.BETTING, PLACE_BET)
        if self.is_bankrupt:
            raise InvalidBetError(BANKRUPT_MESSAGE)
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBetError("Bet must be a whole number")
        if not bet_is_valid(amount, self.balance):
            raise InvalidBetError(f"Bet must be between 1 and {self.balance}")
        self.balance -= amount
        self.hands[0].bet = amount
        self.message = ""
        self._enter_hand(0)

    def offer_split(self) -> bool:
        """Move to the split decision if the untouched main hand is a pair.

        The offer is made at most once per round; a decline is final.
        """

        if self.phase != Phase.PLAYER_TURN or self.active_hand != 0:
            return False
        if self.is_split or self.split_offered or not is_pair(self.hands[0].cards):
            return False
        self.split_offered = True
        self.phase = Phase.SPLIT_DECISION
        self.message = SPLIT_OFFER_MESSAGE
        return True

    def accept_split(self) -> None:
        self._require(Phase.SPLIT_DECISION, ACCEPT_SPLIT)
        main = self.hands[0]
        if self.balance < main.bet:
            raise InsufficientFundsForSplitError(f"Not enough money to split (need {main.bet})")
        if len(self.deck) < 2:
            raise EmptyDeckError("Not enough cards to split")
        first, second = main.cards
        main_card, split_card = self.deck.draw(), self.deck.draw()
        self.balance -= main.bet
        main.cards = [first, main_card]
        self.hands.append(PlayerHand(SPLIT_HAND, [second, split_card], bet=main.bet))
        self.message = ""
        self._enter_hand(0)

    def decline_split(self) -> None:
        self._require(Phase.SPLIT_DECISION, DECLINE_SPLIT)
        self.phase = Phase.PLAYER_TURN
        self.message = ""

    def hit(self) -> None:
        self._require(Phase.PLAYER_TURN, HIT)
        hand = self.current_hand
        hand.cards.append(self.deck.draw())
        total = hand.total
        if total == BLACKJACK_TOTAL:
            self._pay_blackjack(hand)
            self._advance()
        elif total > BLACKJACK_TOTAL:
            hand.outcome = Outcome.BUST
            hand.payout = 0
            self.message = BUST_MESSAGE
            self._advance()

    def stand(self) -> None:
        self._require(Phase.PLAYER_TURN, STAND)
        self.message = ""
        self._advance()

    # -- dealer and settlement -------------------------------------------

    def dealer_step(self) -> bool:
        """Play one dealer tick. Returns ``True`` when a card was drawn."""

        self._require(Phase.DEALER_TURN, "play the dealer")
        if not dealer_should_hit(self.dealer_cards):
            return False
        self.dealer_cards.append(self.deck.draw())
        return True

    def settle(self) -> List[HandResult]:
        self._require(Phase.DEALER_TURN, "settle")
        dealer_total = self.dealer_total
        for hand in self.hands:
            if hand.resolved:
                continue
            hand.outcome, hand.payout = settle_hand(hand.total, dealer_total, hand.bet)
            self.balance += hand.payout
        results = [hand.result() for hand in self.hands]
        self.phase = Phase.SETTLEMENT
        self.message = summarize(results)
        return results

    # -- internals -------------------------------------------------------

    def _pay_blackjack(self, hand: PlayerHand) -> None:
        hand.outcome = Outcome.BLACKJACK
        hand.payout = blackjack_payout(hand.bet)
        self.balance += hand.payout
        self.message = BLACKJACK_MESSAGE

    def _enter_hand(self, index: int) -> None:
        self.active_hand = index
        hand = self.hands[index]
        if hand.total == BLACKJACK_TOTAL:
            self.phase = Phase.PLAYER_TURN
            self._pay_blackjack(hand)
            self._advance()
            return
        self.phase = Phase.PLAYER_TURN
        self.offer_split()

    def _advance(self) -> None:
        if self.is_split and self.active_hand == 0:
            self._enter_hand(1)
        elif any(not hand.resolved for hand in self.hands):
            self.phase = Phase.DEALER_TURN
            self.dealer_revealed = True
            self.message = DEALER_TURN_MESSAGE
        else:
            self.phase = Phase.SETTLEMENT
            if self.is_split:
                self.message = summarize(hand.result() for hand in self.hands)


__all__ = [
    "Phase",
    "PlayerHand",
    "RoundState",
    "MAIN_HAND",
    "SPLIT_HAND",
    "PLACE_BET",
    "HIT",
    "STAND",
    "ACCEPT_SPLIT",
    "DECLINE_SPLIT",
]
