import random

from blackjack_table.core.cards import Deck, parse_cards
from blackjack_table.core.errors import IllegalActionError, InsufficientFundsForSplitError, InvalidBetError
from blackjack_table.core.game import HIT, PLACE_BET, Phase
from blackjack_table.core.round_manager import GameConfig, RoundManager
from blackjack_table.core.scheduler import ManualScheduler


def stacked(*tokens):
    return Deck(cards=list(reversed(parse_cards(tokens))))


def make_manager(*decks, starting_balance=2000):
    queue = list(decks)

    def next_deck():
        return queue.pop(0) if queue else Deck(rng=random.Random(7))

    scheduler = ManualScheduler()
    manager = RoundManager(GameConfig(starting_balance=starting_balance), scheduler, deck_factory=next_deck)
    return manager, scheduler


def test_place_bet_scenario():
    manager, _ = make_manager(stacked("10H", "7D", "9S", "8C"))
    result = manager.place_bet(100)
    assert result.accepted
    snapshot = manager.snapshot()
    assert snapshot.balance == 1900
    assert snapshot.phase == Phase.PLAYER_TURN
    assert snapshot.bets == (100,)
    assert snapshot.can(HIT)


def test_invalid_bet_message_is_transient():
    manager, scheduler = make_manager(stacked("10H", "7D", "9S", "8C"))
    result = manager.place_bet(5000)
    assert not result.accepted
    assert isinstance(result.error, InvalidBetError)
    snapshot = manager.snapshot()
    assert snapshot.balance == 2000
    assert snapshot.phase == Phase.BETTING
    assert snapshot.message == "Bet must be between 1 and 2000"
    scheduler.advance(2.0)
    assert manager.snapshot().message == ""


def test_illegal_action_is_reported_without_change():
    manager, _ = make_manager(stacked("10H", "7D", "9S", "8C"))
    before = manager.snapshot()
    result = manager.hit()
    assert isinstance(result.error, IllegalActionError)
    assert manager.snapshot() == before


def test_dealer_hole_card_hidden_until_dealer_turn():
    manager, _ = make_manager(stacked("10H", "7D", "9S", "8C"))
    manager.place_bet(100)
    snapshot = manager.snapshot()
    assert snapshot.dealer_hidden
    assert snapshot.dealer_cards[1] is None
    assert snapshot.dealer_total == 9
    manager.stand()
    snapshot = manager.snapshot()
    assert not snapshot.dealer_hidden
    assert snapshot.dealer_total == 17


def test_dealer_plays_one_card_per_tick_then_settles_and_deals_next_round():
    manager, scheduler = make_manager(stacked("10H", "10D", "9S", "7C", "2H"))
    manager.place_bet(100)
    manager.stand()
    assert manager.snapshot().message == "Dealer's turn..."
    scheduler.advance(1.0)
    assert len(manager.snapshot().dealer_cards) == 3
    assert manager.snapshot().phase == Phase.DEALER_TURN
    scheduler.advance(1.0)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.SETTLEMENT
    assert snapshot.message == "Main hand: Win"
    assert snapshot.balance == 2100
    scheduler.advance(1.5)
    assert manager.snapshot().phase == Phase.SETTLEMENT
    scheduler.advance(0.5)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.BETTING
    assert snapshot.round_number == 2
    assert snapshot.balance == 2100
    assert snapshot.bets == (0,)


def test_listeners_see_every_transition():
    manager, scheduler = make_manager(stacked("10H", "10D", "9S", "8C"))
    seen = []
    unsubscribe = manager.subscribe(seen.append)
    manager.place_bet(100)
    manager.stand()
    scheduler.advance(1.0)
    assert [snapshot.phase for snapshot in seen] == [Phase.PLAYER_TURN, Phase.DEALER_TURN, Phase.SETTLEMENT]
    unsubscribe()
    scheduler.advance(2.0)
    assert len(seen) == 3


def test_bust_holds_message_then_resets():
    manager, scheduler = make_manager(stacked("10H", "5D", "9S", "8C", "KS"))
    manager.place_bet(100)
    result = manager.hit()
    assert result.accepted
    assert result.message == "BUST"
    assert manager.snapshot().phase == Phase.SETTLEMENT
    scheduler.advance(2.0)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.BETTING
    assert snapshot.balance == 1900
    assert scheduler.pending == 0


def test_reset_during_dealer_turn_cancels_ticks():
    manager, scheduler = make_manager(stacked("10H", "10D", "9S", "5C", "2H", "3H", "4H"))
    manager.place_bet(100)
    manager.stand()
    manager.reset_round()
    assert manager.snapshot().balance == 2000
    assert manager.snapshot().round_number == 2
    scheduler.advance(10.0)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.BETTING
    assert snapshot.round_number == 2


def test_stale_reset_timer_does_not_double_fire():
    manager, scheduler = make_manager(stacked("10H", "AD", "9S", "8C"))
    manager.place_bet(100)
    assert manager.snapshot().phase == Phase.SETTLEMENT
    manager.reset_round()
    scheduler.run_all()
    assert manager.snapshot().round_number == 2


def test_close_stops_all_timers():
    manager, scheduler = make_manager(stacked("10H", "10D", "9S", "5C", "2H"))
    manager.place_bet(100)
    manager.stand()
    manager.close()
    assert scheduler.pending == 0
    scheduler.run_all()
    assert len(manager.snapshot().dealer_cards) == 2
    assert not manager.hit().accepted


def test_split_without_funds_declines_with_message():
    manager, scheduler = make_manager(stacked("8H", "8D", "10S", "7C", "3S"), starting_balance=150)
    manager.place_bet(100)
    assert manager.snapshot().phase == Phase.SPLIT_DECISION
    result = manager.accept_split()
    assert isinstance(result.error, InsufficientFundsForSplitError)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.PLAYER_TURN
    assert snapshot.balance == 50
    assert len(snapshot.hands) == 1
    assert "Not enough money to split" in snapshot.message
    scheduler.advance(2.0)
    assert manager.snapshot().message == ""


def test_split_scenario_through_manager():
    manager, scheduler = make_manager(stacked("8H", "8D", "10S", "7C", "3S", "10C"))
    manager.place_bet(100)
    assert manager.accept_split().accepted
    assert manager.snapshot().balance == 1800
    manager.stand()
    manager.stand()
    scheduler.advance(1.0)
    snapshot = manager.snapshot()
    assert [hand.outcome for hand in snapshot.hands] == ["Lose", "Win"]
    assert snapshot.balance == 2000


def test_empty_deck_aborts_and_refunds():
    manager, scheduler = make_manager(stacked("10H", "5D", "9S", "8C"))
    manager.place_bet(100)
    result = manager.hit()
    assert not result.accepted
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.SETTLEMENT
    assert snapshot.balance == 2000
    assert snapshot.message.startswith("Round aborted")
    scheduler.advance(2.0)
    assert manager.snapshot().phase == Phase.BETTING


def test_dealer_running_out_of_cards_aborts_round():
    manager, scheduler = make_manager(stacked("10H", "8D", "9S", "5C"))
    manager.place_bet(100)
    manager.stand()
    scheduler.advance(1.0)
    snapshot = manager.snapshot()
    assert snapshot.phase == Phase.SETTLEMENT
    assert snapshot.balance == 2000


def test_bankrupt_player_cannot_bet():
    manager, scheduler = make_manager(stacked("10H", "7D", "10S", "9C"), starting_balance=100)
    manager.place_bet(100)
    manager.stand()
    scheduler.advance(1.0)
    scheduler.advance(2.0)
    snapshot = manager.snapshot()
    assert snapshot.is_bankrupt
    assert snapshot.status == "bankrupt"
    assert not snapshot.can(PLACE_BET)
    result = manager.place_bet(1)
    assert isinstance(result.error, InvalidBetError)
    assert manager.snapshot().balance == 0
