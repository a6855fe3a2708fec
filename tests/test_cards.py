import random
from collections import Counter

import pytest

from blackjack_table.core.cards import Card, Deck, create_cards, parse_cards
from blackjack_table.core.errors import EmptyDeckError


def test_create_cards_is_full_unique_deck():
    cards = create_cards()
    assert len(cards) == 52
    assert len(set(cards)) == 52
    assert cards[0] == Card("2", "Hearts")
    assert cards[-1] == Card("A", "Spades")


def test_shuffle_is_a_permutation():
    deck = Deck(rng=random.Random(42))
    assert Counter(deck.remaining()) == Counter(create_cards())
    assert list(deck.remaining()) != create_cards()


def test_shuffle_is_reproducible_with_seeded_rng():
    first = Deck(rng=random.Random(3)).remaining()
    second = Deck(rng=random.Random(3)).remaining()
    assert first == second


def test_draw_takes_last_card_and_shrinks_deck():
    deck = Deck(rng=random.Random(1))
    before = deck.remaining()
    card = deck.draw()
    assert card == before[-1]
    assert len(deck) == len(before) - 1
    assert card not in deck.remaining()


def test_draw_from_empty_deck_raises():
    deck = Deck(cards=parse_cards(["AS"]))
    deck.draw()
    with pytest.raises(EmptyDeckError):
        deck.draw()
    assert len(deck) == 0


def test_parse_cards_tokens():
    assert parse_cards(["10H", "as", "Kd"]) == [
        Card("10", "Hearts"),
        Card("A", "Spades"),
        Card("K", "Diamonds"),
    ]
    with pytest.raises(ValueError):
        parse_cards(["1X"])


def test_card_str_uses_suit_symbol():
    assert str(Card("Q", "Clubs")) == "Q♣"
