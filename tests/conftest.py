"""Pytest fixtures for blackjack trainer tests."""

import pytest
from random import Random

from bjtrainer.cards import Card, Rank, Suit
from bjtrainer.game.engine import deal_initial_cards, initialize_game, place_bet
from bjtrainer.hand import Hand
from bjtrainer.persistence import InMemoryKeyValueStore, ProgressStore
from bjtrainer.rules import GameSettings
from bjtrainer.strategy.advisor import StrategyAdvisor


def _cards(codes):
    return tuple(Card.from_string(c) for c in codes)


def stacked_shoe(player, dealer, rest=()):
    """
    Shoe that deals ``player`` and ``dealer`` in round order, then ``rest``.

    Cards are short strings such as "8S" or "10H".
    """
    p1, p2 = player
    d1, d2 = dealer
    return _cards([p1, d1, p2, d2, *rest])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def settings():
    """Default table rules."""
    return GameSettings()


@pytest.fixture
def h17_settings():
    """Dealer hits soft 17."""
    return GameSettings(dealer_hits_soft_17=True)


@pytest.fixture
def advisor(settings):
    """Strategy advisor for default rules."""
    return StrategyAdvisor(settings)


@pytest.fixture
def progress():
    """Progress store backed by memory."""
    return ProgressStore(InMemoryKeyValueStore())


@pytest.fixture
def stack():
    """The ``stacked_shoe`` builder."""
    return stacked_shoe


@pytest.fixture
def dealt():
    """
    Factory for a state in the player's turn with stacked cards.

    Usage: ``dealt(["10S", "6H"], ["9C", "7D"], rest=["5S"], bet=50)``
    """

    def make(player, dealer, rest=(), bet=50, settings=None, balance=1000):
        state = initialize_game(stacked_shoe(player, dealer, rest), balance, settings or GameSettings())
        state = place_bet(state, bet)
        return deal_initial_cards(state)

    return make


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand((Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand((Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)))


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return Hand((Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand.from_strings("10S", "6H", "KC")
