"""Blackjack training library: round engine and basic-strategy advisor."""

from bjtrainer.cards import Card, Rank, Suit, build_shoe, deal_one, new_shoe, shuffle
from bjtrainer.hand import Hand, hand_value
from bjtrainer.rules import GameSettings

__version__ = "0.1.0"

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "build_shoe",
    "deal_one",
    "new_shoe",
    "shuffle",
    "Hand",
    "hand_value",
    "GameSettings",
]
