"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, NamedTuple

from bjtrainer.cards import Card


class HandValue(NamedTuple):
    """Best total of a set of cards and whether an ace still counts 11."""

    total: int
    is_soft: bool


def hand_value(cards: Iterable[Card]) -> HandValue:
    """
    Calculate the best total for a set of cards.

    Every ace starts at 11. While the total is over 21 and an ace is still
    counted as 11, one ace is reduced to 1. The hand is soft when an ace
    still counts 11 after reduction.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return HandValue(total=total, is_soft=aces > 0 and total <= 21)


@dataclass(frozen=True, slots=True)
class Hand:
    """
    An immutable blackjack hand.

    Only ``cards`` is supplied; the totals and flags are derived from it on
    construction and never patched afterwards.
    """

    cards: tuple[Card, ...] = ()
    total: int = field(init=False)
    is_soft: bool = field(init=False)
    is_blackjack: bool = field(init=False)
    is_busted: bool = field(init=False)

    def __post_init__(self) -> None:
        cards = tuple(self.cards)
        total, is_soft = hand_value(cards)
        object.__setattr__(self, "cards", cards)
        object.__setattr__(self, "total", total)
        object.__setattr__(self, "is_soft", is_soft)
        object.__setattr__(self, "is_blackjack", len(cards) == 2 and total == 21)
        object.__setattr__(self, "is_busted", total > 21)

    @classmethod
    def from_strings(cls, *cards: str) -> "Hand":
        """Build a hand from card strings, e.g. ``Hand.from_strings('AS', 'KH')``."""
        return cls(tuple(Card.from_string(c) for c in cards))

    @property
    def is_hard(self) -> bool:
        return not self.is_soft

    @property
    def is_pair(self) -> bool:
        """Check if the hand is exactly two cards of the same rank."""
        return len(self.cards) == 2 and self.cards[0].rank == self.cards[1].rank

    @property
    def num_cards(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.total})"
        if self.is_soft:
            value_str = f"(soft {self.total})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({list(self.cards)!r}, total={self.total})"


EMPTY_HAND = Hand()


def add_card(hand: Hand, card: Card) -> Hand:
    """Return a new hand with the card appended and every flag recomputed."""
    return Hand(hand.cards + (card,))


def describe_hand(hand: Hand) -> str:
    """Short category label such as 'Pair of 8s', 'Soft 18' or 'Hard 12'."""
    if hand.is_blackjack:
        return "Blackjack"
    if hand.is_busted:
        return "Busted"
    if hand.is_pair:
        return f"Pair of {hand.cards[0].rank}s"
    if hand.is_soft:
        return f"Soft {hand.total}"
    return f"Hard {hand.total}"
