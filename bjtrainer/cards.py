"""Cards and the multi-deck shoe they are dealt from."""

from dataclasses import dataclass
from enum import Enum
from random import Random

from bjtrainer.errors import EmptyShoeError


class Suit(Enum):
    """Card suits."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, valued for blackjack."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the nominal point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @property
    def is_ace(self) -> bool:
        return self == Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == 10


_SUIT_CODES = {
    "H": Suit.HEARTS,
    "♥": Suit.HEARTS,
    "D": Suit.DIAMONDS,
    "♦": Suit.DIAMONDS,
    "C": Suit.CLUBS,
    "♣": Suit.CLUBS,
    "S": Suit.SPADES,
    "♠": Suit.SPADES,
}


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the nominal blackjack value; aces are adjusted per hand."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like 'AS', '10h', 'T♦' or 'K♣'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str == "T":
            rank_str = "10"

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, _SUIT_CODES[suit_str])


# A shoe is consumed from the front; index 0 is the next card dealt.
Shoe = tuple[Card, ...]


def build_deck() -> list[Card]:
    """Return one ordered 52-card deck."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def build_shoe(deck_count: int = 6) -> Shoe:
    """
    Build an unshuffled shoe of complete decks.

    Args:
        deck_count: Number of 52-card decks (1-8)

    Returns:
        The cards in suit-major, rank-minor order, deck after deck
    """
    if not 1 <= deck_count <= 8:
        raise ValueError("deck_count must be between 1 and 8")
    return tuple(card for _ in range(deck_count) for card in build_deck())


def shuffle(shoe: Shoe, rng: Random | None = None) -> Shoe:
    """Return a uniformly shuffled copy of the shoe (Fisher-Yates swaps)."""
    cards = list(shoe)
    (rng or Random()).shuffle(cards)
    return tuple(cards)


def deal_one(shoe: Shoe) -> tuple[Card, Shoe]:
    """
    Take the front card from the shoe.

    Returns:
        The dealt card and the remaining shoe

    Raises:
        EmptyShoeError: If the shoe has no cards left
    """
    if not shoe:
        raise EmptyShoeError()
    return shoe[0], shoe[1:]


def new_shoe(deck_count: int = 6, rng: Random | None = None) -> Shoe:
    """Build and shuffle a fresh shoe."""
    return shuffle(build_shoe(deck_count), rng)
