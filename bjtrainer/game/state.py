"""Game phases, results and the immutable round state."""

from dataclasses import dataclass, field
from enum import Enum, auto

from bjtrainer.cards import Card, Shoe
from bjtrainer.hand import EMPTY_HAND, Hand
from bjtrainer.rules import GameSettings


class Phase(Enum):
    """
    Round phases.

    Flow: BETTING → DEALING → PLAYER_TURN → DEALER_TURN → GAME_OVER → BETTING
    """

    BETTING = auto()
    DEALING = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").lower()


class GameResult(Enum):
    """Outcome of a hand."""

    PLAYER_WINS = "player-wins"
    DEALER_WINS = "dealer-wins"
    PUSH = "push"
    PLAYER_BLACKJACK = "player-blackjack"
    DEALER_BLACKJACK = "dealer-blackjack"

    @property
    def is_win(self) -> bool:
        return self in (GameResult.PLAYER_WINS, GameResult.PLAYER_BLACKJACK)

    @property
    def is_loss(self) -> bool:
        return self in (GameResult.DEALER_WINS, GameResult.DEALER_BLACKJACK)


@dataclass(frozen=True)
class SplitHandState:
    """One of the hands created by splitting."""

    hand: Hand
    bet: int
    is_complete: bool = False
    result: GameResult | None = None


@dataclass(frozen=True)
class GameState:
    """
    Authoritative state of a session.

    Never mutated; every engine operation returns a new instance.
    While split, ``player_hand`` mirrors the active split hand.
    """

    phase: Phase = Phase.BETTING
    deck: Shoe = ()
    player_hand: Hand = EMPTY_HAND
    dealer_hand: Hand = EMPTY_HAND
    player_score: int = 0
    current_bet: int = 0

    # Action affordances, computed after the initial deal
    can_double_down: bool = False
    can_split: bool = False
    can_surrender: bool = False
    can_take_insurance: bool = False

    result: GameResult | None = None
    is_game_active: bool = False

    # Split sub-state
    is_split: bool = False
    split_hands: tuple[SplitHandState, ...] = ()
    active_split_hand_index: int = 0

    insurance_bet: int = 0

    # Last settlement, for display
    last_hand_winnings: int | None = None
    previous_balance: int | None = None

    settings: GameSettings = field(default_factory=GameSettings)

    @property
    def dealer_upcard(self) -> Card | None:
        """The dealer's visible first card."""
        if self.dealer_hand.cards:
            return self.dealer_hand.cards[0]
        return None

    @property
    def active_split_hand(self) -> SplitHandState | None:
        if self.is_split and 0 <= self.active_split_hand_index < len(self.split_hands):
            return self.split_hands[self.active_split_hand_index]
        return None

    @property
    def active_bet(self) -> int:
        """Wager riding on the hand currently being played."""
        split_hand = self.active_split_hand
        return split_hand.bet if split_hand is not None else self.current_bet

    @property
    def total_wagered(self) -> int:
        """Everything staked this round, insurance included."""
        if self.is_split:
            return sum(h.bet for h in self.split_hands) + self.insurance_bet
        return self.current_bet + self.insurance_bet

    @property
    def cards_remaining(self) -> int:
        return len(self.deck)
