"""Table rules and bankroll settings."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GameSettings:
    """
    Rules and limits a session is played under.

    Supplied by the caller; the engine honors every flag instead of assuming
    casino defaults.
    """

    # Bankroll and betting limits
    starting_balance: int = 1000
    min_bet: int = 10
    max_bet: int = 500

    # Shoe configuration
    deck_count: int = 6
    penetration: float = 0.75  # Fraction dealt before the shoe is replaced

    # Dealer rules
    dealer_hits_soft_17: bool = False  # S17 by default

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Optional actions
    allow_surrender: bool = True
    allow_insurance: bool = True

    # Split rules
    double_after_split: bool = True  # DAS
    resplit_aces: bool = False  # RSA
    max_split_hands: int = 2  # 2 means a single split, no re-splitting

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if not 1 <= self.deck_count <= 8:
            raise ValueError("deck_count must be between 1 and 8")
        if self.starting_balance < 0:
            raise ValueError("starting_balance cannot be negative")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.max_bet < self.min_bet:
            raise ValueError("max_bet must be at least min_bet")
        if not 0.0 < self.penetration <= 1.0:
            raise ValueError("penetration must be between 0 and 1")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if self.max_split_hands < 2:
            raise ValueError("max_split_hands must be at least 2")

    @classmethod
    def vegas_strip(cls) -> "GameSettings":
        """Standard Vegas Strip rules."""
        return cls(
            deck_count=6,
            dealer_hits_soft_17=False,
            double_after_split=True,
            resplit_aces=True,
            max_split_hands=4,
        )

    @classmethod
    def downtown_vegas(cls) -> "GameSettings":
        """Downtown Las Vegas rules (typically H17)."""
        return cls(
            deck_count=2,
            dealer_hits_soft_17=True,
            double_after_split=True,
            max_split_hands=4,
        )

    @classmethod
    def single_deck(cls) -> "GameSettings":
        """Single deck rules."""
        return cls(
            deck_count=1,
            dealer_hits_soft_17=True,
            double_after_split=False,
            allow_surrender=False,
        )
