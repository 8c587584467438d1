"""Basic-strategy recommendations for a hand against a dealer upcard."""

from dataclasses import dataclass
from functools import lru_cache

from bjtrainer.cards import Card, Rank
from bjtrainer.game.actions import PlayerAction
from bjtrainer.hand import Hand
from bjtrainer.rules import GameSettings
from bjtrainer.strategy.tables import (
    build_hard_table,
    build_pair_table,
    build_soft_table,
    should_double,
    should_surrender,
    upcard_value,
)

# Confidence levels, 0-100
BLACKJACK_CONFIDENCE = 100
HARD_DOUBLE_CONFIDENCE = 98
SOFT_DOUBLE_CONFIDENCE = 96
SPLIT_CONFIDENCE = 95
HARD_CONFIDENCE = 95
PAIR_CONFIDENCE = 90
SOFT_CONFIDENCE = 90
SURRENDER_CONFIDENCE = 80
INSURANCE_CONFIDENCE = 0


@dataclass(frozen=True)
class Recommendation:
    """One candidate action with how strongly basic strategy favors it."""

    action: PlayerAction
    confidence: int
    reasoning: str
    expected_value: float

    def __str__(self) -> str:
        return f"{self.action.label} ({self.confidence}%)"


def primary_recommendation(recommendations: list[Recommendation]) -> Recommendation | None:
    """Return the highest-confidence recommendation, or None for an empty list."""
    if not recommendations:
        return None
    return max(recommendations, key=lambda r: r.confidence)


class StrategyAdvisor:
    """
    Basic strategy for one rule set.

    Tables are built once per advisor; ``recommend`` is a pure lookup.
    """

    def __init__(self, settings: GameSettings | None = None) -> None:
        self.settings = settings or GameSettings()
        self._hard_table = build_hard_table()
        self._soft_table = build_soft_table()
        self._pair_table = build_pair_table(self.settings.double_after_split)

    def recommend(
        self,
        hand: Hand,
        dealer_upcard: Card,
        *,
        can_double: bool = True,
        can_split: bool = True,
        can_surrender: bool = True,
        is_split: bool = False,
    ) -> list[Recommendation]:
        """
        Rank the candidate actions for ``hand`` against ``dealer_upcard``.

        Args:
            hand: Player hand of one or more cards
            dealer_upcard: The dealer's visible card
            can_double: Offer doubling when the tables call for it
            can_split: Consult the pair table for pairs
            can_surrender: Offer surrender when the tables call for it
            is_split: The hand came from a split, so a two-card 21 is an
                ordinary 21 rather than a blackjack

        Returns:
            Recommendations ordered by confidence, highest first; empty for
            a busted or empty hand
        """
        if not hand.cards or hand.is_busted:
            return []

        dealer = upcard_value(dealer_upcard)
        recommendations = [self._base(hand, dealer_upcard, can_split, is_split)]

        two_cards = len(hand) == 2
        if two_cards and can_double and not hand.is_blackjack:
            double = self._double(hand, dealer_upcard)
            if double is not None:
                recommendations.append(double)

        if two_cards and can_surrender and self.settings.allow_surrender and hand.is_hard:
            if should_surrender(hand.total, dealer, self.settings.dealer_hits_soft_17):
                recommendations.append(
                    Recommendation(
                        action=PlayerAction.SURRENDER,
                        confidence=SURRENDER_CONFIDENCE,
                        reasoning=(
                            f"{hand.total} against a dealer {dealer_upcard.rank} loses more than "
                            "half the time. Surrendering keeps half your bet."
                        ),
                        expected_value=-0.5,
                    )
                )

        if dealer_upcard.is_ace and self.settings.allow_insurance:
            recommendations.append(
                Recommendation(
                    action=PlayerAction.INSURANCE,
                    confidence=INSURANCE_CONFIDENCE,
                    reasoning=(
                        "Insurance is a side bet the house wins over time. "
                        "Decline it and play your hand."
                    ),
                    expected_value=-0.1,
                )
            )

        recommendations.sort(key=lambda r: r.confidence, reverse=True)
        return recommendations

    def _base(
        self, hand: Hand, dealer_upcard: Card, can_split: bool, is_split: bool = False
    ) -> Recommendation:
        """
        Hit, stand or split from the tables, before any upgrade.

        A two-card 21 on a split hand falls through to the soft table.
        """
        dealer = upcard_value(dealer_upcard)

        if hand.is_blackjack and not is_split:
            return Recommendation(
                action=PlayerAction.STAND,
                confidence=BLACKJACK_CONFIDENCE,
                reasoning="Blackjack! Nothing to decide; it pays unless the dealer also has one.",
                expected_value=self.settings.blackjack_payout,
            )

        if hand.is_pair and can_split and hand.cards[0].rank != Rank.FIVE:
            rank = hand.cards[0].rank
            action = self._pair_table[(hand.cards[0].value, dealer)]
            if action == PlayerAction.SPLIT:
                return Recommendation(
                    action=action,
                    confidence=SPLIT_CONFIDENCE,
                    reasoning=(
                        f"Split {rank}s against a dealer {dealer_upcard.rank}. "
                        "Two hands starting from one good card beat one weak total."
                    ),
                    expected_value=0.1,
                )
            verb = "Hit" if action == PlayerAction.HIT else "Stand on"
            return Recommendation(
                action=action,
                confidence=PAIR_CONFIDENCE,
                reasoning=f"Don't split {rank}s against a dealer {dealer_upcard.rank}. {verb} the total.",
                expected_value=0.05,
            )

        if hand.is_soft and (hand.total, dealer) in self._soft_table:
            action = self._soft_table[(hand.total, dealer)]
            if action == PlayerAction.HIT:
                reasoning = f"Soft {hand.total} can't bust on one card. Take another to improve."
            else:
                reasoning = f"Soft {hand.total} is strong enough against a dealer {dealer_upcard.rank}."
            return Recommendation(action, SOFT_CONFIDENCE, reasoning, 0.05)

        if hand.is_hard and (hand.total, dealer) in self._hard_table:
            action = self._hard_table[(hand.total, dealer)]
            return Recommendation(action, HARD_CONFIDENCE, _hard_reasoning(hand.total, action, dealer_upcard), 0.1)

        # Totals the tables don't cover, e.g. a single card or soft 12
        action = PlayerAction.STAND if hand.total >= 17 else PlayerAction.HIT
        return Recommendation(
            action=action,
            confidence=HARD_CONFIDENCE if hand.is_hard else SOFT_CONFIDENCE,
            reasoning=f"{action.label.capitalize()} on {hand.total}.",
            expected_value=0.0,
        )

    def _double(self, hand: Hand, dealer_upcard: Card) -> Recommendation | None:
        dealer = upcard_value(dealer_upcard)
        if not should_double(hand.total, hand.is_soft, dealer, self.settings.dealer_hits_soft_17):
            return None

        if hand.is_soft:
            return Recommendation(
                action=PlayerAction.DOUBLE_DOWN,
                confidence=SOFT_DOUBLE_CONFIDENCE,
                reasoning=(
                    f"Soft {hand.total} against a weak dealer {dealer_upcard.rank}. "
                    "One card can't bust you, so double."
                ),
                expected_value=0.15,
            )

        if hand.total == 11:
            reasoning = f"11 is the best doubling hand. Double against the dealer {dealer_upcard.rank}."
        elif hand.total == 10:
            reasoning = f"10 against a dealer {dealer_upcard.rank}: most cards make a strong hand. Double."
        else:
            reasoning = f"9 against a weak dealer {dealer_upcard.rank}. Double while the dealer is likely to bust."
        return Recommendation(PlayerAction.DOUBLE_DOWN, HARD_DOUBLE_CONFIDENCE, reasoning, 0.2)


def _hard_reasoning(total: int, action: PlayerAction, dealer_upcard: Card) -> str:
    if action == PlayerAction.HIT:
        if total <= 11:
            return f"You can't bust on {total}. Always take another card."
        if dealer_upcard.value >= 7:
            return f"{total} won't hold up against a dealer {dealer_upcard.rank}. Hit to improve."
        return f"{total} is too weak to stand on here. Hit."
    if total >= 17:
        return f"{total} is a made hand. Stand and let the dealer play."
    return f"The dealer {dealer_upcard.rank} is a bust card. Stand on {total} and let the dealer draw."


@lru_cache(maxsize=None)
def _advisor_for(settings: GameSettings) -> StrategyAdvisor:
    return StrategyAdvisor(settings)


def get_recommendations(
    hand: Hand,
    dealer_upcard: Card,
    settings: GameSettings | None = None,
    *,
    can_double: bool = True,
    can_split: bool = True,
    can_surrender: bool = True,
    is_split: bool = False,
) -> list[Recommendation]:
    """Recommendations for ``hand`` using a shared advisor for ``settings``."""
    advisor = _advisor_for(settings or GameSettings())
    return advisor.recommend(
        hand,
        dealer_upcard,
        can_double=can_double,
        can_split=can_split,
        can_surrender=can_surrender,
        is_split=is_split,
    )
