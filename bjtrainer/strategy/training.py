"""Practice-mode notes layered on top of strategy recommendations."""

from dataclasses import replace

from bjtrainer.cards import Card
from bjtrainer.game.actions import PracticeFocus
from bjtrainer.hand import Hand
from bjtrainer.rules import GameSettings
from bjtrainer.strategy.advisor import Recommendation, get_recommendations, primary_recommendation


def apply_practice_focus(
    recommendation: Recommendation,
    focus: PracticeFocus,
    hand: Hand | None = None,
) -> Recommendation:
    """
    Append a training note when the best play is not the practised action.

    The action and confidence are never changed; only the reasoning text
    grows. Blackjack hands and the ``NONE`` focus are returned unchanged.
    """
    target = focus.action
    if target is None or recommendation.action == target:
        return recommendation
    if hand is not None and hand.is_blackjack:
        return recommendation

    note = (
        f" Training Note: You're practising {target.label}, but this hand is not a "
        f"{target.label} opportunity. The correct play here is {recommendation.action.label}."
    )
    return replace(recommendation, reasoning=recommendation.reasoning + note)


def training_recommendation(
    hand: Hand,
    dealer_upcard: Card,
    focus: PracticeFocus,
    settings: GameSettings | None = None,
) -> Recommendation | None:
    """Primary recommendation for a practice round, with any training note."""
    best = primary_recommendation(get_recommendations(hand, dealer_upcard, settings))
    if best is None:
        return None
    return apply_practice_focus(best, focus, hand)
