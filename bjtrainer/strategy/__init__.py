"""Basic-strategy tables, recommendations and drills."""

from bjtrainer.strategy.advisor import (
    Recommendation,
    StrategyAdvisor,
    get_recommendations,
    primary_recommendation,
)
from bjtrainer.strategy.training import apply_practice_focus

__all__ = [
    "Recommendation",
    "StrategyAdvisor",
    "get_recommendations",
    "primary_recommendation",
    "apply_practice_focus",
]
