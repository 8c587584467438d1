"""Random flash-card drills built from the strategy advisor."""

from dataclasses import dataclass
from enum import Enum
from random import Random

from bjtrainer.cards import Card, Rank, Suit
from bjtrainer.game.actions import PlayerAction
from bjtrainer.hand import Hand
from bjtrainer.rules import GameSettings
from bjtrainer.strategy.advisor import get_recommendations, primary_recommendation

# Drills only ask about the four basic plays
DRILL_ACTIONS = frozenset(
    {PlayerAction.HIT, PlayerAction.STAND, PlayerAction.DOUBLE_DOWN, PlayerAction.SPLIT}
)

NON_ACE_RANKS = [r for r in Rank if not r.is_ace]
TEN_VALUE_RANKS = [r for r in Rank if r.is_ten_value]


class DrillCategory(Enum):
    HARD_TOTAL = "hard-total"
    SOFT_TOTAL = "soft-total"
    PAIR = "pair"
    BLACKJACK = "blackjack"


@dataclass(frozen=True)
class DrillScenario:
    """A hand, a dealer upcard and the play basic strategy makes."""

    player_hand: Hand
    dealer_upcard: Card
    correct_action: PlayerAction
    explanation: str
    category: DrillCategory

    @property
    def key(self) -> tuple[int, bool, bool, Rank]:
        """Hand shape and upcard; a pair never shares a key with a hard total."""
        hand = self.player_hand
        return (hand.total, hand.is_soft, hand.is_pair, self.dealer_upcard.rank)


class DrillGenerator:
    """
    Builds a de-duplicated deck of drill scenarios.

    Scenarios are generated per category with random suits and dealer
    upcards, then busted hands, plays outside ``DRILL_ACTIONS`` and repeats
    of a scenario ``key`` are dropped.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: Random | None = None,
        per_hand: int = 3,
    ) -> None:
        self.settings = settings or GameSettings()
        self.rng = rng or Random()
        self.per_hand = per_hand

    def _card(self, rank: Rank) -> Card:
        return Card(rank, self.rng.choice(list(Suit)))

    def _upcard(self) -> Card:
        return self._card(self.rng.choice(list(Rank)))

    def _hard_cards(self, total: int) -> tuple[Card, Card]:
        """Two different non-ace ranks adding up to ``total``."""
        options = [
            (a, b)
            for a in NON_ACE_RANKS
            for b in NON_ACE_RANKS
            if a != b and a.blackjack_value + b.blackjack_value == total
        ]
        first, second = self.rng.choice(options)
        return self._card(first), self._card(second)

    def _scenario(self, cards: tuple[Card, ...], category: DrillCategory) -> DrillScenario | None:
        hand = Hand(cards)
        upcard = self._upcard()
        best = primary_recommendation(get_recommendations(hand, upcard, self.settings))
        if best is None:
            return None
        return DrillScenario(hand, upcard, best.action, best.reasoning, category)

    def _candidates(self) -> list[DrillScenario | None]:
        candidates: list[DrillScenario | None] = []

        for total in range(5, 21):
            for _ in range(self.per_hand):
                candidates.append(self._scenario(self._hard_cards(total), DrillCategory.HARD_TOTAL))

        for value in range(2, 10):
            for _ in range(self.per_hand):
                cards = (self._card(Rank.ACE), self._card(Rank(str(value))))
                candidates.append(self._scenario(cards, DrillCategory.SOFT_TOTAL))

        for rank in Rank:
            for _ in range(self.per_hand):
                candidates.append(self._scenario((self._card(rank), self._card(rank)), DrillCategory.PAIR))

        for rank in TEN_VALUE_RANKS:
            cards = (self._card(Rank.ACE), self._card(rank))
            candidates.append(self._scenario(cards, DrillCategory.BLACKJACK))

        return candidates

    def generate(self) -> list[DrillScenario]:
        scenarios = []
        seen = set()
        for scenario in self._candidates():
            if scenario is None or scenario.player_hand.is_busted:
                continue
            if scenario.correct_action not in DRILL_ACTIONS:
                continue
            if scenario.key in seen:
                continue
            seen.add(scenario.key)
            scenarios.append(scenario)
        return scenarios


def generate_scenarios(
    settings: GameSettings | None = None,
    rng: Random | None = None,
) -> list[DrillScenario]:
    """Generate a fresh de-duplicated list of drill scenarios."""
    return DrillGenerator(settings, rng).generate()


def scenarios_by_category(
    scenarios: list[DrillScenario], category: DrillCategory | str
) -> list[DrillScenario]:
    category = DrillCategory(category)
    return [s for s in scenarios if s.category == category]


def random_scenario(scenarios: list[DrillScenario], rng: Random | None = None) -> DrillScenario:
    """Pick one scenario; raises IndexError for an empty list."""
    if not scenarios:
        raise IndexError("No drill scenarios to choose from")
    return (rng or Random()).choice(scenarios)


def check_answer(scenario: DrillScenario, answer: PlayerAction | str) -> bool:
    """True when ``answer`` is the play basic strategy makes."""
    return PlayerAction(answer) == scenario.correct_action
