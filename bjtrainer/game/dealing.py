"""Dealing policies for the initial two cards of a round."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from bjtrainer.cards import Card, Shoe, deal_one
from bjtrainer.game.actions import PracticeFocus

logger = logging.getLogger(__name__)

CardFilter = Callable[[Card], bool]
PairFilter = Callable[[Card, Card], bool]


@dataclass(frozen=True)
class InitialDeal:
    """Cards for the player and dealer plus what is left of the shoe."""

    player_cards: tuple[Card, Card]
    dealer_cards: tuple[Card, Card]
    remaining: Shoe


class DealingPolicy(ABC):
    """Decides which cards open a round."""

    @abstractmethod
    def deal_initial(self, shoe: Shoe) -> InitialDeal:
        """Deal two cards each to player and dealer."""
        ...


class RandomPolicy(DealingPolicy):
    """Deals from the front of the shoe: player, dealer, player, dealer."""

    def deal_initial(self, shoe: Shoe) -> InitialDeal:
        player_first, shoe = deal_one(shoe)
        dealer_up, shoe = deal_one(shoe)
        player_second, shoe = deal_one(shoe)
        dealer_hole, shoe = deal_one(shoe)
        return InitialDeal(
            player_cards=(player_first, player_second),
            dealer_cards=(dealer_up, dealer_hole),
            remaining=shoe,
        )


def _no_aces(first: Card, second: Card) -> bool:
    return not first.is_ace and not second.is_ace


def _hard_total(low: int, high: int, allow_pairs: bool = True) -> PairFilter:
    def accept(first: Card, second: Card) -> bool:
        if not _no_aces(first, second):
            return False
        if not allow_pairs and first.rank == second.rank:
            return False
        return low <= first.value + second.value <= high

    return accept


def _same_rank(first: Card, second: Card) -> bool:
    return first.rank == second.rank


def _upcard_between(low: int, high: int) -> CardFilter:
    return lambda card: low <= card.value <= high


# focus -> (player two-card filter, dealer upcard filter)
SCENARIOS: dict[PracticeFocus, tuple[PairFilter, CardFilter]] = {
    PracticeFocus.SPLIT: (_same_rank, _upcard_between(2, 11)),
    PracticeFocus.DOUBLE_DOWN: (_hard_total(11, 11), _upcard_between(3, 6)),
    PracticeFocus.HIT: (_hard_total(12, 16, allow_pairs=False), _upcard_between(7, 11)),
    PracticeFocus.STAND: (_hard_total(17, 20), _upcard_between(2, 11)),
}


class ScenarioUnavailable(LookupError):
    """The shoe holds no cards that form the requested scenario."""


def _take_pair(cards: list[Card], accept: PairFilter) -> tuple[Card, Card]:
    """Remove and return the earliest two cards satisfying ``accept``."""
    for i, first in enumerate(cards):
        for j in range(i + 1, len(cards)):
            if accept(first, cards[j]):
                second = cards.pop(j)
                cards.pop(i)
                return first, second
    raise ScenarioUnavailable("no matching player cards")


def _take_card(cards: list[Card], accept: CardFilter) -> Card:
    for i, card in enumerate(cards):
        if accept(card):
            return cards.pop(i)
    raise ScenarioUnavailable("no matching dealer upcard")


class ScenarioPolicy(DealingPolicy):
    """
    Searches the shoe for cards that set up a practice scenario.

    The search is deterministic: the earliest matching cards in shoe order
    are pulled forward and the rest of the shoe keeps its order. When the
    shoe cannot produce the scenario the round is dealt normally.
    """

    def __init__(self, focus: PracticeFocus = PracticeFocus.NONE) -> None:
        self.focus = focus
        self._fallback = RandomPolicy()

    def deal_initial(self, shoe: Shoe) -> InitialDeal:
        if self.focus not in SCENARIOS:
            return self._fallback.deal_initial(shoe)

        player_filter, upcard_filter = SCENARIOS[self.focus]
        cards = list(shoe)
        try:
            player_cards = _take_pair(cards, player_filter)
            dealer_up = _take_card(cards, upcard_filter)
        except ScenarioUnavailable as exc:
            logger.debug("Scenario %s unavailable (%s), dealing normally", self.focus.value, exc)
            return self._fallback.deal_initial(shoe)

        dealer_hole, remaining = deal_one(tuple(cards))
        return InitialDeal(
            player_cards=player_cards,
            dealer_cards=(dealer_up, dealer_hole),
            remaining=remaining,
        )


def policy_for(focus: PracticeFocus) -> DealingPolicy:
    """Return the dealing policy for a practice focus."""
    if focus == PracticeFocus.NONE:
        return RandomPolicy()
    return ScenarioPolicy(focus)
