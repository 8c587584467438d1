"""Player actions, practice focus and engine commands."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from bjtrainer.cards import Shoe


class PlayerAction(Enum):
    """Possible player actions."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE_DOWN = "double-down"
    SPLIT = "split"
    SURRENDER = "surrender"
    INSURANCE = "insurance"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Upper-case display name, e.g. 'DOUBLE DOWN'."""
        return self.name.replace("_", " ")


class PracticeFocus(Enum):
    """Action a training round is built around."""

    NONE = "none"
    DOUBLE_DOWN = "double-down"
    HIT = "hit"
    STAND = "stand"
    SPLIT = "split"

    @property
    def action(self) -> PlayerAction | None:
        if self == PracticeFocus.NONE:
            return None
        return PlayerAction(self.value)


@dataclass(frozen=True)
class PlaceBet:
    amount: int


@dataclass(frozen=True)
class DealInitialCards:
    focus: PracticeFocus = PracticeFocus.NONE


@dataclass(frozen=True)
class PlayerMove:
    action: PlayerAction


@dataclass(frozen=True)
class PlayDealerHand:
    pass


@dataclass(frozen=True)
class ResetRound:
    pass


@dataclass(frozen=True)
class Reshuffle:
    shoe: Shoe


# Closed set of commands accepted by engine.apply_action
Command = Union[PlaceBet, DealInitialCards, PlayerMove, PlayDealerHand, ResetRound, Reshuffle]
