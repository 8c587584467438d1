"""Round engine and game state."""

from bjtrainer.game.actions import PlayerAction, PracticeFocus
from bjtrainer.game.engine import (
    apply_action,
    calculate_winnings,
    deal_initial_cards,
    determine_result,
    execute_player_action,
    initialize_game,
    needs_reshuffle,
    place_bet,
    play_dealer_hand,
    reset_round,
    reshuffle,
)
from bjtrainer.game.events import EventType, GameEvent
from bjtrainer.game.state import GameResult, GameState, Phase, SplitHandState

__all__ = [
    "PlayerAction",
    "PracticeFocus",
    "apply_action",
    "calculate_winnings",
    "deal_initial_cards",
    "determine_result",
    "execute_player_action",
    "initialize_game",
    "needs_reshuffle",
    "place_bet",
    "play_dealer_hand",
    "reset_round",
    "reshuffle",
    "EventType",
    "GameEvent",
    "GameResult",
    "GameState",
    "Phase",
    "SplitHandState",
]
