"""Player statistics and run history."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bjtrainer.game.state import GameResult, GameState


class RunRecord(BaseModel):
    """Summary of one run, from a fresh bankroll until it ended."""

    model_config = ConfigDict(frozen=True)

    hands_played: int = Field(..., ge=0)
    final_balance: int = Field(..., ge=0)
    net_result: int
    ended_at: datetime = Field(default_factory=datetime.now)


class PlayerStatistics(BaseModel):
    """
    Lifetime counters for a player.

    Immutable; ``record_round`` and friends return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    hands_played: int = 0
    hands_won: int = 0
    hands_lost: int = 0
    hands_pushed: int = 0
    blackjacks: int = 0
    busts: int = 0
    total_wagered: int = 0
    net_winnings: int = 0
    decisions_correct: int = 0
    decisions_total: int = 0
    run_history: list[RunRecord] = Field(default_factory=list)

    def record_round(self, state: GameState) -> "PlayerStatistics":
        """Fold a finished round into the counters."""
        if state.result is None:
            raise ValueError("Round has no result yet")

        hands = [h.hand for h in state.split_hands] if state.is_split else [state.player_hand]
        result = state.result
        return self.model_copy(
            update={
                "hands_played": self.hands_played + 1,
                "hands_won": self.hands_won + int(result.is_win),
                "hands_lost": self.hands_lost + int(result.is_loss),
                "hands_pushed": self.hands_pushed + int(result == GameResult.PUSH),
                "blackjacks": self.blackjacks + int(result == GameResult.PLAYER_BLACKJACK),
                "busts": self.busts + sum(1 for h in hands if h.is_busted),
                "total_wagered": self.total_wagered + _wagered(state),
                "net_winnings": self.net_winnings + (state.last_hand_winnings or 0),
            }
        )

    def record_decision(self, correct: bool) -> "PlayerStatistics":
        return self.model_copy(
            update={
                "decisions_correct": self.decisions_correct + int(correct),
                "decisions_total": self.decisions_total + 1,
            }
        )

    def record_run(self, run: RunRecord) -> "PlayerStatistics":
        return self.model_copy(update={"run_history": [*self.run_history, run]})

    def _rate(self, count: int) -> float:
        return count / self.hands_played * 100 if self.hands_played else 0.0

    @property
    def win_rate(self) -> float:
        return self._rate(self.hands_won)

    @property
    def loss_rate(self) -> float:
        return self._rate(self.hands_lost)

    @property
    def push_rate(self) -> float:
        return self._rate(self.hands_pushed)

    @property
    def blackjack_rate(self) -> float:
        return self._rate(self.blackjacks)

    @property
    def bust_rate(self) -> float:
        return self._rate(self.busts)

    @property
    def strategy_accuracy(self) -> float:
        """Percentage of graded decisions that matched basic strategy."""
        if not self.decisions_total:
            return 0.0
        return self.decisions_correct / self.decisions_total * 100

    @property
    def total_runs(self) -> int:
        return len(self.run_history)


def _wagered(state: GameState) -> int:
    """Everything the player staked in a settled round."""
    if state.last_hand_winnings is None or state.previous_balance is None:
        return state.total_wagered
    # last_hand_winnings == returned - staked; surrender zeroes current_bet
    returned = state.player_score - state.previous_balance
    return returned - state.last_hand_winnings
