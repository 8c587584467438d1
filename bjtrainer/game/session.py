"""Mutable session controller that a UI drives."""

import logging
from random import Random

from bjtrainer.cards import new_shoe
from bjtrainer.errors import StoreError, WrongPhaseError
from bjtrainer.game.actions import PlayerAction, PracticeFocus
from bjtrainer.game.dealing import DealingPolicy, policy_for
from bjtrainer.game.engine import (
    deal_initial_cards,
    execute_player_action,
    initialize_game,
    needs_reshuffle,
    place_bet,
    play_dealer_hand,
    reset_round,
    reshuffle,
)
from bjtrainer.game.events import EventEmitter, EventHandler, EventType
from bjtrainer.game.state import GameState, Phase
from bjtrainer.persistence import ProgressStore
from bjtrainer.rules import GameSettings
from bjtrainer.statistics import PlayerStatistics, RunRecord
from bjtrainer.strategy.advisor import Recommendation, StrategyAdvisor, primary_recommendation
from bjtrainer.strategy.training import apply_practice_focus

logger = logging.getLogger(__name__)


class TrainingSession:
    """
    One player's training session.

    Holds the current ``GameState`` and everything around it that is not
    pure: the shoe's random source, the dealing policy, statistics, event
    emission and persistence. The engine and the strategy advisor are only
    ever combined here.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        progress: ProgressStore | None = None,
        focus: PracticeFocus = PracticeFocus.NONE,
        rng: Random | None = None,
        auto_dealer: bool = True,
    ) -> None:
        """
        Start a session, restoring saved progress when there is any.

        Args:
            settings: Table rules
            progress: Where balance and statistics are saved
            focus: Practice focus that drives the dealing policy
            rng: Random source for shuffling
            auto_dealer: Play the dealer's hand as soon as the player is done
        """
        self.settings = settings or GameSettings()
        self.progress = progress or ProgressStore()
        self.rng = rng or Random()
        self.auto_dealer = auto_dealer
        self.events = EventEmitter()
        self.advisor = StrategyAdvisor(self.settings)
        self.focus = focus
        self.policy: DealingPolicy = policy_for(focus)

        balance, statistics = self.progress.load()
        self.statistics = statistics or PlayerStatistics()
        if balance is None or balance < self.settings.min_bet:
            balance = self.settings.starting_balance

        self.state = initialize_game(self._fresh_shoe(), balance, self.settings)
        self._start_run()
        self.events.emit(EventType.SESSION_STARTED, balance=balance)

    def _fresh_shoe(self):
        return new_shoe(self.settings.deck_count, self.rng)

    def _start_run(self) -> None:
        self._run_hands = 0
        self._run_start_balance = self.state.player_score

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self.events.subscribe(handler, event_type)

    def set_focus(self, focus: PracticeFocus | str) -> None:
        """Change the practice focus; takes effect on the next deal."""
        self.focus = PracticeFocus(focus)
        self.policy = policy_for(self.focus)

    @property
    def balance(self) -> int:
        return self.state.player_score

    @property
    def is_run_over(self) -> bool:
        """The bankroll can no longer cover the table minimum."""
        return not self.state.is_game_active and self.state.player_score < self.settings.min_bet

    # -- round flow ---------------------------------------------------------

    def bet(self, amount: int) -> GameState:
        """Place a bet and deal, reshuffling first when the shoe runs low."""
        if self.state.phase == Phase.GAME_OVER:
            self.new_round()

        if needs_reshuffle(self.state):
            self.state = reshuffle(self.state, self._fresh_shoe())
            logger.info("Shoe reshuffled")
            self.events.emit(EventType.SHOE_SHUFFLED, cards=self.state.cards_remaining)

        self.state = place_bet(self.state, amount)
        self.events.emit(EventType.BET_PLACED, amount=amount, balance=self.state.player_score)

        self.state = deal_initial_cards(self.state, self.policy)
        self.events.emit(
            EventType.CARDS_DEALT,
            player=str(self.state.player_hand),
            dealer_upcard=str(self.state.dealer_upcard),
        )
        return self.state

    def recommendations(self) -> list[Recommendation]:
        """Ranked advice for the hand being played, empty outside the player's turn."""
        upcard = self.state.dealer_upcard
        if self.state.phase != Phase.PLAYER_TURN or upcard is None:
            return []
        return self.advisor.recommend(
            self.state.player_hand,
            upcard,
            can_double=self.state.can_double_down,
            can_split=self.state.can_split,
            can_surrender=self.state.can_surrender,
            is_split=self.state.is_split,
        )

    def hint(self) -> Recommendation | None:
        """Primary recommendation with any training note for the current focus."""
        best = primary_recommendation(self.recommendations())
        if best is None:
            return None
        return apply_practice_focus(best, self.focus, self.state.player_hand)

    def act(self, action: PlayerAction | str) -> GameState:
        """
        Play ``action`` on the active hand and grade it against basic strategy.

        Insurance decisions are not graded.
        """
        action = PlayerAction(action)
        best = None
        if action != PlayerAction.INSURANCE:
            best = primary_recommendation(self.recommendations())

        self.state = execute_player_action(self.state, action)
        self.events.emit(EventType.PLAYER_ACTED, action=action.value, phase=str(self.state.phase))

        if best is not None:
            correct = best.action == action
            self.statistics = self.statistics.record_decision(correct)
            self.events.emit(
                EventType.DECISION_GRADED,
                action=action.value,
                recommended=best.action.value,
                correct=correct,
            )

        if self.state.phase == Phase.DEALER_TURN and self.auto_dealer:
            return self.play_dealer()
        if self.state.phase == Phase.GAME_OVER:
            self._finish_round()
        return self.state

    def play_dealer(self) -> GameState:
        self.state = play_dealer_hand(self.state)
        self.events.emit(EventType.DEALER_PLAYED, dealer=str(self.state.dealer_hand))
        self._finish_round()
        return self.state

    def new_round(self) -> GameState:
        self.state = reset_round(self.state)
        self.events.emit(EventType.ROUND_RESET, balance=self.state.player_score)
        return self.state

    def _finish_round(self) -> None:
        state = self.state
        self.statistics = self.statistics.record_round(state)
        self._run_hands += 1
        self.events.emit(
            EventType.ROUND_ENDED,
            result=state.result.value if state.result else None,
            winnings=state.last_hand_winnings,
            balance=state.player_score,
        )
        self._save()

        if self.is_run_over:
            self.end_run()

    # -- runs and persistence -----------------------------------------------

    def end_run(self) -> RunRecord:
        """Close the current run and record it in the run history."""
        if self.state.is_game_active:
            raise WrongPhaseError("end run", self.state.phase)

        record = RunRecord(
            hands_played=self._run_hands,
            final_balance=self.state.player_score,
            net_result=self.state.player_score - self._run_start_balance,
        )
        self.statistics = self.statistics.record_run(record)
        logger.info("Run ended after %d hands with balance %d", record.hands_played, record.final_balance)
        self.events.emit(EventType.RUN_ENDED, **record.model_dump(exclude={"ended_at"}))
        self._save()
        return record

    def new_session(self) -> GameState:
        """Start a new run with the starting balance and a fresh shoe."""
        self.state = initialize_game(self._fresh_shoe(), self.settings.starting_balance, self.settings)
        self._start_run()
        self._save()
        self.events.emit(EventType.SESSION_STARTED, balance=self.state.player_score)
        return self.state

    def reset_statistics(self) -> None:
        self.statistics = PlayerStatistics()
        self._save()

    def _save(self) -> None:
        try:
            self.progress.save(self.state.player_score, self.statistics)
        except StoreError as exc:
            logger.warning("Could not save progress: %s", exc)
            self.events.emit(EventType.PROGRESS_SAVE_FAILED, error=str(exc))
