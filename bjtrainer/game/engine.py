"""
Blackjack round engine.

Every operation is a pure function: it takes a ``GameState`` and returns a
new one. Phase changes are looked up in a ``transitions`` state-machine
table; a trigger with no transition from the current phase raises
``WrongPhaseError``.
"""

import logging
import math
from dataclasses import replace
from decimal import Decimal
from typing import Iterable

from transitions import Machine

from bjtrainer.cards import Card, deal_one
from bjtrainer.errors import (
    IllegalActionError,
    InsufficientFundsError,
    InvalidBetError,
    WrongPhaseError,
)
from bjtrainer.game.actions import (
    Command,
    DealInitialCards,
    PlaceBet,
    PlayDealerHand,
    PlayerAction,
    PlayerMove,
    ResetRound,
    Reshuffle,
)
from bjtrainer.game.dealing import DealingPolicy, RandomPolicy, policy_for
from bjtrainer.game.state import GameResult, GameState, Phase, SplitHandState
from bjtrainer.hand import EMPTY_HAND, Hand, add_card
from bjtrainer.rules import GameSettings

logger = logging.getLogger(__name__)

# Never let a round start with fewer cards than this in the shoe
MIN_CARDS_PER_ROUND = 20

STATES = [p.name.lower() for p in Phase]

TRANSITIONS = [
    {"trigger": "place_bet", "source": "betting", "dest": "dealing"},
    {"trigger": "deal_initial", "source": "dealing", "dest": "player_turn"},
    # Player decisions
    {"trigger": "hit", "source": "player_turn", "dest": "player_turn"},
    {"trigger": "split", "source": "player_turn", "dest": "player_turn"},
    {"trigger": "insurance", "source": "player_turn", "dest": "player_turn"},
    {"trigger": "next_hand", "source": "player_turn", "dest": "player_turn"},
    {"trigger": "stand", "source": "player_turn", "dest": "dealer_turn"},
    {"trigger": "double_down", "source": "player_turn", "dest": "dealer_turn"},
    {"trigger": "bust", "source": "player_turn", "dest": "game_over"},
    {"trigger": "surrender", "source": "player_turn", "dest": "game_over"},
    # Dealer and round end
    {"trigger": "auto_play", "source": "dealer_turn", "dest": "game_over"},
    {"trigger": "reset", "source": ["game_over", "betting"], "dest": "betting"},
    {"trigger": "reshuffle", "source": "betting", "dest": "betting"},
]

# Table only; the engine owns no model, states travel inside GameState
_machine = Machine(
    model=None,
    states=STATES,
    transitions=TRANSITIONS,
    initial="betting",
    auto_transitions=False,
)

_ACTION_TRIGGERS = {
    PlayerAction.HIT: "hit",
    PlayerAction.STAND: "stand",
    PlayerAction.DOUBLE_DOWN: "double_down",
    PlayerAction.SPLIT: "split",
    PlayerAction.SURRENDER: "surrender",
    PlayerAction.INSURANCE: "insurance",
}

_CLEARED_FLAGS = {
    "can_double_down": False,
    "can_split": False,
    "can_surrender": False,
    "can_take_insurance": False,
}


def _fire(state: GameState, trigger: str, operation: str | None = None) -> Phase:
    """Return the phase ``trigger`` leads to from the current phase."""
    found = _machine.get_transitions(trigger=trigger, source=state.phase.name.lower())
    if not found:
        raise WrongPhaseError(operation or trigger.replace("_", " "), state.phase)
    return Phase[found[0].dest.upper()]


# ---------------------------------------------------------------------------
# Round setup
# ---------------------------------------------------------------------------


def initialize_game(
    shoe: Iterable[Card],
    starting_balance: int | None = None,
    settings: GameSettings | None = None,
) -> GameState:
    """
    Create the state for a new session.

    Args:
        shoe: Shuffled cards, front card dealt first
        starting_balance: Opening bankroll (defaults to the settings' value)
        settings: Table rules (defaults to ``GameSettings()``)
    """
    settings = settings or GameSettings()
    balance = settings.starting_balance if starting_balance is None else starting_balance
    if balance < 0:
        raise ValueError("starting_balance cannot be negative")
    return GameState(
        phase=Phase.BETTING,
        deck=tuple(shoe),
        player_score=balance,
        settings=settings,
    )


def place_bet(state: GameState, amount: int) -> GameState:
    """
    Wager ``amount`` and move to dealing.

    Raises:
        WrongPhaseError: Outside the betting phase
        InvalidBetError: Non-positive amount or outside the table limits
        InsufficientFundsError: Amount exceeds the balance
    """
    phase = _fire(state, "place_bet", "place bet")
    if amount <= 0:
        raise InvalidBetError(f"Bet must be positive, got {amount}")
    if amount > state.player_score:
        raise InsufficientFundsError(amount, state.player_score)

    settings = state.settings
    if not settings.min_bet <= amount <= settings.max_bet:
        raise InvalidBetError(
            f"Bet must be between {settings.min_bet} and {settings.max_bet}"
        )

    return replace(
        state,
        phase=phase,
        current_bet=amount,
        player_score=state.player_score - amount,
        is_game_active=True,
        result=None,
        last_hand_winnings=None,
        previous_balance=None,
    )


def deal_initial_cards(state: GameState, policy: DealingPolicy | None = None) -> GameState:
    """Deal two cards each and compute which actions are on offer."""
    phase = _fire(state, "deal_initial", "deal cards")
    deal = (policy or RandomPolicy()).deal_initial(state.deck)

    player = Hand(deal.player_cards)
    dealer = Hand(deal.dealer_cards)
    settings = state.settings
    two_live_cards = len(player) == 2 and not player.is_busted

    return replace(
        state,
        phase=phase,
        deck=deal.remaining,
        player_hand=player,
        dealer_hand=dealer,
        can_double_down=two_live_cards,
        can_split=len(player) == 2 and player.cards[0].value == player.cards[1].value,
        can_surrender=two_live_cards and settings.allow_surrender,
        can_take_insurance=dealer.cards[0].is_ace and settings.allow_insurance,
    )


# ---------------------------------------------------------------------------
# Player actions
# ---------------------------------------------------------------------------


def execute_player_action(state: GameState, action: PlayerAction | str) -> GameState:
    """
    Apply a player decision to the active hand.

    ``action`` may be a ``PlayerAction`` or its string value, e.g.
    ``"double-down"``.
    """
    action = PlayerAction(action)
    _fire(state, _ACTION_TRIGGERS[action], str(action))

    if action == PlayerAction.HIT:
        return _hit(state)
    if action == PlayerAction.STAND:
        return _stand(state)
    if action == PlayerAction.DOUBLE_DOWN:
        return _double_down(state)
    if action == PlayerAction.SPLIT:
        return _split(state)
    if action == PlayerAction.SURRENDER:
        return _surrender(state)
    return _take_insurance(state)


def _hit(state: GameState) -> GameState:
    card, deck = deal_one(state.deck)
    hand = add_card(state.player_hand, card)
    state = replace(state, deck=deck, **_CLEARED_FLAGS)

    if state.is_split:
        state = _update_active_split_hand(state, hand)
        if hand.is_busted:
            return _complete_split_hand(state, GameResult.DEALER_WINS)
        return state

    state = replace(state, player_hand=hand)
    if hand.is_busted:
        logger.debug("Player busts with %s", hand)
        return _settle(state, 0, GameResult.DEALER_WINS, _fire(state, "bust"))
    return state


def _stand(state: GameState) -> GameState:
    if state.is_split:
        return _complete_split_hand(replace(state, **_CLEARED_FLAGS))
    return replace(state, phase=_fire(state, "stand"), **_CLEARED_FLAGS)


def _double_down(state: GameState) -> GameState:
    if not state.can_double_down:
        raise IllegalActionError(PlayerAction.DOUBLE_DOWN)
    stake = state.active_bet
    if state.player_score < stake:
        raise InsufficientFundsError(stake, state.player_score)

    card, deck = deal_one(state.deck)
    hand = add_card(state.player_hand, card)
    state = replace(
        state,
        deck=deck,
        player_score=state.player_score - stake,
        **_CLEARED_FLAGS,
    )

    if state.is_split:
        index = state.active_split_hand_index
        doubled = replace(state.split_hands[index], hand=hand, bet=stake * 2)
        state = replace(
            state,
            player_hand=hand,
            split_hands=_replace_at(state.split_hands, index, doubled),
        )
        result = GameResult.DEALER_WINS if hand.is_busted else None
        return _complete_split_hand(state, result)

    state = replace(state, player_hand=hand, current_bet=stake * 2)
    if hand.is_busted:
        return _settle(state, 0, GameResult.DEALER_WINS, _fire(state, "bust"))
    return replace(state, phase=_fire(state, "double_down"))


def _split(state: GameState) -> GameState:
    if not state.can_split:
        raise IllegalActionError(PlayerAction.SPLIT)
    stake = state.active_bet
    if state.player_score < stake:
        raise InsufficientFundsError(stake, state.player_score)

    first_card, second_card = state.player_hand.cards
    card, deck = deal_one(state.deck)
    first = Hand((first_card, card))
    card, deck = deal_one(deck)
    second = Hand((second_card, card))

    new_hands = (SplitHandState(first, stake), SplitHandState(second, stake))
    if state.is_split:
        index = state.active_split_hand_index
        hands = state.split_hands[:index] + new_hands + state.split_hands[index + 1:]
    else:
        index = 0
        hands = new_hands

    logger.debug("Split into %d hands", len(hands))
    state = replace(
        state,
        deck=deck,
        player_score=state.player_score - stake,
        is_split=True,
        split_hands=hands,
        active_split_hand_index=index,
        **_CLEARED_FLAGS,
    )
    return _activate_split_hand(state, index)


def _surrender(state: GameState) -> GameState:
    if not state.can_surrender:
        raise IllegalActionError(PlayerAction.SURRENDER)
    refund = state.current_bet // 2
    settled = _settle(state, refund, GameResult.DEALER_WINS, _fire(state, "surrender"))
    return replace(settled, current_bet=0)


def _take_insurance(state: GameState) -> GameState:
    if not state.can_take_insurance:
        raise IllegalActionError(PlayerAction.INSURANCE)
    side_bet = state.current_bet // 2
    if state.player_score < side_bet:
        raise InsufficientFundsError(side_bet, state.player_score)
    return replace(
        state,
        player_score=state.player_score - side_bet,
        insurance_bet=state.insurance_bet + side_bet,
        can_take_insurance=False,
    )


# ---------------------------------------------------------------------------
# Split bookkeeping
# ---------------------------------------------------------------------------


def _replace_at(
    hands: tuple[SplitHandState, ...], index: int, hand: SplitHandState
) -> tuple[SplitHandState, ...]:
    return hands[:index] + (hand,) + hands[index + 1:]


def _update_active_split_hand(state: GameState, hand: Hand) -> GameState:
    index = state.active_split_hand_index
    updated = replace(state.split_hands[index], hand=hand)
    return replace(
        state,
        player_hand=hand,
        split_hands=_replace_at(state.split_hands, index, updated),
    )


def _can_resplit(state: GameState, hand: Hand) -> bool:
    settings = state.settings
    if len(hand) != 2 or hand.cards[0].value != hand.cards[1].value:
        return False
    if len(state.split_hands) >= settings.max_split_hands:
        return False
    return not hand.cards[0].is_ace or settings.resplit_aces


def _activate_split_hand(state: GameState, index: int) -> GameState:
    hand = state.split_hands[index].hand
    return replace(
        state,
        active_split_hand_index=index,
        player_hand=hand,
        can_double_down=not hand.is_busted and state.settings.double_after_split,
        can_split=_can_resplit(state, hand),
        can_surrender=False,
        can_take_insurance=False,
    )


def _complete_split_hand(state: GameState, result: GameResult | None = None) -> GameState:
    """Mark the active split hand complete and move to the next one."""
    index = state.active_split_hand_index
    done = replace(state.split_hands[index], is_complete=True, result=result)
    state = replace(state, split_hands=_replace_at(state.split_hands, index, done))

    for next_index, split_hand in enumerate(state.split_hands):
        if not split_hand.is_complete:
            return replace(_activate_split_hand(state, next_index), phase=_fire(state, "next_hand"))

    if all(h.hand.is_busted for h in state.split_hands):
        return _settle(state, 0, GameResult.DEALER_WINS, _fire(state, "bust"))
    return replace(state, phase=_fire(state, "stand"), **_CLEARED_FLAGS)


# ---------------------------------------------------------------------------
# Dealer play and settlement
# ---------------------------------------------------------------------------


def _dealer_draws(hand: Hand, hits_soft_17: bool) -> bool:
    if hand.total < 17:
        return True
    return hits_soft_17 and hand.total == 17 and hand.is_soft


def play_dealer_hand(state: GameState) -> GameState:
    """Draw the dealer's hand out and settle every live player hand."""
    phase = _fire(state, "auto_play", "play dealer hand")

    dealer = state.dealer_hand
    deck = state.deck
    while _dealer_draws(dealer, state.settings.dealer_hits_soft_17):
        card, deck = deal_one(deck)
        dealer = add_card(dealer, card)
    logger.debug("Dealer finishes with %s", dealer)

    state = replace(state, deck=deck, dealer_hand=dealer)
    payout = state.settings.blackjack_payout

    if not state.is_split:
        result = determine_result(state.player_hand, dealer)
        returned = calculate_winnings(state.current_bet, result, payout)
        return _settle(state, returned, result, phase)

    resolved = []
    returned = 0
    for split_hand in state.split_hands:
        result = split_hand.result or _split_hand_result(split_hand.hand, dealer)
        returned += calculate_winnings(split_hand.bet, result, payout)
        resolved.append(replace(split_hand, is_complete=True, result=result))

    staked = sum(h.bet for h in state.split_hands)
    if returned > staked:
        summary = GameResult.PLAYER_WINS
    elif returned < staked:
        summary = GameResult.DEALER_WINS
    else:
        summary = GameResult.PUSH

    state = replace(state, split_hands=tuple(resolved))
    return _settle(state, returned, summary, phase)


def _split_hand_result(hand: Hand, dealer: Hand) -> GameResult:
    """Result for a split hand; a two-card 21 here is not a blackjack."""
    if hand.is_busted:
        return GameResult.DEALER_WINS
    if dealer.is_blackjack:
        return GameResult.DEALER_BLACKJACK
    if dealer.is_busted or hand.total > dealer.total:
        return GameResult.PLAYER_WINS
    if hand.total < dealer.total:
        return GameResult.DEALER_WINS
    return GameResult.PUSH


def _settle(state: GameState, returned: int, result: GameResult, phase: Phase) -> GameState:
    """Credit the round's returns, insurance included, and end the round."""
    if state.insurance_bet and state.dealer_hand.is_blackjack:
        returned += state.insurance_bet * 3

    previous = state.player_score
    net = returned - state.total_wagered
    logger.debug("Round settled: %s, net %+d", result.value, net)

    return replace(
        state,
        phase=phase,
        player_score=previous + returned,
        result=result,
        is_game_active=False,
        last_hand_winnings=net,
        previous_balance=previous,
        **_CLEARED_FLAGS,
    )


def determine_result(player: Hand, dealer: Hand) -> GameResult:
    """Compare a finished player hand against the dealer's."""
    if player.is_busted:
        return GameResult.DEALER_WINS
    if dealer.is_busted:
        return GameResult.PLAYER_WINS
    if player.is_blackjack and dealer.is_blackjack:
        return GameResult.PUSH
    if player.is_blackjack:
        return GameResult.PLAYER_BLACKJACK
    if dealer.is_blackjack:
        return GameResult.DEALER_BLACKJACK
    if player.total > dealer.total:
        return GameResult.PLAYER_WINS
    if player.total < dealer.total:
        return GameResult.DEALER_WINS
    return GameResult.PUSH


def calculate_winnings(bet: int, result: GameResult, blackjack_payout: float = 1.5) -> int:
    """
    Total amount returned to the player for a settled bet, stake included.

    A 3:2 blackjack on 10 returns 25; a push returns the stake; a loss
    returns nothing.
    """
    if result == GameResult.PLAYER_WINS:
        return bet * 2
    if result == GameResult.PLAYER_BLACKJACK:
        return bet + math.floor(Decimal(bet) * Decimal(str(blackjack_payout)))
    if result == GameResult.PUSH:
        return bet
    return 0


# ---------------------------------------------------------------------------
# Between rounds
# ---------------------------------------------------------------------------


def reset_round(state: GameState) -> GameState:
    """Clear the table for the next bet; balance and shoe carry forward."""
    return replace(
        state,
        phase=_fire(state, "reset", "reset round"),
        player_hand=EMPTY_HAND,
        dealer_hand=EMPTY_HAND,
        current_bet=0,
        result=None,
        is_game_active=False,
        is_split=False,
        split_hands=(),
        active_split_hand_index=0,
        insurance_bet=0,
        **_CLEARED_FLAGS,
    )


def needs_reshuffle(state: GameState) -> bool:
    """True once the shoe has been dealt past the penetration cut."""
    settings = state.settings
    cut = int(52 * settings.deck_count * (1 - settings.penetration))
    return state.cards_remaining < max(cut, MIN_CARDS_PER_ROUND)


def reshuffle(state: GameState, shoe: Iterable[Card]) -> GameState:
    """Replace the shoe between rounds."""
    return replace(state, phase=_fire(state, "reshuffle"), deck=tuple(shoe))


def apply_action(state: GameState, command: Command) -> GameState:
    """Dispatch a command to the matching engine operation."""
    if isinstance(command, PlaceBet):
        return place_bet(state, command.amount)
    if isinstance(command, DealInitialCards):
        return deal_initial_cards(state, policy_for(command.focus))
    if isinstance(command, PlayerMove):
        return execute_player_action(state, command.action)
    if isinstance(command, PlayDealerHand):
        return play_dealer_hand(state)
    if isinstance(command, ResetRound):
        return reset_round(state)
    if isinstance(command, Reshuffle):
        return reshuffle(state, command.shoe)
    raise TypeError(f"Unknown command: {command!r}")
