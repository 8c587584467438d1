"""Tests for dealing policies."""

import pytest
from collections import Counter

from bjtrainer.cards import Card, new_shoe
from bjtrainer.errors import EmptyShoeError
from bjtrainer.game.actions import DealInitialCards, PlaceBet, PracticeFocus
from bjtrainer.game.dealing import RandomPolicy, ScenarioPolicy, policy_for
from bjtrainer.game.engine import apply_action, initialize_game
from bjtrainer.hand import Hand


def shoe_of(*codes):
    return tuple(Card.from_string(c) for c in codes)


def conserved(deal, shoe):
    dealt = [*deal.player_cards, *deal.dealer_cards, *deal.remaining]
    return Counter(dealt) == Counter(shoe)


class TestRandomPolicy:
    def test_alternates_player_and_dealer(self):
        """Test cards go player, dealer, player, dealer."""
        shoe = shoe_of("2S", "3S", "4S", "5S", "6S")
        deal = RandomPolicy().deal_initial(shoe)
        assert deal.player_cards == shoe_of("2S", "4S")
        assert deal.dealer_cards == shoe_of("3S", "5S")
        assert deal.remaining == shoe_of("6S")

    def test_short_shoe(self):
        """Test a shoe with fewer than four cards cannot deal."""
        with pytest.raises(EmptyShoeError):
            RandomPolicy().deal_initial(shoe_of("2S", "3S"))


class TestScenarioPolicy:
    def test_split_finds_earliest_pair(self):
        """Test the split scenario pulls the first pair in the shoe."""
        shoe = shoe_of("10S", "7H", "5C", "9D", "5H", "2C")
        deal = ScenarioPolicy(PracticeFocus.SPLIT).deal_initial(shoe)
        assert deal.player_cards == shoe_of("5C", "5H")
        assert deal.dealer_cards == shoe_of("10S", "7H")
        assert deal.remaining == shoe_of("9D", "2C")
        assert conserved(deal, shoe)

    def test_double_down_sets_up_11_vs_weak_dealer(self):
        """Test the double scenario deals hard 11 against 3-6."""
        shoe = shoe_of("KS", "AH", "4C", "9D", "7H", "5C", "QD")
        deal = ScenarioPolicy(PracticeFocus.DOUBLE_DOWN).deal_initial(shoe)
        hand = Hand(deal.player_cards)
        assert hand.total == 11
        assert hand.is_hard
        assert 3 <= deal.dealer_cards[0].value <= 6
        assert conserved(deal, shoe)

    def test_hit_sets_up_stiff_vs_strong_dealer(self):
        """Test the hit scenario deals a stiff hand against 7 or higher."""
        shoe = shoe_of("5S", "KH", "4C", "8D", "9C", "2H")
        deal = ScenarioPolicy(PracticeFocus.HIT).deal_initial(shoe)
        hand = Hand(deal.player_cards)
        assert 12 <= hand.total <= 16
        assert not hand.is_pair
        assert deal.dealer_cards[0].value >= 7

    def test_stand_sets_up_hard_17_plus(self):
        """Test the stand scenario deals hard 17-20."""
        shoe = shoe_of("2S", "3H", "KC", "8D", "4C", "5H")
        deal = ScenarioPolicy(PracticeFocus.STAND).deal_initial(shoe)
        hand = Hand(deal.player_cards)
        assert 17 <= hand.total <= 20
        assert hand.is_hard

    def test_falls_back_when_search_fails(self):
        """Test a shoe without the scenario is dealt normally."""
        shoe = shoe_of("2S", "3H", "4C", "6D", "7C")
        deal = ScenarioPolicy(PracticeFocus.SPLIT).deal_initial(shoe)
        assert deal == RandomPolicy().deal_initial(shoe)

    def test_search_is_deterministic(self, rng):
        """Verify the same shoe always yields the same deal."""
        shoe = new_shoe(1, rng)
        policy = ScenarioPolicy(PracticeFocus.DOUBLE_DOWN)
        assert policy.deal_initial(shoe) == policy.deal_initial(shoe)

    @pytest.mark.parametrize("focus", list(PracticeFocus))
    def test_full_shoe_conserves_cards(self, rng, focus):
        """Verify no policy adds or loses cards."""
        shoe = new_shoe(6, rng)
        assert conserved(policy_for(focus).deal_initial(shoe), shoe)

    def test_policy_for(self):
        """Test each focus maps to its policy."""
        assert isinstance(policy_for(PracticeFocus.NONE), RandomPolicy)
        assert isinstance(policy_for(PracticeFocus.SPLIT), ScenarioPolicy)

    def test_engine_deals_practice_scenario(self, rng):
        """Test the engine deals a pair when practising splits."""
        state = initialize_game(new_shoe(6, rng))
        state = apply_action(state, PlaceBet(25))
        state = apply_action(state, DealInitialCards(PracticeFocus.SPLIT))
        assert state.player_hand.is_pair
        assert state.can_split
        assert state.cards_remaining == 312 - 4
