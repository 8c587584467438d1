"""Tests for Hand evaluation."""

import pytest

from bjtrainer.cards import Card, Rank, Suit
from bjtrainer.hand import EMPTY_HAND, Hand, add_card, describe_hand, hand_value


class TestHandValue:
    """Tests for ace reduction."""

    def test_empty(self):
        """Test no cards value to hard zero."""
        assert hand_value([]) == (0, False)

    def test_hard_total(self, hard_16_hand):
        """Test a hand without aces is hard."""
        assert hard_16_hand.total == 16
        assert not hard_16_hand.is_soft

    def test_soft_total(self, soft_17_hand):
        """Test an ace counted as 11 makes the hand soft."""
        assert soft_17_hand.total == 17
        assert soft_17_hand.is_soft

    def test_two_aces_are_soft_12(self):
        """Test A,A is soft 12."""
        hand = Hand.from_strings("AS", "AH")
        assert hand.total == 12
        assert hand.is_soft

    def test_three_aces_are_soft_13(self):
        """Only two aces need reducing; one still counts 11."""
        hand = Hand.from_strings("AS", "AH", "AD")
        assert hand.total == 13
        assert hand.is_soft

    def test_soft_hand_turns_hard(self):
        """Test a soft hand turns hard when the ace must count 1."""
        hand = Hand.from_strings("AS", "6H", "10C")
        assert hand.total == 17
        assert not hand.is_soft

    def test_ace_ace_nine(self):
        """Test A,A,9 is soft 21 but not blackjack."""
        hand = Hand.from_strings("AS", "AH", "9C")
        assert hand.total == 21
        assert hand.is_soft
        assert not hand.is_blackjack


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self):
        """Test the empty hand has no flags set."""
        assert len(EMPTY_HAND) == 0
        assert EMPTY_HAND.total == 0
        assert not EMPTY_HAND.is_blackjack
        assert not EMPTY_HAND.is_busted

    def test_blackjack(self, blackjack_hand):
        """Test an ace and a king are blackjack."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.total == 21
        assert blackjack_hand.is_soft

    def test_three_card_21_is_not_blackjack(self):
        """Test three cards to 21 are not blackjack."""
        hand = Hand.from_strings("7S", "7H", "7C")
        assert hand.total == 21
        assert not hand.is_blackjack

    def test_bust(self, bust_hand):
        """Test a total over 21 is busted."""
        assert bust_hand.is_busted
        assert bust_hand.total == 26

    def test_twenty_two_is_bust(self):
        """Test 22 is a bust."""
        assert Hand.from_strings("10S", "10H", "2C").is_busted

    def test_pair_requires_same_rank(self, pair_8s_hand):
        """Test only two cards of one rank form a pair."""
        assert pair_8s_hand.is_pair
        assert not Hand.from_strings("KS", "QH").is_pair
        assert not Hand.from_strings("8S", "8H", "8C").is_pair

    def test_hand_is_immutable(self, hard_16_hand):
        """Test hands cannot be modified."""
        with pytest.raises(AttributeError):
            hard_16_hand.total = 3

    def test_add_card_returns_new_hand(self, soft_17_hand):
        """Test adding a card leaves the original hand alone."""
        bigger = add_card(soft_17_hand, Card(Rank.TEN, Suit.CLUBS))
        assert len(soft_17_hand) == 2
        assert len(bigger) == 3
        assert bigger.total == 17
        assert not bigger.is_soft

    def test_derived_fields_follow_cards(self):
        """Flags are recomputed from scratch, never carried over."""
        hand = add_card(Hand.from_strings("AS"), Card(Rank.KING, Suit.HEARTS))
        assert hand.is_blackjack
        hand = add_card(hand, Card(Rank.TWO, Suit.HEARTS))
        assert not hand.is_blackjack
        assert hand.total == 13


class TestDescribeHand:
    @pytest.mark.parametrize(
        "cards,label",
        [
            (("AS", "KH"), "Blackjack"),
            (("10S", "10H", "5C"), "Busted"),
            (("8S", "8H"), "Pair of 8s"),
            (("AS", "7H"), "Soft 18"),
            (("10S", "2H"), "Hard 12"),
        ],
    )
    def test_labels(self, cards, label):
        """Test the short category labels."""
        assert describe_hand(Hand.from_strings(*cards)) == label
