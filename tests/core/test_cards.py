"""Tests for cards and shoe utilities."""

import pytest
from collections import Counter
from random import Random

from bjtrainer.cards import Card, Rank, Suit, build_deck, build_shoe, deal_one, new_shoe, shuffle
from bjtrainer.errors import EmptyShoeError


class TestCard:
    """Tests for the Card class."""

    def test_card_immutability(self):
        """Cards cannot be modified."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_value(self):
        """Numeric ranks are face value, faces 10, ace 11."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.QUEEN, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_ten_value_and_ace(self):
        """Test face cards count as ten and aces are flagged."""
        assert Card(Rank.KING, Suit.SPADES).is_ten_value
        assert not Card(Rank.NINE, Suit.SPADES).is_ten_value
        assert Card(Rank.ACE, Suit.SPADES).is_ace
        assert not Card(Rank.ACE, Suit.SPADES).is_ten_value

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("AS", Card(Rank.ACE, Suit.SPADES)),
            ("10h", Card(Rank.TEN, Suit.HEARTS)),
            ("TD", Card(Rank.TEN, Suit.DIAMONDS)),
            ("K♣", Card(Rank.KING, Suit.CLUBS)),
        ],
    )
    def test_from_string(self, text, expected):
        """Test parsing short card strings."""
        assert Card.from_string(text) == expected

    @pytest.mark.parametrize("text", ["", "A", "1S", "AX", "11H"])
    def test_from_string_rejects_garbage(self, text):
        """Test that malformed card strings raise ValueError."""
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_str_uses_symbols(self):
        """Test cards print with suit symbols."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"

    def test_cards_are_values(self):
        """Equal cards hash the same; duplicates are fine in a shoe."""
        assert len({Card(Rank.ACE, Suit.SPADES), Card(Rank.ACE, Suit.SPADES)}) == 1


class TestShoe:
    """Tests for building, shuffling and dealing."""

    def test_deck_has_52_unique_cards(self):
        """Verify one deck holds each card exactly once."""
        deck = build_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52

    @pytest.mark.parametrize("decks", [1, 2, 6, 8])
    def test_shoe_size(self, decks):
        """Test shoe size scales with the deck count."""
        assert len(build_shoe(decks)) == 52 * decks

    def test_six_deck_default(self):
        """Test the default shoe is six decks."""
        shoe = build_shoe()
        assert len(shoe) == 312
        assert all(count == 6 for count in Counter(shoe).values())

    @pytest.mark.parametrize("decks", [0, 9, -1])
    def test_invalid_deck_count(self, decks):
        """Test deck counts outside 1-8 are rejected."""
        with pytest.raises(ValueError):
            build_shoe(decks)

    def test_shuffle_is_permutation(self, rng):
        """Verify shuffling reorders without adding or losing cards."""
        shoe = build_shoe(2)
        shuffled = shuffle(shoe, rng)
        assert Counter(shuffled) == Counter(shoe)
        assert shuffled != shoe

    def test_shuffle_does_not_touch_input(self, rng):
        """Test the original shoe is left untouched."""
        shoe = build_shoe(1)
        shuffle(shoe, rng)
        assert shoe == build_shoe(1)

    def test_seeded_shuffle_is_reproducible(self):
        """Test the same seed gives the same shoe."""
        assert new_shoe(6, Random(7)) == new_shoe(6, Random(7))

    def test_deal_one_takes_front_card(self):
        """Test dealing takes the front card and returns the rest."""
        shoe = build_shoe(1)
        card, rest = deal_one(shoe)
        assert card == shoe[0]
        assert rest == shoe[1:]
        assert len(rest) == 51

    def test_deal_from_empty_shoe(self):
        """Test dealing from an empty shoe raises EmptyShoeError."""
        with pytest.raises(EmptyShoeError):
            deal_one(())

    @pytest.mark.parametrize("deck_count", [1, 6, 8])
    def test_dealing_out_a_shoe_returns_every_card_in_order(self, deck_count):
        """Dealing an unshuffled shoe to the end yields it unchanged, then raises."""
        shoe = build_shoe(deck_count)
        dealt = []
        remaining = shoe
        while remaining:
            card, remaining = deal_one(remaining)
            dealt.append(card)

        assert len(dealt) == 52 * deck_count
        assert tuple(dealt) == build_shoe(deck_count)
        with pytest.raises(EmptyShoeError):
            deal_one(remaining)
