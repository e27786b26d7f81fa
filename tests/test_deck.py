import random

import pytest

from memory_match.engine.deck import (
    MAX_PAIR_COUNT, CardState, Rank, Suit, build_deck, deal_cards, face_up_unmatched,
    is_well_formed, reindex, unmatched_pair_count,
)


class TestBuildDeck:
    def test_deck_is_well_formed(self):
        cards = build_deck(8, seed=42)
        assert len(cards) == 16
        assert is_well_formed(cards, 8)
        assert all(not c.is_face_up and not c.is_matched and not c.is_error for c in cards)

    def test_same_seed_same_deck(self):
        assert build_deck(10, seed=123) == build_deck(10, seed=123)

    def test_different_seeds_differ(self):
        assert build_deck(10, seed=1) != build_deck(10, seed=2)

    def test_string_seed(self):
        assert build_deck(6, seed="2026-10-19") == build_deck(6, seed="2026-10-19")

    def test_full_deck(self):
        cards = build_deck(MAX_PAIR_COUNT, seed=0)
        assert is_well_formed(cards, MAX_PAIR_COUNT)

    @pytest.mark.parametrize("pair_count", [0, -1, MAX_PAIR_COUNT + 1])
    def test_invalid_pair_count(self, pair_count):
        with pytest.raises(ValueError):
            build_deck(pair_count, seed=0)

    def test_deal_uses_given_generator(self):
        assert deal_cards(6, random.Random(9)) == deal_cards(6, random.Random(9))


class TestCardState:
    def test_matches_on_suit_and_rank(self):
        a = CardState(0, Suit.HEARTS, Rank.ACE)
        b = CardState(1, Suit.HEARTS, Rank.ACE, is_face_up=True)
        c = CardState(2, Suit.DIAMONDS, Rank.ACE)
        assert a.matches(b)
        assert not a.matches(c)

    def test_str(self):
        card = CardState(0, Suit.SPADES, Rank.TEN)
        assert str(card) == "##"
        assert str(CardState(0, Suit.SPADES, Rank.TEN, is_face_up=True)) == "10♠"
        assert str(CardState(0, Suit.SPADES, Rank.TEN, is_face_up=True, is_matched=True)) == "[10♠]"

    def test_red_suits(self):
        assert Suit.HEARTS.is_red and Suit.DIAMONDS.is_red
        assert not Suit.CLUBS.is_red and not Suit.SPADES.is_red


class TestBoardHelpers:
    def test_reindex(self):
        cards = [CardState(7, Suit.HEARTS, Rank.ACE), CardState(3, Suit.CLUBS, Rank.KING)]
        assert [c.id for c in reindex(cards)] == [0, 1]

    def test_face_up_unmatched_ignores_matched(self):
        cards = [
            CardState(0, Suit.HEARTS, Rank.ACE, is_face_up=True, is_matched=True),
            CardState(1, Suit.HEARTS, Rank.ACE, is_face_up=True, is_matched=True),
            CardState(2, Suit.CLUBS, Rank.TWO, is_face_up=True),
            CardState(3, Suit.CLUBS, Rank.TWO),
        ]
        assert [c.id for c in face_up_unmatched(cards)] == [2]
        assert unmatched_pair_count(cards) == 1

    def test_ill_formed_board(self):
        cards = (CardState(0, Suit.HEARTS, Rank.ACE), CardState(1, Suit.CLUBS, Rank.ACE))
        assert not is_well_formed(cards, 1)
