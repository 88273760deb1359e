"""
Binzingo Cardy - Danger Eligibility Tests
"""

import pytest

from binzingo.engine.base import CardPlayer
from binzingo.engine.danger import can_declare_danger


def _player(hand, declared=False):
    return CardPlayer(id="p1", name="P1", hand=tuple(hand), has_declared_danger=declared)


class TestCanDeclareDanger:
    """Tests for can_declare_danger()."""

    def test_single_card(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        assert can_declare_danger(_player([card("7", "diamonds")]), state) is True

    def test_single_action_card(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        assert can_declare_danger(_player([card("A", "diamonds")]), state) is True

    def test_only_question_cards(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        hand = [card("Q", "spades"), card("8", "clubs")]
        assert can_declare_danger(_player(hand), state) is False

    def test_empty_hand(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        assert can_declare_danger(_player([]), state) is False

    def test_already_declared(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        assert can_declare_danger(_player([card("7", "diamonds")], declared=True), state) is False

    def test_only_action_cards(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        hand = [card("K", "hearts"), card("2", "clubs")]
        assert can_declare_danger(_player(hand), state) is False

    @pytest.mark.parametrize("enabler", ["2", "3", "K", "J", "A", "joker"])
    def test_enablers(self, make_state, card, enabler):
        state = make_state([[]], card("9", "spades"))
        hand = [card(enabler, "hearts"), card("4", "diamonds")]
        assert can_declare_danger(_player(hand), state) is True

    def test_question_card_blocks_enabler(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        hand = [card("K", "hearts"), card("Q", "hearts"), card("4", "diamonds")]
        assert can_declare_danger(_player(hand), state) is False

    @pytest.mark.parametrize("rank", ["5", "6", "7", "9", "10"])
    def test_multi_drop_pair(self, make_state, card, rank):
        state = make_state([[]], card("4", "spades"))
        hand = [card(rank, "hearts"), card(rank, "diamonds")]
        assert can_declare_danger(_player(hand), state) is True

    def test_pair_of_fours_is_not_multi_drop(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        hand = [card("4", "hearts"), card("4", "diamonds")]
        assert can_declare_danger(_player(hand), state) is False

    def test_two_of_top_suit(self, make_state, card):
        state = make_state([[]], card("9", "hearts"))
        hand = [card("4", "hearts"), card("6", "hearts")]
        assert can_declare_danger(_player(hand), state) is True

    def test_two_of_top_rank(self, make_state, card):
        state = make_state([[]], card("4", "spades"))
        hand = [card("4", "hearts"), card("4", "diamonds")]
        assert can_declare_danger(_player(hand), state) is True

    def test_unrelated_non_action_cards(self, make_state, card):
        state = make_state([[]], card("9", "spades"))
        hand = [card("4", "hearts"), card("6", "diamonds")]
        assert can_declare_danger(_player(hand), state) is False
