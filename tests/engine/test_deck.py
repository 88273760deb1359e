"""
Binzingo Cardy - Deck, Shuffle and Dealer Tests
"""

import random
from collections import Counter

import pytest

from binzingo.engine.base import ILLEGAL_STARTERS, JOKER, RANKS, SUITS
from binzingo.engine.deck import (
    DECK_SIZE,
    build_deck,
    can_start,
    deal_cards,
    draw_cards,
    find_valid_starter,
    shuffle_deck,
)
from binzingo.engine.errors import DeckExhausted, ErrorKind, ResourceExhaustion


class TestBuildDeck:
    """Tests for build_deck()."""

    def test_has_54_cards(self):
        assert len(build_deck()) == DECK_SIZE == 54

    def test_ids_are_unique(self):
        ids = [c.id for c in build_deck()]
        assert len(set(ids)) == 54

    def test_thirteen_ranks_per_suit(self):
        deck = build_deck()
        for suit in SUITS:
            ranks = sorted(c.rank for c in deck if c.suit == suit)
            assert ranks == sorted(RANKS)

    def test_two_jokers(self):
        jokers = [c for c in build_deck() if c.is_joker]
        assert len(jokers) == 2
        assert all(c.suit == JOKER and c.rank == JOKER for c in jokers)

    def test_id_format(self):
        ids = {c.id for c in build_deck()}
        assert "10-hearts" in ids
        assert "A-spades" in ids
        assert {"joker-1", "joker-2"} <= ids


class TestShuffleDeck:
    """Tests for shuffle_deck()."""

    def test_is_permutation(self, full_deck):
        shuffled = shuffle_deck(full_deck, random.Random(7))
        assert Counter(c.id for c in shuffled) == Counter(c.id for c in full_deck)

    def test_does_not_modify_input(self, full_deck):
        before = tuple(full_deck)
        shuffle_deck(full_deck, random.Random(7))
        assert full_deck == before

    def test_seeded_is_reproducible(self, full_deck):
        a = shuffle_deck(full_deck, random.Random(42))
        b = shuffle_deck(full_deck, random.Random(42))
        assert a == b

    def test_different_seeds_differ(self, full_deck):
        a = shuffle_deck(full_deck, random.Random(1))
        b = shuffle_deck(full_deck, random.Random(2))
        assert a != b

    def test_positional_occupancy_roughly_uniform(self):
        """Each card of a 4-card deck should land in each slot ~25% of the time."""
        items = build_deck()[:4]
        rng = random.Random(99)
        samples = 8000
        counts = Counter()
        for _ in range(samples):
            shuffled = shuffle_deck(items, rng)
            counts[(shuffled[0].id)] += 1
        for card in items:
            share = counts[card.id] / samples
            assert 0.22 < share < 0.28


class TestDealCards:
    """Tests for deal_cards()."""

    @pytest.mark.parametrize("players", [1, 2, 4, 10])
    def test_consumes_four_per_player(self, full_deck, players):
        hands, remaining = deal_cards(full_deck, players)
        assert len(hands) == players
        assert all(len(h) == 4 for h in hands)
        assert len(remaining) == 54 - 4 * players

    def test_round_robin_from_tail(self, full_deck):
        hands, _ = deal_cards(full_deck, 2)
        # Seat 0 gets the last card, seat 1 the one before it, and so on
        assert hands[0][0] == full_deck[-1]
        assert hands[1][0] == full_deck[-2]
        assert hands[0][1] == full_deck[-3]

    def test_remaining_is_prefix(self, full_deck):
        _, remaining = deal_cards(full_deck, 3)
        assert remaining == full_deck[:54 - 12]

    def test_not_enough_cards(self, full_deck):
        with pytest.raises(DeckExhausted):
            deal_cards(full_deck[:7], 2)

    def test_custom_hand_size(self, full_deck):
        hands, remaining = deal_cards(full_deck, 2, hand_size=7)
        assert all(len(h) == 7 for h in hands)
        assert len(remaining) == 40


class TestFindValidStarter:
    """Tests for find_valid_starter()."""

    def test_top_card_valid(self, card):
        deck = (card("K", "hearts"), card("7", "clubs"))
        starter, remaining = find_valid_starter(deck)
        assert starter == card("7", "clubs")
        assert remaining == (card("K", "hearts"),)

    def test_skips_illegal_starters(self, card):
        deck = (card("5", "spades"), card("joker"), card("A", "hearts"), card("8", "clubs"))
        starter, remaining = find_valid_starter(deck)
        assert starter.rank == "5"
        assert remaining == ()

    def test_no_valid_starter(self, card):
        deck = (card("2", "hearts"), card("Q", "clubs"), card("joker"))
        with pytest.raises(DeckExhausted) as exc_info:
            find_valid_starter(deck)
        assert exc_info.value.kind == ErrorKind.INITIALIZATION_FAILURE

    def test_empty_deck(self):
        with pytest.raises(DeckExhausted):
            find_valid_starter(())

    def test_starter_never_illegal(self, full_deck):
        for seed in range(50):
            deck = shuffle_deck(full_deck, random.Random(seed))
            starter, _ = find_valid_starter(deck)
            assert starter.rank not in ILLEGAL_STARTERS

    @pytest.mark.parametrize("rank", ["2", "3", "8", "A", "J", "Q", "K"])
    def test_can_start_rejects_action_ranks(self, card, rank):
        assert can_start(card(rank, "hearts")) is False

    @pytest.mark.parametrize("rank", ["4", "5", "6", "7", "9", "10"])
    def test_can_start_accepts_non_action(self, card, rank):
        assert can_start(card(rank, "hearts")) is True


class TestDrawCards:
    """Tests for draw_cards() and the discard recycling policy."""

    def test_draws_from_tail(self, card):
        deck = (card("4", "hearts"), card("5", "hearts"))
        drawn, remaining, pile = draw_cards(deck, (card("9", "clubs"),), 1)
        assert drawn == (card("5", "hearts"),)
        assert remaining == (card("4", "hearts"),)
        assert pile == (card("9", "clubs"),)

    def test_recycles_discard_pile_keeping_top(self, card):
        pile = (card("4", "spades"), card("5", "spades"), card("9", "clubs"))
        drawn, remaining, new_pile = draw_cards((), pile, 2, random.Random(3))
        assert {c.id for c in drawn} == {"4-spades", "5-spades"}
        assert remaining == ()
        assert new_pile == (card("9", "clubs"),)

    def test_partial_draw_when_everything_runs_out(self, card):
        deck = (card("4", "hearts"),)
        pile = (card("6", "diamonds"), card("9", "clubs"))
        drawn, remaining, new_pile = draw_cards(deck, pile, 5, random.Random(3))
        assert len(drawn) == 2
        assert remaining == ()
        assert new_pile == (card("9", "clubs"),)

    def test_nothing_to_draw(self, card):
        with pytest.raises(ResourceExhaustion):
            draw_cards((), (card("9", "clubs"),), 1)

    def test_recycle_leaves_action_top_alone_on_pile(self, card):
        pile = (card("9", "clubs"), card("5", "spades"), card("K", "hearts"))
        drawn, remaining, new_pile = draw_cards((), pile, 1, random.Random(3))
        assert len(drawn) == 1
        assert new_pile == (card("K", "hearts"),)
        assert new_pile[0].rank in ILLEGAL_STARTERS
