"""
Binzingo Cardy - Test Configuration and Fixtures

Common fixtures and builders for all test modules.
"""

import random
from dataclasses import replace
from typing import Callable

import pytest

from binzingo.engine.base import (
    JOKER,
    Card,
    CardPlayer,
    GamePhase,
    GameState,
    TurnTimerState,
)
from binzingo.engine.deck import build_deck


# =============================================================================
# CARD BUILDERS
# =============================================================================

def _make_card(rank: str, suit: str | None = None, tag: str = "") -> Card:
    if rank == JOKER:
        return Card(id=f"joker-{tag or '1'}", suit=JOKER, rank=JOKER, is_joker=True)
    card_id = f"{rank}-{suit}" + (f"-{tag}" if tag else "")
    return Card(id=card_id, suit=suit, rank=rank)


@pytest.fixture
def card() -> Callable[..., Card]:
    """
    Card builder: card("7", "hearts"), card("joker", tag="2").

    Ids match the deck's "{rank}-{suit}" convention unless a tag is given.
    """
    return _make_card


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """
    Build a playing-phase GameState from hands and a discard top.

    Args (of the returned builder):
        hands: One card list per seat, seats named "p1", "p2", ...
        top: Card on top of the discard pile
        deck: Draw pile (defaults to 10 harmless cards)
        **overrides: Any other GameState field
    """
    def _build(hands, top, deck=None, **overrides) -> GameState:
        if deck is None:
            deck = tuple(
                _make_card(rank, "clubs", tag="deck")
                for rank in ("4", "5", "6", "7", "9", "10", "4", "5", "6", "7")
            )
            deck = tuple(
                replace(c, id=f"{c.id}-{i}") for i, c in enumerate(deck)
            )
        players = tuple(
            CardPlayer(id=f"p{i + 1}", name=f"Player {i + 1}", hand=tuple(hand))
            for i, hand in enumerate(hands)
        )
        state = GameState(
            deck=tuple(deck),
            discard_pile=(top,),
            players=players,
            phase=GamePhase.PLAYING,
            turn_timer=TurnTimerState(45, True),
        )
        return replace(state, **overrides)

    return _build


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def full_deck() -> tuple[Card, ...]:
    return build_deck()


@pytest.fixture
def two_player_roster() -> list[tuple[str, str]]:
    return [("alice", "Alice"), ("bob", "Bob")]
