"""
Binzingo Cardy - Input Validation Utilities

Provides validation functions for game engine inputs. All validators either
return validated data or raise a descriptive UsageError / RuleViolation.
"""

from typing import Sequence

from binzingo.engine.base import Card, CardPlayer, GameState
from binzingo.engine.errors import RuleViolation, UsageError
from binzingo.engine.rules import can_play, is_valid_multi_drop


def validate_roster(
    players: Sequence[tuple[str, str]],
    max_players: int = 10
) -> tuple[tuple[str, str], ...]:
    """
    Validate the (player_id, name) roster for a new round.

    Args:
        players: Seats in turn order
        max_players: Largest supported table

    Returns:
        Validated roster as a tuple

    Raises:
        UsageError: If the roster is empty, too large, or ids repeat
    """
    roster = tuple(players)
    if not roster:
        raise UsageError("Need at least 1 player to start.")
    if len(roster) > max_players:
        raise UsageError(f"At most {max_players} players allowed, got {len(roster)}.")

    ids = [player_id for player_id, _ in roster]
    if len(set(ids)) != len(ids):
        raise UsageError("Player ids must be unique.")
    for player_id in ids:
        if not player_id:
            raise UsageError("Player id must not be empty.")

    return roster


def validate_seated(state: GameState, player_id: str) -> int:
    """Return the seat index of `player_id`, or raise if not at the table."""
    index = state.player_index(player_id)
    if index is None:
        raise UsageError(f"Player {player_id} is not in this game.")
    return index


def validate_playing(state: GameState) -> None:
    if not state.is_playing:
        raise UsageError(f"Game is not in progress (phase: {state.phase.value}).")


def validate_turn(state: GameState, player_id: str) -> int:
    """
    Validate that it is `player_id`'s turn and nothing blocks normal play.

    Returns:
        The player's seat index

    Raises:
        UsageError: Wrong phase, wrong player, or an answer is outstanding
    """
    validate_playing(state)
    index = validate_seated(state, player_id)
    if index != state.current_player_index:
        raise UsageError("Not your turn!")
    if state.waiting_for_answer is not None:
        raise UsageError(
            f"Waiting for {state.waiting_for_answer} to answer the question."
        )
    return index


def validate_answering(state: GameState, player_id: str) -> int:
    """Validate that `player_id` is the one who owes a question answer."""
    validate_playing(state)
    index = validate_seated(state, player_id)
    if state.waiting_for_answer != player_id:
        raise UsageError("No question is waiting for your answer.")
    return index


def validate_cards_in_hand(
    player: CardPlayer,
    cards: Sequence[Card]
) -> tuple[Card, ...]:
    """
    Validate that every card is held by the player exactly once.

    Returns:
        The held Card objects, in the order given

    Raises:
        UsageError: If the list is empty, repeats a card, or names an unheld card
    """
    if not cards:
        raise UsageError("At least one card must be played.")

    ids = [card.id for card in cards]
    if len(set(ids)) != len(ids):
        raise UsageError("The same card cannot be played twice.")

    held = []
    for card in cards:
        match = player.find_card(card.id)
        if match is None:
            raise UsageError(f"{card} is not in your hand.")
        held.append(match)
    return tuple(held)


def validate_multi_drop(cards: Sequence[Card]) -> None:
    """
    Raises:
        UsageError: If several cards are not a legal multi-drop
    """
    if not is_valid_multi_drop(cards):
        raise UsageError(
            "Multi-drop cards must share one rank from J, K, 5, 6, 7, 9, 10 (no Jokers)."
        )


def validate_playable(state: GameState, cards: Sequence[Card]) -> None:
    """
    Raises:
        RuleViolation: If any card fails the legality check
    """
    top_card = state.top_card
    for card in cards:
        if not can_play(card, top_card, state):
            raise RuleViolation(f"{card} cannot be played on {top_card}.")


def validate_exact_target(
    hand_after: Sequence[Card],
    exact_card_id: str | None,
    played_card: Card
) -> Card:
    """
    Validate the hand card an Ace or Joker refers to.

    Args:
        hand_after: The player's hand once the played cards are removed
        exact_card_id: Referenced card id
        played_card: The Ace or Joker being played

    Returns:
        The referenced card

    Raises:
        UsageError: If the reference is missing or not in the remaining hand
    """
    if not exact_card_id:
        kind = "Joker" if played_card.is_joker else "Ace"
        raise UsageError(f"{kind} requires an exact card selection.")
    for card in hand_after:
        if card.id == exact_card_id:
            return card
    raise UsageError(f"Target card {exact_card_id} not found in your hand.")
