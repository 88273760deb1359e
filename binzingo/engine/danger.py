"""
Binzingo Cardy - Danger Eligibility

Decides whether a player may declare "danger", i.e. whether the hand shows a
realistic path to winning soon. A single card always qualifies; larger hands
need at least one non-action card to finish on, plus an enabler.

Win paths for hands of two or more cards:
    - 2 / 3: Force the next player to draw, then finish
    - K / J: Skip or turn around the next player, then finish
    - A: Command a suit, then finish on a matching card
    - Joker: Command an exact card, then finish on it
    - Two or more non-action cards of one rank in {5, 6, 7, 9, 10}: multi-drop
    - Two or more non-action cards of the discard top's suit or rank

Question cards (Q / 8) never open a path; a hand that holds one alongside a
non-action card is treated as ineligible.
"""

from binzingo.engine.base import (
    NON_ACTION_RANKS,
    QUESTION_RANKS,
    CardPlayer,
    GameState,
)
from binzingo.engine.rules import rank_counts

# Ranks considered for multi-drop win paths
DANGER_MULTI_DROP_RANKS = ("5", "6", "7", "9", "10")

_ENABLER_RANKS = frozenset({"2", "3", "K", "J", "A"})


def can_declare_danger(player: CardPlayer, state: GameState) -> bool:
    """
    Whether `player` may declare danger in `state`.

    Args:
        player: The declaring player
        state: Current game state (only the discard top is consulted)

    Returns:
        True if the hand shows a realistic win path
    """
    if player.has_declared_danger:
        return False
    if not player.hand:
        return False
    if len(player.hand) == 1:
        return True

    non_action = [card for card in player.hand if card.rank in NON_ACTION_RANKS]
    if not non_action:
        return False

    if any(card.rank in QUESTION_RANKS for card in player.hand):
        return False

    if any(card.rank in _ENABLER_RANKS or card.is_joker for card in player.hand):
        return True

    counts = rank_counts(non_action)
    if any(counts[rank] >= 2 for rank in DANGER_MULTI_DROP_RANKS):
        return True

    top_card = state.top_card
    if sum(1 for card in non_action if card.suit == top_card.suit) >= 2:
        return True
    if sum(1 for card in non_action if card.rank == top_card.rank) >= 2:
        return True

    return False
