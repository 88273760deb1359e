"""
Binzingo Cardy - Card-Effect Resolver

Legality checks and per-rank effects. The legality predicate is evaluated by
strict priority: pending punishments first, then exact-card, question and suit
commands, and finally ordinary suit/rank matching.

Effects by rank:
    - 2 / 3: Start or extend a draw-2 / draw-3 punishment
    - A: Clear punishment and command, then command a suit for 3 turns
    - J: Skip the next player
    - K: Reverse direction
    - Q / 8: Ask a question the player must answer immediately
    - Joker: Clear punishment, command an exact card until it is played
"""

from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from binzingo.engine.base import (
    EXACT_CARD_TURNS,
    MULTI_DROP_RANKS,
    NON_ACTION_RANKS,
    QUESTION_RANKS,
    QUESTION_TURNS,
    SUIT_COMMAND_TURNS,
    ActiveCommand,
    Card,
    CardPlayer,
    CommandType,
    GameState,
    PendingPunishment,
    PunishmentType,
)

# Suit used when an Ace targets a joker
DEFAULT_COMMAND_SUIT = "hearts"


@dataclass(frozen=True)
class EffectOutcome:
    """
    Combined effect of every card in one play.

    Attributes:
        pending_punishment: Punishment after the play
        active_command: Command after the play
        skips: Number of Jacks played
        reversals: Number of Kings played
        question_asked: A Queen or 8 was played
        command_installed: The play set a new command
    """
    pending_punishment: PendingPunishment
    active_command: ActiveCommand
    skips: int = 0
    reversals: int = 0
    question_asked: bool = False
    command_installed: bool = False

    @property
    def reverses_direction(self) -> bool:
        """An even number of Kings cancels out."""
        return self.reversals % 2 == 1


def matches_top(card: Card, top_card: Card) -> bool:
    """Suit or rank match against the top of the discard pile."""
    return card.suit == top_card.suit or card.rank == top_card.rank


def can_play(card: Card, top_card: Card, state: GameState) -> bool:
    """
    Whether `card` may be played onto `top_card` under the current constraints.

    The first matching constraint is authoritative.
    """
    punishment = state.pending_punishment.type
    if punishment == PunishmentType.TWO:
        return card.rank in ("2", "A") or card.is_joker
    if punishment == PunishmentType.THREE:
        return card.rank in ("3", "A") or card.is_joker

    command = state.active_command
    if command.type == CommandType.EXACT_CARD:
        return card.id == command.value or card.rank == "A"
    if command.type == CommandType.QUESTION:
        return is_valid_answer(card, top_card)
    if command.type == CommandType.SUIT:
        return card.suit == command.value or card.rank == "A" or card.is_joker

    return matches_top(card, top_card) or card.rank == "A" or card.is_joker


def is_valid_answer(card: Card, top_card: Card) -> bool:
    """A question answer must be a non-action card matching suit or rank."""
    return card.rank in NON_ACTION_RANKS and matches_top(card, top_card)


def is_valid_multi_drop(cards: Sequence[Card]) -> bool:
    """Several cards may be dropped together only if they share a multi-drop rank."""
    if len(cards) < 2:
        return True
    rank = cards[0].rank
    if any(card.is_joker for card in cards):
        return False
    if any(card.rank != rank for card in cards):
        return False
    return rank in MULTI_DROP_RANKS


def is_winning_card(card: Card) -> bool:
    """Only non-action cards can end a round."""
    return card.rank in NON_ACTION_RANKS


def can_declare_win(player: CardPlayer) -> bool:
    """A win may be declared holding exactly one non-action card."""
    return len(player.hand) == 1 and is_winning_card(player.hand[0])


def next_player_index(
    current_index: int,
    player_count: int,
    direction: int,
    skips: int = 0
) -> int:
    """
    Seat index of the next player.

    Args:
        current_index: Seat whose turn is ending
        player_count: Number of seats
        direction: 1 or -1
        skips: Extra seats to jump (Jacks played)

    Returns:
        (current + direction * (1 + skips) + N) mod N
    """
    return (current_index + direction * (1 + skips) + player_count) % player_count


def fulfils_command(card: Card, command: ActiveCommand) -> bool:
    """Whether leading with `card` satisfies the active command."""
    if command.type == CommandType.EXACT_CARD:
        return card.id == command.value
    if command.type == CommandType.SUIT:
        return card.suit == command.value and not card.is_joker and card.rank != "A"
    return False


def resolve_effects(
    state: GameState,
    cards: Sequence[Card],
    exact_target: Card | None = None
) -> EffectOutcome:
    """
    Apply each card's rank effect in play order.

    Args:
        state: State before the play
        cards: Cards being played, already validated
        exact_target: Hand card referenced by an Ace or Joker

    Returns:
        EffectOutcome describing the combined result
    """
    punishment = state.pending_punishment
    command = state.active_command
    skips = 0
    reversals = 0
    question_asked = False
    command_installed = False

    for card in cards:
        if card.rank == "2":
            punishment = _stack(punishment, PunishmentType.TWO, 2)
        elif card.rank == "3":
            punishment = _stack(punishment, PunishmentType.THREE, 3)
        elif card.rank == "A":
            if len(cards) == 1 and exact_target is not None:
                punishment = PendingPunishment()
                suit = DEFAULT_COMMAND_SUIT if exact_target.is_joker else exact_target.suit
                command = ActiveCommand(CommandType.SUIT, suit, SUIT_COMMAND_TURNS)
                command_installed = True
        elif card.rank == "J":
            skips += 1
        elif card.rank == "K":
            reversals += 1
        elif card.rank in QUESTION_RANKS:
            command = ActiveCommand(CommandType.QUESTION, None, QUESTION_TURNS)
            question_asked = True
            command_installed = True
        elif card.is_joker:
            punishment = PendingPunishment()
            if exact_target is not None:
                command = ActiveCommand(
                    CommandType.EXACT_CARD, exact_target.id, EXACT_CARD_TURNS
                )
                command_installed = True

    return EffectOutcome(
        pending_punishment=punishment,
        active_command=command,
        skips=skips,
        reversals=reversals,
        question_asked=question_asked,
        command_installed=command_installed,
    )


def count_down_command(
    command: ActiveCommand,
    fulfilled: bool
) -> ActiveCommand:
    """Clear a fulfilled command, otherwise use up one of its turns."""
    if not command.is_active or fulfilled:
        return ActiveCommand()
    if command.remaining_turns <= 1:
        return ActiveCommand()
    return ActiveCommand(command.type, command.value, command.remaining_turns - 1)


def playable_cards(state: GameState, player: CardPlayer) -> tuple[Card, ...]:
    """Cards in the player's hand that pass `can_play` right now."""
    top_card = state.top_card
    return tuple(card for card in player.hand if can_play(card, top_card, state))


def rank_counts(cards: Sequence[Card]) -> Counter:
    return Counter(card.rank for card in cards)


def _stack(
    punishment: PendingPunishment,
    kind: PunishmentType,
    amount: int
) -> PendingPunishment:
    if punishment.type == kind:
        return PendingPunishment(kind, punishment.amount + amount)
    if punishment.type is None:
        return PendingPunishment(kind, amount)
    return punishment
