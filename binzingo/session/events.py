"""
Binzingo Cardy - Game Event Definitions

Event types and payloads emitted after each state transition, for the
layers that broadcast or persist game state.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from binzingo.engine.base import GamePhase, GameState


class GameEvent(Enum):
    """Events that can occur during a round."""

    GAME_STARTED = auto()
    CARDS_PLAYED = auto()
    CARD_DRAWN = auto()
    PUNISHMENT_DRAWN = auto()
    DANGER_DECLARED = auto()
    QUESTION_ASKED = auto()
    QUESTION_ANSWERED = auto()
    COMMAND_SET = auto()
    DIRECTION_REVERSED = auto()
    PLAYER_CARDLESS = auto()
    TURN_ADVANCED = auto()
    TIMER_EXPIRED = auto()
    ROUND_WON = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for event data."""

    event: GameEvent
    game_id: str
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def classify_transition(
    before: GameState | None,
    after: GameState,
    actor_id: str | None = None
) -> list[GameEvent]:
    """
    Determine the game events between two consecutive states.

    Args:
        before: State before the transition (None for a new round)
        after: State after the transition
        actor_id: Player who acted, if known

    Returns:
        Events in the order a UI would announce them; STATE_UPDATED when
        nothing more specific applies
    """
    if before is None:
        return [GameEvent.GAME_STARTED]

    events: list[GameEvent] = []
    actor = after.get_player(actor_id) if actor_id else None
    actor_before = before.get_player(actor_id) if actor_id else None

    if actor and actor_before:
        if actor.has_declared_danger and not actor_before.has_declared_danger:
            events.append(GameEvent.DANGER_DECLARED)

        if len(after.discard_pile) > len(before.discard_pile) and len(actor.hand) < len(actor_before.hand):
            if before.waiting_for_answer == actor_id:
                events.append(GameEvent.QUESTION_ANSWERED)
            else:
                events.append(GameEvent.CARDS_PLAYED)
                if any(c.rank == "A" or c.is_joker for c in after.last_played_cards):
                    events.append(GameEvent.COMMAND_SET)

        if len(actor.hand) > len(actor_before.hand):
            if before.pending_punishment.is_active and not after.pending_punishment.is_active:
                events.append(GameEvent.PUNISHMENT_DRAWN)
            else:
                events.append(GameEvent.CARD_DRAWN)

        if actor.is_cardless and not actor_before.is_cardless:
            events.append(GameEvent.PLAYER_CARDLESS)

    if after.waiting_for_answer and after.waiting_for_answer != before.waiting_for_answer:
        events.append(GameEvent.QUESTION_ASKED)

    if after.direction != before.direction:
        events.append(GameEvent.DIRECTION_REVERSED)

    if after.phase == GamePhase.ROUND_ENDED and before.phase != GamePhase.ROUND_ENDED:
        events.append(GameEvent.ROUND_WON)
    elif after.turn_serial != before.turn_serial:
        events.append(GameEvent.TURN_ADVANCED)

    return events or [GameEvent.STATE_UPDATED]
