"""
Binzingo Cardy Game Sessions.

Live ownership of a round: serialized transitions, the turn clock, bot
scheduling, events and snapshots for the layers above.
"""

from binzingo.session.events import EventPayload, GameEvent, classify_transition
from binzingo.session.manager import GameSession, close_session, get_session
from binzingo.session.scheduler import TurnScheduler
from binzingo.session.snapshot import CardModel, GameSnapshot, PlayerModel

__all__ = [
    "CardModel",
    "EventPayload",
    "GameEvent",
    "GameSession",
    "GameSnapshot",
    "PlayerModel",
    "TurnScheduler",
    "classify_transition",
    "close_session",
    "get_session",
]
