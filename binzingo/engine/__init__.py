"""
Binzingo Cardy Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles dealing, card effects, turn order, danger and win detection,
the turn timer and the bot policy.
"""

from binzingo.engine.base import (
    ActiveCommand,
    Card,
    CardPlayer,
    CommandType,
    EngineConfig,
    GamePhase,
    GameState,
    PendingPunishment,
    PunishmentType,
    TurnTimerState,
)
from binzingo.engine.binzingo import BinzingoEngine
from binzingo.engine.bot import BotAction, BotMove, BotPolicy
from binzingo.engine.danger import can_declare_danger
from binzingo.engine.errors import (
    ActionResult,
    DeckExhausted,
    EngineError,
    ErrorKind,
    InitializationFailure,
    ResourceExhaustion,
    RuleViolation,
    UsageError,
)
from binzingo.engine.rules import can_play, next_player_index
from binzingo.engine.scoring import RoundResult, calculate_round_scores
from binzingo.engine.timer import TurnTimer

__all__ = [
    # Data Classes
    "ActiveCommand",
    "Card",
    "CardPlayer",
    "EngineConfig",
    "GameState",
    "PendingPunishment",
    "RoundResult",
    "TurnTimerState",
    # Enums
    "CommandType",
    "GamePhase",
    "PunishmentType",
    # Results and errors
    "ActionResult",
    "DeckExhausted",
    "EngineError",
    "ErrorKind",
    "InitializationFailure",
    "ResourceExhaustion",
    "RuleViolation",
    "UsageError",
    # Engines
    "BinzingoEngine",
    "BotAction",
    "BotMove",
    "BotPolicy",
    "TurnTimer",
    # Rules
    "calculate_round_scores",
    "can_declare_danger",
    "can_play",
    "next_player_index",
]
