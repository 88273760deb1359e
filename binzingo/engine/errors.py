"""
Binzingo Cardy - Engine Errors and Action Results

Validators raise typed EngineError subclasses. Public engine operations catch
them and hand back an ActionResult, so callers branch on `result.ok` and
`result.error.kind` instead of wrapping every call in try/except.
"""

from dataclasses import dataclass
from enum import Enum, auto

from binzingo.engine.base import GameState


class ErrorKind(Enum):
    """Categories of rejected actions."""
    USAGE = auto()                   # out of turn/phase, missing or invalid target
    RULE_VIOLATION = auto()          # illegal play, declaration or answer
    RESOURCE_EXHAUSTION = auto()     # nothing left to draw
    INITIALIZATION_FAILURE = auto()  # no valid starter card


class EngineError(Exception):
    """Base class for all engine errors."""

    kind: ErrorKind = ErrorKind.USAGE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(EngineError):
    kind = ErrorKind.USAGE


class RuleViolation(EngineError):
    kind = ErrorKind.RULE_VIOLATION


class ResourceExhaustion(EngineError):
    kind = ErrorKind.RESOURCE_EXHAUSTION


class InitializationFailure(EngineError):
    kind = ErrorKind.INITIALIZATION_FAILURE


class DeckExhausted(InitializationFailure):
    """No valid starter card remained while dealing."""


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of an engine operation.

    Attributes:
        state: The new state on success, the untouched input state on failure
        error: The rejection reason, or None on success
    """
    state: GameState
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return None if self.error is None else self.error.kind

    @classmethod
    def success(cls, state: GameState) -> "ActionResult":
        return cls(state=state)

    @classmethod
    def failure(cls, state: GameState, error: EngineError) -> "ActionResult":
        return cls(state=state, error=error)
