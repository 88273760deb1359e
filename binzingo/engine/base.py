"""
Binzingo Cardy - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses) so that every
transition builds a new state and a rejected action leaves the old one intact.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from binzingo.config.settings import Settings


SUITS: tuple[str, ...] = ("hearts", "diamonds", "clubs", "spades")
RANKS: tuple[str, ...] = (
    "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A",
)
JOKER = "joker"

ACTION_RANKS: frozenset[str] = frozenset({"2", "3", "8", "A", "J", "Q", "K", JOKER})
NON_ACTION_RANKS: frozenset[str] = frozenset({"4", "5", "6", "7", "9", "10"})
ILLEGAL_STARTERS: frozenset[str] = ACTION_RANKS
MULTI_DROP_RANKS: frozenset[str] = frozenset({"J", "K", "5", "6", "7", "9", "10"})
QUESTION_RANKS: frozenset[str] = frozenset({"Q", "8"})

# Exact-card commands persist until fulfilled
EXACT_CARD_TURNS = 999
SUIT_COMMAND_TURNS = 3
QUESTION_TURNS = 1


class GamePhase(Enum):
    """Lifecycle phases of a round."""
    DEALING = "dealing"
    PLAYING = "playing"
    ROUND_ENDED = "round-ended"


class PunishmentType(Enum):
    """Stackable forced-draw obligations."""
    TWO = "2"
    THREE = "3"


class CommandType(Enum):
    """Temporary play constraints."""
    SUIT = "suit"
    EXACT_CARD = "exact-card"
    QUESTION = "question"


@dataclass(frozen=True)
class Card:
    """
    A single playing card.

    Attributes:
        id: Identifier unique within a deck (e.g. "10-hearts", "joker-1")
        suit: One of SUITS, or "joker"
        rank: One of RANKS, or "joker"
        is_joker: True exactly when suit and rank are "joker"
    """
    id: str
    suit: str
    rank: str
    is_joker: bool = False

    def __post_init__(self) -> None:
        """Validate suit/rank and the joker invariant."""
        if self.is_joker:
            if self.suit != JOKER or self.rank != JOKER:
                raise ValueError(f"Joker card {self.id} must have joker suit and rank.")
            return
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit {self.suit!r} for card {self.id}.")
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank {self.rank!r} for card {self.id}.")

    @property
    def is_action(self) -> bool:
        return self.rank in ACTION_RANKS

    @property
    def is_non_action(self) -> bool:
        return self.rank in NON_ACTION_RANKS

    def __str__(self) -> str:
        if self.is_joker:
            return "Joker"
        return f"{self.rank} of {self.suit}"


@dataclass(frozen=True)
class PendingPunishment:
    """Accumulated draw obligation; type None means nothing is pending."""
    type: PunishmentType | None = None
    amount: int = 0

    @property
    def is_active(self) -> bool:
        return self.type is not None


@dataclass(frozen=True)
class ActiveCommand:
    """
    A play constraint imposed by an Ace, Joker, Queen or 8.

    Attributes:
        type: Kind of command, or None when no command is active
        value: Commanded suit (SUIT) or card id (EXACT_CARD)
        remaining_turns: Plays left before the command lapses
    """
    type: CommandType | None = None
    value: str | None = None
    remaining_turns: int = 0

    @property
    def is_active(self) -> bool:
        return self.type is not None


@dataclass(frozen=True)
class TurnTimerState:
    """Countdown for the current turn."""
    time_remaining: int
    is_active: bool = True


@dataclass(frozen=True)
class CardPlayer:
    """
    A seat at the table for the current round.

    Attributes:
        id: Player identifier
        name: Display name
        hand: Cards currently held
        has_declared_danger: Whether the player has declared danger this round
        is_cardless: Emptied their hand on an action card; must draw before acting
        is_bot: Seat is driven by the bot policy
    """
    id: str
    name: str
    hand: tuple[Card, ...] = field(default_factory=tuple)
    has_declared_danger: bool = False
    is_cardless: bool = False
    is_bot: bool = False

    def find_card(self, card_id: str) -> Card | None:
        """Return the held card with the given id, if any."""
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def holds(self, card_id: str) -> bool:
        return self.find_card(card_id) is not None


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one round. The engine never mutates it in place.

    Attributes:
        deck: Draw pile; the last element is drawn next
        discard_pile: Played cards; the last element is the top
        players: Seats in turn order
        current_player_index: Index of the player whose turn it is
        direction: 1 for clockwise, -1 for counterclockwise
        phase: Lifecycle phase
        pending_punishment: Draw obligation for the current player
        active_command: Current play constraint
        last_played_cards: Cards of the most recent play or answer
        round_winner: Winner id once the round has ended
        waiting_for_answer: Player id that owes a question answer
        turn_timer: Countdown for the current turn
        turn_serial: Increments whenever the turn passes
        turn_time_limit: Seconds allowed per turn
    """
    deck: tuple[Card, ...]
    discard_pile: tuple[Card, ...]
    players: tuple[CardPlayer, ...]
    current_player_index: int = 0
    direction: int = 1
    phase: GamePhase = GamePhase.DEALING
    pending_punishment: PendingPunishment = field(default_factory=PendingPunishment)
    active_command: ActiveCommand = field(default_factory=ActiveCommand)
    last_played_cards: tuple[Card, ...] = field(default_factory=tuple)
    round_winner: str | None = None
    waiting_for_answer: str | None = None
    turn_timer: TurnTimerState = field(default_factory=lambda: TurnTimerState(45, False))
    turn_serial: int = 0
    turn_time_limit: int = 45

    @property
    def top_card(self) -> Card:
        """The card on top of the discard pile."""
        return self.discard_pile[-1]

    @property
    def current_player(self) -> CardPlayer:
        return self.players[self.current_player_index]

    @property
    def is_playing(self) -> bool:
        return self.phase == GamePhase.PLAYING

    def player_index(self, player_id: str) -> int | None:
        """Seat index of a player id, or None if not seated."""
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return None

    def get_player(self, player_id: str) -> CardPlayer | None:
        index = self.player_index(player_id)
        return None if index is None else self.players[index]

    def with_player(self, index: int, player: CardPlayer) -> "GameState":
        """Return a copy with the seat at `index` replaced."""
        players = list(self.players)
        players[index] = player
        return replace(self, players=tuple(players))


@dataclass(frozen=True)
class EngineConfig:
    """
    Table configuration for a round.

    Attributes:
        turn_time_limit: Seconds per turn before the automatic draw
        hand_size: Cards dealt to each player
        max_players: Largest supported table
        bot_delay_min: Lower bound of a bot's thinking delay (seconds)
        bot_delay_max: Upper bound of a bot's thinking delay (seconds)
    """
    turn_time_limit: int = 45
    hand_size: int = 4
    max_players: int = 10
    bot_delay_min: float = 1.5
    bot_delay_max: float = 2.5

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.turn_time_limit < 1:
            raise ValueError("Turn time limit must be at least 1 second.")
        if self.hand_size < 1:
            raise ValueError("Hand size must be at least 1.")
        if not 2 <= self.max_players <= 10:
            raise ValueError("Maximum players must be between 2 and 10.")
        if self.bot_delay_min < 0 or self.bot_delay_max < self.bot_delay_min:
            raise ValueError("Bot delay range must satisfy 0 <= min <= max.")

    @classmethod
    def from_settings(cls, settings: "Settings | None" = None) -> "EngineConfig":
        """Build a config from application settings."""
        if settings is None:
            from binzingo.config.settings import get_settings
            settings = get_settings()
        return cls(
            turn_time_limit=settings.turn_time_limit,
            hand_size=settings.hand_size,
            max_players=settings.max_players,
            bot_delay_min=settings.bot_delay_min,
            bot_delay_max=settings.bot_delay_max,
        )
