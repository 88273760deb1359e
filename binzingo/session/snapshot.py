"""
Binzingo Cardy - State Snapshots

Pydantic models mirroring GameState, for consumers that persist or broadcast
state after each mutation. Enum fields are stored by value so a snapshot
round-trips through JSON.
"""

from pydantic import BaseModel, Field

from binzingo.engine.base import (
    ActiveCommand,
    Card,
    CardPlayer,
    CommandType,
    GamePhase,
    GameState,
    PendingPunishment,
    PunishmentType,
    TurnTimerState,
)


class CardModel(BaseModel):
    """Mirrors Card."""

    id: str
    suit: str
    rank: str
    is_joker: bool = False

    @classmethod
    def from_card(cls, card: Card) -> "CardModel":
        return cls(id=card.id, suit=card.suit, rank=card.rank, is_joker=card.is_joker)

    def to_card(self) -> Card:
        return Card(id=self.id, suit=self.suit, rank=self.rank, is_joker=self.is_joker)


class PlayerModel(BaseModel):
    """Mirrors CardPlayer. `hand` is empty in views that hide it."""

    id: str
    name: str
    hand: list[CardModel] = Field(default_factory=list)
    hand_size: int = 0
    has_declared_danger: bool = False
    is_cardless: bool = False
    is_bot: bool = False


class PunishmentModel(BaseModel):
    type: str | None = None
    amount: int = 0


class CommandModel(BaseModel):
    type: str | None = None
    value: str | None = None
    remaining_turns: int = 0


class TimerModel(BaseModel):
    time_remaining: int
    is_active: bool = True


class GameSnapshot(BaseModel):
    """Complete, serializable game state."""

    game_id: str
    deck: list[CardModel] = Field(default_factory=list)
    deck_size: int = 0
    discard_pile: list[CardModel] = Field(default_factory=list)
    players: list[PlayerModel]
    current_player_index: int = 0
    direction: int = 1
    phase: str = GamePhase.DEALING.value
    pending_punishment: PunishmentModel = Field(default_factory=PunishmentModel)
    active_command: CommandModel = Field(default_factory=CommandModel)
    last_played_cards: list[CardModel] = Field(default_factory=list)
    round_winner: str | None = None
    waiting_for_answer: str | None = None
    turn_timer: TimerModel
    turn_serial: int = 0
    turn_time_limit: int = 45

    @classmethod
    def from_state(cls, game_id: str, state: GameState) -> "GameSnapshot":
        """Capture a full snapshot, including every hand and the deck order."""
        return cls(
            game_id=game_id,
            deck=[CardModel.from_card(c) for c in state.deck],
            deck_size=len(state.deck),
            discard_pile=[CardModel.from_card(c) for c in state.discard_pile],
            players=[
                PlayerModel(
                    id=p.id,
                    name=p.name,
                    hand=[CardModel.from_card(c) for c in p.hand],
                    hand_size=len(p.hand),
                    has_declared_danger=p.has_declared_danger,
                    is_cardless=p.is_cardless,
                    is_bot=p.is_bot,
                )
                for p in state.players
            ],
            current_player_index=state.current_player_index,
            direction=state.direction,
            phase=state.phase.value,
            pending_punishment=PunishmentModel(
                type=state.pending_punishment.type.value
                if state.pending_punishment.type else None,
                amount=state.pending_punishment.amount,
            ),
            active_command=CommandModel(
                type=state.active_command.type.value
                if state.active_command.type else None,
                value=state.active_command.value,
                remaining_turns=state.active_command.remaining_turns,
            ),
            last_played_cards=[CardModel.from_card(c) for c in state.last_played_cards],
            round_winner=state.round_winner,
            waiting_for_answer=state.waiting_for_answer,
            turn_timer=TimerModel(
                time_remaining=state.turn_timer.time_remaining,
                is_active=state.turn_timer.is_active,
            ),
            turn_serial=state.turn_serial,
            turn_time_limit=state.turn_time_limit,
        )

    def to_state(self) -> GameState:
        """
        Rebuild the engine state.

        Raises:
            ValueError: If this is a redacted player view
        """
        if len(self.deck) != self.deck_size or any(
            len(p.hand) != p.hand_size for p in self.players
        ):
            raise ValueError("Cannot rebuild game state from a redacted snapshot.")

        punishment = self.pending_punishment
        command = self.active_command
        return GameState(
            deck=tuple(c.to_card() for c in self.deck),
            discard_pile=tuple(c.to_card() for c in self.discard_pile),
            players=tuple(
                CardPlayer(
                    id=p.id,
                    name=p.name,
                    hand=tuple(c.to_card() for c in p.hand),
                    has_declared_danger=p.has_declared_danger,
                    is_cardless=p.is_cardless,
                    is_bot=p.is_bot,
                )
                for p in self.players
            ),
            current_player_index=self.current_player_index,
            direction=self.direction,
            phase=GamePhase(self.phase),
            pending_punishment=PendingPunishment(
                PunishmentType(punishment.type) if punishment.type else None,
                punishment.amount,
            ),
            active_command=ActiveCommand(
                CommandType(command.type) if command.type else None,
                command.value,
                command.remaining_turns,
            ),
            last_played_cards=tuple(c.to_card() for c in self.last_played_cards),
            round_winner=self.round_winner,
            waiting_for_answer=self.waiting_for_answer,
            turn_timer=TurnTimerState(
                self.turn_timer.time_remaining, self.turn_timer.is_active
            ),
            turn_serial=self.turn_serial,
            turn_time_limit=self.turn_time_limit,
        )

    def player_view(self, viewer_id: str) -> "GameSnapshot":
        """
        Redacted copy for one seat: other hands and the deck are hidden,
        only their sizes remain.
        """
        players = [
            p if p.id == viewer_id else p.model_copy(update={"hand": []})
            for p in self.players
        ]
        return self.model_copy(update={"players": players, "deck": []})
