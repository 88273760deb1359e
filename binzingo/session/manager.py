"""
Binzingo Cardy - Game Session

Single owner of a live GameState. Serializes every transition, publishes
events to subscribers, drives the turn clock and schedules bot turns.
Provides module-level convenience functions for the layers above.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Sequence

from binzingo.engine.base import Card, EngineConfig, GameState
from binzingo.engine.binzingo import BinzingoEngine
from binzingo.engine.bot import BotPolicy
from binzingo.engine.errors import ActionResult, UsageError
from binzingo.engine.scoring import RoundResult
from binzingo.engine.timer import TurnTimer
from binzingo.session.events import EventPayload, GameEvent, classify_transition
from binzingo.session.scheduler import TurnScheduler
from binzingo.session.snapshot import GameSnapshot

logger = logging.getLogger(__name__)

_BOT_TASK = "bot"
_CLOCK_TASK = "clock"
TICK_INTERVAL = 1.0


class GameSession:
    """Owns one game's state and applies engine operations to it.

    Every operation runs under a lock, so engine transitions never
    interleave even though the clock and bot turns fire from the
    scheduler thread. Without a scheduler nothing runs in the background;
    callers drive `tick()` and `run_bot_turn()` themselves.
    """

    def __init__(
        self,
        game_id: str,
        *,
        config: EngineConfig | None = None,
        scheduler: TurnScheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.game_id = game_id
        self.config = config or EngineConfig.from_settings()
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._state: GameState | None = None
        self._listeners: list[Callable[[EventPayload], None]] = []
        self._lock = threading.RLock()

    # -- Lifecycle -------------------------------------------------------

    @property
    def state(self) -> GameState | None:
        with self._lock:
            return self._state

    @property
    def is_active(self) -> bool:
        state = self.state
        return state is not None and state.is_playing

    def start(
        self,
        players: Sequence[tuple[str, str]],
        with_bots: bool = False,
    ) -> GameState:
        """Deal a new round, replacing any round in progress.

        Args:
            players: (player_id, name) pairs in seat order.
            with_bots: Fill the table with bot seats.

        Raises:
            UsageError: If the roster is invalid.
            InitializationFailure: If dealing could not find a starter card.
        """
        with self._lock:
            self._cancel_background()
            state = BinzingoEngine.initialize_game(
                players, with_bots=with_bots, rng=self._rng, config=self.config
            )
            self._state = state
            logger.info(
                "Game %s started with %d players", self.game_id, len(state.players)
            )
            self._publish(None, state, None)
            self._start_clock()
            self._schedule_bot_if_needed()
            return state

    def reset_game(self) -> None:
        """Drop the round, cancelling the clock and any pending bot turn."""
        with self._lock:
            self._cancel_background()
            self._state = None
            logger.info("Game %s reset", self.game_id)

    def close(self) -> None:
        """Reset and release the scheduler."""
        self.reset_game()
        if self._scheduler is not None:
            self._scheduler.shutdown()

    # -- Subscriptions ---------------------------------------------------

    def subscribe(self, listener: Callable[[EventPayload], None]) -> None:
        """Receive an EventPayload for every committed transition."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[EventPayload], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # -- Operations ------------------------------------------------------

    def play_cards(
        self,
        player_id: str,
        cards: Sequence[Card],
        exact_card_id: str | None = None,
    ) -> ActionResult:
        return self._apply(
            player_id,
            lambda s: BinzingoEngine.play_cards(s, player_id, cards, exact_card_id),
        )

    def draw_card(self, player_id: str) -> ActionResult:
        return self._apply(
            player_id,
            lambda s: BinzingoEngine.draw_card(s, player_id, rng=self._rng),
        )

    def declare_danger(self, player_id: str) -> ActionResult:
        return self._apply(
            player_id, lambda s: BinzingoEngine.declare_danger(s, player_id)
        )

    def declare_win(self, player_id: str) -> ActionResult:
        return self._apply(
            player_id, lambda s: BinzingoEngine.declare_win(s, player_id)
        )

    def answer_question(self, player_id: str, card: Card) -> ActionResult:
        return self._apply(
            player_id, lambda s: BinzingoEngine.answer_question(s, player_id, card)
        )

    def draw_instead_of_answer(self, player_id: str) -> ActionResult:
        return self._apply(
            player_id,
            lambda s: BinzingoEngine.draw_instead_of_answer(s, player_id, rng=self._rng),
        )

    def tick(self) -> bool:
        """Advance the turn clock by one second.

        Returns:
            True while the clock should keep running.
        """
        with self._lock:
            state = self._state
            if state is None or not TurnTimer.is_running(state):
                return False

            expiring = TurnTimer.is_expiring(state)
            actor_id = state.waiting_for_answer or state.current_player.id
            new_state = TurnTimer.on_tick(state, rng=self._rng)
            self._state = new_state

            if expiring and new_state.turn_serial != state.turn_serial:
                logger.info(
                    "%s drew a card automatically (time expired)", actor_id
                )
                self._emit(GameEvent.TIMER_EXPIRED, actor_id)
                self._publish(state, new_state, actor_id)
                self._after_transition()
            return TurnTimer.is_running(new_state)

    def run_bot_turn(self, bot_id: str, turn_serial: int | None = None) -> ActionResult | None:
        """Let a bot act if it is still its move.

        Args:
            bot_id: Bot seat to act for.
            turn_serial: Serial the turn was scheduled at; a mismatch
                means the turn has already moved on.

        Returns:
            The engine result, or None when the scheduled turn is stale.
        """
        with self._lock:
            state = self._state
            if state is None:
                return None
            if turn_serial is not None and state.turn_serial != turn_serial:
                logger.debug("Dropping stale turn for bot %s", bot_id)
                return None

            result = BotPolicy.take_turn(state, bot_id, rng=self._rng)
            if result is None:
                logger.debug("Dropping stale turn for bot %s", bot_id)
                return None
            if not result.ok:
                logger.warning("Bot %s action rejected: %s", bot_id, result.error)
                return result

            logger.info("Bot %s acted", bot_id)
            self._state = result.state
            self._publish(state, result.state, bot_id)
            self._after_transition()
            return result

    # -- Queries ---------------------------------------------------------

    def snapshot(self, viewer_id: str | None = None) -> GameSnapshot:
        """Serializable snapshot; redacted for `viewer_id` when given."""
        state = self._require_state()
        snap = GameSnapshot.from_state(self.game_id, state)
        return snap if viewer_id is None else snap.player_view(viewer_id)

    def round_result(self) -> RoundResult:
        return BinzingoEngine.finish_round(self._require_state())

    def playable_cards(self, player_id: str) -> tuple[Card, ...]:
        return BinzingoEngine.playable_cards(self._require_state(), player_id)

    # -- Internals -------------------------------------------------------

    def _require_state(self) -> GameState:
        state = self.state
        if state is None:
            raise UsageError(f"Game {self.game_id} has not been started.")
        return state

    def _apply(
        self,
        actor_id: str,
        operation: Callable[[GameState], ActionResult],
    ) -> ActionResult:
        with self._lock:
            state = self._require_state()
            result = operation(state)
            if not result.ok:
                logger.info(
                    "Rejected action by %s in game %s: %s",
                    actor_id, self.game_id, result.error,
                )
                return result

            self._state = result.state
            self._publish(state, result.state, actor_id)
            self._after_transition()
            return result

    def _after_transition(self) -> None:
        state = self._state
        if state is None:
            return
        if not state.is_playing:
            logger.info("Game %s round won by %s", self.game_id, state.round_winner)
            self._cancel_background()
            return
        self._schedule_bot_if_needed()

    def _publish(
        self, before: GameState | None, after: GameState, actor_id: str | None
    ) -> None:
        for event in classify_transition(before, after, actor_id):
            self._emit(event, actor_id)

    def _emit(self, event: GameEvent, player_id: str | None) -> None:
        payload = EventPayload(
            event=event,
            game_id=self.game_id,
            player_id=player_id,
            data={"turn_serial": self._state.turn_serial if self._state else None},
        )
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Event listener failed for %s", event.name)

    def _start_clock(self) -> None:
        if self._scheduler is not None:
            self._scheduler.start_clock(_CLOCK_TASK, TICK_INTERVAL, self.tick)

    def _schedule_bot_if_needed(self) -> None:
        state = self._state
        if state is None or not state.is_playing:
            return
        actor_id = state.waiting_for_answer or state.current_player.id
        actor = state.get_player(actor_id)
        if actor is None or not actor.is_bot or self._scheduler is None:
            return

        delay = self._rng.uniform(self.config.bot_delay_min, self.config.bot_delay_max)
        serial = state.turn_serial
        self._scheduler.schedule(
            _BOT_TASK, delay, lambda: self.run_bot_turn(actor_id, serial)
        )

    def _cancel_background(self) -> None:
        if self._scheduler is not None:
            self._scheduler.cancel(_BOT_TASK)
            self._scheduler.cancel(_CLOCK_TASK)


# -- Module-level convenience functions ----------------------------------

_sessions: dict[str, GameSession] = {}
_sessions_lock = threading.Lock()


def get_session(game_id: str, *, live: bool = True) -> GameSession:
    """Get or create the session for a game id.

    Args:
        game_id: Identifier of the game.
        live: Drive the clock and bots from a background scheduler.
    """
    with _sessions_lock:
        session = _sessions.get(game_id)
        if session is None:
            session = GameSession(
                game_id, scheduler=TurnScheduler() if live else None
            )
            _sessions[game_id] = session
        return session


def close_session(game_id: str) -> None:
    """Shut down and forget a game's session."""
    with _sessions_lock:
        session = _sessions.pop(game_id, None)
    if session is not None:
        session.close()
