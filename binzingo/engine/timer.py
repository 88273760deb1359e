"""
Binzingo Cardy - Turn Timer

Explicit tick source for the per-turn countdown. `on_tick` is called once per
second by whatever drives the clock; when the countdown runs out the current
player draws automatically, exactly as a manual draw would.
"""

import random
from dataclasses import replace

from binzingo.engine.base import GameState, TurnTimerState
from binzingo.engine.binzingo import BinzingoEngine


class TurnTimer:
    """Stateless countdown logic operating on GameState."""

    @classmethod
    def is_running(cls, state: GameState) -> bool:
        return state.is_playing and state.turn_timer.is_active

    @classmethod
    def stop(cls, state: GameState) -> GameState:
        return replace(
            state,
            turn_timer=TurnTimerState(state.turn_timer.time_remaining, False),
        )

    @classmethod
    def is_expiring(cls, state: GameState) -> bool:
        """True if the next tick triggers the automatic draw."""
        return cls.is_running(state) and state.turn_timer.time_remaining <= 1

    @classmethod
    def on_tick(
        cls,
        state: GameState,
        rng: random.Random | None = None
    ) -> GameState:
        """
        Advance the countdown by one second.

        On expiry the player who owes an answer draws instead of answering;
        otherwise the current player draws (taking any pending punishment).
        If that draw is impossible the countdown restarts and nothing else
        changes.

        Args:
            state: Current state
            rng: Random source for recycling the discard pile

        Returns:
            The state after this tick
        """
        if not cls.is_running(state):
            return state

        time_remaining = state.turn_timer.time_remaining - 1
        if time_remaining > 0:
            return replace(state, turn_timer=TurnTimerState(time_remaining, True))

        if state.waiting_for_answer is not None:
            result = BinzingoEngine.draw_instead_of_answer(
                state, state.waiting_for_answer, rng=rng
            )
        else:
            result = BinzingoEngine.draw_card(state, state.current_player.id, rng=rng)

        if result.ok:
            return result.state
        return replace(state, turn_timer=TurnTimerState(state.turn_time_limit, True))
