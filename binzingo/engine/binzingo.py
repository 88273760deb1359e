"""
Binzingo Cardy - Turn-State Machine

Orchestrates a round: dealing, plays, draws, declarations and question
answers. All methods are stateless class methods; state is passed in and a
new state is returned inside an ActionResult, never stored.

Round flow:
    - Shuffle, deal 4 cards each, turn up a non-action starter
    - On your turn play one card (or a legal multi-drop) or draw
    - A Queen or 8 keeps the turn until you answer or draw instead
    - Empty your hand on a non-action card to win the round ("Gamehot")
    - Emptying it on an action card leaves you cardless until you draw
"""

import random
from dataclasses import replace
from typing import Callable, Sequence

from binzingo.engine.base import (
    ActiveCommand,
    Card,
    CardPlayer,
    EngineConfig,
    GamePhase,
    GameState,
    PendingPunishment,
    TurnTimerState,
)
from binzingo.engine.danger import can_declare_danger
from binzingo.engine.deck import (
    build_deck,
    deal_cards,
    draw_cards,
    find_valid_starter,
    shuffle_deck,
)
from binzingo.engine.errors import ActionResult, EngineError, RuleViolation, UsageError
from binzingo.engine.rules import (
    can_declare_win,
    count_down_command,
    fulfils_command,
    is_valid_answer,
    is_winning_card,
    next_player_index,
    playable_cards,
    resolve_effects,
)
from binzingo.engine.scoring import RoundResult, calculate_round_scores
from binzingo.engine.validators import (
    validate_answering,
    validate_cards_in_hand,
    validate_exact_target,
    validate_multi_drop,
    validate_playable,
    validate_playing,
    validate_roster,
    validate_seated,
    validate_turn,
)

BOT_NAMES = ("AI Bot 1", "AI Bot 2", "AI Bot 3")
FULL_TABLE = 4


def _guarded(state: GameState, action: Callable[[], GameState]) -> ActionResult:
    """Run a transition, converting engine errors into a failed result."""
    try:
        return ActionResult.success(action())
    except EngineError as exc:
        return ActionResult.failure(state, exc)


class BinzingoEngine:
    """
    Stateless engine for a Binzingo Cardy round.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    # -- Setup -----------------------------------------------------------

    @classmethod
    def bot_seats(cls, human_count: int) -> list[tuple[str, str]]:
        """
        Bot seats to add for a table of `human_count` humans.

        A lone human gets a single opponent; larger tables are filled up to
        four seats.
        """
        if human_count == 1:
            bots_needed = 1
        else:
            bots_needed = max(0, min(len(BOT_NAMES), FULL_TABLE - human_count))
        return [(f"bot-{i + 1}", BOT_NAMES[i]) for i in range(bots_needed)]

    @classmethod
    def initialize_game(
        cls,
        players: Sequence[tuple[str, str]],
        with_bots: bool = False,
        rng: random.Random | None = None,
        config: EngineConfig | None = None
    ) -> GameState:
        """
        Start a new round.

        Args:
            players: (player_id, name) pairs in seat order
            with_bots: Add bot seats (see bot_seats)
            rng: Random source for the shuffle
            config: Table configuration

        Returns:
            A GameState in the playing phase

        Raises:
            UsageError: If the roster is invalid
            DeckExhausted: If no valid starter card could be found
        """
        config = config or EngineConfig()
        roster = validate_roster(players, config.max_players)

        seats = [CardPlayer(id=pid, name=name) for pid, name in roster]
        if with_bots:
            bots = cls.bot_seats(len(seats))
            validate_roster(roster + tuple(bots), config.max_players)
            seats.extend(CardPlayer(id=pid, name=name, is_bot=True) for pid, name in bots)

        deck = shuffle_deck(build_deck(), rng)
        hands, deck = deal_cards(deck, len(seats), config.hand_size)
        starter, deck = find_valid_starter(deck)

        return GameState(
            deck=deck,
            discard_pile=(starter,),
            players=tuple(
                replace(seat, hand=hand) for seat, hand in zip(seats, hands)
            ),
            current_player_index=0,
            direction=1,
            phase=GamePhase.PLAYING,
            turn_timer=TurnTimerState(config.turn_time_limit, True),
            turn_time_limit=config.turn_time_limit,
        )

    # -- Turn actions ----------------------------------------------------

    @classmethod
    def play_cards(
        cls,
        state: GameState,
        player_id: str,
        cards: Sequence[Card],
        exact_card_id: str | None = None
    ) -> ActionResult:
        """
        Play one card, or several cards of one multi-drop rank.

        Args:
            state: Current state
            player_id: Acting player
            cards: Cards to play, in order
            exact_card_id: Hand card targeted by an Ace (suit) or Joker (exact card)

        Returns:
            ActionResult with the new state, or the rejection
        """
        return _guarded(
            state, lambda: cls._play_cards(state, player_id, cards, exact_card_id)
        )

    @classmethod
    def draw_card(
        cls,
        state: GameState,
        player_id: str,
        rng: random.Random | None = None
    ) -> ActionResult:
        """
        Draw one card, or the whole pending punishment, and pass the turn.

        Args:
            state: Current state
            player_id: Acting player
            rng: Random source used if the discard pile must be recycled

        Returns:
            ActionResult with the new state, or the rejection
        """
        return _guarded(state, lambda: cls._draw_card(state, player_id, rng))

    @classmethod
    def declare_danger(cls, state: GameState, player_id: str) -> ActionResult:
        """Announce a realistic path to winning. Does not use up a turn."""
        return _guarded(state, lambda: cls._declare_danger(state, player_id))

    @classmethod
    def declare_win(cls, state: GameState, player_id: str) -> ActionResult:
        """Win the round holding exactly one non-action card."""
        return _guarded(state, lambda: cls._declare_win(state, player_id))

    @classmethod
    def answer_question(
        cls,
        state: GameState,
        player_id: str,
        card: Card
    ) -> ActionResult:
        """Answer an outstanding question with a matching non-action card."""
        return _guarded(state, lambda: cls._answer_question(state, player_id, card))

    @classmethod
    def draw_instead_of_answer(
        cls,
        state: GameState,
        player_id: str,
        rng: random.Random | None = None
    ) -> ActionResult:
        """Skip an outstanding question by drawing a single card."""
        return _guarded(
            state, lambda: cls._draw_instead_of_answer(state, player_id, rng)
        )

    # -- Queries ---------------------------------------------------------

    @classmethod
    def playable_cards(cls, state: GameState, player_id: str) -> tuple[Card, ...]:
        """Cards the player could legally play right now (empty when it is not their turn)."""
        index = state.player_index(player_id)
        if (
            index is None
            or not state.is_playing
            or index != state.current_player_index
            or state.waiting_for_answer is not None
            or state.players[index].is_cardless
        ):
            return ()
        return playable_cards(state, state.players[index])

    @classmethod
    def can_declare_danger(cls, state: GameState, player_id: str) -> bool:
        player = state.get_player(player_id)
        return player is not None and can_declare_danger(player, state)

    @classmethod
    def round_scores(cls, state: GameState) -> dict[str, int]:
        return calculate_round_scores(state.players)

    @classmethod
    def finish_round(cls, state: GameState) -> RoundResult:
        """
        Tally a finished round.

        Raises:
            UsageError: If the round is still in progress
        """
        if state.phase != GamePhase.ROUND_ENDED:
            raise UsageError("The round has not ended yet.")
        return RoundResult(
            winner_id=state.round_winner,
            scores=calculate_round_scores(state.players),
        )

    # -- Transitions -----------------------------------------------------

    @classmethod
    def _play_cards(
        cls,
        state: GameState,
        player_id: str,
        cards: Sequence[Card],
        exact_card_id: str | None
    ) -> GameState:
        index = validate_turn(state, player_id)
        player = state.players[index]
        if player.is_cardless:
            raise UsageError("You are cardless and must draw before playing.")

        played = validate_cards_in_hand(player, cards)
        validate_multi_drop(played)
        validate_playable(state, played)

        played_ids = {card.id for card in played}
        hand_after = tuple(card for card in player.hand if card.id not in played_ids)

        exact_target = None
        commanding = next((c for c in played if c.rank == "A" or c.is_joker), None)
        if commanding is not None:
            exact_target = validate_exact_target(hand_after, exact_card_id, commanding)

        fulfilled = fulfils_command(played[0], state.active_command)
        outcome = resolve_effects(state, played, exact_target)
        direction = -state.direction if outcome.reverses_direction else state.direction

        player = replace(player, hand=hand_after)
        new_state = replace(
            state.with_player(index, player),
            discard_pile=state.discard_pile + played,
            last_played_cards=played,
            pending_punishment=outcome.pending_punishment,
            active_command=outcome.active_command,
            direction=direction,
        )

        if not hand_after:
            if is_winning_card(played[-1]):
                return cls._end_round(new_state, player_id)
            new_state = new_state.with_player(index, replace(player, is_cardless=True))

        if outcome.question_asked:
            return cls._restart_timer(replace(new_state, waiting_for_answer=player_id))

        # A command set by this play only loses one turn, even if the play also
        # fulfilled the previous command
        fulfilled = fulfilled and not outcome.command_installed
        new_state = replace(
            new_state,
            active_command=count_down_command(outcome.active_command, fulfilled),
        )

        next_index = next_player_index(
            index, len(state.players), direction, outcome.skips
        )
        return cls._pass_turn(new_state, next_index)

    @classmethod
    def _draw_card(
        cls,
        state: GameState,
        player_id: str,
        rng: random.Random | None
    ) -> GameState:
        index = validate_turn(state, player_id)
        punishment = state.pending_punishment
        count = punishment.amount if punishment.is_active else 1

        new_state = cls._draw_into_hand(state, index, count, rng)
        new_state = replace(new_state, pending_punishment=PendingPunishment())

        next_index = next_player_index(index, len(state.players), state.direction)
        return cls._pass_turn(new_state, next_index)

    @classmethod
    def _declare_danger(cls, state: GameState, player_id: str) -> GameState:
        validate_playing(state)
        index = validate_seated(state, player_id)
        player = state.players[index]

        if player.has_declared_danger:
            raise RuleViolation("Danger has already been declared.")
        if not player.hand:
            raise RuleViolation("Cannot declare danger without cards.")
        if not can_declare_danger(player, state):
            raise RuleViolation("Cannot declare danger with current hand!")

        new_state = state.with_player(index, replace(player, has_declared_danger=True))
        return cls._restart_timer(new_state)

    @classmethod
    def _declare_win(cls, state: GameState, player_id: str) -> GameState:
        validate_playing(state)
        index = validate_seated(state, player_id)
        player = state.players[index]

        if not can_declare_win(player):
            raise RuleViolation(
                "Cannot declare GAMEHOT with action cards or multiple cards!"
            )

        last_card = player.hand[0]
        new_state = replace(
            state.with_player(index, replace(player, hand=())),
            discard_pile=state.discard_pile + (last_card,),
            last_played_cards=(last_card,),
        )
        return cls._end_round(new_state, player_id)

    @classmethod
    def _answer_question(
        cls,
        state: GameState,
        player_id: str,
        card: Card
    ) -> GameState:
        index = validate_answering(state, player_id)
        player = state.players[index]
        (answer,) = validate_cards_in_hand(player, [card])

        if not is_valid_answer(answer, state.top_card):
            raise RuleViolation(f"{answer} is not a valid answer to {state.top_card}.")

        hand_after = tuple(c for c in player.hand if c.id != answer.id)
        new_state = replace(
            state.with_player(index, replace(player, hand=hand_after)),
            discard_pile=state.discard_pile + (answer,),
            last_played_cards=(answer,),
            waiting_for_answer=None,
            active_command=ActiveCommand(),
        )

        if not hand_after:
            return cls._end_round(new_state, player_id)

        next_index = next_player_index(index, len(state.players), state.direction)
        return cls._pass_turn(new_state, next_index)

    @classmethod
    def _draw_instead_of_answer(
        cls,
        state: GameState,
        player_id: str,
        rng: random.Random | None
    ) -> GameState:
        index = validate_answering(state, player_id)
        new_state = cls._draw_into_hand(state, index, 1, rng)
        new_state = replace(
            new_state,
            waiting_for_answer=None,
            active_command=ActiveCommand(),
        )

        next_index = next_player_index(index, len(state.players), state.direction)
        return cls._pass_turn(new_state, next_index)

    # -- Helpers ---------------------------------------------------------

    @classmethod
    def _draw_into_hand(
        cls,
        state: GameState,
        index: int,
        count: int,
        rng: random.Random | None
    ) -> GameState:
        drawn, deck, discard_pile = draw_cards(
            state.deck, state.discard_pile, count, rng
        )
        player = state.players[index]
        player = replace(player, hand=player.hand + drawn, is_cardless=False)
        return replace(
            state.with_player(index, player),
            deck=deck,
            discard_pile=discard_pile,
        )

    @classmethod
    def _pass_turn(cls, state: GameState, next_index: int) -> GameState:
        new_state = replace(
            state,
            current_player_index=next_index,
            turn_serial=state.turn_serial + 1,
        )
        return cls._restart_timer(new_state)

    @classmethod
    def _restart_timer(cls, state: GameState) -> GameState:
        return replace(state, turn_timer=TurnTimerState(state.turn_time_limit, True))

    @classmethod
    def _end_round(cls, state: GameState, winner_id: str) -> GameState:
        return replace(
            state,
            phase=GamePhase.ROUND_ENDED,
            round_winner=winner_id,
            waiting_for_answer=None,
            turn_timer=TurnTimerState(state.turn_timer.time_remaining, False),
        )
