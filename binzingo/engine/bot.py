"""
Binzingo Cardy - Bot Policy

A deliberately simple policy for bot-controlled seats:
    - Owing an answer: answer with the first valid card, else draw instead
    - Holding two cards: declare danger first when eligible
    - Otherwise play the first playable card, or draw when nothing fits
"""

import random
from collections import Counter
from dataclasses import dataclass
from enum import Enum, auto

from binzingo.engine.base import Card, GameState
from binzingo.engine.binzingo import BinzingoEngine
from binzingo.engine.errors import ActionResult
from binzingo.engine.rules import is_valid_answer


class BotMove(Enum):
    """Kinds of action a bot can take."""
    PLAY = auto()
    DRAW = auto()
    ANSWER = auto()
    DRAW_INSTEAD = auto()


@dataclass(frozen=True)
class BotAction:
    """
    A single chosen action.

    Attributes:
        move: What to do
        cards: Cards to play or the answer card
        exact_card_id: Target for an Ace or Joker
    """
    move: BotMove
    cards: tuple[Card, ...] = ()
    exact_card_id: str | None = None


class BotPolicy:
    """Stateless decision logic for bot seats."""

    DANGER_HAND_SIZE = 2

    @classmethod
    def is_bots_move(cls, state: GameState, bot_id: str) -> bool:
        """Freshness check: the round is live and this bot is the one to act."""
        if not state.is_playing:
            return False
        if state.waiting_for_answer is not None:
            return state.waiting_for_answer == bot_id
        return state.current_player.id == bot_id

    @classmethod
    def choose_action(cls, state: GameState, bot_id: str) -> BotAction | None:
        """
        Pick the bot's next action.

        Returns:
            The chosen BotAction, or None if it is not this bot's move
        """
        if not cls.is_bots_move(state, bot_id):
            return None

        player = state.get_player(bot_id)
        if state.waiting_for_answer == bot_id:
            for card in player.hand:
                if is_valid_answer(card, state.top_card):
                    return BotAction(BotMove.ANSWER, cards=(card,))
            return BotAction(BotMove.DRAW_INSTEAD)

        for card in BinzingoEngine.playable_cards(state, bot_id):
            rest = tuple(c for c in player.hand if c.id != card.id)
            if card.rank == "A" or card.is_joker:
                if not rest:
                    continue
                target = cls._ace_target(rest) if card.rank == "A" else cls._joker_target(rest)
                return BotAction(BotMove.PLAY, cards=(card,), exact_card_id=target.id)
            return BotAction(BotMove.PLAY, cards=(card,))

        return BotAction(BotMove.DRAW)

    @classmethod
    def should_declare_danger(cls, state: GameState, bot_id: str) -> bool:
        player = state.get_player(bot_id)
        return (
            player is not None
            and len(player.hand) == cls.DANGER_HAND_SIZE
            and BinzingoEngine.can_declare_danger(state, bot_id)
        )

    @classmethod
    def take_turn(
        cls,
        state: GameState,
        bot_id: str,
        rng: random.Random | None = None
    ) -> ActionResult | None:
        """
        Run the bot's move against the engine.

        Danger is declared first when eligible; the bot then issues exactly
        one play, answer or draw.

        Returns:
            The engine result, or None if the move is stale
        """
        action = cls.choose_action(state, bot_id)
        if action is None:
            return None

        if action.move in (BotMove.PLAY, BotMove.DRAW) and cls.should_declare_danger(state, bot_id):
            declared = BinzingoEngine.declare_danger(state, bot_id)
            if declared.ok:
                state = declared.state

        if action.move == BotMove.PLAY:
            return BinzingoEngine.play_cards(
                state, bot_id, action.cards, action.exact_card_id
            )
        if action.move == BotMove.ANSWER:
            return BinzingoEngine.answer_question(state, bot_id, action.cards[0])
        if action.move == BotMove.DRAW_INSTEAD:
            return BinzingoEngine.draw_instead_of_answer(state, bot_id, rng=rng)
        return BinzingoEngine.draw_card(state, bot_id, rng=rng)

    @classmethod
    def _ace_target(cls, rest: tuple[Card, ...]) -> Card:
        """Command the suit the bot holds most of."""
        suits = Counter(card.suit for card in rest if not card.is_joker)
        if not suits:
            return rest[0]
        best_suit, _ = suits.most_common(1)[0]
        return next(card for card in rest if card.suit == best_suit)

    @classmethod
    def _joker_target(cls, rest: tuple[Card, ...]) -> Card:
        """Command a card the bot can finish on."""
        for card in rest:
            if card.is_non_action:
                return card
        return rest[0]
