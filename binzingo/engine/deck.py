"""
Binzingo Cardy - Deck Builder, Shuffler and Dealer

Builds the 54-card deck, shuffles it with an injectable random source and
deals opening hands. Draws always come from the end of the deck.
"""

import random

from binzingo.engine.base import ILLEGAL_STARTERS, JOKER, RANKS, SUITS, Card
from binzingo.engine.errors import DeckExhausted, ResourceExhaustion

DECK_SIZE = 54


def build_deck() -> tuple[Card, ...]:
    """
    Build the canonical unshuffled deck.

    Returns:
        52 standard cards (13 ranks x 4 suits) followed by 2 jokers
    """
    cards = [
        Card(id=f"{rank}-{suit}", suit=suit, rank=rank)
        for suit in SUITS
        for rank in RANKS
    ]
    cards.append(Card(id="joker-1", suit=JOKER, rank=JOKER, is_joker=True))
    cards.append(Card(id="joker-2", suit=JOKER, rank=JOKER, is_joker=True))
    return tuple(cards)


def shuffle_deck(
    cards: tuple[Card, ...] | list[Card],
    rng: random.Random | None = None
) -> tuple[Card, ...]:
    """
    Return a uniformly random permutation of `cards` (Fisher-Yates).

    Args:
        cards: Cards to shuffle; the input is not modified
        rng: Random source; pass a seeded Random for reproducible decks

    Returns:
        Shuffled cards as a new tuple
    """
    rng = rng or random.Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return tuple(shuffled)


def deal_cards(
    deck: tuple[Card, ...],
    player_count: int,
    hand_size: int = 4
) -> tuple[list[tuple[Card, ...]], tuple[Card, ...]]:
    """
    Deal `hand_size` cards to each player, round-robin from the deck tail.

    Args:
        deck: Shuffled deck
        player_count: Number of seats
        hand_size: Cards per player

    Returns:
        Tuple of (hands in seat order, remaining deck)

    Raises:
        DeckExhausted: If the deck cannot cover every hand
    """
    needed = player_count * hand_size
    if needed > len(deck):
        raise DeckExhausted(
            f"Cannot deal {hand_size} cards to {player_count} players "
            f"from {len(deck)} cards."
        )

    remaining = list(deck)
    hands: list[list[Card]] = [[] for _ in range(player_count)]
    for _ in range(hand_size):
        for hand in hands:
            hand.append(remaining.pop())

    return [tuple(hand) for hand in hands], tuple(remaining)


def can_start(card: Card) -> bool:
    """Whether a card may seed the discard pile."""
    return card.rank not in ILLEGAL_STARTERS


def find_valid_starter(deck: tuple[Card, ...]) -> tuple[Card, tuple[Card, ...]]:
    """
    Pop cards from the tail until one may start the discard pile.

    Rejected cards are consumed along the way.

    Returns:
        Tuple of (starter card, remaining deck)

    Raises:
        DeckExhausted: If the deck runs out before a valid starter appears
    """
    remaining = list(deck)
    while remaining:
        card = remaining.pop()
        if can_start(card):
            return card, tuple(remaining)
    raise DeckExhausted("No valid starter found in deck.")


def draw_cards(
    deck: tuple[Card, ...],
    discard_pile: tuple[Card, ...],
    count: int,
    rng: random.Random | None = None
) -> tuple[tuple[Card, ...], tuple[Card, ...], tuple[Card, ...]]:
    """
    Draw up to `count` cards, recycling the discard pile when the deck runs dry.

    When the deck is empty, every discard except the top card is shuffled
    into a fresh deck. Drawing stops early if both piles are exhausted.
    After a reshuffle the remaining top card becomes the bottom of the pile,
    so the bottom card may then be an action card.

    Args:
        deck: Current draw pile
        discard_pile: Current discard pile (top card is kept in place)
        count: Cards requested
        rng: Random source for the reshuffle

    Returns:
        Tuple of (drawn cards, new deck, new discard pile)

    Raises:
        ResourceExhaustion: If not a single card could be drawn
    """
    remaining = list(deck)
    pile = discard_pile
    drawn: list[Card] = []

    while len(drawn) < count:
        if not remaining:
            if len(pile) <= 1:
                break
            remaining = list(shuffle_deck(pile[:-1], rng))
            pile = pile[-1:]
        drawn.append(remaining.pop())

    if count > 0 and not drawn:
        raise ResourceExhaustion("No cards left to draw.")

    return tuple(drawn), tuple(remaining), pile
