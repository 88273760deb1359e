"""
Binzingo Cardy - Round Scoring

Penalty points for the cards left in each hand when a round ends. Lower is
better; the round winner holds no cards and scores 0.

Card values:
    - Joker: 200
    - Ace: 100
    - 3: 75
    - 2: 50
    - J, Q, K: 10
    - 4-10: face value
"""

from dataclasses import dataclass
from typing import Sequence

from binzingo.engine.base import Card, CardPlayer

CARD_POINTS: dict[str, int] = {
    "joker": 200,
    "A": 100,
    "3": 75,
    "2": 50,
    "J": 10,
    "Q": 10,
    "K": 10,
}


@dataclass(frozen=True)
class RoundResult:
    """
    Final tally of a finished round.

    Attributes:
        winner_id: Player who emptied their hand or declared the win
        scores: Penalty points per player id
    """
    winner_id: str | None
    scores: dict[str, int]

    @property
    def total_points(self) -> int:
        return sum(self.scores.values())

    def __str__(self) -> str:
        lines = [f"Winner: {self.winner_id or 'none'}"]
        for player_id, points in self.scores.items():
            lines.append(f"  - {player_id}: {points}")
        return "\n".join(lines)


def card_points(card: Card) -> int:
    """Penalty value of a single card."""
    if card.rank in CARD_POINTS:
        return CARD_POINTS[card.rank]
    return int(card.rank)


def hand_points(hand: Sequence[Card]) -> int:
    return sum(card_points(card) for card in hand)


def calculate_round_scores(players: Sequence[CardPlayer]) -> dict[str, int]:
    """
    Score every hand.

    Args:
        players: Seats at the end of the round

    Returns:
        Mapping of player id to penalty points
    """
    return {player.id: hand_points(player.hand) for player in players}
