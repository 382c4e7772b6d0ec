"""
Hand evaluation collaborator interface.

Showdown needs to rank each remaining player's hole cards together with the
board. Ranking poker hands is delegated to an injected evaluator; the engine
only requires that ranks are comparable and that higher ranks win.
"""

from typing import Any, Protocol, Sequence, Tuple, runtime_checkable

from .cards import Card


@runtime_checkable
class HandEvaluator(Protocol):
    """Evaluator protocol consumed at showdown."""

    def evaluate(self, hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> Any:
        """Rank a player's two hole cards plus the community cards.

        Args:
            hole_cards: The player's two private cards.
            community_cards: The (normally five) shared cards.

        Returns:
            An orderable rank; equal ranks split the pot.
        """
        ...


class HighCardEvaluator:
    """Placeholder evaluator comparing the five highest card ranks.

    It does not recognise pairs, straights or flushes. Integrators that need
    real showdown results inject a full evaluator instead.
    """

    def evaluate(self, hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> Tuple[int, ...]:
        cards = list(hole_cards) + list(community_cards)
        if not cards:
            raise ValueError("Cannot evaluate an empty hand")
        return tuple(sorted((card.rank.value for card in cards), reverse=True)[:5])
