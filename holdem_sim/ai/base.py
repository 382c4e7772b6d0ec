"""
Base bot policy interface for the Texas Hold'em simulator.

This module defines the protocol that all bot policies must implement.
"""

from typing import Protocol, runtime_checkable

from ..core import Action, GameSnapshot, Player


@runtime_checkable
class BotPolicy(Protocol):
    """Bot decision interface protocol.

    A policy is a function of the visible state only: its own player record,
    the community cards, the pot, the current bet and the chip stacks
    carried by a viewer-scoped snapshot, plus its own randomness source.
    """

    def decide(self, player: Player, snapshot: GameSnapshot) -> Action:
        """Choose an action for the player whose turn it is.

        Args:
            player: The acting player as seen in the snapshot
            snapshot: Viewer-scoped snapshot of the table

        Returns:
            An action that is legal for the player; raise amounts are
            "raise to" totals for the round
        """
        ...
