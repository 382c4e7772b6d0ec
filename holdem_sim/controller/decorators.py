"""
Decorators for controller layer functionality.

This module provides the transaction decorator used by the orchestrator.
"""

import functools
from typing import Any, Callable, TypeVar

from ..core import GameState, IllegalActionError

F = TypeVar('F', bound=Callable[..., Any])


def atomic(func: F) -> F:
    """
    Decorator to make an orchestrator operation all-or-nothing.

    The game state and the undealt deck are captured before the call. If the
    decorated method raises, both are restored, as are any controller
    attributes named in the instance's ``_atomic_attributes``, and the
    exception is re-raised.

    IllegalActionError is re-raised untouched: actions are validated before
    anything is mutated, so a rejection has nothing to roll back.

    Args:
        func: The method to decorate. Must be a method of a class that has
              a _game_state attribute of type GameState.

    Returns:
        The decorated function with atomic behavior.

    Example:
        @atomic
        def apply(self, player_id, action, amount=0):
            # Rolled back if the action turns out to be illegal
            self._betting_round.apply(self._game_state, player_id, action, amount)
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if not hasattr(self, '_game_state'):
            raise AttributeError(
                f"@atomic decorator requires the class to have a '_game_state' attribute. "
                f"Class {self.__class__.__name__} does not have this attribute."
            )

        game_state = getattr(self, '_game_state')
        if not isinstance(game_state, GameState):
            raise TypeError(
                f"@atomic decorator requires '_game_state' to be of type GameState. "
                f"Got {type(game_state).__name__} instead."
            )

        original_snapshot = game_state.create_snapshot()
        deck = game_state.deck
        deck_cards = deck.remaining_cards() if deck is not None else None
        saved_attributes = {
            name: getattr(self, name) for name in getattr(self, '_atomic_attributes', ())
        }

        try:
            return func(self, *args, **kwargs)
        except IllegalActionError:
            raise
        except Exception as e:
            game_state.restore_from_snapshot(original_snapshot)
            game_state.deck = deck
            if deck is not None:
                deck.restore(deck_cards)
            for name, value in saved_attributes.items():
                setattr(self, name, value)
            game_state.add_event(f"Transaction rolled back due to error: {e}")
            raise

    return wrapper
