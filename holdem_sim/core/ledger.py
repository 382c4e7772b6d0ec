"""
Pot and betting ledger for the Texas Hold'em simulator.

This module answers legality queries for player actions and applies legal
actions to the game state. Validation always happens completely before any
chip moves, so a rejected action never leaves a trace in the state.
"""

import logging
from typing import Optional, Protocol, Set

from .enums import ActionType, SeatStatus
from .exceptions import IllegalActionError
from .player import Player


class BettingStateProtocol(Protocol):
    """Minimal state interface required by the ledger.

    Both ``GameState`` and ``GameSnapshot`` satisfy it, so bots can query
    legality on the snapshot they were given.
    """

    @property
    def current_bet(self) -> int:
        """The highest total commitment any player must match this round."""
        ...

    @property
    def big_blind(self) -> int:
        """The big blind, which is also the minimum raise increment."""
        ...


class BettingLedger:
    """Legality rules and chip movement for fold/check/call/raise.

    A raise amount is the player's total commitment for the round after the
    raise ("raise to"), not the increment.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    @staticmethod
    def call_amount(player: Player, state: BettingStateProtocol) -> int:
        """Chips the player still needs to put in to match the current bet."""
        return max(0, state.current_bet - player.current_bet)

    @staticmethod
    def min_raise_to(state: BettingStateProtocol) -> int:
        """Smallest legal raise target: one big blind above the current bet."""
        return state.current_bet + state.big_blind

    @staticmethod
    def max_raise_to(player: Player) -> int:
        """Raise target that puts every remaining chip in."""
        return player.current_bet + player.chips

    def legal_actions(self, player: Player, state: BettingStateProtocol) -> Set[ActionType]:
        """Get the set of legal actions for a player.

        Args:
            player: The player asking.
            state: Current betting state.

        Returns:
            A set of legal action types; empty for folded, all-in or
            eliminated players.
        """
        if player.status != SeatStatus.ACTIVE or player.chips <= 0:
            return set()

        actions = {ActionType.FOLD}
        to_match = self.call_amount(player, state)

        if to_match == 0:
            actions.add(ActionType.CHECK)
        else:
            actions.add(ActionType.CALL)

        if player.chips > to_match:
            actions.add(ActionType.RAISE)

        return actions

    def validate(self, player: Player, action_type: ActionType, amount: int,
                 state: BettingStateProtocol) -> None:
        """Validate an action without touching the state.

        Args:
            player: The acting player.
            action_type: The requested action.
            amount: Raise target for RAISE, ignored otherwise.
            state: Current betting state.

        Raises:
            IllegalActionError: When the action is not legal for this player.
        """
        legal = self.legal_actions(player, state)
        if action_type not in legal:
            if not legal:
                raise IllegalActionError(
                    f"Player {player.seat_id} cannot act, status: {player.status.value}"
                )
            if action_type == ActionType.CHECK:
                raise IllegalActionError(
                    f"Cannot check when there is a bet of {self.call_amount(player, state)}, must call or fold"
                )
            raise IllegalActionError(
                f"{action_type.value} is not legal for player {player.seat_id}; "
                f"legal actions: {sorted(a.value for a in legal)}"
            )

        if action_type == ActionType.RAISE:
            self._validate_raise(player, amount, state)

    def _validate_raise(self, player: Player, amount: int, state: BettingStateProtocol) -> None:
        all_in_total = self.max_raise_to(player)

        if amount > all_in_total:
            raise IllegalActionError(
                f"Raise to {amount} exceeds player {player.seat_id}'s stack (maximum {all_in_total})"
            )

        if amount <= state.current_bet:
            raise IllegalActionError(
                f"Raise to {amount} does not exceed the current bet of {state.current_bet}"
            )

        # All-in raise is valid even if less than minimum raise
        if amount == all_in_total:
            return

        min_total = self.min_raise_to(state)
        if amount < min_total:
            raise IllegalActionError(
                f"Raise total {amount} is less than minimum raise {min_total}. "
                f"(Current bet: {state.current_bet}, minimum increase: {state.big_blind})"
            )

    def apply(self, player: Player, action_type: ActionType, amount: int, state) -> int:
        """Validate and apply an action to the game state.

        Args:
            player: The acting player.
            action_type: The requested action.
            amount: Raise target for RAISE.
            state: The mutable ``GameState``.

        Returns:
            The number of chips moved into the pot.

        Raises:
            IllegalActionError: When the action is illegal; the state is untouched.
        """
        self.validate(player, action_type, amount, state)

        moved = 0
        if action_type == ActionType.FOLD:
            player.fold()

        elif action_type == ActionType.CHECK:
            pass

        elif action_type == ActionType.CALL:
            moved = state.transfer_to_pot(player, self.call_amount(player, state))

        elif action_type == ActionType.RAISE:
            moved = state.transfer_to_pot(player, amount - player.current_bet)
            state.current_bet = player.current_bet
            state.last_raiser = player.seat_id

        player.last_action_type = action_type
        self._logger.debug(
            f"Player {player.seat_id} {action_type.value} moved {moved}, "
            f"pot {state.pot}, current bet {state.current_bet}"
        )
        return moved
