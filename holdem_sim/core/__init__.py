"""
Core game logic for the Texas Hold'em simulator.

This package contains the fundamental components: cards, players, game
state, the pot and betting ledger, the betting round state machine, payout
helpers and the event bus.
"""

import random

from .enums import (
    Suit, Rank, ActionType, Phase, SeatStatus, RoundState, Action,
    COMMUNITY_CARDS_PER_PHASE
)
from .exceptions import (
    PokerGameError, InvalidConfigurationError, IllegalActionError,
    InsufficientChipsError, GameStateError, EmptyDeckError, ChipConservationError
)
from .cards import Card, Deck, full_deck
from .player import Player
from .state import GameState, GameSnapshot
from .ledger import BettingLedger, BettingStateProtocol
from .betting_round import BettingRound
from .pot import SidePot, calculate_side_pots, split_pot, distribute_pots
from .evaluator import HandEvaluator, HighCardEvaluator
from .events import EventBus, EventType, GameEvent
from .invariants import ChipConservationChecker
from .config import GameConfiguration, MIN_PLAYERS, MAX_PLAYERS


def new_deck(seed=None) -> Deck:
    """Create a new shuffled deck.

    Args:
        seed: Optional seed for a reproducible shuffle.

    Returns:
        A shuffled 52-card deck.
    """
    return Deck.create(random.Random(seed))


__all__ = [
    # Enums
    'Suit', 'Rank', 'ActionType', 'Phase', 'SeatStatus', 'RoundState', 'Action',
    'COMMUNITY_CARDS_PER_PHASE',

    # Errors
    'PokerGameError', 'InvalidConfigurationError', 'IllegalActionError',
    'InsufficientChipsError', 'GameStateError', 'EmptyDeckError', 'ChipConservationError',

    # Core classes
    'Card', 'Deck', 'Player', 'GameState', 'GameSnapshot',

    # Betting
    'BettingLedger', 'BettingStateProtocol', 'BettingRound',

    # Pots and showdown
    'SidePot', 'calculate_side_pots', 'split_pot', 'distribute_pots',
    'HandEvaluator', 'HighCardEvaluator',

    # Events and invariants
    'EventBus', 'EventType', 'GameEvent', 'ChipConservationChecker',

    # Configuration
    'GameConfiguration', 'MIN_PLAYERS', 'MAX_PLAYERS',

    # Utility functions
    'new_deck', 'full_deck'
]
