"""
Game state management for the Texas Hold'em simulator.

This module provides the single mutable context object owned by one game,
plus immutable snapshots handed to bots and presentation layers. It stores
data and performs primitive chip movements; betting rules live in the
ledger and the betting round state machine.
"""

import copy
import random
from dataclasses import dataclass, field, fields
from typing import List, Optional, Dict, Any

from .enums import Phase, RoundState
from .cards import Card, Deck
from .player import Player


@dataclass
class GameSnapshot:
    """
    Read-only snapshot of game state for external consumption.

    Players are deep copies. When taken for a specific viewer the other
    players' hole cards are removed, so a snapshot only carries what that
    seat may legitimately see.
    """

    phase: Phase
    community_cards: List[Card]
    pot: int
    current_bet: int
    players: List[Player]
    dealer_position: int
    current_player: Optional[int]
    small_blind: int
    big_blind: int
    hand_number: int
    round_state: Optional[RoundState]
    last_raiser: Optional[int]
    events: List[str]
    viewer_seat: Optional[int] = None

    def get_player_by_seat(self, seat_id: int) -> Optional[Player]:
        for player in self.players:
            if player.seat_id == seat_id:
                return player
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a plain dictionary for presentation layers.

        Returns:
            Dictionary representation of the game state.
        """
        players_data = []
        for player in self.players:
            players_data.append({
                'seat_id': player.seat_id,
                'name': player.name,
                'chips': player.chips,
                'current_bet': player.current_bet,
                'total_bet_this_hand': player.total_bet_this_hand,
                'has_acted': player.has_acted,
                'status': player.status.name,
                'is_human': player.is_human,
                'hole_cards': [str(card) for card in player.hole_cards],
                'is_dealer': player.is_dealer,
                'is_small_blind': player.is_small_blind,
                'is_big_blind': player.is_big_blind
            })

        return {
            'phase': self.phase.name,
            'round_state': self.round_state.name if self.round_state else None,
            'community_cards': [str(card) for card in self.community_cards],
            'pot': self.pot,
            'current_bet': self.current_bet,
            'current_player': self.current_player,
            'dealer_position': self.dealer_position,
            'hand_number': self.hand_number,
            'players': players_data,
            'small_blind': self.small_blind,
            'big_blind': self.big_blind,
            'last_raiser': self.last_raiser
        }


@dataclass
class GameState:
    """
    Mutable game state for one table.

    Exactly one instance exists per running game and is passed explicitly to
    every engine operation. Pot, community cards and current bet are reset at
    the start of each hand; the players list is stable across hands.
    """

    players: List[Player] = field(default_factory=list)
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    current_player: Optional[int] = None
    hand_number: int = 0
    dealer_position: int = 0
    small_blind: int = 10
    big_blind: int = 20
    phase: Phase = Phase.BLINDS
    round_state: Optional[RoundState] = None
    last_raiser: Optional[int] = None

    deck: Optional[Deck] = None
    rng: random.Random = field(default_factory=random.Random)

    # Human readable log of the current hand
    events: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate state after initialization."""
        if self.pot < 0:
            raise ValueError(f"Pot amount cannot be negative: {self.pot}")

        if self.current_bet < 0:
            raise ValueError(f"Current bet cannot be negative: {self.current_bet}")

        if self.small_blind <= 0:
            raise ValueError(f"Small blind must be positive: {self.small_blind}")

        if self.big_blind <= self.small_blind:
            raise ValueError(f"Big blind ({self.big_blind}) must be greater than small blind ({self.small_blind})")

        seats = [p.seat_id for p in self.players]
        if seats != list(range(len(seats))):
            raise ValueError(f"Seats must be numbered 0..n-1 in order, got {seats}")

    # === queries ===

    @property
    def num_seats(self) -> int:
        return len(self.players)

    def get_player_by_seat(self, seat_id: int) -> Optional[Player]:
        if 0 <= seat_id < len(self.players):
            return self.players[seat_id]
        return None

    def get_players_in_hand(self) -> List[Player]:
        """Players still contesting the pot (ACTIVE or ALL_IN)."""
        return [p for p in self.players if p.in_hand]

    def get_actionable_players(self) -> List[Player]:
        """Players in the hand who still hold chips and may bet."""
        return [p for p in self.players if p.can_act()]

    def players_with_chips(self) -> List[Player]:
        return [p for p in self.players if p.chips > 0]

    def total_chips(self) -> int:
        """Sum of every stack plus the pot; conserved by every betting operation."""
        return sum(p.chips for p in self.players) + self.pot

    def seats_clockwise_from(self, seat_id: int) -> List[int]:
        """Every seat in clockwise order starting after ``seat_id`` and ending on it."""
        n = len(self.players)
        return [(seat_id + offset) % n for offset in range(1, n + 1)]

    # === chip movement ===

    def transfer_to_pot(self, player: Player, amount: int) -> int:
        """Move chips from a player's stack into the pot.

        Both sides are updated together; the amount is clamped to the stack.

        Args:
            player: The contributing player.
            amount: Requested amount.

        Returns:
            The amount actually moved.
        """
        moved = player.commit(amount)
        self.pot += moved
        return moved

    def award_from_pot(self, player: Player, amount: int) -> None:
        """Pay chips from the pot to a player.

        Raises:
            ValueError: If the pot holds fewer chips than requested.
        """
        if amount < 0 or amount > self.pot:
            raise ValueError(f"Cannot award {amount} from pot of {self.pot}")
        self.pot -= amount
        player.add_chips(amount)

    # === dealing ===

    def new_deck(self) -> Deck:
        """Create and shuffle a fresh deck owned by the current hand."""
        self.deck = Deck.create(self.rng)
        return self.deck

    def deal_hole_cards(self) -> None:
        """Deal two hole cards to each player in the hand.

        Raises:
            ValueError: If the deck is not initialized.
        """
        if self.deck is None:
            raise ValueError("Deck not initialized")

        in_hand = self.get_players_in_hand()
        for player in in_hand:
            player.set_hole_cards(self.deck.deal_cards(2))

        self.add_event(f"Dealt hole cards to {len(in_hand)} players")

    def deal_community_cards(self, count: int) -> List[Card]:
        """Deal community cards from the shared deck.

        Raises:
            ValueError: If the deck is not initialized or the board would exceed five cards.
        """
        if self.deck is None:
            raise ValueError("Deck not initialized")
        if len(self.community_cards) + count > 5:
            raise ValueError(f"Cannot deal {count} more community cards onto {len(self.community_cards)}")

        cards = self.deck.deal_cards(count)
        self.community_cards.extend(cards)
        self.add_event(f"{self.phase.name} dealt: {' '.join(str(card) for card in cards)}")
        return cards

    # === lifecycle ===

    def reset_for_new_hand(self) -> None:
        """Clear per-hand table state; players keep their chips."""
        self.community_cards = []
        self.pot = 0
        self.current_bet = 0
        self.current_player = None
        self.last_raiser = None
        self.round_state = None
        self.phase = Phase.BLINDS
        self.events = []
        for player in self.players:
            player.reset_for_new_hand()

    def add_event(self, event: str) -> None:
        self.events.append(event)

    # === snapshots ===

    def create_snapshot(self, viewer_seat: Optional[int] = None) -> GameSnapshot:
        """Create a deep-copied snapshot of the current state.

        Args:
            viewer_seat: If given, hole cards of every other seat are hidden.

        Returns:
            A GameSnapshot independent of this state.
        """
        players_copy = [copy.deepcopy(player) for player in self.players]
        if viewer_seat is not None:
            for player in players_copy:
                if player.seat_id != viewer_seat:
                    player.hole_cards = []

        return GameSnapshot(
            phase=self.phase,
            community_cards=list(self.community_cards),
            pot=self.pot,
            current_bet=self.current_bet,
            players=players_copy,
            dealer_position=self.dealer_position,
            current_player=self.current_player,
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            hand_number=self.hand_number,
            round_state=self.round_state,
            last_raiser=self.last_raiser,
            events=list(self.events),
            viewer_seat=viewer_seat
        )

    def restore_from_snapshot(self, snapshot: GameSnapshot) -> None:
        """Restore table state from a full (non viewer-scoped) snapshot.

        The deck is not part of a snapshot and is restored separately by callers
        that need it.
        Players are restored in place so references held by callers stay live.
        """
        if snapshot.viewer_seat is not None:
            raise ValueError("Cannot restore from a viewer-scoped snapshot")

        self.phase = snapshot.phase
        self.community_cards = list(snapshot.community_cards)
        self.pot = snapshot.pot
        self.current_bet = snapshot.current_bet
        if len(snapshot.players) != len(self.players):
            raise ValueError("Snapshot seat count does not match the table")
        for player, saved in zip(self.players, snapshot.players):
            for player_field in fields(Player):
                setattr(player, player_field.name, copy.copy(getattr(saved, player_field.name)))
        self.dealer_position = snapshot.dealer_position
        self.current_player = snapshot.current_player
        self.small_blind = snapshot.small_blind
        self.big_blind = snapshot.big_blind
        self.hand_number = snapshot.hand_number
        self.round_state = snapshot.round_state
        self.last_raiser = snapshot.last_raiser
        self.events = list(snapshot.events)

    def to_dict(self, viewer_seat: Optional[int] = None) -> Dict[str, Any]:
        return self.create_snapshot(viewer_seat).to_dict()

    def __str__(self) -> str:
        community_str = " ".join(str(card) for card in self.community_cards)
        return (f"Hand #{self.hand_number}, "
                f"Phase: {self.phase.name}, "
                f"Community: [{community_str}], "
                f"Pot: {self.pot}, "
                f"Current bet: {self.current_bet}, "
                f"In hand: {len(self.get_players_in_hand())}")
