"""
Heuristic bot policy for the Texas Hold'em simulator.

Scores the two hole cards, adds a small random aggression jitter and maps
the result to fold/call/raise probabilities. The chosen action is then
mapped onto the legal action set, so the policy never submits an illegal
action.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core import Action, ActionType, BettingLedger, Card, GameSnapshot, Player


@dataclass
class HeuristicBotConfig:
    """Configuration for the heuristic bot.

    Attributes:
        jitter: Half-width of the uniform aggression jitter added to strength
        weak_threshold: Effective strength below which the hand is weak
        strong_threshold: Effective strength at or above which the hand is strong
        weak_fold_probability: Fold frequency with a weak hand (otherwise call)
        medium_fold_probability: Fold frequency with a medium hand
        medium_call_probability: Call frequency with a medium hand that did not fold
        strong_raise_probability: Raise frequency with a strong hand (otherwise call)
    """
    jitter: float = 0.1
    weak_threshold: float = 0.3
    strong_threshold: float = 0.6
    weak_fold_probability: float = 0.7
    medium_fold_probability: float = 0.3
    medium_call_probability: float = 0.6
    strong_raise_probability: float = 0.8


def hand_strength(hole_cards: Sequence[Card]) -> float:
    """Score two hole cards in [0, 1].

    High card normalised by the ace (14); pairs are boosted into [0.5, 1].
    """
    if not hole_cards:
        return 0.0
    values = [card.rank.value for card in hole_cards]
    high_card = max(values)
    if len(values) == 2 and values[0] == values[1]:
        return 0.5 + high_card / 28
    return high_card / 14


class HeuristicBot:
    """Reference bot policy.

    Decisions depend only on the snapshot passed in and the bot's own
    random generator, so a seeded bot replays identically.
    """

    def __init__(self, config: Optional[HeuristicBotConfig] = None,
                 rng: Optional[random.Random] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or HeuristicBotConfig()
        self._rng = rng or random.Random()
        self._ledger = BettingLedger()
        self._logger = logger or logging.getLogger(__name__)
        self.decision_count = 0

    def decide(self, player: Player, snapshot: GameSnapshot) -> Action:
        """Choose a legal action for ``player``.

        Raises:
            ValueError: If the player has no legal action
        """
        legal = self._ledger.legal_actions(player, snapshot)
        if not legal:
            raise ValueError(f"Player {player.seat_id} has no legal action")

        self.decision_count += 1
        strength = hand_strength(player.hole_cards)
        intent = self._choose_intent(strength)
        action = self._to_legal_action(intent, strength, player, snapshot, legal)

        self._logger.debug(
            f"{player.name} strength={strength:.2f} intent={intent.value} -> {action}"
        )
        return action

    def _choose_intent(self, strength: float) -> ActionType:
        cfg = self.config
        effective = strength + self._rng.uniform(-cfg.jitter, cfg.jitter)

        if effective < cfg.weak_threshold:
            return ActionType.FOLD if self._rng.random() < cfg.weak_fold_probability else ActionType.CALL
        if effective < cfg.strong_threshold:
            if self._rng.random() < cfg.medium_fold_probability:
                return ActionType.FOLD
            return ActionType.CALL if self._rng.random() < cfg.medium_call_probability else ActionType.RAISE
        return ActionType.RAISE if self._rng.random() < cfg.strong_raise_probability else ActionType.CALL

    def _to_legal_action(self, intent: ActionType, strength: float, player: Player,
                         snapshot: GameSnapshot, legal) -> Action:
        seat = player.seat_id

        if intent == ActionType.RAISE and ActionType.RAISE in legal:
            return Action(ActionType.RAISE, self.raise_amount(strength, player, snapshot), seat)

        if intent == ActionType.FOLD and ActionType.CHECK not in legal:
            return Action(ActionType.FOLD, 0, seat)

        # Never fold when checking is free
        if ActionType.CHECK in legal:
            return Action(ActionType.CHECK, 0, seat)
        return Action(ActionType.CALL, 0, seat)

    def raise_amount(self, strength: float, player: Player, snapshot: GameSnapshot) -> int:
        """Raise target ``floor(big_blind * 2 * (1 + strength * 3))``.

        Lifted to the minimum legal raise and capped at the player's stack.
        """
        target = int(snapshot.big_blind * 2 * (1 + strength * 3))
        target = max(target, self._ledger.min_raise_to(snapshot))
        return min(target, self._ledger.max_raise_to(player))
