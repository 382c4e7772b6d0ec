"""
Bot policies for the Texas Hold'em simulator.

This package provides the policy protocol consumed by the orchestrator and
the reference heuristic implementation.
"""

from .base import BotPolicy
from .heuristic_bot import HeuristicBot, HeuristicBotConfig, hand_strength

__all__ = ['BotPolicy', 'HeuristicBot', 'HeuristicBotConfig', 'hand_strength']
