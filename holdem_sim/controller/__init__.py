"""
Controller layer for the Texas Hold'em simulator.

This package provides the hand orchestrator that bridges the core betting
engine with the user interface layers.
"""

from .orchestrator import HandOrchestrator, HandResult
from .decorators import atomic

__all__ = ['HandOrchestrator', 'HandResult', 'atomic']
