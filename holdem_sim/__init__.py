"""
Texas Hold'em Simulator

A headless betting engine for a Texas Hold'em table: explicit game state,
a betting round state machine, side pots and payout, bot policies and a
command-line table. The engine emits events; user interfaces subscribe.
"""

__version__ = "0.1.0"
