"""
测试配置 - pytest配置文件

提供构建牌桌、游戏状态和编排器的通用fixture。
"""

import random
from typing import List, Optional

import pytest

from holdem_sim.ai import HeuristicBot
from holdem_sim.controller import HandOrchestrator
from holdem_sim.core import EventBus, GameState, Phase, Player


def make_players(chips: List[int], humans: int = 0) -> List[Player]:
    """按座位顺序创建玩家，前 humans 个为人类玩家."""
    return [
        Player(seat_id=seat, name=f"Player {seat}", chips=amount, is_human=seat < humans)
        for seat, amount in enumerate(chips)
    ]


def make_state(chips: List[int], small_blind: int = 10, big_blind: int = 20,
               phase: Phase = Phase.BLINDS, dealer_position: int = 0,
               seed: Optional[int] = 0) -> GameState:
    return GameState(
        players=make_players(chips),
        small_blind=small_blind,
        big_blind=big_blind,
        phase=phase,
        dealer_position=dealer_position,
        rng=random.Random(seed)
    )


def make_orchestrator(chips: List[int], seed: Optional[int] = 0, **kwargs) -> HandOrchestrator:
    """创建全部由机器人组成的牌桌编排器."""
    state = make_state(chips, seed=seed)
    kwargs.setdefault('bot_policy', HeuristicBot(rng=random.Random(seed)))
    return HandOrchestrator(game_state=state, **kwargs)


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def three_player_table(event_bus):
    """三人牌桌，盲注10/20，每人1000筹码."""
    return make_orchestrator([1000, 1000, 1000], event_bus=event_bus)


@pytest.fixture
def heads_up_table(event_bus):
    return make_orchestrator([500, 500], event_bus=event_bus)
