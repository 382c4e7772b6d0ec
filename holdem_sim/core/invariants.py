"""
筹码守恒检查器

验证以下规则：
1. 总筹码数量守恒：玩家筹码 + 底池 = 初始总筹码
2. 筹码和底池不能为负数
"""

import logging
from typing import Optional

from .exceptions import ChipConservationError
from .state import GameState

__all__ = ['ChipConservationChecker']


class ChipConservationChecker:
    """筹码守恒检查器

    违反守恒说明引擎存在缺陷，检查失败时记录critical日志并抛出异常.
    """

    def __init__(self, expected_total: Optional[int] = None, logger: Optional[logging.Logger] = None):
        """初始化筹码守恒检查器

        Args:
            expected_total: 期望的总筹码数量，为None时在第一次检查时记录
        """
        self.expected_total = expected_total
        self._logger = logger or logging.getLogger(__name__)

    def reset(self, state: GameState) -> None:
        """以当前状态的总筹码作为新的基准"""
        self.expected_total = state.total_chips()

    def check(self, state: GameState, context: str = "") -> None:
        """执行检查

        Raises:
            ChipConservationError: 总量变化或出现负数时
        """
        actual = state.total_chips()
        if self.expected_total is None:
            self.expected_total = actual

        negative = [p.seat_id for p in state.players if p.chips < 0]
        if negative or state.pot < 0:
            self._logger.critical(f"出现负数筹码: 座位{negative}, 底池{state.pot} ({context})")
            raise ChipConservationError(self.expected_total, actual, f"negative chips {context}".strip())

        if actual != self.expected_total:
            self._logger.critical(f"筹码不守恒: 期望{self.expected_total}, 实际{actual} ({context})")
            raise ChipConservationError(self.expected_total, actual, context)
