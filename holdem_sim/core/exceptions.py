"""
德州扑克模拟器异常定义.

区分用户可恢复的异常(非法行动、无效配置)和表示程序缺陷的致命异常
(牌堆耗尽、筹码不守恒).
"""


class PokerGameError(Exception):
    """德州扑克游戏基础异常类"""
    pass


class InvalidConfigurationError(PokerGameError):
    """游戏配置无效，在创建任何游戏状态之前抛出"""
    pass


class IllegalActionError(PokerGameError):
    """玩家行动不在合法行动集合内，或不轮到该玩家行动"""
    pass


class InsufficientChipsError(PokerGameError):
    """筹码不足异常.

    跟注和全押加注会被截断到玩家的筹码数而不是抛出该异常.
    """
    pass


class GameStateError(PokerGameError):
    """游戏状态错误异常，如没有进行中的手牌时提交行动"""
    pass


class EmptyDeckError(PokerGameError):
    """从空牌堆发牌（内部不变量被破坏）"""
    pass


class ChipConservationError(PokerGameError):
    """筹码守恒被破坏（内部不变量被破坏）"""

    def __init__(self, expected: int, actual: int, context: str = ""):
        self.expected = expected
        self.actual = actual
        self.context = context
        message = f"筹码不守恒: 期望总量{expected}, 实际{actual}"
        if context:
            message += f" ({context})"
        super().__init__(message)
