"""
游戏相关枚举定义模块.

包含德州扑克模拟器中使用的枚举类型，如花色、点数、行动类型、阶段和座位状态等.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union


class Suit(Enum):
    """
    扑克牌花色枚举.
    """

    HEARTS = "hearts"      # 红桃
    DIAMONDS = "diamonds"  # 方块
    CLUBS = "clubs"        # 梅花
    SPADES = "spades"      # 黑桃

    @property
    def symbol(self) -> str:
        """花色的Unicode符号."""
        return {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}[self.value]


class Rank(IntEnum):
    """
    扑克牌点数枚举.

    数值越大表示点数越大，A记为14.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class ActionType(Enum):
    """
    玩家行动类型枚举.

    下注统一以加注表示：raise的金额是本轮的总投入目标.
    """

    FOLD = "fold"    # 弃牌
    CHECK = "check"  # 过牌
    CALL = "call"    # 跟注
    RAISE = "raise"  # 加注

    @classmethod
    def parse(cls, value: Union["ActionType", str]) -> "ActionType":
        """
        从字符串或枚举值解析行动类型.

        Args:
            value: 行动类型或其字符串值（不区分大小写）

        Returns:
            ActionType: 对应的行动类型

        Raises:
            ValueError: 当字符串无法识别时
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"无效的行动类型: {value}") from None


class Phase(Enum):
    """
    手牌阶段枚举.

    按顺序推进: BLINDS → PRE_FLOP → FLOP → TURN → RIVER → SHOWDOWN → PAYOUT.
    """

    BLINDS = "blinds"      # 下盲注
    PRE_FLOP = "pre_flop"  # 翻牌前
    FLOP = "flop"          # 翻牌
    TURN = "turn"          # 转牌
    RIVER = "river"        # 河牌
    SHOWDOWN = "showdown"  # 摊牌
    PAYOUT = "payout"      # 派奖

    def next(self) -> "Phase":
        """
        返回下一个阶段.

        Raises:
            ValueError: 当已经处于PAYOUT阶段时
        """
        order = list(Phase)
        index = order.index(self)
        if index == len(order) - 1:
            raise ValueError("PAYOUT之后没有后续阶段")
        return order[index + 1]


# 每个阶段开始时需要发出的公共牌数量
COMMUNITY_CARDS_PER_PHASE = {
    Phase.FLOP: 3,
    Phase.TURN: 1,
    Phase.RIVER: 1,
}


class SeatStatus(Enum):
    """
    座位状态枚举.
    """

    ACTIVE = "active"    # 仍在手牌中且有筹码
    FOLDED = "folded"    # 已弃牌
    ALL_IN = "all_in"    # 全押，仍在手牌中但不能再行动
    OUT = "out"          # 已淘汰（筹码为0），不再发牌


class RoundState(Enum):
    """
    下注轮状态机的状态.
    """

    AWAITING_ACTION = "awaiting_action"  # 等待某个座位行动
    ROUND_CLOSED = "round_closed"        # 本轮下注结束
    HAND_OVER = "hand_over"              # 只剩一名未弃牌玩家


@dataclass(frozen=True)
class Action:
    """
    玩家行动数据类.

    Attributes:
        action_type: 行动类型
        amount: 加注时为本轮总投入目标，其余行动为0
        player_id: 执行行动的玩家座位号

    Examples:
        >>> Action(ActionType.RAISE, 40, 0)  # 玩家0加注到40
        >>> Action(ActionType.FOLD, 0, 1)    # 玩家1弃牌
    """

    action_type: ActionType
    amount: int = 0
    player_id: int = 0

    def __post_init__(self):
        """验证行动数据的有效性."""
        if self.amount < 0:
            raise ValueError(f"行动金额不能为负数: {self.amount}")

    def __str__(self) -> str:
        if self.action_type == ActionType.RAISE:
            return f"raise to {self.amount}"
        return self.action_type.value

