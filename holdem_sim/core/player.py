"""
德州扑克玩家状态管理.

包含玩家的基本信息、筹码管理、手牌管理和状态控制功能.
玩家对象由牌桌持有，跨手牌存在（筹码延续），手牌相关字段每手重置.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .cards import Card
from .enums import SeatStatus, ActionType


@dataclass
class Player:
    """
    德州扑克玩家类.

    current_bet 是本下注轮已投入底池的筹码（committed），
    total_bet_this_hand 是本手牌累计投入，用于边池计算和作废退还.
    """

    seat_id: int
    name: str
    chips: int
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    status: SeatStatus = SeatStatus.ACTIVE
    is_human: bool = False
    has_acted: bool = False
    total_bet_this_hand: int = 0
    is_dealer: bool = False
    is_small_blind: bool = False
    is_big_blind: bool = False
    last_action_type: Optional[ActionType] = None

    def __post_init__(self) -> None:
        """
        验证玩家数据的有效性.

        Raises:
            ValueError: 当玩家数据无效时
        """
        if self.seat_id < 0:
            raise ValueError(f"座位号不能为负数: {self.seat_id}")

        if self.chips < 0:
            raise ValueError(f"筹码数量不能为负数: {self.chips}")

        if self.current_bet < 0:
            raise ValueError(f"当前下注不能为负数: {self.current_bet}")

        if len(self.hole_cards) not in (0, 2):
            raise ValueError(f"手牌必须为0或2张: {len(self.hole_cards)}")

    def __hash__(self) -> int:
        return hash(self.seat_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return False
        return self.seat_id == other.seat_id

    @property
    def folded(self) -> bool:
        return self.status == SeatStatus.FOLDED

    @property
    def is_all_in(self) -> bool:
        """仍在手牌中但筹码为0."""
        return self.status == SeatStatus.ALL_IN

    @property
    def in_hand(self) -> bool:
        """是否仍在争夺本手牌的底池（未弃牌、未淘汰）."""
        return self.status in (SeatStatus.ACTIVE, SeatStatus.ALL_IN)

    def can_act(self) -> bool:
        """
        检查玩家是否可以行动.

        Returns:
            bool: 未弃牌、未全押且有筹码时返回True
        """
        return self.status == SeatStatus.ACTIVE and self.chips > 0

    def commit(self, amount: int) -> int:
        """
        从筹码中投入指定金额到本轮下注.

        只修改玩家一侧，底池一侧由 GameState.transfer_to_pot 同步更新.

        Args:
            amount: 投入金额，超过筹码时截断为全押

        Returns:
            int: 实际投入的金额

        Raises:
            ValueError: 当金额为负数或玩家不在手牌中时
        """
        if amount < 0:
            raise ValueError(f"下注金额不能为负数: {amount}")
        if not self.in_hand:
            raise ValueError(f"玩家{self.seat_id}不在手牌中，无法下注")

        actual_amount = min(amount, self.chips)
        self.chips -= actual_amount
        self.current_bet += actual_amount
        self.total_bet_this_hand += actual_amount

        if self.chips == 0:
            self.status = SeatStatus.ALL_IN

        return actual_amount

    def fold(self) -> None:
        """执行弃牌操作."""
        if not self.in_hand:
            raise ValueError(f"玩家{self.seat_id}无法弃牌")
        self.status = SeatStatus.FOLDED

    def set_hole_cards(self, cards: List[Card]) -> None:
        """
        设置玩家的手牌.

        Raises:
            ValueError: 当手牌数量不是2张时
        """
        if len(cards) != 2:
            raise ValueError(f"手牌必须为2张: {len(cards)}")
        self.hole_cards = list(cards)

    def get_hole_cards_str(self, hidden: bool = False) -> str:
        """
        获取手牌的字符串表示.

        Returns:
            str: 手牌的字符串表示，如"AH KS"
        """
        if hidden:
            return " ".join("XX" for _ in self.hole_cards)
        return " ".join(str(card) for card in self.hole_cards)

    def reset_for_new_hand(self) -> None:
        """
        为新一手牌重置玩家状态.

        筹码为0的玩家被标记为淘汰并保持淘汰.
        """
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet_this_hand = 0
        self.has_acted = False
        self.last_action_type = None
        self.is_dealer = False
        self.is_small_blind = False
        self.is_big_blind = False

        if self.status != SeatStatus.OUT:
            self.status = SeatStatus.ACTIVE if self.chips > 0 else SeatStatus.OUT

    def reset_for_new_round(self) -> None:
        """新的下注轮开始时重置本轮投入和行动标记."""
        self.current_bet = 0
        self.has_acted = False

    def add_chips(self, amount: int) -> None:
        """
        增加玩家的筹码（派奖或退还）.

        Raises:
            ValueError: 当金额为负数时
        """
        if amount < 0:
            raise ValueError(f"增加的筹码数量不能为负数: {amount}")

        self.chips += amount

    def __str__(self) -> str:
        position_info = []
        if self.is_dealer:
            position_info.append("庄家")
        if self.is_small_blind:
            position_info.append("小盲")
        if self.is_big_blind:
            position_info.append("大盲")

        position_str = f"({', '.join(position_info)})" if position_info else ""

        return (f"{self.name}{position_str}: {self.chips}筹码, 当前下注{self.current_bet}, "
                f"手牌[{self.get_hole_cards_str()}], 状态{self.status.name}")

    def __repr__(self) -> str:
        return f"Player(seat={self.seat_id}, name='{self.name}', chips={self.chips}, status={self.status.name})"
