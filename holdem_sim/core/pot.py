"""
底池分配模块.

根据每位玩家本手牌的累计投入计算主池和边池，并按摊牌结果分配.
弃牌玩家的投入计入底池但没有争夺资格；只有一名有资格玩家的边池等同于返还.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping


@dataclass
class SidePot:
    """
    边池数据结构.

    Attributes:
        amount: 边池金额
        eligible_players: 有资格竞争此边池的玩家座位号列表
    """

    amount: int
    eligible_players: List[int]

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"边池金额不能为负数: {self.amount}")

        if not self.eligible_players:
            raise ValueError("边池必须至少有一个有资格的玩家")

        if len(self.eligible_players) != len(set(self.eligible_players)):
            raise ValueError("边池的有资格玩家列表不能有重复")

    def __str__(self) -> str:
        players_str = ", ".join(map(str, self.eligible_players))
        return f"边池({self.amount}筹码, 玩家: {players_str})"


def calculate_side_pots(contributions: Mapping[int, int], eligible: Iterable[int]) -> List[SidePot]:
    """
    计算主池和边池.

    Args:
        contributions: 本手牌每位玩家的累计投入 {seat_id: amount}，包含已弃牌玩家
        eligible: 仍有资格赢取底池的座位（未弃牌）

    Returns:
        边池列表，按层级排列 [主池, 边池1, ...]

    算法说明:
        1. 取有资格玩家的不同投入额作为层级，升序排列
        2. 每层金额 = 所有玩家在 (上一层, 本层] 区间内的投入之和
        3. 投入额不低于本层的有资格玩家可以争夺该层
        4. 高于最高层的弃牌玩家投入并入最后一个池

    示例:
        投入 {0: 25, 1: 50, 2: 100}，均未弃牌
        - 主池: 75 (玩家0,1,2)
        - 边池1: 50 (玩家1,2)
        - 边池2: 50 (玩家2，相当于返还)
    """
    eligible_seats = sorted(seat for seat in set(eligible) if contributions.get(seat, 0) > 0)
    levels = sorted({contributions[seat] for seat in eligible_seats})

    pots: List[SidePot] = []
    prev = 0
    for level in levels:
        amount = sum(min(c, level) - min(c, prev) for c in contributions.values())
        players = [seat for seat in eligible_seats if contributions[seat] >= level]
        pots.append(SidePot(amount, players))
        prev = level

    leftover = sum(c - min(c, prev) for c in contributions.values())
    if leftover and pots:
        pots[-1].amount += leftover

    return pots


def seats_from_button(seats: Iterable[int], dealer_position: int, num_seats: int) -> List[int]:
    """按顺时针距离庄家位的远近排序座位，庄家左侧第一位最近."""
    return sorted(seats, key=lambda seat: (seat - dealer_position - 1) % num_seats)


def split_pot(amount: int, winner_seats: Iterable[int], dealer_position: int, num_seats: int) -> Dict[int, int]:
    """
    平分一个底池.

    余数筹码从庄家左侧开始顺时针逐个分给获胜者.

    Args:
        amount: 底池金额
        winner_seats: 获胜者座位
        dealer_position: 庄家位置
        num_seats: 座位总数

    Returns:
        Dict[int, int]: 每位获胜者的所得 {seat_id: chips}

    Raises:
        ValueError: 当没有获胜者时
    """
    ordered = seats_from_button(set(winner_seats), dealer_position, num_seats)
    if not ordered:
        raise ValueError("平分底池至少需要一名获胜者")

    base, remainder = divmod(amount, len(ordered))
    shares = {}
    for index, seat in enumerate(ordered):
        shares[seat] = base + (1 if index < remainder else 0)
    return shares


def distribute_pots(pots: List[SidePot], ranks: Mapping[int, Any],
                    dealer_position: int, num_seats: int) -> Dict[int, int]:
    """
    按牌力把每个底池分给其有资格玩家中的最强者.

    Args:
        pots: calculate_side_pots 的结果
        ranks: 每个有资格座位的牌力（可比较，越大越强）
        dealer_position: 庄家位置
        num_seats: 座位总数

    Returns:
        Dict[int, int]: 每个座位赢得的总筹码
    """
    awards: Dict[int, int] = {}
    for pot in pots:
        if len(pot.eligible_players) == 1:
            winners = pot.eligible_players
        else:
            best = max(ranks[seat] for seat in pot.eligible_players)
            winners = [seat for seat in pot.eligible_players if ranks[seat] == best]

        for seat, share in split_pot(pot.amount, winners, dealer_position, num_seats).items():
            awards[seat] = awards.get(seat, 0) + share

    return awards
