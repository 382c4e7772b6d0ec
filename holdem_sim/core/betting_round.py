"""
下注轮状态机.

负责决定当前行动座位、校验并执行行动、检测下注轮关闭和手牌提前结束.

状态:
    AWAITING_ACTION: 等待 current_player 行动
    ROUND_CLOSED: 所有需要行动的玩家都已行动且投入相等（或已全押）
    HAND_OVER: 只剩一名未弃牌玩家
"""

import logging
from typing import Optional, Set

from .enums import ActionType, RoundState
from .exceptions import IllegalActionError
from .ledger import BettingLedger
from .player import Player
from .state import GameState


class BettingRound:
    """
    单个下注轮的状态机.

    本身不持有状态，所有数据都保存在传入的 GameState 中，
    因此同一个实例可以驱动整局游戏的每个下注轮.
    """

    def __init__(self, ledger: Optional[BettingLedger] = None,
                 logger: Optional[logging.Logger] = None):
        self._ledger = ledger or BettingLedger()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def ledger(self) -> BettingLedger:
        return self._ledger

    def start(self, state: GameState, first_seat_after: int, keep_commitments: bool = False) -> RoundState:
        """
        开始一个新的下注轮.

        Args:
            state: 游戏状态
            first_seat_after: 从该座位之后顺时针寻找第一个行动者
                （翻牌前为大盲座位，翻牌后为庄家座位）
            keep_commitments: 翻牌前为True，保留盲注的投入和当前下注

        Returns:
            RoundState: AWAITING_ACTION，或无人需要行动时直接为 ROUND_CLOSED
        """
        if keep_commitments:
            for player in state.players:
                player.has_acted = False
        else:
            for player in state.players:
                player.reset_for_new_round()
            state.current_bet = 0
            state.last_raiser = None

        state.round_state = RoundState.AWAITING_ACTION

        if not self.round_needs_action(state):
            self._logger.debug(f"{state.phase.name} 无人需要行动，下注轮直接结束")
            state.current_player = None
            state.round_state = RoundState.ROUND_CLOSED
            return state.round_state

        state.current_player = self.next_actor(state, first_seat_after)
        self._logger.debug(f"{state.phase.name} 下注轮开始，首先行动座位: {state.current_player}")
        return state.round_state

    def legal_actions(self, state: GameState, seat_id: int) -> Set[ActionType]:
        """
        查询某座位当前的合法行动.

        不轮到该座位行动时返回空集合.
        """
        if state.round_state != RoundState.AWAITING_ACTION or state.current_player != seat_id:
            return set()
        player = state.get_player_by_seat(seat_id)
        if player is None:
            return set()
        return self._ledger.legal_actions(player, state)

    def apply(self, state: GameState, seat_id: int, action_type: ActionType, amount: int = 0) -> RoundState:
        """
        执行当前座位的行动并推进状态机.

        Args:
            state: 游戏状态
            seat_id: 行动座位
            action_type: 行动类型
            amount: 加注目标金额

        Returns:
            RoundState: 行动后的状态机状态

        Raises:
            IllegalActionError: 下注轮未在等待行动、不轮到该座位或行动不合法时，状态不变
        """
        if state.round_state != RoundState.AWAITING_ACTION:
            raise IllegalActionError(f"当前没有等待行动的下注轮 (状态: {state.round_state})")

        if state.current_player != seat_id:
            raise IllegalActionError(
                f"Not player {seat_id}'s turn, current player: {state.current_player}"
            )

        player = state.get_player_by_seat(seat_id)
        if player is None:
            raise IllegalActionError(f"找不到座位 {seat_id}")

        self._ledger.apply(player, action_type, amount, state)

        player.has_acted = True
        if action_type == ActionType.RAISE:
            # 加注重新打开本轮，其他玩家需要再次行动
            for other in state.players:
                if other is not player:
                    other.has_acted = False

        if len(state.get_players_in_hand()) == 1:
            state.round_state = RoundState.HAND_OVER
            state.current_player = None
        elif not self.round_needs_action(state):
            state.round_state = RoundState.ROUND_CLOSED
            state.current_player = None
        else:
            state.current_player = self.next_actor(state, seat_id)

        return state.round_state

    def needs_action(self, player: Player, state: GameState) -> bool:
        """
        判断玩家在本轮是否还需要行动.

        有筹码且未弃牌的玩家，如果投入低于当前下注，或自上次加注以来尚未行动，
        就需要行动. 唯一有筹码的玩家（其他人都已全押）只在面对下注时行动.
        """
        if not player.can_act():
            return False
        if player.current_bet < state.current_bet:
            return True
        return not player.has_acted and len(state.get_actionable_players()) >= 2

    def round_needs_action(self, state: GameState) -> bool:
        return any(self.needs_action(p, state) for p in state.players)

    def next_actor(self, state: GameState, from_seat: int) -> Optional[int]:
        """
        从 from_seat 之后顺时针找到下一个未弃牌且未全押的座位.
        """
        for seat in state.seats_clockwise_from(from_seat):
            if state.players[seat].can_act():
                return seat
        return None

    def close(self, state: GameState) -> None:
        """
        关闭下注轮：清零本轮投入和行动标记.

        本轮投入在行动时已经进入底池，这里只重置记账字段.
        """
        for player in state.players:
            player.reset_for_new_round()
        state.current_bet = 0
        state.last_raiser = None
        state.current_player = None
        state.round_state = RoundState.ROUND_CLOSED

    @staticmethod
    def betting_complete_for_hand(state: GameState) -> bool:
        """有筹码的在局玩家少于两人时，本手牌不再有下注，直接发完公共牌."""
        return len(state.get_actionable_players()) < 2
