"""
德州扑克手牌编排器.

这个模块驱动一手牌的完整流程：盲注、四个下注轮、摊牌和派奖。
编排器是UI层唯一的入口，UI通过 apply(player_id, action, amount) 提交行动，
通过事件总线和快照获得显示所需的全部信息。
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union

from ..core import (
    ActionType, BettingLedger, BettingRound, ChipConservationChecker,
    ChipConservationError, COMMUNITY_CARDS_PER_PHASE, EventBus, EventType,
    GameConfiguration, GameSnapshot, GameState, GameStateError, HandEvaluator,
    HighCardEvaluator, IllegalActionError, InvalidConfigurationError,
    MAX_PLAYERS, MIN_PLAYERS, Phase, Player, RoundState, SeatStatus, SidePot,
    calculate_side_pots, distribute_pots
)
from ..ai import BotPolicy, HeuristicBot
from .decorators import atomic


@dataclass(frozen=True)
class HandResult:
    """手牌结束结果.

    Attributes:
        hand_number: 手牌编号
        winner_ids: 主池获胜玩家座位列表
        pot_amount: 底池总金额
        awards: 每个座位从底池中拿回的筹码
        winning_hand_description: 结果描述
        side_pots: 底池（含边池）划分
        showdown: 是否经过摊牌
        aborted: 手牌是否被中止
    """

    hand_number: int
    winner_ids: List[int]
    pot_amount: int
    awards: Dict[int, int]
    winning_hand_description: str
    side_pots: List[SidePot] = field(default_factory=list)
    showdown: bool = False
    aborted: bool = False


class HandOrchestrator:
    """德州扑克手牌编排器.

    负责：
    - 手牌生命周期（庄家轮转、发牌、盲注）
    - 把行动交给下注轮状态机，并在下注轮关闭后推进阶段
    - 摊牌、边池划分和派奖
    - 在每次变更后检查筹码守恒
    - 向事件总线发布事件

    每个编排器拥有自己的游戏状态和事件总线，不存在全局状态。
    """

    _atomic_attributes = ('_hand_in_progress', '_last_result', '_game_over')

    def __init__(
        self,
        config: Optional[GameConfiguration] = None,
        game_state: Optional[GameState] = None,
        evaluator: Optional[HandEvaluator] = None,
        bot_policy: Optional[BotPolicy] = None,
        event_bus: Optional[EventBus] = None,
        logger: Optional[logging.Logger] = None
    ):
        """初始化编排器.

        Args:
            config: 游戏配置，game_state 为None时用于创建玩家和状态
            game_state: 直接提供的游戏状态（测试场景使用）
            evaluator: 摊牌牌力评估器，默认为 HighCardEvaluator
            bot_policy: 机器人策略，默认为以配置种子初始化的 HeuristicBot
            event_bus: 事件总线，为None时创建新的总线
            logger: 日志记录器

        Raises:
            InvalidConfigurationError: 玩家数量不在允许范围内时
        """
        self._logger = logger or logging.getLogger(__name__)

        if game_state is None:
            config = config or GameConfiguration.create()
            game_state = GameState(
                players=config.build_players(),
                small_blind=config.small_blind,
                big_blind=config.big_blind,
                rng=random.Random(config.seed)
            )
        if not MIN_PLAYERS <= len(game_state.players) <= MAX_PLAYERS:
            raise InvalidConfigurationError(
                f"Invalid player configuration: {len(game_state.players)} seats, "
                f"expected {MIN_PLAYERS}-{MAX_PLAYERS}"
            )

        self._game_state = game_state
        self._evaluator = evaluator or HighCardEvaluator()
        if bot_policy is None:
            seed = config.seed if config is not None else None
            bot_policy = HeuristicBot(rng=random.Random(seed))
        self._bot_policy = bot_policy
        self._event_bus = event_bus or EventBus(self._logger)

        self._betting_round = BettingRound(BettingLedger(self._logger), self._logger)
        self._checker = ChipConservationChecker(logger=self._logger)
        self._checker.reset(game_state)

        self._hand_in_progress = False
        self._last_result: Optional[HandResult] = None
        self._game_over = False

    # === 只读属性 ===

    @property
    def game_state(self) -> GameState:
        return self._game_state

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def current_player_id(self) -> Optional[int]:
        if not self._hand_in_progress:
            return None
        return self._game_state.current_player

    @property
    def is_hand_over(self) -> bool:
        return not self._hand_in_progress

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def last_result(self) -> Optional[HandResult]:
        return self._last_result

    def get_snapshot(self, viewer_seat: Optional[int] = None) -> GameSnapshot:
        """获取游戏状态快照，指定 viewer_seat 时隐藏其他玩家的底牌."""
        return self._game_state.create_snapshot(viewer_seat)

    def legal_actions(self, player_id: int) -> Set[ActionType]:
        """查询玩家当前的合法行动，不轮到该玩家时为空集合."""
        if not self._hand_in_progress:
            return set()
        return self._betting_round.legal_actions(self._game_state, player_id)

    # === 手牌生命周期 ===

    def start_hand(self) -> bool:
        """开始新的一手牌.

        Returns:
            是否成功开始；有筹码的玩家不足两人时返回False并宣布游戏结束

        Raises:
            GameStateError: 当前已有手牌在进行中
        """
        if self._hand_in_progress:
            raise GameStateError("当前已有手牌在进行中，无法开始新手牌")

        state = self._game_state
        if len(state.players_with_chips()) < 2:
            self._declare_game_over()
            return False

        first_hand = state.hand_number == 0
        state.reset_for_new_hand()
        state.hand_number += 1
        state.dealer_position = self._initial_button() if first_hand else self._next_seat_with_chips(state.dealer_position)
        state.players[state.dealer_position].is_dealer = True
        self._hand_in_progress = True

        in_hand = state.get_players_in_hand()
        self._logger.info(f"第{state.hand_number}手牌开始，庄家座位{state.dealer_position}，{len(in_hand)}名玩家")
        self._event_bus.emit_simple(
            EventType.HAND_STARTED,
            hand_number=state.hand_number,
            dealer_position=state.dealer_position,
            active_players=len(in_hand)
        )

        state.new_deck()
        state.deal_hole_cards()
        for player in in_hand:
            self._event_bus.emit_simple(EventType.CARDS_DEALT, seat_id=player.seat_id, count=2)

        big_blind_seat = self._post_blinds()

        self._enter_phase(Phase.PRE_FLOP)
        status = self._betting_round.start(state, big_blind_seat, keep_commitments=True)
        self._checker.check(state, "after blinds")
        if status == RoundState.ROUND_CLOSED:
            self._close_round_and_advance()
        return True

    @atomic
    def apply(self, player_id: int, action: Union[ActionType, str], amount: int = 0) -> RoundState:
        """提交一个玩家行动.

        Args:
            player_id: 行动玩家座位
            action: 行动类型或其字符串值
            amount: 加注的目标总额（本轮），其他行动忽略

        Returns:
            行动后下注轮状态机的状态

        Raises:
            GameStateError: 没有手牌在进行中
            IllegalActionError: 行动不合法，状态不变
        """
        if not self._hand_in_progress:
            raise GameStateError("当前没有手牌在进行中")

        try:
            action_type = ActionType.parse(action)
        except ValueError as e:
            raise IllegalActionError(str(e)) from e

        state = self._game_state
        player = state.get_player_by_seat(player_id)
        pot_before = state.pot

        try:
            status = self._betting_round.apply(state, player_id, action_type, amount)
        except IllegalActionError as e:
            self._logger.warning(f"拒绝座位{player_id}的行动 {action_type.value}: {e}")
            raise

        moved = state.pot - pot_before
        description = f"raise to {player.current_bet}" if action_type == ActionType.RAISE else action_type.value
        state.add_event(f"{player.name} {description}")
        self._logger.debug(f"{player.name} {description}，投入{moved}，底池{state.pot}")

        self._event_bus.emit_simple(
            EventType.PLAYER_ACTION,
            seat_id=player_id,
            name=player.name,
            action=action_type.value,
            amount=moved,
            raise_to=player.current_bet if action_type == ActionType.RAISE else None,
            is_all_in=player.is_all_in
        )
        self._emit_player_updated(player)
        if moved:
            self._event_bus.emit_simple(EventType.POT_UPDATED, pot=state.pot, current_bet=state.current_bet)

        self._checker.check(state, f"after {action_type.value} by seat {player_id}")

        if status == RoundState.HAND_OVER:
            self._award_uncontested()
        elif status == RoundState.ROUND_CLOSED:
            self._close_round_and_advance()
        return status

    @atomic
    def abort_hand(self, remaining_seat: Optional[int] = None) -> HandResult:
        """中止当前手牌.

        指定 remaining_seat 或只剩一名在局玩家时，底池判给该玩家；
        否则本手牌作废，每名玩家拿回本手牌的全部投入。

        Raises:
            GameStateError: 没有手牌在进行中，或指定座位不在局中
        """
        if not self._hand_in_progress:
            raise GameStateError("当前没有手牌在进行中")

        state = self._game_state
        if remaining_seat is not None:
            survivor = state.get_player_by_seat(remaining_seat)
            if survivor is None or not survivor.in_hand:
                raise GameStateError(f"座位{remaining_seat}不在本手牌中")
        else:
            in_hand = state.get_players_in_hand()
            survivor = in_hand[0] if len(in_hand) == 1 else None

        pot_amount = state.pot
        if survivor is not None:
            awards = {survivor.seat_id: pot_amount}
            winner_ids = [survivor.seat_id]
            description = f"Hand aborted, {survivor.name} takes the pot"
        else:
            awards = {p.seat_id: p.total_bet_this_hand for p in state.players if p.total_bet_this_hand > 0}
            winner_ids = []
            description = "Hand aborted, pot voided and contributions refunded"

        self._pay_awards(awards)
        state.current_player = None
        state.round_state = None
        self._logger.info(f"第{state.hand_number}手牌中止: {description}")

        result = HandResult(
            hand_number=state.hand_number,
            winner_ids=winner_ids,
            pot_amount=pot_amount,
            awards=awards,
            winning_hand_description=description,
            aborted=True
        )
        self._finish_hand(result, EventType.HAND_ABORTED)
        return result

    def process_bot_action(self) -> bool:
        """让当前行动的机器人玩家做出决策并执行.

        Returns:
            是否执行了机器人行动；无手牌进行或轮到人类玩家时返回False
        """
        seat = self.current_player_id
        if seat is None:
            return False
        player = self._game_state.players[seat]
        if player.is_human:
            return False

        snapshot = self.get_snapshot(viewer_seat=seat)
        action = self._bot_policy.decide(snapshot.get_player_by_seat(seat), snapshot)
        self.apply(seat, action.action_type, action.amount)
        return True

    def play_hand(self) -> Optional[HandResult]:
        """由机器人把一手牌打完.

        Returns:
            手牌结果；游戏已结束无法开始新手牌时返回None

        Raises:
            GameStateError: 轮到人类玩家行动时
        """
        if not self._hand_in_progress and not self.start_hand():
            return None

        while self._hand_in_progress:
            if not self.process_bot_action():
                raise GameStateError(f"座位{self.current_player_id}是人类玩家，无法自动进行")
        return self._last_result

    # === 内部流程 ===

    def _initial_button(self) -> int:
        """第一手牌的庄家位：座位0下小盲；单挑时座位0是庄家兼小盲."""
        contenders = [p.seat_id for p in self._game_state.get_players_in_hand()]
        return contenders[0] if len(contenders) == 2 else contenders[-1]

    def _next_seat_with_chips(self, from_seat: int) -> int:
        state = self._game_state
        for seat in state.seats_clockwise_from(from_seat):
            if state.players[seat].chips > 0:
                return seat
        raise GameStateError("没有持有筹码的玩家")

    def _post_blinds(self) -> int:
        """收取盲注，返回大盲座位. 盲注不超过玩家筹码，下盲注不算行动."""
        state = self._game_state
        state.phase = Phase.BLINDS
        seats = [s for s in state.seats_clockwise_from(state.dealer_position) if state.players[s].in_hand]

        if len(seats) == 2:
            # 单挑：庄家下小盲
            small_blind_seat = state.dealer_position
            big_blind_seat = seats[0]
        else:
            small_blind_seat, big_blind_seat = seats[0], seats[1]

        small = state.players[small_blind_seat]
        big = state.players[big_blind_seat]
        small.is_small_blind = True
        big.is_big_blind = True

        small_posted = state.transfer_to_pot(small, state.small_blind)
        big_posted = state.transfer_to_pot(big, state.big_blind)
        state.current_bet = max(p.current_bet for p in state.players)

        state.add_event(f"{small.name} posts small blind {small_posted}, {big.name} posts big blind {big_posted}")
        self._logger.debug(f"盲注: 座位{small_blind_seat}小盲{small_posted}，座位{big_blind_seat}大盲{big_posted}")

        self._event_bus.emit_simple(
            EventType.BLINDS_POSTED,
            small_blind_seat=small_blind_seat,
            small_blind=small_posted,
            big_blind_seat=big_blind_seat,
            big_blind=big_posted
        )
        self._emit_player_updated(small)
        self._emit_player_updated(big)
        self._event_bus.emit_simple(EventType.POT_UPDATED, pot=state.pot, current_bet=state.current_bet)
        return big_blind_seat

    def _enter_phase(self, phase: Phase) -> None:
        state = self._game_state
        previous = state.phase
        state.phase = phase
        state.add_event(f"Phase: {phase.name}")
        self._logger.info(f"第{state.hand_number}手牌进入{phase.name}阶段")
        self._event_bus.emit_simple(
            EventType.PHASE_CHANGED,
            hand_number=state.hand_number,
            previous_phase=previous.value,
            phase=phase.value
        )

    def _close_round_and_advance(self) -> None:
        """下注轮关闭后发下一条街的公共牌；无人可下注时直接发完公共牌进入摊牌."""
        state = self._game_state
        while True:
            closed_phase = state.phase
            self._betting_round.close(state)
            self._event_bus.emit_simple(EventType.ROUND_CLOSED, phase=closed_phase.value, pot=state.pot)

            if closed_phase == Phase.RIVER:
                self._showdown()
                return

            next_phase = closed_phase.next()
            self._enter_phase(next_phase)
            cards = state.deal_community_cards(COMMUNITY_CARDS_PER_PHASE[next_phase])
            self._event_bus.emit_simple(
                EventType.CARDS_DEALT,
                phase=next_phase.value,
                cards=[str(card) for card in cards],
                community_cards=[str(card) for card in state.community_cards]
            )

            if self._betting_round.betting_complete_for_hand(state):
                self._logger.debug(f"{next_phase.name}: 可下注玩家不足两人，直接发牌")
                continue

            status = self._betting_round.start(state, state.dealer_position)
            if status == RoundState.AWAITING_ACTION:
                return

    def _award_uncontested(self) -> None:
        """除一人外全部弃牌：不比牌，底池直接给幸存者."""
        state = self._game_state
        survivor = state.get_players_in_hand()[0]
        pot_amount = state.pot

        self._enter_phase(Phase.PAYOUT)
        self._pay_awards({survivor.seat_id: pot_amount})
        self._logger.info(f"{survivor.name} 赢得底池 {pot_amount}（其他玩家弃牌）")

        self._finish_hand(HandResult(
            hand_number=state.hand_number,
            winner_ids=[survivor.seat_id],
            pot_amount=pot_amount,
            awards={survivor.seat_id: pot_amount},
            winning_hand_description=f"{survivor.name} wins uncontested"
        ))

    def _showdown(self) -> None:
        state = self._game_state
        self._enter_phase(Phase.SHOWDOWN)

        contenders = state.get_players_in_hand()
        ranks = {
            p.seat_id: self._evaluator.evaluate(p.hole_cards, state.community_cards)
            for p in contenders
        }
        contributions = {p.seat_id: p.total_bet_this_hand for p in state.players if p.total_bet_this_hand > 0}
        pots = calculate_side_pots(contributions, ranks.keys())
        awards = distribute_pots(pots, ranks, state.dealer_position, state.num_seats)

        main_pot = pots[0].eligible_players if pots else list(ranks)
        best = max(ranks[seat] for seat in main_pot)
        winner_ids = sorted(seat for seat in main_pot if ranks[seat] == best)
        names = ", ".join(state.players[seat].name for seat in winner_ids)
        pot_amount = state.pot

        for player in contenders:
            state.add_event(f"{player.name} shows {player.get_hole_cards_str()}")

        self._enter_phase(Phase.PAYOUT)
        self._pay_awards(awards)
        self._logger.info(f"摊牌: {names} 赢得主池，底池共{pot_amount}")

        self._finish_hand(HandResult(
            hand_number=state.hand_number,
            winner_ids=winner_ids,
            pot_amount=pot_amount,
            awards=awards,
            winning_hand_description=f"{names} win{'s' if len(winner_ids) == 1 else ''} at showdown",
            side_pots=pots,
            showdown=True
        ))

    def _pay_awards(self, awards: Dict[int, int]) -> None:
        """从底池派奖，派奖总额必须恰好等于底池."""
        state = self._game_state
        total = sum(awards.values())
        if total != state.pot:
            self._logger.critical(f"派奖总额{total}与底池{state.pot}不一致")
            raise ChipConservationError(state.pot, total, "pot distribution")

        for seat, amount in awards.items():
            state.award_from_pot(state.players[seat], amount)
            self._emit_player_updated(state.players[seat])
        self._event_bus.emit_simple(EventType.POT_UPDATED, pot=state.pot, current_bet=state.current_bet)

    def _finish_hand(self, result: HandResult, event_type: EventType = EventType.HAND_OVER) -> None:
        state = self._game_state
        state.current_player = None
        self._hand_in_progress = False
        self._last_result = result
        self._checker.check(state, "after payout")

        for player in state.players:
            if player.chips == 0 and player.status != SeatStatus.OUT:
                player.status = SeatStatus.OUT
                self._logger.info(f"{player.name} 被淘汰")
                self._event_bus.emit_simple(EventType.PLAYER_ELIMINATED, seat_id=player.seat_id, name=player.name)

        self._event_bus.emit_simple(
            event_type,
            hand_number=result.hand_number,
            winner_ids=result.winner_ids,
            pot_amount=result.pot_amount,
            awards=dict(result.awards),
            description=result.winning_hand_description
        )

        if len(state.players_with_chips()) <= 1:
            self._declare_game_over()

    def _declare_game_over(self) -> None:
        if self._game_over:
            return
        self._game_over = True
        remaining = self._game_state.players_with_chips()
        winner = remaining[0] if remaining else None
        self._logger.info(f"游戏结束，胜者: {winner.name if winner else '无'}")
        self._event_bus.emit_simple(
            EventType.GAME_OVER,
            winner_id=winner.seat_id if winner else None,
            winner_name=winner.name if winner else None
        )

    def _emit_player_updated(self, player: Player) -> None:
        self._event_bus.emit_simple(
            EventType.PLAYER_UPDATED,
            seat_id=player.seat_id,
            chips=player.chips,
            current_bet=player.current_bet,
            total_bet_this_hand=player.total_bet_this_hand,
            status=player.status.value
        )
