"""德州扑克CLI渲染模块.

这个模块负责将游戏状态快照和引擎事件渲染为命令行文本，
实现显示逻辑与核心游戏逻辑的分离。
"""

from typing import List, Optional, Set

from ...core import ActionType, EventType, GameEvent, GameSnapshot, Player, SeatStatus
from ...controller import HandResult


class CLIRenderer:
    """CLI渲染器.

    所有渲染方法都是纯函数，仅依赖传入的快照、结果或事件数据。
    """

    @staticmethod
    def render_game_header(num_players: int, starting_chips: int, small_blind: int, big_blind: int) -> str:
        lines = [
            "=== 德州扑克模拟器 ===",
            f"玩家数: {num_players}, 初始筹码: {starting_chips}, 盲注: {small_blind}/{big_blind}",
        ]
        return "\n".join(lines)

    @staticmethod
    def render_hand_header(hand_number: int) -> str:
        return f"\n=== 第 {hand_number} 手牌 ==="

    @staticmethod
    def render_game_state(snapshot: GameSnapshot) -> str:
        """渲染当前游戏状态.

        快照按观察者生成时，其他玩家的底牌已被隐藏，这里只显示快照中存在的底牌。

        Args:
            snapshot: 游戏状态快照

        Returns:
            格式化的游戏状态字符串
        """
        lines = [
            f"阶段: {snapshot.phase.name}",
            f"底池: {snapshot.pot}",
            f"当前最高下注: {snapshot.current_bet}",
        ]

        if snapshot.community_cards:
            lines.append(f"公共牌: {' '.join(card.display for card in snapshot.community_cards)}")

        lines.append("")
        lines.append("玩家状态:")
        for player in snapshot.players:
            lines.append(f"  {CLIRenderer._render_player_status(player, snapshot)}")

        return "\n".join(lines)

    @staticmethod
    def render_action_prompt(player: Player, snapshot: GameSnapshot, legal: Set[ActionType]) -> str:
        """渲染行动提示和可用行动列表."""
        lines = [f"轮到 {player.name} 行动 (筹码: {player.chips})", "可用行动:"]
        for description in CLIRenderer.describe_actions(player, snapshot, legal):
            lines.append(f"  {description}")
        return "\n".join(lines)

    @staticmethod
    def describe_actions(player: Player, snapshot: GameSnapshot, legal: Set[ActionType]) -> List[str]:
        to_call = min(snapshot.current_bet - player.current_bet, player.chips)
        max_total = player.current_bet + player.chips
        min_total = min(snapshot.current_bet + snapshot.big_blind, max_total)

        descriptions = []
        if ActionType.FOLD in legal:
            descriptions.append("fold  - 弃牌")
        if ActionType.CHECK in legal:
            descriptions.append("check - 过牌")
        if ActionType.CALL in legal:
            all_in = " (全押)" if to_call == player.chips else ""
            descriptions.append(f"call  - 跟注 {to_call}{all_in}")
        if ActionType.RAISE in legal:
            descriptions.append(f"raise N - 加注到 N ({min_total}-{max_total})")
        return descriptions

    @staticmethod
    def render_hand_result(result: HandResult, snapshot: GameSnapshot) -> str:
        """渲染手牌结果.

        Args:
            result: 手牌结果
            snapshot: 最终游戏状态快照

        Returns:
            格式化的结果字符串
        """
        names = {p.seat_id: p.name for p in snapshot.players}
        lines = ["", "=== 手牌结果 ===", f"底池总额: {result.pot_amount}"]

        if len(result.winner_ids) == 1:
            lines.append(f"获胜者: {names[result.winner_ids[0]]}")
        elif result.winner_ids:
            lines.append(f"平局获胜者: {', '.join(names[seat] for seat in result.winner_ids)}")
        lines.append(result.winning_hand_description)

        if len(result.side_pots) > 1:
            lines.append("")
            lines.append("边池分配:")
            for index, side_pot in enumerate(result.side_pots):
                eligible = ", ".join(names[seat] for seat in side_pot.eligible_players)
                lines.append(f"  边池 {index + 1}: {side_pot.amount} 筹码 ({eligible})")

        for seat, amount in sorted(result.awards.items()):
            lines.append(f"  {names[seat]} +{amount}")

        return "\n".join(lines)

    @staticmethod
    def render_event(event: GameEvent) -> Optional[str]:
        """把引擎事件渲染为一行解说，不需要显示的事件返回None."""
        data = event.data
        if event.event_type == EventType.BLINDS_POSTED:
            return (f"座位{data['small_blind_seat']} 下小盲 {data['small_blind']}，"
                    f"座位{data['big_blind_seat']} 下大盲 {data['big_blind']}")
        if event.event_type == EventType.PLAYER_ACTION:
            action = f"加注到 {data['raise_to']}" if data['raise_to'] is not None else data['action']
            all_in = " (全押)" if data['is_all_in'] else ""
            return f"{data['name']} {action}{all_in}"
        if event.event_type == EventType.CARDS_DEALT and 'community_cards' in data:
            return f"发出公共牌: {' '.join(data['cards'])}  (公共牌: {' '.join(data['community_cards'])})"
        if event.event_type == EventType.PLAYER_ELIMINATED:
            return f"{data['name']} 筹码输光，被淘汰"
        if event.event_type == EventType.HAND_ABORTED:
            return f"手牌中止: {data['description']}"
        return None

    @staticmethod
    def render_error_message(error: str) -> str:
        return f"错误: {error}"

    @staticmethod
    def render_game_over(snapshot: GameSnapshot) -> str:
        remaining = [p for p in snapshot.players if p.chips > 0]
        if len(remaining) == 1:
            return f"游戏结束: {remaining[0].name} 赢得全部筹码"
        standings = ", ".join(f"{p.name}={p.chips}" for p in snapshot.players)
        return f"游戏结束: {standings}"

    @staticmethod
    def _render_player_status(player: Player, snapshot: GameSnapshot) -> str:
        markers = []
        if player.seat_id == snapshot.dealer_position:
            markers.append("D")
        if player.is_small_blind:
            markers.append("SB")
        if player.is_big_blind:
            markers.append("BB")
        position = f" ({'/'.join(markers)})" if markers else ""

        status_str = {
            SeatStatus.FOLDED: " [弃牌]",
            SeatStatus.ALL_IN: " [全押]",
            SeatStatus.OUT: " [出局]",
        }.get(player.status, "")

        current_marker = " <-- 当前" if snapshot.current_player == player.seat_id else ""
        cards_str = f" 手牌: {' '.join(card.display for card in player.hole_cards)}" if player.hole_cards else ""

        return (f"{player.name}{position}: 筹码={player.chips}, 当前下注={player.current_bet}"
                f"{status_str}{current_marker}{cards_str}")
