"""德州扑克CLI输入处理模块.

这个模块负责读取人类玩家的命令并转换为 (行动类型, 金额)，
金额语义与引擎一致：加注金额为本轮投入的目标总额。
"""

from typing import Optional, Set, Tuple

import click

from ...core import ActionType, GameSnapshot, Player

ParsedAction = Tuple[ActionType, int]

_ALIASES = {
    'f': ActionType.FOLD, 'fold': ActionType.FOLD, '弃牌': ActionType.FOLD,
    'k': ActionType.CHECK, 'check': ActionType.CHECK, '过牌': ActionType.CHECK,
    'c': ActionType.CALL, 'call': ActionType.CALL, '跟注': ActionType.CALL,
    'r': ActionType.RAISE, 'raise': ActionType.RAISE, '加注': ActionType.RAISE,
}


class CLIInputHandler:
    """CLI输入处理器.

    只负责把文本转换成行动；行动是否合法由引擎判断，
    非法行动由游戏循环重新提示同一位玩家。
    """

    @staticmethod
    def parse_command(command: str, player: Player, snapshot: GameSnapshot) -> Optional[ParsedAction]:
        """解析文本命令.

        支持 ``fold``/``check``/``call``/``raise N`` 及其缩写，
        ``allin`` 解析为加注到全部筹码；筹码不足以超过当前下注时解析为跟注。

        Returns:
            (行动类型, 金额)，无法识别时返回None
        """
        parts = command.lower().split()
        if not parts:
            return None

        if parts[0] in ('allin', 'all', '全押'):
            all_in_to = player.current_bet + player.chips
            if all_in_to <= snapshot.current_bet:
                return ActionType.CALL, 0
            return ActionType.RAISE, all_in_to

        action_type = _ALIASES.get(parts[0])
        if action_type is None:
            return None

        if action_type != ActionType.RAISE:
            return (action_type, 0) if len(parts) == 1 else None

        if len(parts) != 2:
            return None
        try:
            amount = int(parts[1])
        except ValueError:
            return None
        return ActionType.RAISE, amount

    @staticmethod
    def get_player_action(player: Player, snapshot: GameSnapshot, legal: Set[ActionType]) -> ParsedAction:
        """提示玩家输入行动，直到命令可以被解析.

        Raises:
            click.Abort: 用户取消输入
        """
        while True:
            command = click.prompt("请输入行动", type=str)
            parsed = CLIInputHandler.parse_command(command, player, snapshot)
            if parsed is None:
                click.echo(f"无法识别命令 '{command}'，可用: {', '.join(a.value for a in sorted(legal, key=lambda a: a.value))}")
                continue
            return parsed

    @staticmethod
    def get_continue_choice() -> bool:
        """询问是否继续下一手牌."""
        return click.confirm("是否继续下一手牌?", default=True)
