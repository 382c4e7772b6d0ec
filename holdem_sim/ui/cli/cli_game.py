"""德州扑克CLI游戏界面.

这个模块提供命令行牌桌：人类玩家通过命令行输入行动，
机器人由编排器的策略驱动，事件总线负责解说。
"""

import logging
import random
import time
from typing import Optional

import click

from ...ai import HeuristicBot
from ...controller import HandOrchestrator
from ...core import (
    GameConfiguration, GameEvent, IllegalActionError, InvalidConfigurationError
)
from .input_handler import CLIInputHandler
from .render import CLIRenderer


class TexasHoldemCLI:
    """德州扑克CLI游戏界面.

    只通过编排器的公开接口（apply、快照、事件）与引擎交互。
    """

    def __init__(self, config: GameConfiguration, bot_delay: float = 0.0,
                 max_hands: Optional[int] = None, auto: bool = False,
                 logger: Optional[logging.Logger] = None):
        """初始化CLI游戏.

        Args:
            config: 游戏配置
            bot_delay: 机器人行动前的停顿秒数
            max_hands: 最多进行的手牌数，None表示直到游戏结束
            auto: 为True时人类座位也由机器人策略代打，不询问是否继续
            logger: 日志记录器
        """
        self.config = config
        self.bot_delay = bot_delay
        self.max_hands = max_hands
        self.auto = auto
        self.logger = logger or logging.getLogger(__name__)

        self.orchestrator = HandOrchestrator(config=config, logger=self.logger)
        self.orchestrator.event_bus.subscribe_all(self._narrate)
        self._autopilot = HeuristicBot(rng=random.Random(config.seed), logger=self.logger)

    def run(self) -> None:
        """运行游戏主循环."""
        click.echo(CLIRenderer.render_game_header(
            self.config.total_players, self.config.starting_chips,
            self.config.small_blind, self.config.big_blind
        ))

        hands_played = 0
        while self.max_hands is None or hands_played < self.max_hands:
            if not self.orchestrator.start_hand():
                break
            hands_played += 1
            click.echo(CLIRenderer.render_hand_header(self.orchestrator.game_state.hand_number))

            try:
                self._play_current_hand()
            except click.Abort:
                if not self.orchestrator.is_hand_over:
                    self.orchestrator.abort_hand()
                raise

            snapshot = self.orchestrator.get_snapshot()
            click.echo(CLIRenderer.render_hand_result(self.orchestrator.last_result, snapshot))

            if self.orchestrator.is_game_over:
                break
            if self.max_hands is not None and hands_played >= self.max_hands:
                break
            if not self.auto and not CLIInputHandler.get_continue_choice():
                break

        click.echo(CLIRenderer.render_game_over(self.orchestrator.get_snapshot()))

    def _play_current_hand(self) -> None:
        while not self.orchestrator.is_hand_over:
            seat = self.orchestrator.current_player_id
            player = self.orchestrator.game_state.players[seat]
            if player.is_human and not self.auto:
                self._handle_human_action(seat)
            else:
                if self.bot_delay:
                    time.sleep(self.bot_delay)
                self._handle_bot_action(seat)

    def _handle_human_action(self, seat: int) -> None:
        """提示人类玩家行动，非法行动重新提示同一位玩家."""
        while True:
            snapshot = self.orchestrator.get_snapshot(viewer_seat=seat)
            player = snapshot.get_player_by_seat(seat)
            legal = self.orchestrator.legal_actions(seat)

            click.echo("")
            click.echo(CLIRenderer.render_game_state(snapshot))
            click.echo(CLIRenderer.render_action_prompt(player, snapshot, legal))

            action_type, amount = CLIInputHandler.get_player_action(player, snapshot, legal)
            try:
                self.orchestrator.apply(seat, action_type, amount)
                return
            except IllegalActionError as e:
                click.echo(CLIRenderer.render_error_message(str(e)))

    def _handle_bot_action(self, seat: int) -> None:
        if not self.orchestrator.game_state.players[seat].is_human:
            self.orchestrator.process_bot_action()
            return

        # 自动模式下代打人类座位
        snapshot = self.orchestrator.get_snapshot(viewer_seat=seat)
        action = self._autopilot.decide(snapshot.get_player_by_seat(seat), snapshot)
        self.orchestrator.apply(seat, action.action_type, action.amount)

    def _narrate(self, event: GameEvent) -> None:
        line = CLIRenderer.render_event(event)
        if line:
            click.echo(line)


@click.command(name='holdem-sim')
@click.option('--humans', default=1, show_default=True, help='人类玩家数量')
@click.option('--bots', default=3, show_default=True, help='机器人数量')
@click.option('--chips', default=1000, show_default=True, help='初始筹码')
@click.option('--small-blind', default=10, show_default=True, help='小盲注')
@click.option('--big-blind', default=20, show_default=True, help='大盲注')
@click.option('--seed', type=int, default=None, help='随机种子，用于复现牌局')
@click.option('--bot-delay', default=0.5, show_default=True, help='机器人行动前的停顿秒数')
@click.option('--max-hands', type=int, default=None, help='最多进行的手牌数')
@click.option('--auto', is_flag=True, help='所有座位由机器人代打')
@click.option('--verbose', '-v', is_flag=True, help='输出引擎INFO日志')
def main(humans, bots, chips, small_blind, big_blind, seed, bot_delay, max_hands, auto, verbose):
    """德州扑克命令行牌桌."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = GameConfiguration.create(
            human_players=humans,
            bot_players=bots,
            starting_chips=chips,
            small_blind=small_blind,
            big_blind=big_blind,
            seed=seed
        )
    except InvalidConfigurationError as e:
        raise click.BadParameter(str(e)) from e

    game = TexasHoldemCLI(config, bot_delay=bot_delay, max_hands=max_hands, auto=auto)
    game.run()


if __name__ == "__main__":
    main()
