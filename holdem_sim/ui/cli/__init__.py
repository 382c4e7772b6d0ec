"""德州扑克CLI用户界面模块.

这个包提供命令行界面的德州扑克牌桌，包括：
- CLI游戏主类和click命令
- 渲染器（显示逻辑）
- 输入处理器（用户交互）
"""

from .cli_game import TexasHoldemCLI, main
from .render import CLIRenderer
from .input_handler import CLIInputHandler

__all__ = ['TexasHoldemCLI', 'main', 'CLIRenderer', 'CLIInputHandler']
