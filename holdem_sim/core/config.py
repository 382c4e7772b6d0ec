"""
游戏配置.

配置在创建任何游戏状态之前同步校验，无效配置以 InvalidConfigurationError
报告，并附带可读的原因.
"""

from typing import List, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from .exceptions import InvalidConfigurationError
from .player import Player

MIN_PLAYERS = 2
MAX_PLAYERS = 10


@pydantic_dataclass
class GameConfiguration:
    """
    游戏配置.

    人类玩家占据前面的座位，机器人依次坐在后面.
    """

    human_players: int = Field(1, ge=1, description="人类玩家数量")
    bot_players: int = Field(3, ge=0, description="机器人数量")
    starting_chips: int = Field(1000, gt=0, description="初始筹码")
    small_blind: int = Field(10, gt=0, description="小盲金额")
    big_blind: int = Field(20, gt=0, description="大盲金额")
    seed: Optional[int] = Field(None, description="随机种子，用于可重现的牌局")
    player_names: Optional[List[str]] = Field(None, description="按座位顺序的玩家名称")

    @field_validator('player_names')
    @classmethod
    def validate_player_names(cls, v):
        """玩家名称不能为空."""
        if v is not None and any(not name.strip() for name in v):
            raise ValueError("玩家名称不能为空")
        return v

    @model_validator(mode='after')
    def validate_table(self):
        """校验总人数、盲注关系和名称数量."""
        total = self.human_players + self.bot_players
        if not MIN_PLAYERS <= total <= MAX_PLAYERS:
            raise ValueError(
                f"Invalid player configuration: {total} players, you need {MIN_PLAYERS}-{MAX_PLAYERS} total players"
            )

        if self.big_blind <= self.small_blind:
            raise ValueError(f"大盲({self.big_blind})必须大于小盲({self.small_blind})")

        if self.player_names is not None and len(self.player_names) != total:
            raise ValueError(f"玩家名称数量({len(self.player_names)})与玩家总数({total})不一致")
        return self

    @classmethod
    def create(cls, **kwargs) -> 'GameConfiguration':
        """
        创建并校验配置.

        Raises:
            InvalidConfigurationError: 配置无效时，消息包含所有失败原因
        """
        try:
            return cls(**kwargs)
        except ValidationError as e:
            reasons = []
            for error in e.errors():
                location = ".".join(str(part) for part in error.get('loc', ()) if part != '__root__')
                message = error.get('msg', '')
                reasons.append(f"{location}: {message}" if location else message)
            raise InvalidConfigurationError("; ".join(reasons)) from e

    @property
    def total_players(self) -> int:
        return self.human_players + self.bot_players

    def build_players(self) -> List[Player]:
        """按座位顺序创建玩家：先人类玩家，后机器人."""
        players = []
        for seat in range(self.total_players):
            is_human = seat < self.human_players
            if self.player_names is not None:
                name = self.player_names[seat]
            elif is_human:
                name = f"Player {seat + 1}"
            else:
                name = f"Bot {seat - self.human_players + 1}"
            players.append(Player(seat_id=seat, name=name, chips=self.starting_chips, is_human=is_human))
        return players
