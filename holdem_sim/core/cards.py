"""
扑克牌相关的核心数据结构.

包含Card和Deck类，提供扑克牌的基本操作和牌组管理功能.
"""

import random
from dataclasses import dataclass
from typing import List, Optional

from .enums import Suit, Rank
from .exceptions import EmptyDeckError


_RANK_DISPLAY = {
    Rank.TWO: "2", Rank.THREE: "3", Rank.FOUR: "4", Rank.FIVE: "5",
    Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8", Rank.NINE: "9",
    Rank.TEN: "10", Rank.JACK: "J", Rank.QUEEN: "Q",
    Rank.KING: "K", Rank.ACE: "A"
}

_RANK_PARSE = {
    "2": Rank.TWO, "3": Rank.THREE, "4": Rank.FOUR, "5": Rank.FIVE,
    "6": Rank.SIX, "7": Rank.SEVEN, "8": Rank.EIGHT, "9": Rank.NINE,
    "10": Rank.TEN, "T": Rank.TEN, "J": Rank.JACK, "Q": Rank.QUEEN,
    "K": Rank.KING, "A": Rank.ACE
}

_SUIT_PARSE = {
    "H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS, "S": Suit.SPADES
}


@dataclass(frozen=True)
class Card:
    """
    表示一张扑克牌.

    不可变值对象，包含花色和点数.
    """

    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        """
        返回扑克牌的字符串表示.

        Returns:
            str: 格式为"点数花色"的字符串，如"AH"表示红桃A
        """
        return f"{_RANK_DISPLAY[self.rank]}{self.suit.name[0]}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def display(self) -> str:
        """带花色符号的显示文本，如"A♠"."""
        return f"{_RANK_DISPLAY[self.rank]}{self.suit.symbol}"

    @classmethod
    def from_str(cls, card_str: str) -> 'Card':
        """
        从字符串创建扑克牌对象.

        Args:
            card_str: 扑克牌字符串，格式为"点数花色"，如"AH"、"10s"、"Td"

        Returns:
            Card: 对应的扑克牌对象

        Raises:
            ValueError: 当字符串格式无效时
        """
        text = card_str.strip()
        if len(text) < 2:
            raise ValueError(f"卡牌字符串格式错误: {card_str}")

        rank_str, suit_str = text[:-1].upper(), text[-1].upper()

        if rank_str not in _RANK_PARSE:
            raise ValueError(f"无效的点数: {rank_str}")
        if suit_str not in _SUIT_PARSE:
            raise ValueError(f"无效的花色: {suit_str}")

        return cls(_SUIT_PARSE[suit_str], _RANK_PARSE[rank_str])

    def __lt__(self, other: 'Card') -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.rank.value < other.rank.value


def full_deck() -> List[Card]:
    """按花色、点数顺序生成52张不重复的牌."""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


class Deck:
    """
    表示一副扑克牌.

    包含52张标准扑克牌，由当前手牌独占. 从序列末尾发牌.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        初始化未洗牌的牌组.

        Args:
            rng: 随机数生成器，用于洗牌操作
        """
        self._rng = rng or random.Random()
        self._cards: List[Card] = full_deck()

    @classmethod
    def create(cls, rng: Optional[random.Random] = None) -> 'Deck':
        """
        创建一副洗好的新牌.

        Args:
            rng: 随机数生成器

        Returns:
            Deck: 已洗牌的52张牌
        """
        deck = cls(rng)
        deck.shuffle()
        return deck

    def shuffle(self) -> None:
        """Fisher-Yates洗牌：从最后一个位置向前，与[0, i]内的随机位置交换."""
        cards = self._cards
        for i in range(len(cards) - 1, 0, -1):
            j = self._rng.randint(0, i)
            cards[i], cards[j] = cards[j], cards[i]

    def deal(self) -> Card:
        """
        发一张牌（移除并返回顶部的牌）.

        Returns:
            Card: 发出的牌

        Raises:
            EmptyDeckError: 当牌组为空时
        """
        if not self._cards:
            raise EmptyDeckError("Cannot deal from empty deck")
        return self._cards.pop()

    def deal_cards(self, count: int) -> List[Card]:
        """
        发多张牌.

        牌数不足时不会发出任何牌.

        Args:
            count: 要发的牌数

        Returns:
            List[Card]: 发出的牌列表

        Raises:
            ValueError: 当count为负数时
            EmptyDeckError: 当牌组中的牌不足时
        """
        if count < 0:
            raise ValueError("Count must be non-negative")
        if count > len(self._cards):
            raise EmptyDeckError(f"Cannot deal {count} cards, only {len(self._cards)} remaining")
        return [self.deal() for _ in range(count)]

    def remaining_cards(self) -> List[Card]:
        """返回剩余牌的副本."""
        return list(self._cards)

    def restore(self, cards: List[Card]) -> None:
        """将剩余牌恢复为之前 remaining_cards() 的结果，用于事务回滚."""
        self._cards = list(cards)

    @property
    def cards_remaining(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __str__(self) -> str:
        return f"Deck({len(self._cards)} cards remaining)"

    def __repr__(self) -> str:
        return f"Deck(cards_remaining={len(self._cards)}, rng={self._rng})"
