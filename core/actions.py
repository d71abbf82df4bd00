"""
动作类型定义与动作生成器

克里比奇的决策动作只有三种: 弃牌进 crib、出牌、Go
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, List, Tuple
import itertools

from .cards import Card, cards_to_str
from .pegging import legal_plays

DISCARD_COUNT = 2  # 每人弃 2 张进 crib


class ActionType(IntEnum):
    """动作类型"""
    DISCARD = 0  # 弃牌进 crib
    PLAY = 1     # 出牌
    GO = 2       # 无牌可出


@dataclass(frozen=True, slots=True)
class Action:
    """
    不可变动作表示

    Attributes:
        cards: 涉及的牌 (弃牌 2 张 / 出牌 1 张 / Go 为空)
        action_type: 动作类型
    """
    cards: Tuple[Card, ...]
    action_type: ActionType

    @classmethod
    def discard(cls, first: Card, second: Card) -> 'Action':
        return cls(cards=(first, second), action_type=ActionType.DISCARD)

    @classmethod
    def play(cls, card: Card) -> 'Action':
        return cls(cards=(card,), action_type=ActionType.PLAY)

    @classmethod
    def go(cls) -> 'Action':
        return cls(cards=(), action_type=ActionType.GO)

    @property
    def is_go(self) -> bool:
        return self.action_type == ActionType.GO

    @property
    def card(self) -> Card:
        """出牌动作的牌"""
        if self.action_type != ActionType.PLAY:
            raise ValueError(f"{self.action_type.name} action has no single card")
        return self.cards[0]

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        if self.is_go:
            return "Go"
        if self.action_type == ActionType.DISCARD:
            return f"Discard {cards_to_str(self.cards)}"
        return f"Play {self.cards[0]}"


class ActionGenerator:
    """
    合法动作生成器

    根据手牌生成弃牌组合与出牌选择
    """

    def __init__(self, hand_cards: Iterable[Card]):
        """
        Args:
            hand_cards: 手牌
        """
        self.hand = tuple(hand_cards)

    def gen_discards(self) -> List[Action]:
        """所有 2 张弃牌组合 (6 张手牌时 15 种，按手牌顺序稳定枚举)"""
        return [
            Action.discard(a, b)
            for a, b in itertools.combinations(self.hand, DISCARD_COUNT)
        ]

    def gen_plays(self, total: int) -> List[Action]:
        """当前点数下的合法出牌；无牌可出时只有 Go"""
        plays = [Action.play(c) for c in legal_plays(self.hand, total)]
        return plays or [Action.go()]
