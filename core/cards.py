"""
牌的定义与编码

克里比奇使用标准 52 张牌:
- A(1), 2-10, J(11), Q(12), K(13)
- 四种花色 ♣ ♦ ♥ ♠
- 计分点数: 人头牌记 10，其余记牌面 (min(rank, 10))
"""
from enum import Enum
from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple, Dict
import numpy as np


class Suit(Enum):
    """花色 (顺序决定牌的编号)"""
    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    @property
    def index(self) -> int:
        return SUIT_ORDER.index(self)


SUIT_ORDER: Tuple[Suit, ...] = (Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES)

# 牌面值范围
ACE = 1
JACK = 11
QUEEN = 12
KING = 13
RANKS: Tuple[int, ...] = tuple(range(ACE, KING + 1))

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    1: 'A', 2: '2', 3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q', 13: 'K',
}

# 显示字符到牌面值的映射 (兼容 T 表示 10)
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}
STR_TO_RANK['T'] = 10

# 花色字符 (符号与 ASCII 字母均可解析)
STR_TO_SUIT: Dict[str, Suit] = {s.value: s for s in Suit}
STR_TO_SUIT.update({'C': Suit.CLUBS, 'D': Suit.DIAMONDS, 'H': Suit.HEARTS, 'S': Suit.SPADES})

DECK_SIZE = 52

# 牌组类型: 不可变元组，抽牌总是返回新的牌组
Deck = Tuple['Card', ...]


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    Attributes:
        rank: 牌面值 1..13
        suit: 花色
    """
    rank: int
    suit: Suit

    def __post_init__(self):
        if self.rank not in RANK_TO_STR:
            raise ValueError(f"Invalid rank: {self.rank}")

    @property
    def value(self) -> int:
        """计分点数 (用于 15 和 31)"""
        return card_value(self.rank)

    @property
    def index(self) -> int:
        """0..51 的编号 (花色优先)"""
        return self.suit.index * 13 + self.rank - 1

    @classmethod
    def from_index(cls, index: int) -> 'Card':
        return cls(rank=index % 13 + 1, suit=SUIT_ORDER[index // 13])

    def __str__(self) -> str:
        return f"{RANK_TO_STR[self.rank]}{self.suit.value}"

    def __repr__(self) -> str:
        return f"Card({self})"


def card_value(rank: int) -> int:
    return rank if rank < 10 else 10


def sort_key(card: Card) -> Tuple[int, int]:
    return card.rank, card.suit.index


def make_deck() -> Deck:
    """按花色、牌面顺序生成 52 张牌，每张恰好一次"""
    return tuple(Card(rank, suit) for suit in SUIT_ORDER for rank in RANKS)


def shuffle(deck: Iterable[Card], rng: Callable[[], float]) -> Deck:
    """
    Fisher-Yates 洗牌

    Args:
        deck: 待洗的牌 (不会被修改)
        rng: 返回 [0, 1) 浮点数的随机源

    Returns:
        新的牌组元组
    """
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = int(rng() * (i + 1))
        cards[i], cards[j] = cards[j], cards[i]
    return tuple(cards)


def new_deck(rng: Callable[[], float]) -> Deck:
    """洗好的新牌组"""
    return shuffle(make_deck(), rng)


def deal_round(deck: Deck, hand_size: int = 6) -> Tuple[Deck, Deck, Deck]:
    """
    发牌: 从牌组末尾轮流发牌，AI 先

    Returns:
        (玩家手牌, AI 手牌, 剩余牌组)
    """
    if len(deck) < hand_size * 2:
        raise ValueError(f"Deck too small to deal: {len(deck)} cards")

    remaining = list(deck)
    player_hand, ai_hand = [], []
    for _ in range(hand_size):
        ai_hand.append(remaining.pop())
        player_hand.append(remaining.pop())
    return tuple(player_hand), tuple(ai_hand), tuple(remaining)


def cut_starter(deck: Deck) -> Tuple[Card, Deck]:
    """
    切牌: 取牌组末尾的一张作为 starter

    翻出 J 时庄家的 2 分 (heels) 由调用方负责记分
    """
    if not deck:
        raise ValueError("Cannot cut from an empty deck")
    return deck[-1], deck[:-1]


def remove_cards(cards: Iterable[Card], removed: Iterable[Card]) -> Deck:
    """返回去掉指定牌后的新元组 (保持原顺序)"""
    removed = set(removed)
    return tuple(c for c in cards if c not in removed)


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌转换为 52 维 one-hot 向量

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组，第 card.index 位为 1
    """
    array = np.zeros(DECK_SIZE, dtype=np.float32)
    for card in cards:
        array[card.index] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """将 52 维数组转换回牌列表 (按编号排序)"""
    return [Card.from_index(int(i)) for i in np.flatnonzero(array > 0)]


def str_to_card(s: str) -> Card:
    """
    解析单张牌

    Args:
        s: 如 "A♣"、"10♦"、"5H"、"TS"
    """
    s = s.strip().upper()
    if len(s) < 2:
        raise ValueError(f"Invalid card string: {s!r}")
    rank_str, suit_str = s[:-1], s[-1]
    if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
        raise ValueError(f"Invalid card string: {s!r}")
    return Card(STR_TO_RANK[rank_str], STR_TO_SUIT[suit_str])


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "5♣ 5♦ J♠"
    """
    return ' '.join(str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """解析以空白分隔的牌，如 "5C 5D JS" """
    return [str_to_card(token) for token in s.split()]
