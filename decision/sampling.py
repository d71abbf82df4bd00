"""
未见牌池

从 52 张牌中去掉决策方已知的牌，剩下的牌供模拟抽样
"""
from typing import Iterable, Tuple
import numpy as np

from core.cards import Card, DECK_SIZE, cards_to_array


def unseen_cards(known: Iterable[Card]) -> Tuple[Card, ...]:
    """
    未见牌池 (按牌编号排序，保证抽样可复现)

    Args:
        known: 决策方已知的牌 (自己的手牌、弃牌、starter、已出的牌)
    """
    mask = np.ones(DECK_SIZE, dtype=bool)
    mask[cards_to_array(known) > 0] = False
    return tuple(Card.from_index(int(i)) for i in np.flatnonzero(mask))
