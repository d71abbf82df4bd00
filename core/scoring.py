"""
计分引擎 - 手牌/crib 计分与出牌 (pegging) 计分

所有方法都是纯函数，无状态
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
from collections import Counter
from itertools import combinations
from math import comb

from .cards import Card, JACK

FIFTEEN = 15
THIRTY_ONE = 31
MIN_RUN_LEN = 3
MAX_PEG_RUN_LEN = 7

# 房规: 7-8-9 组合加分
HOUSE_RANKS = (7, 8, 9)
HOUSE_BONUS = 3


@dataclass(frozen=True)
class HandScore:
    """手牌计分明细"""
    fifteens: int = 0
    pairs: int = 0
    runs: int = 0
    flush: int = 0
    knobs: int = 0
    house: int = 0

    @property
    def total(self) -> int:
        return self.fifteens + self.pairs + self.runs + self.flush + self.knobs + self.house

    def __repr__(self) -> str:
        return (
            f"HandScore(total={self.total}, fifteens={self.fifteens}, pairs={self.pairs}, "
            f"runs={self.runs}, flush={self.flush}, knobs={self.knobs}, house={self.house})"
        )


class ScoringEngine:
    """
    克里比奇计分引擎

    手牌计分的每个组成部分独立计算后求和，
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def fifteens(cards: Sequence[Card]) -> int:
        """每个点数和为 15 的非空子集记 2 分"""
        values = [c.value for c in cards]
        points = 0
        for size in range(1, len(values) + 1):
            for subset in combinations(values, size):
                if sum(subset) == FIFTEEN:
                    points += 2
        return points

    @staticmethod
    def pairs(cards: Sequence[Card]) -> int:
        """同点数 n 张记 2 * C(n, 2) 分 (对子 2，三条 6，四条 12)"""
        counter = Counter(c.rank for c in cards)
        return sum(2 * comb(n, 2) for n in counter.values())

    @staticmethod
    def runs(cards: Sequence[Card]) -> int:
        """
        顺子计分

        在出现过的不同点数上找长度 >= 3 的极大连续段，只计最长长度；
        同样最长的多段都计入。每段得分 = 长度 × 各点数张数之积
        """
        counter = Counter(c.rank for c in cards)
        ranks = sorted(counter)

        best_len = 0
        total = 0
        i = 0
        while i < len(ranks):
            j = i
            while j + 1 < len(ranks) and ranks[j + 1] == ranks[j] + 1:
                j += 1
            run_len = j - i + 1
            if run_len >= MIN_RUN_LEN:
                multiplicity = 1
                for rank in ranks[i:j + 1]:
                    multiplicity *= counter[rank]
                if run_len > best_len:
                    best_len = run_len
                    total = run_len * multiplicity
                elif run_len == best_len:
                    total += run_len * multiplicity
            i = j + 1
        return total

    @staticmethod
    def flush(hand: Sequence[Card], starter: Optional[Card], is_crib: bool) -> int:
        """
        同花

        手中 4 张同花记 4 分，starter 也同花记 5 分；
        crib 只有 5 张同花才计分
        """
        if not hand:
            return 0
        suit = hand[0].suit
        if any(c.suit != suit for c in hand):
            return 0
        if starter is not None and starter.suit == suit:
            return len(hand) + 1
        return 0 if is_crib else len(hand)

    @staticmethod
    def knobs(hand: Sequence[Card], starter: Optional[Card]) -> int:
        """手中持有与 starter 同花色的 J 记 1 分"""
        if starter is None:
            return 0
        return 1 if any(c.rank == JACK and c.suit == starter.suit for c in hand) else 0

    @staticmethod
    def house_bonus(cards: Sequence[Card]) -> int:
        """房规: 每个不同的 7-8-9 组合记 3 分"""
        counter = Counter(c.rank for c in cards)
        sevens, eights, nines = (counter[r] for r in HOUSE_RANKS)
        return HOUSE_BONUS * sevens * eights * nines

    @staticmethod
    def breakdown(
        hand: Sequence[Card],
        starter: Card,
        is_crib: bool = False,
        house_789: bool = True,
    ) -> HandScore:
        """
        计算手牌 (或 crib) 的计分明细

        Args:
            hand: 4 张手牌
            starter: 翻出的 starter
            is_crib: 是否为 crib 计分 (影响同花规则)
            house_789: 是否启用 7-8-9 房规

        Returns:
            计分明细
        """
        hand = tuple(hand)
        all_cards = hand + (starter,)
        return HandScore(
            fifteens=ScoringEngine.fifteens(all_cards),
            pairs=ScoringEngine.pairs(all_cards),
            runs=ScoringEngine.runs(all_cards),
            flush=ScoringEngine.flush(hand, starter, is_crib),
            knobs=ScoringEngine.knobs(hand, starter),
            house=ScoringEngine.house_bonus(all_cards) if house_789 else 0,
        )

    @staticmethod
    def tail_same_rank(seq: Sequence[Card]) -> int:
        """出牌堆末尾连续同点数的张数"""
        if not seq:
            return 0
        same = 1
        k = len(seq) - 1
        while k > 0 and seq[k - 1].rank == seq[k].rank:
            same += 1
            k -= 1
        return same

    @staticmethod
    def tail_run_length(seq: Sequence[Card]) -> int:
        """
        出牌堆末尾最长顺子长度

        末尾 l 张 (任意顺序) 的点数互不相同且连续即成顺子，l 取 3..7 中的最大值；
        不存在时返回 0
        """
        for length in range(min(MAX_PEG_RUN_LEN, len(seq)), MIN_RUN_LEN - 1, -1):
            ranks = sorted(c.rank for c in seq[-length:])
            if all(ranks[i] == ranks[i - 1] + 1 for i in range(1, len(ranks))):
                return length
        return 0

    @staticmethod
    def pegging_points(stack: Sequence[Card], card: Card) -> int:
        """
        出一张牌的即时得分

        Args:
            stack: 本轮 (上次清零后) 已出的牌
            card: 新出的牌

        Returns:
            15 / 31 各 2 分 + 末尾对子 (2/6/12) + 末尾最长顺子长度
        """
        seq = tuple(stack) + (card,)
        total = sum(c.value for c in seq)

        points = 0
        if total == FIFTEEN:
            points += 2
        if total == THIRTY_ONE:
            points += 2

        same = ScoringEngine.tail_same_rank(seq)
        if same >= 2:
            points += 2 * comb(same, 2)

        points += ScoringEngine.tail_run_length(seq)
        return points


def score_hand(
    hand: Iterable[Card],
    starter: Card,
    is_crib: bool = False,
    house_789: bool = True,
) -> int:
    """手牌 (或 crib) 总分，非负整数"""
    return ScoringEngine.breakdown(tuple(hand), starter, is_crib, house_789).total


def score_breakdown(
    hand: Iterable[Card],
    starter: Card,
    is_crib: bool = False,
    house_789: bool = True,
) -> HandScore:
    return ScoringEngine.breakdown(tuple(hand), starter, is_crib, house_789)


def pegging_points(stack: Sequence[Card], card: Card) -> int:
    return ScoringEngine.pegging_points(stack, card)
