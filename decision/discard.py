"""
弃牌选择

枚举 6 张手牌的全部 15 种弃牌，对每种弃牌模拟 starter 与对手弃牌，
按期望得分选择
"""
from typing import Iterable, List, Tuple
from itertools import combinations
import logging

from core.cards import Card, cards_to_str, remove_cards
from core.actions import DISCARD_COUNT
from core.rng import GameRng
from core.scoring import score_hand

from .config import SearchConfig
from .sampling import unseen_cards

logger = logging.getLogger(__name__)

HAND_SIZE = 6


def evaluate_discards(
    hand: Iterable[Card],
    seen: Iterable[Card],
    is_dealer: bool,
    simulations: int,
    rng: GameRng,
    house_789: bool = True,
    crib_discount: float = SearchConfig.crib_discount,
) -> List[Tuple[Tuple[Card, ...], float]]:
    """
    评估全部弃牌组合

    每次模拟从未见牌中抽 1 张 starter 和 2 张对手弃牌，
    期望值 = 保留手牌得分 + crib 得分 (庄家) 或 - crib_discount × crib 得分 (非庄家)

    Args:
        hand: 6 张手牌
        seen: 已知的其他牌 (发牌后决策时通常为空)
        is_dealer: 决策方是否为庄家
        simulations: 每种组合的模拟次数
        rng: 随机源
        house_789: 是否启用 7-8-9 房规
        crib_discount: 对手 crib 的折扣系数

    Returns:
        [(弃牌, 期望值), ...]，按 itertools.combinations 的稳定顺序
    """
    hand = tuple(hand)
    if len(hand) != HAND_SIZE:
        raise ValueError(f"Discard selection needs {HAND_SIZE} cards, got {len(hand)}")
    if simulations <= 0:
        raise ValueError(f"simulations must be positive, got {simulations}")

    pool = unseen_cards(hand + tuple(seen))
    results = []

    for toss in combinations(hand, DISCARD_COUNT):
        keep = remove_cards(hand, toss)
        total = 0.0
        for _ in range(simulations):
            starter, opp_first, opp_second = rng.sample(pool, 3)
            hand_points = score_hand(keep, starter, False, house_789)
            if is_dealer:
                crib = toss + (opp_first, opp_second)
            else:
                crib = (opp_first, opp_second) + toss
            crib_points = score_hand(crib, starter, True, house_789)
            if is_dealer:
                total += hand_points + crib_points
            else:
                total += hand_points - crib_discount * crib_points
        results.append((toss, total / simulations))

    return results


def choose_discard(
    hand: Iterable[Card],
    seen: Iterable[Card],
    is_dealer: bool,
    simulations: int,
    rng: GameRng,
    house_789: bool = True,
    crib_discount: float = SearchConfig.crib_discount,
) -> Tuple[Tuple[Card, ...], Tuple[Card, ...]]:
    """
    选择期望值最高的弃牌 (并列时取最先枚举到的)

    Returns:
        (保留的 4 张, 弃进 crib 的 2 张)
    """
    hand = tuple(hand)
    results = evaluate_discards(hand, seen, is_dealer, simulations, rng, house_789, crib_discount)

    best_toss, best_ev = results[0]
    for toss, ev in results[1:]:
        if ev > best_ev:
            best_toss, best_ev = toss, ev

    logger.debug(f"Discard {cards_to_str(best_toss)} (EV {best_ev:.2f}, dealer={is_dealer})")
    return remove_cards(hand, best_toss), best_toss
