"""
出牌选择

对每张合法出牌做蒙特卡洛推演: 从未见牌中抽样对手手牌，
双方都按贪心策略 (即时得分最高) 把当前这一轮打完，
以 (己方得分 - 对手得分) 的平均值评估第一张真实出牌
"""
from typing import Dict, Optional, Sequence, Tuple
import logging

from core.cards import Card
from core.pegging import GO_POINTS, Seat, PeggingState, legal_plays
from core.rng import GameRng
from core.scoring import THIRTY_ONE, pegging_points

from .sampling import unseen_cards

logger = logging.getLogger(__name__)

# 推演中打到 31 的一方额外获得的分数
THIRTY_ONE_ROLLOUT_BONUS = 1


def greedy_play(stack: Sequence[Card], total: int, candidates: Sequence[Card]) -> Tuple[Card, int]:
    """
    贪心出牌: 即时得分最高，并列时取点数和更高的，再并列取最先出现的

    Args:
        stack: 本轮已出的牌
        total: 当前点数和
        candidates: 合法出牌 (非空)

    Returns:
        (选中的牌, 即时得分)
    """
    best, best_points, best_total = None, -1, -1
    for card in candidates:
        points = pegging_points(stack, card)
        new_total = total + card.value
        if points > best_points or (points == best_points and new_total > best_total):
            best, best_points, best_total = card, points, new_total
    return best, best_points


def rollout(state: PeggingState, card: Card, opponent_hand: Sequence[Card]) -> int:
    """
    贪心对贪心推演当前这一轮

    Args:
        state: 真实出牌状态 (轮到决策方)
        card: 决策方要评估的第一张牌
        opponent_hand: 抽样得到的对手手牌

    Returns:
        决策方净得分 (己方 - 对手)
    """
    me = state.turn
    opp = me.other
    sign = {me: 1, opp: -1}

    stack = state.stack + (card,)
    total = state.total + card.value
    net = pegging_points(state.stack, card)
    if total == THIRTY_ONE:
        return net + THIRTY_ONE_ROLLOUT_BONUS

    hands: Dict[Seat, Tuple[Card, ...]] = {
        me: tuple(c for c in state.hand(me) if c != card),
        opp: tuple(opponent_hand),
    }
    # 已 Go 的一方在本轮中不会再出牌
    passed = {me: False, opp: state.passed(opp)}
    last_mover = me
    turn = opp

    while True:
        legal = () if passed[turn] else legal_plays(hands[turn], total)
        if not legal:
            passed[turn] = True
            if passed[turn.other]:
                net += sign[last_mover] * GO_POINTS
                break
            turn = turn.other
            continue

        play, points = greedy_play(stack, total, legal)
        stack = stack + (play,)
        total += play.value
        hands[turn] = tuple(c for c in hands[turn] if c != play)
        net += sign[turn] * points
        last_mover = turn
        if total == THIRTY_ONE:
            net += sign[turn] * THIRTY_ONE_ROLLOUT_BONUS
            break
        turn = turn.other

    return net


def evaluate_plays(
    state: PeggingState,
    simulations: int,
    rng: GameRng,
) -> list:
    """
    评估当前出牌方的每张合法出牌

    对手手牌从未见牌中抽样 (决策方已知: 自己的弃牌、starter、已出的牌、自己的手牌)，
    张数等于对手实际剩余张数

    Returns:
        [(牌, 平均净得分), ...]，按手牌顺序
    """
    if simulations <= 0:
        raise ValueError(f"simulations must be positive, got {simulations}")

    me = state.turn
    pool = unseen_cards(state.seen(me) + state.hand(me))
    opponent_count = len(state.hand(me.other))

    results = []
    for card in state.legal_plays(me):
        total = 0.0
        for _ in range(simulations):
            opponent_hand = rng.sample(pool, opponent_count)
            total += rollout(state, card, opponent_hand)
        results.append((card, total / simulations))
    return results


def choose_pegging_move(
    state: PeggingState,
    simulations: int,
    rng: GameRng,
) -> Tuple[Optional[Card], float]:
    """
    为当前出牌方选择出牌

    Args:
        state: 出牌状态 (决策方为 state.turn)
        simulations: 每张候选牌的模拟次数
        rng: 随机源

    Returns:
        (选中的牌, 期望净得分)；无合法出牌时返回 (None, 0.0)，调用方需宣告 Go
    """
    if state.is_complete or not state.legal_plays():
        return None, 0.0

    results = evaluate_plays(state, simulations, rng)
    best_card, best_ev = results[0]
    for card, ev in results[1:]:
        if ev > best_ev:
            best_card, best_ev = card, ev

    logger.debug(f"{state.turn.value} pegs {best_card} (EV {best_ev:.2f}) at count {state.total}")
    return best_card, best_ev
