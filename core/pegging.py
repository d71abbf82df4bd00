"""
出牌 (pegging) 状态机

使用不可变数据结构，每次出牌/Go 返回新状态，
非法操作抛出异常且不影响原状态
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple
import logging

from .cards import Card, cards_to_str
from .errors import IllegalPlay, InvalidGo
from .scoring import THIRTY_ONE, pegging_points

logger = logging.getLogger(__name__)

GO_POINTS = 1


class Seat(Enum):
    """座位"""
    PLAYER = "player"
    AI = "ai"

    @property
    def other(self) -> 'Seat':
        return Seat.AI if self is Seat.PLAYER else Seat.PLAYER


def legal_plays(hand: Iterable[Card], total: int) -> Tuple[Card, ...]:
    """手牌中不会使总点数超过 31 的牌"""
    return tuple(c for c in hand if total + c.value <= THIRTY_ONE)


@dataclass(frozen=True)
class PeggingState:
    """
    不可变出牌状态

    Attributes:
        player_hand: 玩家剩余手牌
        ai_hand: AI 剩余手牌
        turn: 当前行动方
        stack: 本轮 (上次清零后) 已出的牌
        total: 本轮点数和，始终等于 stack 点数之和，不超过 31
        player_passed: 玩家本轮已 Go
        ai_passed: AI 本轮已 Go
        last_mover: 最近一次出牌的一方
        player_seen: 玩家出牌前已知的牌 (自己的弃牌 + starter)
        ai_seen: AI 出牌前已知的牌 (自己的弃牌 + starter)
        played: 本局已出的全部牌 (跨清零累积)
    """
    player_hand: Tuple[Card, ...]
    ai_hand: Tuple[Card, ...]
    turn: Seat
    stack: Tuple[Card, ...] = ()
    total: int = 0
    player_passed: bool = False
    ai_passed: bool = False
    last_mover: Optional[Seat] = None
    player_seen: Tuple[Card, ...] = ()
    ai_seen: Tuple[Card, ...] = ()
    played: Tuple[Card, ...] = ()

    def __post_init__(self):
        # 允许传入列表等任意序列，统一存为元组
        for name in ("player_hand", "ai_hand", "stack", "player_seen", "ai_seen", "played"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @classmethod
    def initial(
        cls,
        player_hand: Iterable[Card],
        ai_hand: Iterable[Card],
        dealer: Seat,
        player_seen: Iterable[Card] = (),
        ai_seen: Iterable[Card] = (),
    ) -> 'PeggingState':
        """非庄家先出"""
        return cls(
            player_hand=tuple(player_hand),
            ai_hand=tuple(ai_hand),
            turn=dealer.other,
            player_seen=tuple(player_seen),
            ai_seen=tuple(ai_seen),
        )

    def hand(self, seat: Seat) -> Tuple[Card, ...]:
        return self.player_hand if seat is Seat.PLAYER else self.ai_hand

    def passed(self, seat: Seat) -> bool:
        return self.player_passed if seat is Seat.PLAYER else self.ai_passed

    def seen(self, seat: Seat) -> Tuple[Card, ...]:
        """某一方当前已知的牌: 出牌前已知的牌 + 已出的牌"""
        known = self.player_seen if seat is Seat.PLAYER else self.ai_seen
        return known + self.played

    def legal_plays(self, seat: Optional[Seat] = None) -> Tuple[Card, ...]:
        seat = self.turn if seat is None else seat
        return legal_plays(self.hand(seat), self.total)

    @property
    def is_complete(self) -> bool:
        """双方手牌都已出完"""
        return not self.player_hand and not self.ai_hand

    def __repr__(self) -> str:
        return (
            f"PeggingState(turn={self.turn.value}, total={self.total}, "
            f"stack=[{cards_to_str(self.stack)}], "
            f"player={len(self.player_hand)}, ai={len(self.ai_hand)})"
        )


def _hands_after(state: PeggingState, actor: Seat, card: Card) -> Dict[str, Tuple[Card, ...]]:
    hand = tuple(c for c in state.hand(actor) if c != card)
    if actor is Seat.PLAYER:
        return {"player_hand": hand}
    return {"ai_hand": hand}


def _flags(passed: Dict[Seat, bool]) -> Dict[str, bool]:
    return {"player_passed": passed[Seat.PLAYER], "ai_passed": passed[Seat.AI]}


def apply_play(state: PeggingState, card: Card, actor: Seat) -> Tuple[PeggingState, int]:
    """
    出牌

    Args:
        state: 当前状态
        card: 要出的牌
        actor: 出牌方

    Returns:
        (新状态, actor 本次得分)

    Raises:
        IllegalPlay: 不是 actor 的回合、牌不在手中、或总点数会超过 31
    """
    if state.is_complete:
        raise IllegalPlay("Pegging is already complete")
    if actor is not state.turn:
        raise IllegalPlay(f"It is not {actor.value}'s turn")
    if card not in state.hand(actor):
        raise IllegalPlay(f"{card} is not in {actor.value}'s hand")
    new_total = state.total + card.value
    if new_total > THIRTY_ONE:
        raise IllegalPlay(f"{card} would bring the count to {new_total}")

    points = pegging_points(state.stack, card)
    other = actor.other
    changes = _hands_after(state, actor, card)
    new_state = replace(
        state,
        stack=state.stack + (card,),
        total=new_total,
        last_mover=actor,
        played=state.played + (card,),
        **changes,
    )

    passed = {Seat.PLAYER: state.player_passed, Seat.AI: state.ai_passed}
    passed[actor] = False

    if new_state.is_complete:
        # 最后一张牌: 未到 31 时额外 1 分
        if new_total < THIRTY_ONE:
            points += 1
        new_state = replace(new_state, turn=other, **_flags(passed))
    elif new_total == THIRTY_ONE:
        next_turn = other if new_state.hand(other) else actor
        new_state = replace(
            new_state,
            stack=(),
            total=0,
            turn=next_turn,
            player_passed=False,
            ai_passed=False,
        )
    elif passed[other] and not new_state.hand(actor):
        # 对手已 Go 且出牌方刚出完手牌: 直接结算 Go 分，由对手开始新一轮
        points += GO_POINTS
        new_state = replace(
            new_state,
            stack=(),
            total=0,
            turn=other,
            player_passed=False,
            ai_passed=False,
        )
    else:
        if not new_state.hand(other):
            passed[other] = True
        next_turn = actor if passed[other] else other
        new_state = replace(new_state, turn=next_turn, **_flags(passed))

    logger.debug(f"{actor.value} plays {card} (count {new_total}) for {points}")
    return new_state, points


def declare_go(state: PeggingState, actor: Seat) -> Tuple[PeggingState, Optional[Seat]]:
    """
    宣告 Go (无牌可出)

    双方都 Go 时最近出牌的一方得 1 分，本轮清零，
    由未得分的一方继续 (如其还有手牌)

    Returns:
        (新状态, 获得 Go 分的一方或 None)

    Raises:
        InvalidGo: 不是 actor 的回合，或 actor 仍有合法出牌
    """
    if state.is_complete:
        raise InvalidGo("Pegging is already complete")
    if actor is not state.turn:
        raise InvalidGo(f"It is not {actor.value}'s turn")
    if state.legal_plays(actor):
        raise InvalidGo(f"{actor.value} still has a legal play at count {state.total}")

    other = actor.other
    passed = {Seat.PLAYER: state.player_passed, Seat.AI: state.ai_passed}
    passed[actor] = True

    if not (passed[other] or not state.hand(other)):
        logger.debug(f"{actor.value} says Go at count {state.total}")
        return replace(state, turn=other, **_flags(passed)), None

    # 双方都无法出牌
    scorer = state.last_mover if state.stack else None
    non_scorer = scorer.other if scorer is not None else other
    if state.hand(non_scorer):
        next_turn = non_scorer
    elif state.hand(non_scorer.other):
        next_turn = non_scorer.other
    else:
        next_turn = state.turn

    logger.debug(f"Go at count {state.total}, point to {scorer.value if scorer else 'nobody'}")
    new_state = replace(
        state,
        stack=(),
        total=0,
        turn=next_turn,
        player_passed=False,
        ai_passed=False,
    )
    return new_state, scorer
