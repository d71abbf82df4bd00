"""
观测构建

将对局状态转换为某一方视角的观测 (不包含对手手牌内容)
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import numpy as np

from core.cards import Card, cards_to_array
from core.actions import Action
from core.pegging import Seat, PeggingState
from core.state import GameState, Phase


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        seat: 观测方
        phase: 对局阶段
        hand: 观测方当前手牌 (弃牌阶段 6 张，出牌阶段为剩余手牌)
        seen: 观测方已知的其他牌 (自己的弃牌、starter、已出的牌)
        is_dealer: 观测方是否为庄家
        starter: starter (切牌后)
        pegging: 出牌状态 (出牌阶段)；决策只读取对手剩余张数
        scores: (己方分数, 对手分数)
        house_789: 是否启用 7-8-9 房规
        legal_actions: 合法动作
    """
    seat: Seat
    phase: str
    hand: Tuple[Card, ...]
    seen: Tuple[Card, ...]
    is_dealer: bool
    starter: Optional[Card]
    pegging: Optional[PeggingState]
    scores: Tuple[int, int]
    house_789: bool
    legal_actions: List[Action]

    @property
    def total(self) -> int:
        return self.pegging.total if self.pegging is not None else 0

    @property
    def stack(self) -> Tuple[Card, ...]:
        return self.pegging.stack if self.pegging is not None else ()

    @property
    def opponent_cards_left(self) -> int:
        if self.pegging is None:
            return 0
        return len(self.pegging.hand(self.seat.other))

    def to_dict(self) -> Dict[str, Any]:
        """转换为 numpy 数组字典"""
        return {
            "hand": cards_to_array(self.hand),
            "seen": cards_to_array(self.seen),
            "stack": cards_to_array(self.stack),
            "total": np.array([self.total], dtype=np.float32),
            "scores": np.array(self.scores, dtype=np.float32),
            "is_dealer": np.array([float(self.is_dealer)], dtype=np.float32),
            "opponent_cards_left": np.array([self.opponent_cards_left], dtype=np.float32),
        }


class ObservationBuilder:
    """从 GameState 构建某一方的观测"""

    def build(self, state: GameState, seat: Seat) -> Observation:
        if state.pegging is not None and state.phase == Phase.PEGGING:
            hand = state.pegging.hand(seat)
        else:
            hand = state.hand(seat)

        legal_actions = state.get_legal_actions() if state.current_seat is seat else []

        return Observation(
            seat=seat,
            phase=state.phase.value,
            hand=hand,
            seen=state.seen_by(seat),
            is_dealer=state.dealer is seat,
            starter=state.starter,
            pegging=state.pegging,
            scores=(state.scores.score(seat), state.scores.score(seat.other)),
            house_789=state.config.house_789,
            legal_actions=legal_actions,
        )
