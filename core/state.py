"""
对局状态定义

使用不可变数据结构，每个阶段转换返回新状态:
- 易于复现 (配合 GameRng)
- 非法操作不破坏状态
- 自动步骤 (发牌/切牌/亮牌) 由调用方显式触发
"""
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple
from enum import Enum
import logging

from .cards import Card, Deck, JACK, new_deck, deal_round, cut_starter, cards_to_str
from .actions import Action, ActionType, ActionGenerator, DISCARD_COUNT
from .config import GameConfig
from .errors import MalformedDiscard
from .pegging import GO_POINTS, Seat, PeggingState, apply_play, declare_go
from .scoring import HandScore, score_breakdown

logger = logging.getLogger(__name__)

HEELS_POINTS = 2


class Phase(Enum):
    """对局阶段"""
    DEAL = "deal"            # 待发牌
    DISCARD = "discard"      # 弃牌进 crib
    CUT = "cut"              # 待切牌
    PEGGING = "pegging"      # 出牌阶段
    SHOW = "show"            # 亮牌计分
    GAME_OVER = "game_over"  # 游戏结束


@dataclass(frozen=True)
class Scoreboard:
    """
    不可变计分板

    分数封顶于 max_score，首个达到的一方获胜，之后不再加分
    """
    player: int = 0
    ai: int = 0
    max_score: int = 120
    winner: Optional[Seat] = None

    def score(self, seat: Seat) -> int:
        return self.player if seat is Seat.PLAYER else self.ai

    def add(self, seat: Seat, points: int) -> 'Scoreboard':
        """
        加分

        Returns:
            新计分板 (游戏已结束或 points <= 0 时原样返回)
        """
        if points <= 0 or self.winner is not None:
            return self
        new_value = min(self.max_score, self.score(seat) + points)
        winner = seat if new_value >= self.max_score else None
        if seat is Seat.PLAYER:
            return replace(self, player=new_value, winner=winner)
        return replace(self, ai=new_value, winner=winner)

    @property
    def is_over(self) -> bool:
        return self.winner is not None


@dataclass(frozen=True)
class ShowResult:
    """亮牌阶段的计分明细"""
    dealer: Seat
    starter: Card
    pone_score: HandScore
    dealer_score: HandScore
    crib_score: HandScore

    def total_for(self, seat: Seat) -> int:
        if seat is self.dealer:
            return self.dealer_score.total + self.crib_score.total
        return self.pone_score.total


def commit_player_discard(
    hand: Iterable[Card],
    cards: Iterable[Card],
) -> Tuple[Tuple[Card, ...], Tuple[Card, ...]]:
    """
    提交弃牌

    Args:
        hand: 6 张手牌
        cards: 要弃进 crib 的牌

    Returns:
        (保留的 4 张, 弃掉的 2 张)

    Raises:
        MalformedDiscard: 不是恰好 2 张不同的、手中的牌
    """
    hand = tuple(hand)
    cards = tuple(cards)
    if len(cards) != DISCARD_COUNT or len(set(cards)) != DISCARD_COUNT:
        raise MalformedDiscard(f"Must discard exactly {DISCARD_COUNT} distinct cards, got {len(cards)}")
    missing = [c for c in cards if c not in hand]
    if missing:
        raise MalformedDiscard(f"Cards not in hand: {cards_to_str(missing)}")
    keep = tuple(c for c in hand if c not in cards)
    return keep, cards


@dataclass(frozen=True)
class GameState:
    """
    不可变对局状态

    Attributes:
        config: 对局配置
        phase: 当前阶段
        dealer: 本局庄家 (拥有 crib)
        scores: 计分板 (跨局累积)
        deck: 剩余牌组
        player_hand: 玩家手牌 (弃牌后为保留的 4 张，亮牌阶段计分用)
        ai_hand: AI 手牌
        player_discard: 玩家弃进 crib 的牌
        ai_discard: AI 弃进 crib 的牌
        starter: 切出的 starter
        pegging: 出牌状态 (出牌阶段起有效)
        last_show: 最近一次亮牌明细
        round_number: 当前局数 (从 1 开始)
    """
    config: GameConfig = field(default_factory=GameConfig)
    phase: Phase = Phase.DEAL
    dealer: Seat = Seat.PLAYER
    scores: Scoreboard = field(default_factory=Scoreboard)
    deck: Deck = ()
    player_hand: Tuple[Card, ...] = ()
    ai_hand: Tuple[Card, ...] = ()
    player_discard: Tuple[Card, ...] = ()
    ai_discard: Tuple[Card, ...] = ()
    starter: Optional[Card] = None
    pegging: Optional[PeggingState] = None
    last_show: Optional[ShowResult] = None
    round_number: int = 0

    @classmethod
    def initial(cls, dealer: Seat = Seat.PLAYER, config: Optional[GameConfig] = None) -> 'GameState':
        """
        创建初始状态

        Args:
            dealer: 首局庄家
            config: 对局配置

        Returns:
            初始状态 (待发牌)
        """
        config = config or GameConfig()
        return cls(
            config=config,
            phase=Phase.DEAL,
            dealer=dealer,
            scores=Scoreboard(max_score=config.max_score),
        )

    # ------------------------------------------------------------------
    # 查询

    def hand(self, seat: Seat) -> Tuple[Card, ...]:
        return self.player_hand if seat is Seat.PLAYER else self.ai_hand

    def discard(self, seat: Seat) -> Tuple[Card, ...]:
        return self.player_discard if seat is Seat.PLAYER else self.ai_discard

    @property
    def pone(self) -> Seat:
        """非庄家"""
        return self.dealer.other

    @property
    def crib(self) -> Tuple[Card, ...]:
        """crib: 庄家弃牌在前"""
        return self.discard(self.dealer) + self.discard(self.pone)

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.GAME_OVER

    @property
    def winner(self) -> Optional[Seat]:
        return self.scores.winner

    @property
    def current_seat(self) -> Optional[Seat]:
        """
        需要做决策的一方

        弃牌阶段非庄家先弃；出牌阶段为 pegging.turn；其他阶段为 None
        """
        if self.phase == Phase.DISCARD:
            for seat in (self.pone, self.dealer):
                if not self.discard(seat):
                    return seat
        if self.phase == Phase.PEGGING and self.pegging is not None:
            return self.pegging.turn
        return None

    def seen_by(self, seat: Seat) -> Tuple[Card, ...]:
        """某一方已知的牌: 自己的弃牌、starter、已出的牌"""
        if self.pegging is not None:
            return self.pegging.seen(seat)
        known = self.discard(seat)
        if self.starter is not None:
            known = known + (self.starter,)
        return known

    def get_legal_actions(self) -> List[Action]:
        """
        当前决策方的合法动作

        Returns:
            弃牌阶段: 15 种弃牌
            出牌阶段: 合法出牌或 Go
            其他阶段: 空列表
        """
        seat = self.current_seat
        if seat is None:
            return []
        if self.phase == Phase.DISCARD:
            return ActionGenerator(self.hand(seat)).gen_discards()
        return ActionGenerator(self.pegging.hand(seat)).gen_plays(self.pegging.total)

    # ------------------------------------------------------------------
    # 阶段转换

    def _require(self, phase: Phase):
        if self.phase != phase:
            raise ValueError(f"Not in {phase.value} phase (current: {self.phase.value})")

    def _with_scores(self, scores: Scoreboard, **changes) -> 'GameState':
        """更新计分板，达到终局分数时进入 GAME_OVER"""
        if scores.is_over:
            logger.debug(f"Game over, winner {scores.winner.value} ({scores.player}-{scores.ai})")
            changes["phase"] = Phase.GAME_OVER
        return replace(self, scores=scores, **changes)

    def with_deal(self, rng) -> 'GameState':
        """
        洗牌并发牌

        Args:
            rng: 随机源 (GameRng 或返回 [0, 1) 的可调用对象)

        Returns:
            新状态 (弃牌阶段)
        """
        self._require(Phase.DEAL)
        player_hand, ai_hand, deck = deal_round(new_deck(rng))
        logger.debug(f"Round {self.round_number + 1}: dealt, {self.dealer.value} deals")
        return replace(
            self,
            phase=Phase.DISCARD,
            deck=deck,
            player_hand=player_hand,
            ai_hand=ai_hand,
            player_discard=(),
            ai_discard=(),
            starter=None,
            pegging=None,
            round_number=self.round_number + 1,
        )

    def with_discard(self, seat: Seat, cards: Iterable[Card]) -> 'GameState':
        """
        某一方提交弃牌；双方都弃完后进入切牌阶段

        Raises:
            ValueError: 不在弃牌阶段或该方已弃过
            MalformedDiscard: 弃牌不合法
        """
        self._require(Phase.DISCARD)
        if self.discard(seat):
            raise ValueError(f"{seat.value} has already discarded")
        keep, toss = commit_player_discard(self.hand(seat), cards)
        logger.debug(f"{seat.value} discards {cards_to_str(toss)}")

        if seat is Seat.PLAYER:
            new_state = replace(self, player_hand=keep, player_discard=toss)
        else:
            new_state = replace(self, ai_hand=keep, ai_discard=toss)

        if new_state.player_discard and new_state.ai_discard:
            new_state = replace(new_state, phase=Phase.CUT)
        return new_state

    def with_cut(self) -> 'GameState':
        """
        切出 starter，翻出 J 时庄家得 2 分 (heels)，然后进入出牌阶段
        """
        self._require(Phase.CUT)
        starter, deck = cut_starter(self.deck)
        scores = self.scores
        if starter.rank == JACK:
            logger.debug(f"{self.dealer.value} scores {HEELS_POINTS} for his heels")
            scores = scores.add(self.dealer, HEELS_POINTS)

        pegging = PeggingState.initial(
            self.player_hand,
            self.ai_hand,
            self.dealer,
            player_seen=self.player_discard + (starter,),
            ai_seen=self.ai_discard + (starter,),
        )
        logger.debug(f"Starter {starter}")
        return self._with_scores(
            scores,
            phase=Phase.PEGGING,
            deck=deck,
            starter=starter,
            pegging=pegging,
        )

    def _after_pegging(self, pegging: PeggingState, scores: Scoreboard) -> 'GameState':
        phase = Phase.SHOW if pegging.is_complete else Phase.PEGGING
        return self._with_scores(scores, phase=phase, pegging=pegging)

    def with_play(self, card: Card) -> 'GameState':
        """
        当前出牌方出一张牌

        Raises:
            IllegalPlay: 出牌不合法
        """
        self._require(Phase.PEGGING)
        actor = self.pegging.turn
        pegging, points = apply_play(self.pegging, card, actor)
        return self._after_pegging(pegging, self.scores.add(actor, points))

    def with_go(self) -> 'GameState':
        """
        当前出牌方宣告 Go

        Raises:
            InvalidGo: 仍有合法出牌
        """
        self._require(Phase.PEGGING)
        pegging, scorer = declare_go(self.pegging, self.pegging.turn)
        scores = self.scores
        if scorer is not None:
            scores = scores.add(scorer, GO_POINTS)
        return self._after_pegging(pegging, scores)

    def with_action(self, action: Action) -> 'GameState':
        """
        执行当前决策方的动作

        Args:
            action: 弃牌/出牌/Go 动作

        Returns:
            新状态
        """
        if action.action_type == ActionType.DISCARD:
            if self.phase != Phase.DISCARD:
                raise ValueError("Discard action outside discard phase")
            return self.with_discard(self.current_seat, action.cards)
        if action.action_type == ActionType.PLAY:
            return self.with_play(action.card)
        return self.with_go()

    def with_show(self) -> 'GameState':
        """
        亮牌计分: 非庄家手牌 → 庄家手牌 → crib

        任一方达到终局分数后不再计分；否则换庄进入下一局
        """
        self._require(Phase.SHOW)
        house = self.config.house_789
        pone_score = score_breakdown(self.hand(self.pone), self.starter, False, house)
        dealer_score = score_breakdown(self.hand(self.dealer), self.starter, False, house)
        crib_score = score_breakdown(self.crib, self.starter, True, house)

        scores = self.scores.add(self.pone, pone_score.total)
        scores = scores.add(self.dealer, dealer_score.total)
        scores = scores.add(self.dealer, crib_score.total)

        show = ShowResult(
            dealer=self.dealer,
            starter=self.starter,
            pone_score=pone_score,
            dealer_score=dealer_score,
            crib_score=crib_score,
        )
        logger.debug(
            f"Show: {self.pone.value} {pone_score.total}, "
            f"{self.dealer.value} {dealer_score.total} + crib {crib_score.total}"
        )

        if scores.is_over:
            return self._with_scores(scores, last_show=show)
        return replace(
            self,
            scores=scores,
            last_show=show,
            phase=Phase.DEAL,
            dealer=self.dealer.other,
        )
