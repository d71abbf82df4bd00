"""
评估器

智能体定义与对局评估
"""
from typing import Callable, Dict, List, Optional
from dataclasses import dataclass, field
import numpy as np
import logging

from core.actions import Action, ActionType
from core.pegging import Seat
from core.rng import GameRng
from core.scoring import ScoringEngine
from decision import SearchConfig, choose_discard, choose_pegging_move, greedy_play
from env import CribbageEnv, Observation

from .metrics import MetricsAggregator

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_points: float
    avg_margin: float
    games_played: int
    avg_rounds: float = 0.0
    extra_stats: Dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_margin={self.avg_margin:.2f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, obs: Observation, legal_actions: List[Action]) -> Action:
        """选择动作"""
        raise NotImplementedError

    def reset(self, rng: Optional[GameRng] = None):
        """
        重置状态

        Args:
            rng: 对局随机流，需要随机性的智能体应使用它
        """
        pass


class RandomAgent(Agent):
    """随机智能体"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self._rng = np.random.default_rng(seed)

    def act(self, obs: Observation, legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions to choose from")
        idx = int(self._rng.integers(len(legal_actions)))
        return legal_actions[idx]


class GreedyAgent(Agent):
    """
    贪心智能体

    弃牌: 保留 4 张自身得分 (15、对子、顺子) 最高的组合
    出牌: 即时得分最高的牌
    """

    def __init__(self, name: str = "greedy"):
        super().__init__(name)

    @staticmethod
    def _keep_value(keep) -> int:
        return ScoringEngine.fifteens(keep) + ScoringEngine.pairs(keep) + ScoringEngine.runs(keep)

    def act(self, obs: Observation, legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions to choose from")

        if legal_actions[0].action_type == ActionType.DISCARD:
            best, best_value = legal_actions[0], -1
            for action in legal_actions:
                keep = tuple(c for c in obs.hand if c not in action.cards)
                value = self._keep_value(keep)
                if value > best_value:
                    best, best_value = action, value
            return best

        plays = [a.card for a in legal_actions if a.action_type == ActionType.PLAY]
        if not plays:
            return Action.go()
        card, _ = greedy_play(obs.stack, obs.total, plays)
        return Action.play(card)


class MonteCarloAgent(Agent):
    """蒙特卡洛智能体 (决策引擎)"""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        rng: Optional[GameRng] = None,
        seed: Optional[int] = None,
        name: str = "monte_carlo",
    ):
        """
        Args:
            config: 搜索配置
            rng: 随机源 (脱离环境单独使用时)
            seed: 未传入 rng 时用于创建随机源
            name: 名称
        """
        super().__init__(name)
        self.config = config or SearchConfig()
        self._seed = seed
        self.rng = rng or GameRng(seed)
        self.last_expected: Optional[float] = None

    def reset(self, rng: Optional[GameRng] = None):
        """
        对局开始时改用对局的随机流，模拟抽样与洗牌推进同一个流，
        同一对局种子即可复现整局
        """
        if rng is not None:
            self.rng = rng
        elif self._seed is not None:
            self.rng = GameRng(self._seed)
        self.last_expected = None

    def act(self, obs: Observation, legal_actions: List[Action]) -> Action:
        if not legal_actions:
            raise ValueError("No legal actions to choose from")

        if legal_actions[0].action_type == ActionType.DISCARD:
            _, toss = choose_discard(
                obs.hand,
                obs.seen,
                obs.is_dealer,
                self.config.discard_simulations,
                self.rng,
                house_789=obs.house_789,
                crib_discount=self.config.crib_discount,
            )
            return Action.discard(*toss)

        card, expected = choose_pegging_move(obs.pegging, self.config.pegging_simulations, self.rng)
        self.last_expected = expected
        if card is None:
            return Action.go()
        return Action.play(card)


class Evaluator:
    """
    评估器

    让待评估智能体与对手轮流坐庄对局，统计胜率与分差
    """

    def __init__(self, env_fn: Callable = CribbageEnv):
        self.env_fn = env_fn

    def evaluate(
        self,
        agent: Agent,
        opponent: Optional[Agent] = None,
        n_games: int = 100,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体 (坐 AI 座位)
            opponent: 对手 (坐 PLAYER 座位)，默认随机智能体
            n_games: 游戏数量
            seed: 基础种子，第 i 局使用 seed + i
            verbose: 是否输出进度

        Returns:
            评估结果
        """
        from .arena import Arena

        if opponent is None:
            opponent = RandomAgent("opponent", seed=seed)

        arena = Arena(env_fn=self.env_fn)
        stats = MetricsAggregator()
        wins = 0

        for game_idx in range(n_games):
            game_seed = seed + game_idx if seed is not None else None
            dealer = Seat.AI if game_idx % 2 == 0 else Seat.PLAYER
            result = arena.play_game(opponent, agent, seed=game_seed, first_dealer=dealer)

            if result.winner_seat is Seat.AI:
                wins += 1
            stats.add_dict({
                "points": result.ai_score,
                "margin": result.ai_score - result.player_score,
                "rounds": result.rounds,
            })

            if verbose and (game_idx + 1) % 10 == 0:
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {wins/(game_idx+1):.2%}")

        means = stats.get_means()
        margins = stats.metrics["margin"]
        return EvalResult(
            win_rate=wins / n_games if n_games > 0 else 0.0,
            avg_points=means.get("points", 0.0),
            avg_margin=means.get("margin", 0.0),
            games_played=n_games,
            avg_rounds=means.get("rounds", 0.0),
            extra_stats={"margin_std": margins.std},
        )
