"""
对战竞技场

组织双人对战
"""
from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass
from itertools import permutations
import logging

from core.pegging import Seat
from env import CribbageEnv

from .evaluator import Agent
from .metrics import GameMetrics, MetricsCollector

logger = logging.getLogger(__name__)

# 单局最多决策步数，超过视为智能体或环境卡死
MAX_STEPS_PER_GAME = 10000


@dataclass
class MatchResult:
    """对局结果"""
    player_agent: str
    ai_agent: str
    winner: str  # 获胜智能体名称
    winner_seat: Seat
    player_score: int
    ai_score: int
    rounds: int
    length: int = 0

    def to_metrics(self) -> GameMetrics:
        return GameMetrics(
            player_agent=self.player_agent,
            ai_agent=self.ai_agent,
            winner=self.winner,
            player_score=self.player_score,
            ai_score=self.ai_score,
            rounds=self.rounds,
        )


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[Tuple[str, float]]:
        """获取排名"""
        return sorted(
            [(name, stats["win_rate"]) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, win_rate) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    组织智能体之间的对战
    """

    def __init__(self, env_fn: Callable = CribbageEnv):
        self.env_fn = env_fn

    def play_game(
        self,
        player_agent: Agent,
        ai_agent: Agent,
        seed: Optional[int] = None,
        first_dealer: Seat = Seat.PLAYER,
    ) -> MatchResult:
        """
        进行一局完整游戏 (直到一方达到目标分数)

        Args:
            player_agent: 坐 PLAYER 座位的智能体
            ai_agent: 坐 AI 座位的智能体
            seed: 洗牌种子
            first_dealer: 首局庄家

        Returns:
            对局结果
        """
        env = self.env_fn()
        agents = {Seat.PLAYER: player_agent, Seat.AI: ai_agent}

        obs, info = env.reset(seed=seed, first_dealer=first_dealer)
        for agent in agents.values():
            agent.reset(env.rng)
        done = env.state.is_finished
        length = 0

        while not done:
            seat = env.current_seat
            legal_actions = env.get_legal_actions()
            action = agents[seat].act(obs, legal_actions)
            obs, reward, terminated, truncated, info = env.step(action)

            if "error" in info:
                raise RuntimeError(f"{agents[seat].name} chose illegal action {action}: {info['error']}")

            done = terminated or truncated
            length += 1
            if length > MAX_STEPS_PER_GAME:
                raise RuntimeError(f"Game exceeded {MAX_STEPS_PER_GAME} steps")

        state = env.state
        winner_seat = state.winner
        result = MatchResult(
            player_agent=player_agent.name,
            ai_agent=ai_agent.name,
            winner=agents[winner_seat].name,
            winner_seat=winner_seat,
            player_score=state.scores.player,
            ai_score=state.scores.ai,
            rounds=state.round_number,
            length=length,
        )
        logger.debug(
            f"Game over: {result.winner} ({winner_seat.value}) wins "
            f"{result.player_score}-{result.ai_score} in {result.rounds} rounds"
        )
        return result

    def play_match(
        self,
        agents: List[Agent],
        n_games: int = 1,
        seed: Optional[int] = None,
    ) -> List[MatchResult]:
        """
        进行对局

        Args:
            agents: [PLAYER 座位智能体, AI 座位智能体]
            n_games: 对局数，首局庄家轮流
            seed: 基础种子，第 i 局使用 seed + i

        Returns:
            对局结果列表
        """
        if len(agents) != 2:
            raise ValueError(f"Cribbage needs exactly 2 agents, got {len(agents)}")

        results = []
        for game_idx in range(n_games):
            game_seed = seed + game_idx if seed is not None else None
            dealer = Seat.PLAYER if game_idx % 2 == 0 else Seat.AI
            results.append(self.play_game(agents[0], agents[1], seed=game_seed, first_dealer=dealer))
        return results

    def round_robin(
        self,
        agents: List[Agent],
        games_per_match: int = 10,
        seed: Optional[int] = None,
    ) -> TournamentResult:
        """
        循环赛

        每对智能体交换座位各打 games_per_match 局

        Args:
            agents: 智能体列表 (名称需唯一)
            games_per_match: 每场比赛的对局数
            seed: 基础种子

        Returns:
            锦标赛结果
        """
        names = [agent.name for agent in agents]
        if len(set(names)) != len(names):
            raise ValueError(f"Agent names must be unique: {names}")

        collector = MetricsCollector()
        all_matches = []

        for match_idx, (i, j) in enumerate(permutations(range(len(agents)), 2)):
            match_seed = seed + match_idx * games_per_match if seed is not None else None
            results = self.play_match([agents[i], agents[j]], games_per_match, seed=match_seed)
            all_matches.extend(results)
            for result in results:
                collector.add_game(result.to_metrics())

        standings = {name: collector.compute_metrics(name) for name in names}
        return TournamentResult(
            standings=standings,
            total_games=len(all_matches),
            matches=all_matches,
        )
