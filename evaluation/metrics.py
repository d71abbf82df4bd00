"""
评估指标

对局统计与在线均值/方差
"""
from typing import Dict, List, Optional
from dataclasses import dataclass
from collections import defaultdict
import numpy as np


@dataclass
class GameMetrics:
    """单局游戏指标"""
    player_agent: str
    ai_agent: str
    winner: str
    player_score: int
    ai_score: int
    rounds: int

    @property
    def margin(self) -> int:
        """胜方分差"""
        return abs(self.player_score - self.ai_score)

    @property
    def is_skunk(self) -> bool:
        """败方不足 91 分"""
        return min(self.player_score, self.ai_score) <= 90


class RunningStats:
    """
    运行时统计

    在线计算均值和方差 (Welford)
    """

    def __init__(self):
        self.n = 0
        self.mean = 0.0
        self.M2 = 0.0
        self.min_val = float('inf')
        self.max_val = float('-inf')

    def update(self, x: float):
        """更新统计"""
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        delta2 = x - self.mean
        self.M2 += delta * delta2
        self.min_val = min(self.min_val, x)
        self.max_val = max(self.max_val, x)

    @property
    def variance(self) -> float:
        """样本方差"""
        if self.n < 2:
            return 0.0
        return self.M2 / (self.n - 1)

    @property
    def std(self) -> float:
        """标准差"""
        return float(np.sqrt(self.variance))

    def to_dict(self) -> Dict[str, float]:
        """转换为字典"""
        return {
            "count": self.n,
            "mean": self.mean,
            "std": self.std,
            "min": self.min_val if self.n > 0 else 0.0,
            "max": self.max_val if self.n > 0 else 0.0,
        }


class MetricsCollector:
    """
    指标收集器

    按智能体名称累积胜场、得分与 skunk 次数
    """

    def __init__(self):
        self.games: List[GameMetrics] = []
        self._stats: Dict[str, Dict[str, RunningStats]] = defaultdict(lambda: defaultdict(RunningStats))
        self._rounds = RunningStats()

    def add_game(self, metrics: GameMetrics):
        """添加游戏指标"""
        self.games.append(metrics)
        seats = (
            (metrics.player_agent, metrics.player_score, metrics.ai_score),
            (metrics.ai_agent, metrics.ai_score, metrics.player_score),
        )
        for name, own, other in seats:
            stats = self._stats[name]
            won = 1.0 if own > other else 0.0
            stats["wins"].update(won)
            stats["points"].update(own)
            stats["margin"].update(own - other)
            stats["skunks"].update(1.0 if won and metrics.is_skunk else 0.0)
        self._rounds.update(metrics.rounds)

    def compute_metrics(self, name: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            name: 智能体名称，None 表示全局 (只统计局数与回合数)
        """
        if name is None:
            return {"games": len(self.games), "avg_rounds": self._rounds.mean}

        stats = self._stats.get(name)
        if stats is None:
            return {}
        return {
            "games": stats["wins"].n,
            "win_rate": stats["wins"].mean,
            "avg_points": stats["points"].mean,
            "avg_margin": stats["margin"].mean,
            "skunk_rate": stats["skunks"].mean,
        }


class MetricsAggregator:
    """
    指标聚合器

    聚合多个来源的指标
    """

    def __init__(self):
        self.metrics: Dict[str, RunningStats] = defaultdict(RunningStats)

    def add(self, name: str, value: float):
        """添加指标值"""
        self.metrics[name].update(value)

    def add_dict(self, values: Dict[str, float]):
        """添加字典形式的指标"""
        for name, value in values.items():
            self.add(name, value)

    def get_all(self) -> Dict[str, Dict[str, float]]:
        """获取所有指标"""
        return {name: stats.to_dict() for name, stats in self.metrics.items()}

    def get_means(self) -> Dict[str, float]:
        """获取所有均值"""
        return {name: stats.mean for name, stats in self.metrics.items()}
