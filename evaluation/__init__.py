"""
Evaluation Layer - 评估框架

Modules:
    evaluator: 评估器和智能体
    arena: 对战竞技场
    metrics: 评估指标
"""
from .evaluator import (
    EvalResult,
    Agent,
    RandomAgent,
    GreedyAgent,
    MonteCarloAgent,
    Evaluator,
)
from .arena import (
    MatchResult,
    TournamentResult,
    Arena,
)
from .metrics import (
    GameMetrics,
    MetricsCollector,
    RunningStats,
    MetricsAggregator,
)

__all__ = [
    # evaluator
    "EvalResult",
    "Agent",
    "RandomAgent",
    "GreedyAgent",
    "MonteCarloAgent",
    "Evaluator",
    # arena
    "MatchResult",
    "TournamentResult",
    "Arena",
    # metrics
    "GameMetrics",
    "MetricsCollector",
    "RunningStats",
    "MetricsAggregator",
]
