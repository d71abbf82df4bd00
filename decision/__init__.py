"""
Decision Layer - 蒙特卡洛决策引擎

Modules:
    discard: 弃牌选择
    pegging: 出牌选择 (贪心推演)
    sampling: 未见牌池
    config: 搜索配置
"""
from .config import SearchConfig
from .sampling import unseen_cards
from .discard import evaluate_discards, choose_discard
from .pegging import greedy_play, rollout, evaluate_plays, choose_pegging_move

__all__ = [
    "SearchConfig",
    "unseen_cards",
    "evaluate_discards",
    "choose_discard",
    "greedy_play",
    "rollout",
    "evaluate_plays",
    "choose_pegging_move",
]
