"""
Core Layer - 纯游戏逻辑 (无 I/O)

Modules:
    cards: 牌定义、牌组与编码
    rng: 可复现随机数流
    scoring: 计分引擎
    pegging: 出牌状态机
    actions: 动作类型与生成
    state: 对局状态 (阶段状态机)
    config: 对局配置
    errors: 引擎异常
"""
from .cards import (
    Card,
    Suit,
    Deck,
    make_deck,
    shuffle,
    new_deck,
    deal_round,
    cut_starter,
    remove_cards,
    card_value,
    cards_to_array,
    array_to_cards,
    cards_to_str,
    str_to_card,
    str_to_cards,
)

from .rng import GameRng

from .scoring import (
    HandScore,
    ScoringEngine,
    score_hand,
    score_breakdown,
    pegging_points,
)

from .pegging import (
    Seat,
    PeggingState,
    legal_plays,
    apply_play,
    declare_go,
)

from .actions import (
    ActionType,
    Action,
    ActionGenerator,
)

from .state import (
    Phase,
    Scoreboard,
    ShowResult,
    GameState,
    commit_player_discard,
)

from .config import GameConfig

from .errors import (
    CribbageError,
    IllegalPlay,
    InvalidGo,
    MalformedDiscard,
    ExhaustedSimulationInput,
)

__all__ = [
    # cards
    "Card",
    "Suit",
    "Deck",
    "make_deck",
    "shuffle",
    "new_deck",
    "deal_round",
    "cut_starter",
    "remove_cards",
    "card_value",
    "cards_to_array",
    "array_to_cards",
    "cards_to_str",
    "str_to_card",
    "str_to_cards",
    # rng
    "GameRng",
    # scoring
    "HandScore",
    "ScoringEngine",
    "score_hand",
    "score_breakdown",
    "pegging_points",
    # pegging
    "Seat",
    "PeggingState",
    "legal_plays",
    "apply_play",
    "declare_go",
    # actions
    "ActionType",
    "Action",
    "ActionGenerator",
    # state
    "Phase",
    "Scoreboard",
    "ShowResult",
    "GameState",
    "commit_player_discard",
    # config
    "GameConfig",
    # errors
    "CribbageError",
    "IllegalPlay",
    "InvalidGo",
    "MalformedDiscard",
    "ExhaustedSimulationInput",
]
