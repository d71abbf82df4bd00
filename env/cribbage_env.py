"""
克里比奇 Gymnasium 环境

遵循标准 Gymnasium API，负责推进发牌、切牌、亮牌等自动步骤；
智能体只在弃牌与出牌阶段做决策
"""
from typing import Any, Dict, List, Optional, Tuple, Union
import logging
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from core.actions import Action
from core.cards import DECK_SIZE, cards_to_str
from core.config import GameConfig
from core.pegging import Seat
from core.rng import GameRng
from core.scoring import THIRTY_ONE
from core.state import GameState, Phase, ShowResult

from .observation import Observation, ObservationBuilder

logger = logging.getLogger(__name__)

# 单步合法动作数上限 (弃牌阶段 C(6,2) = 15 种)
MAX_LEGAL_ACTIONS = 15
HAND_SIZE = 6


class CribbageEnv(gym.Env):
    """
    克里比奇双人对局环境

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info

    observation 为当前决策方视角的 Observation (to_dict() 与 observation_space 对应)；
    action 可以是 Action，或 get_legal_actions() 中的下标；
    reward 为决策方在本步中的净得分 (己方 - 对手)，包含随后自动完成的切牌与亮牌
    """

    metadata = {
        "render_modes": ["ansi"],
        "name": "Cribbage-v1",
    }

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        first_dealer: Seat = Seat.PLAYER,
        render_mode: Optional[str] = None,
    ):
        """
        Args:
            config: 对局配置
            seed: 随机种子 (整局洗牌与模拟使用同一个流)
            first_dealer: 首局庄家
            render_mode: 渲染模式 ("ansi", None)
        """
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self._seed = seed
        self._first_dealer = first_dealer
        self._obs_builder = ObservationBuilder()

        self._rng: Optional[GameRng] = None
        self._state: Optional[GameState] = None
        self._shows: List[ShowResult] = []

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        # 动作空间: 合法动作列表中的下标
        self.action_space = spaces.Discrete(MAX_LEGAL_ACTIONS)

        max_score = self.config.max_score
        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "seen": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "stack": spaces.Box(0, 1, shape=(DECK_SIZE,), dtype=np.float32),
            "total": spaces.Box(0, THIRTY_ONE, shape=(1,), dtype=np.float32),
            "scores": spaces.Box(0, max_score, shape=(2,), dtype=np.float32),
            "is_dealer": spaces.Box(0, 1, shape=(1,), dtype=np.float32),
            "opponent_cards_left": spaces.Box(0, HAND_SIZE, shape=(1,), dtype=np.float32),
        })

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        return self._state

    @property
    def rng(self) -> GameRng:
        """本局的随机流 (洗牌与蒙特卡洛抽样共用)"""
        if self._rng is None:
            raise RuntimeError("Environment not reset. Call reset() first.")
        return self._rng

    @property
    def current_seat(self) -> Optional[Seat]:
        return self.state.current_seat

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        first_dealer: Optional[Seat] = None,
    ) -> Tuple[Optional[Observation], Dict[str, Any]]:
        """
        开始新的一局游戏

        Args:
            seed: 随机种子 (None 时使用构造时的种子)
            options: 额外选项，支持 {"first_dealer": Seat}
            first_dealer: 首局庄家

        Returns:
            (observation, info) 元组
        """
        game_seed = seed if seed is not None else self._seed
        super().reset(seed=game_seed)

        if first_dealer is None and options:
            first_dealer = options.get("first_dealer")
        dealer = first_dealer if first_dealer is not None else self._first_dealer

        self._rng = GameRng(game_seed)
        self._state = GameState.initial(dealer, self.config)
        self._shows = []
        self._advance()

        return self._build_observation(), self._build_info()

    def step(
        self,
        action: Union[int, Action],
    ) -> Tuple[Optional[Observation], float, bool, bool, Dict[str, Any]]:
        """
        执行当前决策方的动作

        非法动作不改变状态，info["error"] 给出原因，调用方重新选择即可

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        state = self.state
        actor = state.current_seat
        if actor is None:
            raise RuntimeError(f"No decision pending in phase {state.phase.value}")

        try:
            action = self._decode_action(action)
            new_state = state.with_action(action)
        except ValueError as e:
            logger.debug(f"Rejected {action} from {actor.value}: {e}")
            info = self._build_info()
            info["error"] = str(e)
            return self._build_observation(), 0.0, False, False, info

        self._state = new_state
        self._advance()

        after = self._state.scores
        reward = float(
            (after.score(actor) - state.scores.score(actor))
            - (after.score(actor.other) - state.scores.score(actor.other))
        )

        terminated = self._state.is_finished
        info = self._build_info()

        if self.render_mode == "ansi":
            info["render"] = self.render()

        return self._build_observation(), reward, terminated, False, info

    def _decode_action(self, action: Union[int, Action]) -> Action:
        """下标动作转换为 Action"""
        if isinstance(action, Action):
            return action
        legal_actions = self.state.get_legal_actions()
        index = int(action)
        if not 0 <= index < len(legal_actions):
            raise ValueError(f"Action index {index} out of range for {len(legal_actions)} legal actions")
        return legal_actions[index]

    def get_legal_actions(self) -> List[Action]:
        return self.state.get_legal_actions()

    def observation(self, seat: Seat) -> Observation:
        """某一方视角的观测"""
        return self._obs_builder.build(self.state, seat)

    @property
    def shows(self) -> List[ShowResult]:
        """本局游戏每一局的亮牌明细"""
        return list(self._shows)

    def _advance(self):
        """推进不需要决策的阶段: 发牌、切牌、亮牌"""
        while True:
            phase = self._state.phase
            if phase == Phase.DEAL:
                self._state = self._state.with_deal(self._rng)
            elif phase == Phase.CUT:
                self._state = self._state.with_cut()
            elif phase == Phase.SHOW:
                self._state = self._state.with_show()
                self._shows.append(self._state.last_show)
            else:
                break

    def _build_observation(self) -> Optional[Observation]:
        seat = self._state.current_seat
        if seat is None:
            return None
        return self._obs_builder.build(self._state, seat)

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        state = self._state
        seat = state.current_seat
        info = {
            "current_player": seat.value if seat is not None else None,
            "phase": state.phase.value,
            "dealer": state.dealer.value,
            "round": state.round_number,
            "scores": {"player": state.scores.player, "ai": state.scores.ai},
        }
        if state.is_finished:
            info["winner"] = state.winner.value
        return info

    def render(self) -> str:
        """文本渲染"""
        state = self.state
        lines = [
            f"Round {state.round_number} | dealer {state.dealer.value} | phase {state.phase.value}",
            f"Scores: player {state.scores.player}, ai {state.scores.ai}",
        ]
        if state.starter is not None:
            lines.append(f"Starter: {state.starter}")
        if state.pegging is not None and state.phase == Phase.PEGGING:
            peg = state.pegging
            lines.append(f"Count {peg.total}: {cards_to_str(peg.stack)}")
        return "\n".join(lines)
