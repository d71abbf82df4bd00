"""
可复现的随机数流

每局游戏只播种一次，所有洗牌与蒙特卡洛抽样都推进同一个流，
相同种子即可复现整局对局。
"""
from typing import List, Optional, Sequence, TypeVar
import numpy as np

from .errors import ExhaustedSimulationInput

T = TypeVar('T')


class GameRng:
    """
    基于 numpy PCG64 的随机源

    实例可直接调用，返回 [0, 1) 的浮点数，可作为 shuffle 的 rng 参数
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = np.random.Generator(np.random.PCG64(seed))

    def random(self) -> float:
        """返回 [0, 1) 的浮点数"""
        return float(self._generator.random())

    def __call__(self) -> float:
        return self.random()

    def sample(self, pool: Sequence[T], k: int) -> List[T]:
        """
        无放回抽取 k 个元素

        Args:
            pool: 候选集合 (不会被修改)
            k: 抽取数量

        Raises:
            ExhaustedSimulationInput: 候选集合不足 k 个
        """
        n = len(pool)
        if k > n:
            raise ExhaustedSimulationInput(f"Cannot sample {k} cards from a pool of {n}")
        indices = self._generator.choice(n, size=k, replace=False)
        return [pool[int(i)] for i in indices]

    def __repr__(self) -> str:
        return f"GameRng(seed={self.seed})"
