"""
搜索配置

定义蒙特卡洛决策的模拟次数等参数
"""
from dataclasses import dataclass


@dataclass
class SearchConfig:
    """
    蒙特卡洛搜索配置

    Attributes:
        discard_simulations: 每种弃牌组合的模拟次数 (参考范围 200-2000)
        pegging_simulations: 每张候选出牌的模拟次数 (参考范围 60-500)
        crib_discount: 对手 crib 分数的折扣系数
    """
    discard_simulations: int = 400
    pegging_simulations: int = 180
    crib_discount: float = 0.9

    def __post_init__(self):
        if self.discard_simulations <= 0 or self.pegging_simulations <= 0:
            raise ValueError("Simulation counts must be positive")

    @classmethod
    def from_dict(cls, d: dict) -> 'SearchConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    @classmethod
    def fast(cls) -> 'SearchConfig':
        """低模拟次数 (测试与快速对局)"""
        return cls(discard_simulations=40, pegging_simulations=20)
