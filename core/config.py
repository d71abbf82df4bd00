"""
对局配置

规则相关的开关都显式传入，不使用全局变量
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """
    对局配置

    Attributes:
        max_score: 终局分数，任一方达到即结束 (分数封顶于此)
        house_789: 是否启用 7-8-9 加分的房规
    """
    max_score: int = 120
    house_789: bool = True

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    def __post_init__(self):
        if self.max_score <= 0:
            raise ValueError(f"max_score must be positive, got {self.max_score}")
