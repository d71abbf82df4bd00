"""
Environment Layer - 对局环境

Modules:
    cribbage_env: 对局环境 (reset/step)
    observation: 观测构建
"""
from .cribbage_env import CribbageEnv

from .observation import (
    Observation,
    ObservationBuilder,
)

__all__ = [
    # env
    "CribbageEnv",
    # observation
    "Observation",
    "ObservationBuilder",
]
