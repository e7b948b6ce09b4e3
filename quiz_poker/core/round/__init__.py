"""
回合模块

提供回合阶段、问题定义以及回合状态容器。
"""

from .types import Question, RoundPhase, TransitionReason, PhaseTransition
from .round import Round, BettingRoundState

__all__ = [
    'Question',
    'RoundPhase',
    'TransitionReason',
    'PhaseTransition',
    'Round',
    'BettingRoundState',
]
