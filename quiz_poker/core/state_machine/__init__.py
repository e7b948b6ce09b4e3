"""
状态机模块

管理回合的九个阶段及阶段进入时的副作用。
"""

from .types import PhaseContext, PhaseHandler
from .base_phase_handler import BasePhaseHandler
from .phase_handlers import (
    AnteHandler,
    QuestionHandler,
    BettingHandler,
    RevealHandler,
    ShowdownHandler,
    FinishedHandler,
    default_handlers,
)
from .round_state_machine import RoundStateMachine

__all__ = [
    'PhaseContext',
    'PhaseHandler',
    'BasePhaseHandler',
    'AnteHandler',
    'QuestionHandler',
    'BettingHandler',
    'RevealHandler',
    'ShowdownHandler',
    'FinishedHandler',
    'default_handlers',
    'RoundStateMachine',
]
