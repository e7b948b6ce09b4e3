"""
下注模块

提供玩家行动类型、行动验证和下注引擎。
"""

from .betting_types import ActionType, ActionSource, PlayerAction, ActionRecord
from .betting_validator import BettingValidator, ValidationResult
from .betting_engine import BettingEngine, BetResult

__all__ = [
    'ActionType',
    'ActionSource',
    'PlayerAction',
    'ActionRecord',
    'BettingValidator',
    'ValidationResult',
    'BettingEngine',
    'BetResult',
]
