"""
摊牌模块

按答案准确度确定主池和每个边池的获胜者并分配筹码。
"""

from .types import RoundWinner, PlayerAnswerResult, WinnerDistribution, RoundResult
from .winner_resolver import WinnerResolver

__all__ = [
    'RoundWinner',
    'PlayerAnswerResult',
    'WinnerDistribution',
    'RoundResult',
    'WinnerResolver',
]
