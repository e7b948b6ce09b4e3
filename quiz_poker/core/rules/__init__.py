"""
规则模块

提供错误类型与业务异常定义。
"""

from .errors import (
    ErrorKind,
    QuizPokerError,
    InvalidActionError,
    PotLedgerError,
    PhaseTransitionError,
    ConfigError,
    ChipConservationError,
    SnapshotError,
)

__all__ = [
    'ErrorKind',
    'QuizPokerError',
    'InvalidActionError',
    'PotLedgerError',
    'PhaseTransitionError',
    'ConfigError',
    'ChipConservationError',
    'SnapshotError',
]
