"""
问答扑克业务异常与错误类型定义
区分可恢复的行动错误(以ErrorKind返回)和契约错误(抛出异常)
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """行动被拒绝的原因"""
    GAME_NOT_ACTIVE = "game_not_active"
    NO_ACTIVE_ROUND = "no_active_round"
    PLAYER_NOT_FOUND = "player_not_found"
    PLAYER_ELIMINATED = "player_eliminated"
    PLAYER_FOLDED = "player_folded"
    WRONG_PHASE_FOR_ACTION = "wrong_phase_for_action"
    NOT_PLAYERS_TURN = "not_players_turn"
    INSUFFICIENT_CHIPS = "insufficient_chips"
    INVALID_RAISE_AMOUNT = "invalid_raise_amount"
    MISSING_ANSWER = "missing_answer"
    ANSWER_WRONG_TYPE = "answer_wrong_type"
    CANNOT_CHECK = "cannot_check"          # 面对未匹配的下注时过牌
    NOTHING_TO_CALL = "nothing_to_call"    # 已匹配最高下注时跟注


class QuizPokerError(Exception):
    """问答扑克基础异常类"""
    pass


class InvalidActionError(QuizPokerError):
    """无效玩家行动异常"""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind.value)


class PotLedgerError(QuizPokerError):
    """底池账本操作错误"""
    pass


class PhaseTransitionError(QuizPokerError):
    """阶段转换错误异常"""
    pass


class ConfigError(QuizPokerError):
    """配置错误异常"""
    pass


class ChipConservationError(QuizPokerError):
    """筹码守恒被破坏，属于内部错误"""
    pass


class SnapshotError(QuizPokerError):
    """快照创建、序列化或恢复失败"""
    pass
