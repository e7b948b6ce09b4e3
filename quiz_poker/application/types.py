"""
Application Layer Types - 应用层类型定义

定义回合引擎API返回的结果类型。
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Generic, List, Optional, TypeVar

from ..core.events.domain_events import DomainEvent
from ..core.round.types import RoundPhase
from ..core.rules.errors import ErrorKind

T = TypeVar('T')

__all__ = ['ResultStatus', 'QueryResult', 'ActionResult']


class ResultStatus(Enum):
    """操作结果状态"""
    SUCCESS = auto()
    FAILURE = auto()
    VALIDATION_ERROR = auto()


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """查询结果"""
    success: bool
    status: ResultStatus
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[str] = None

    @classmethod
    def success_result(cls, data: T, message: str = "查询成功") -> 'QueryResult[T]':
        return cls(success=True, status=ResultStatus.SUCCESS, data=data, message=message)

    @classmethod
    def failure_result(cls, message: str, error_code: Optional[str] = None,
                       status: ResultStatus = ResultStatus.FAILURE) -> 'QueryResult[T]':
        return cls(success=False, status=status, message=message, error_code=error_code)

    @classmethod
    def validation_error(cls, message: str, error_code: Optional[str] = None) -> 'QueryResult[T]':
        return cls.failure_result(message, error_code, ResultStatus.VALIDATION_ERROR)


@dataclass(frozen=True)
class ActionResult:
    """
    玩家行动的处理结果

    Attributes:
        accepted: 行动是否被接受
        reason: 被拒绝的原因
        message: 可读的说明
        events: 本次调用期间按顺序产生的事件
        phase_complete: 行动是否使当前阶段完成
        phase: 处理结束后回合所处的阶段
    """
    accepted: bool
    reason: Optional[ErrorKind] = None
    message: str = ""
    events: List[DomainEvent] = field(default_factory=list)
    phase_complete: bool = False
    phase: Optional[RoundPhase] = None

    @classmethod
    def rejected(cls, reason: ErrorKind, message: str, phase: Optional[RoundPhase] = None,
                 events: Optional[List[DomainEvent]] = None) -> 'ActionResult':
        return cls(accepted=False, reason=reason, message=message, events=events or [], phase=phase)

    def __bool__(self) -> bool:
        return self.accepted
