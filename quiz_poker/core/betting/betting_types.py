"""
行动类型定义

定义玩家行动相关的枚举类型和数据结构。
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional

__all__ = ['ActionType', 'ActionSource', 'PlayerAction', 'ActionRecord']


class ActionType(Enum):
    """玩家行动类型"""
    CHECK = auto()      # 过牌
    CALL = auto()       # 跟注
    RAISE = auto()      # 加注到指定总额
    ALL_IN = auto()     # 全押
    FOLD = auto()       # 弃牌
    ANSWER = auto()     # 提交答案

    @property
    def is_wager(self) -> bool:
        return self != ActionType.ANSWER


class ActionSource(Enum):
    """行动来源"""
    PLAYER = "player"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class PlayerAction:
    """
    玩家提交的一次行动
    RAISE的amount是"加注到"的总额；ANSWER的answer在引擎中校验类型
    """
    action_type: ActionType
    amount: Optional[int] = None
    answer: Any = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if not isinstance(self.action_type, ActionType):
            raise ValueError(f"未知的行动类型: {self.action_type!r}")

    @classmethod
    def check(cls) -> 'PlayerAction':
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> 'PlayerAction':
        return cls(ActionType.CALL)

    @classmethod
    def raise_to(cls, amount: Optional[int]) -> 'PlayerAction':
        return cls(ActionType.RAISE, amount=amount)

    @classmethod
    def all_in(cls) -> 'PlayerAction':
        return cls(ActionType.ALL_IN)

    @classmethod
    def fold(cls) -> 'PlayerAction':
        return cls(ActionType.FOLD)

    @classmethod
    def answer_with(cls, value: Any) -> 'PlayerAction':
        return cls(ActionType.ANSWER, answer=value)


@dataclass(frozen=True)
class ActionRecord:
    """行动历史中的一条不可变记录"""
    player_id: str
    action_type: ActionType
    phase: str
    timestamp: float
    amount: Optional[int] = None          # 实际移动的筹码，加注时为加注到的总额
    answer: Any = None
    source: ActionSource = ActionSource.PLAYER
    accepted: bool = True
    reason: Optional[str] = None          # 被拒绝时的ErrorKind值

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'action_type': self.action_type.name,
            'phase': self.phase,
            'timestamp': self.timestamp,
            'amount': self.amount,
            'answer': self.answer,
            'source': self.source.value,
            'accepted': self.accepted,
            'reason': self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ActionRecord':
        return cls(
            player_id=data['player_id'],
            action_type=ActionType[data['action_type']],
            phase=data['phase'],
            timestamp=data['timestamp'],
            amount=data.get('amount'),
            answer=data.get('answer'),
            source=ActionSource(data.get('source', ActionSource.PLAYER.value)),
            accepted=data.get('accepted', True),
            reason=data.get('reason'),
        )
