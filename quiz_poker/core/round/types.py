"""
回合类型定义

定义回合阶段、问题以及阶段转换记录。
"""

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional, Union

__all__ = ['RoundPhase', 'Question', 'TransitionReason', 'PhaseTransition']

Number = Union[int, float]


class RoundPhase(Enum):
    """回合阶段枚举，严格线性推进"""
    ANTE = auto()
    QUESTION1 = auto()
    BETTING1 = auto()
    QUESTION2 = auto()
    BETTING2 = auto()
    REVEAL = auto()
    BETTING3 = auto()
    SHOWDOWN = auto()
    FINISHED = auto()

    @property
    def is_betting(self) -> bool:
        return self in (RoundPhase.BETTING1, RoundPhase.BETTING2, RoundPhase.BETTING3)

    @property
    def is_question(self) -> bool:
        return self in (RoundPhase.QUESTION1, RoundPhase.QUESTION2)

    @property
    def is_terminal(self) -> bool:
        return self == RoundPhase.FINISHED

    @property
    def index(self) -> int:
        return _PHASE_ORDER.index(self)

    @property
    def next(self) -> Optional['RoundPhase']:
        """下一个阶段；FINISHED没有后继"""
        position = self.index
        if position + 1 >= len(_PHASE_ORDER):
            return None
        return _PHASE_ORDER[position + 1]

    @property
    def answer_revealed(self) -> bool:
        """正确答案是否已对客户端公开"""
        return self.index >= RoundPhase.REVEAL.index


_PHASE_ORDER = list(RoundPhase)


@dataclass(frozen=True)
class Question:
    """回合使用的问题"""
    text: str
    correct_answer: Number
    hint: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None

    def __post_init__(self):
        """验证问题数据的有效性"""
        if not self.text:
            raise ValueError("问题文本不能为空")
        if isinstance(self.correct_answer, bool) or not isinstance(self.correct_answer, (int, float)):
            raise ValueError(f"正确答案必须是数字: {self.correct_answer!r}")
        if not math.isfinite(self.correct_answer):
            raise ValueError(f"正确答案必须是有限数字: {self.correct_answer!r}")

    def to_dict(self, include_answer: bool = True) -> Dict[str, Any]:
        data = {
            'text': self.text,
            'hint': self.hint,
            'category': self.category,
            'difficulty': self.difficulty,
        }
        if include_answer:
            data['correct_answer'] = self.correct_answer
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Question':
        return cls(
            text=data['text'],
            correct_answer=data['correct_answer'],
            hint=data.get('hint'),
            category=data.get('category'),
            difficulty=data.get('difficulty'),
        )


class TransitionReason(Enum):
    """阶段转换的触发原因"""
    ALL_ACTIONS_COMPLETE = "all_actions_complete"
    TIMER = "timer"
    AUTOMATIC = "automatic"
    MANUAL = "manual"


@dataclass(frozen=True)
class PhaseTransition:
    """一次阶段转换的记录"""
    from_phase: RoundPhase
    to_phase: RoundPhase
    reason: TransitionReason
    timestamp: float
