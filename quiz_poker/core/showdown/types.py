"""
摊牌结果类型定义
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

__all__ = ['RoundWinner', 'PlayerAnswerResult', 'WinnerDistribution', 'RoundResult']

Number = Union[int, float]


@dataclass(frozen=True)
class RoundWinner:
    """某一个底池的获胜者"""
    player_id: str
    win_amount: int
    pot_type: str          # 'main' 或 'side'
    pot_index: int         # 0为主池，之后为边池序号
    accuracy: float
    deviation: Number

    def __post_init__(self):
        if self.win_amount < 0:
            raise ValueError("赢得金额不能为负数")
        if self.pot_type not in ('main', 'side'):
            raise ValueError(f"未知的底池类型: {self.pot_type}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'win_amount': self.win_amount,
            'pot_type': self.pot_type,
            'pot_index': self.pot_index,
            'accuracy': self.accuracy,
            'deviation': self.deviation,
        }


@dataclass(frozen=True)
class PlayerAnswerResult:
    """玩家答案的评估结果"""
    player_id: str
    answer: Number
    deviation: Number
    accuracy: float
    in_showdown: bool
    answered_at: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'answer': self.answer,
            'deviation': self.deviation,
            'accuracy': self.accuracy,
            'in_showdown': self.in_showdown,
            'answered_at': self.answered_at,
        }


@dataclass(frozen=True)
class WinnerDistribution:
    """
    所有底池的分配结果
    undistributed是没有合格答题者的底池金额，留给调用方处理
    """
    winners: List[RoundWinner]
    payouts: Dict[str, int]
    total_distributed: int
    undistributed: int = 0

    def __post_init__(self):
        """验证分配结果的一致性"""
        if sum(self.payouts.values()) != self.total_distributed:
            raise ValueError(
                f"分配结果不一致: 计算总额{sum(self.payouts.values())}, 声明总额{self.total_distributed}")

    @property
    def winner_ids(self) -> List[str]:
        return sorted(self.payouts)


@dataclass
class RoundResult:
    """回合结束后的结果摘要"""
    round_id: str
    correct_answer: Number
    answers: List[PlayerAnswerResult] = field(default_factory=list)
    distribution: Optional[WinnerDistribution] = None
    carry_over: int = 0

    def to_dict(self) -> Dict[str, Any]:
        distribution = self.distribution
        return {
            'round_id': self.round_id,
            'correct_answer': self.correct_answer,
            'answers': [a.to_dict() for a in self.answers],
            'winners': [w.to_dict() for w in distribution.winners] if distribution else [],
            'payouts': dict(distribution.payouts) if distribution else {},
            'total_distributed': distribution.total_distributed if distribution else 0,
            'carry_over': self.carry_over,
        }
