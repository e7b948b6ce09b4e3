"""
回合参与者的实现
包含筹码、单回合下注字段、答案以及跨回合的统计数据
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

__all__ = ['PlayerStatus', 'PlayerStats', 'Participant']

Number = Union[int, float]


class PlayerStatus(Enum):
    """参与者在回合内的状态"""
    ACTIVE = "active"
    FOLDED = "folded"
    ALL_IN = "all_in"
    ELIMINATED = "eliminated"
    WAITING = "waiting"


@dataclass
class PlayerStats:
    """跨回合累计的玩家统计"""
    rounds_played: int = 0
    rounds_won: int = 0
    total_winnings: int = 0
    fold_count: int = 0
    all_in_count: int = 0
    average_accuracy: float = 0.0
    answered_rounds: int = 0

    def record_accuracy(self, accuracy: float) -> None:
        """以滑动平均的方式更新平均准确度"""
        total = self.average_accuracy * self.answered_rounds + accuracy
        self.answered_rounds += 1
        self.average_accuracy = round(total / self.answered_rounds, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rounds_played': self.rounds_played,
            'rounds_won': self.rounds_won,
            'total_winnings': self.total_winnings,
            'fold_count': self.fold_count,
            'all_in_count': self.all_in_count,
            'average_accuracy': self.average_accuracy,
            'answered_rounds': self.answered_rounds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerStats':
        return cls(**data)


@dataclass
class Participant:
    """
    问答扑克参与者
    stack在整局游戏中延续，其余下注字段在每个回合开始时重置
    """
    player_id: str                                  # 玩家ID
    stack: int                                      # 当前筹码
    name: Optional[str] = None                      # 玩家名称
    status: PlayerStatus = PlayerStatus.WAITING     # 回合内状态
    current_bet: int = 0                            # 当前下注阶段已匹配的金额
    total_bet_in_round: int = 0                     # 本回合累计投入的金额
    answer: Optional[Number] = None                 # 提交的答案
    answered_at: Optional[float] = None             # 最后一次提交答案的时间
    is_all_in: bool = False                         # 是否已全押
    stats: PlayerStats = field(default_factory=PlayerStats)

    def __post_init__(self):
        """验证参与者数据的有效性"""
        if not self.player_id:
            raise ValueError("player_id不能为空")
        if self.stack < 0:
            raise ValueError(f"筹码数量不能为负数: {self.stack}")
        if self.current_bet < 0 or self.total_bet_in_round < 0:
            raise ValueError("下注金额不能为负数")
        if self.name is None:
            self.name = self.player_id

    @property
    def is_folded(self) -> bool:
        return self.status == PlayerStatus.FOLDED

    @property
    def is_eliminated(self) -> bool:
        return self.status == PlayerStatus.ELIMINATED

    @property
    def has_answered(self) -> bool:
        return self.answer is not None

    @property
    def in_hand(self) -> bool:
        """仍在争夺底池（未弃牌且未出局）"""
        return self.status not in (PlayerStatus.FOLDED, PlayerStatus.ELIMINATED)

    @property
    def can_wager(self) -> bool:
        """仍能做出下注决定（在手、未全押且有筹码）"""
        return self.in_hand and not self.is_all_in and self.stack > 0

    def reset_for_round(self) -> None:
        """
        为新回合重置单回合字段
        保留筹码和统计数据；筹码为0的参与者直接标记为出局
        """
        self.current_bet = 0
        self.total_bet_in_round = 0
        self.answer = None
        self.answered_at = None
        self.is_all_in = False
        self.status = PlayerStatus.ELIMINATED if self.stack <= 0 else PlayerStatus.WAITING

    def post(self, amount: int) -> int:
        """
        从筹码中投入指定金额

        Args:
            amount: 投入金额，超出筹码的部分按全部筹码计算

        Returns:
            实际投入金额
        """
        if amount < 0:
            raise ValueError(f"投入金额不能为负数: {amount}")

        actual = min(amount, self.stack)
        self.stack -= actual
        self.current_bet += actual
        self.total_bet_in_round += actual

        if self.stack == 0 and actual > 0:
            self.mark_all_in()
        return actual

    def mark_all_in(self) -> None:
        self.is_all_in = True
        self.status = PlayerStatus.ALL_IN

    def fold(self) -> None:
        """弃牌，已投入的筹码不退回"""
        self.status = PlayerStatus.FOLDED

    def win(self, amount: int) -> None:
        """赢得筹码，这是筹码增加的唯一入口"""
        if amount < 0:
            raise ValueError(f"赢得金额不能为负数: {amount}")
        self.stack += amount
        self.stats.total_winnings += amount

    def submit_answer(self, answer: Number, timestamp: float) -> None:
        self.answer = answer
        self.answered_at = timestamp

    def public_state(self) -> Dict[str, Any]:
        """对客户端公开的状态"""
        return {
            'player_id': self.player_id,
            'name': self.name,
            'stack': self.stack,
            'current_bet': self.current_bet,
            'total_bet_in_round': self.total_bet_in_round,
            'status': self.status.value,
            'is_all_in': self.is_all_in,
            'has_answered': self.has_answered,
        }
