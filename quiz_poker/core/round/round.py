"""
回合状态容器

Round只保存状态，所有变更都通过下注引擎和阶段状态机完成。
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..betting.betting_types import ActionRecord
from ..config import RoundSettings
from ..players.participant import Participant
from ..pot.pot_ledger import PotLedger
from .types import Question, RoundPhase, PhaseTransition

__all__ = ['BettingRoundState', 'Round']


@dataclass
class BettingRoundState:
    """当前下注阶段的行动状态"""
    phase: Optional[RoundPhase] = None
    pending: Set[str] = field(default_factory=set)   # 本阶段仍需做出决定的玩家
    raises_count: int = 0
    raisers: Set[str] = field(default_factory=set)
    last_raiser: Optional[str] = None
    last_actor: Optional[str] = None
    next_to_act: Optional[str] = None

    def reset(self, phase: Optional[RoundPhase]) -> None:
        self.phase = phase
        self.pending = set()
        self.raises_count = 0
        self.raisers = set()
        self.last_raiser = None
        self.last_actor = None
        self.next_to_act = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'phase': self.phase.name if self.phase else None,
            'pending': sorted(self.pending),
            'raises_count': self.raises_count,
            'raisers': sorted(self.raisers),
            'last_raiser': self.last_raiser,
            'last_actor': self.last_actor,
            'next_to_act': self.next_to_act,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BettingRoundState':
        return cls(
            phase=RoundPhase[data['phase']] if data.get('phase') else None,
            pending=set(data.get('pending', [])),
            raises_count=data.get('raises_count', 0),
            raisers=set(data.get('raisers', [])),
            last_raiser=data.get('last_raiser'),
            last_actor=data.get('last_actor'),
            next_to_act=data.get('next_to_act'),
        )


@dataclass
class Round:
    """
    单个问答扑克回合

    参与者列表在回合开始时固定，回合内不允许加入或离开。
    phase到达FINISHED后回合不再变化，由调用方归档。
    """
    round_id: str
    question: Question
    participants: List[Participant]
    settings: RoundSettings = field(default_factory=RoundSettings)
    round_number: int = 1
    phase: RoundPhase = RoundPhase.ANTE
    ledger: PotLedger = field(default_factory=PotLedger)
    action_history: List[ActionRecord] = field(default_factory=list)
    betting: BettingRoundState = field(default_factory=BettingRoundState)
    answered_this_phase: Set[str] = field(default_factory=set)
    transitions: List[PhaseTransition] = field(default_factory=list)
    event_log: List[Any] = field(default_factory=list)   # DomainEvent列表，按发生顺序追加
    result: Optional[Any] = None                         # 摊牌后的RoundResult
    initial_chips: Optional[int] = None                  # 回合开始时全部参与者的筹码总和
    started_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None
    paused: bool = False
    closed: bool = False

    def __post_init__(self):
        """验证回合数据的有效性"""
        if not self.round_id:
            raise ValueError("round_id不能为空")
        ids = [p.player_id for p in self.participants]
        if len(ids) != len(set(ids)):
            raise ValueError(f"参与者ID重复: {ids}")

    def get_participant(self, player_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.player_id == player_id:
                return participant
        return None

    @property
    def participant_ids(self) -> List[str]:
        return [p.player_id for p in self.participants]

    @property
    def is_finished(self) -> bool:
        return self.phase == RoundPhase.FINISHED

    def is_active(self) -> bool:
        """回合是否可以接受玩家行动"""
        return not self.closed and not self.paused and not self.is_finished

    def in_hand(self) -> List[Participant]:
        """仍在争夺底池的参与者（未弃牌且未出局）"""
        return [p for p in self.participants if p.in_hand]

    def record_action(self, record: ActionRecord) -> None:
        self.action_history.append(record)

    def record_transition(self, transition: PhaseTransition) -> None:
        self.transitions.append(transition)
