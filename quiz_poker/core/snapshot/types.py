"""
状态快照类型定义

定义回合状态快照的不可变数据结构。
面向客户端的快照在揭示阶段之前不包含正确答案和其他玩家的答案。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..round.types import RoundPhase

__all__ = ['SnapshotMetadata', 'PlayerSnapshot', 'PotSnapshot', 'RoundSnapshot']


@dataclass(frozen=True)
class SnapshotMetadata:
    """快照元数据"""
    snapshot_id: str
    created_at: float
    round_number: int
    client_facing: bool
    viewer_id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        """验证快照元数据的有效性"""
        if not self.snapshot_id:
            raise ValueError("snapshot_id不能为空")
        if self.created_at <= 0:
            raise ValueError("created_at必须为正数")
        if self.round_number < 0:
            raise ValueError("round_number不能为负数")


@dataclass(frozen=True)
class PlayerSnapshot:
    """玩家状态快照"""
    player_id: str
    name: str
    stack: int
    current_bet: int
    total_bet_in_round: int
    status: str
    is_all_in: bool
    has_answered: bool
    answer: Optional[float] = None           # 面向客户端且未揭示时为None
    answered_at: Optional[float] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """验证玩家快照的有效性"""
        if not self.player_id:
            raise ValueError("player_id不能为空")
        if self.stack < 0:
            raise ValueError("stack不能为负数")
        if self.current_bet < 0 or self.total_bet_in_round < 0:
            raise ValueError("下注金额不能为负数")


@dataclass(frozen=True)
class PotSnapshot:
    """底池状态快照"""
    main_pot: int
    side_pots: Tuple[Dict[str, Any], ...]
    total_pot: int
    main_eligible: Tuple[str, ...] = ()
    contributions: Dict[str, int] = field(default_factory=dict)
    carry_over: int = 0

    def __post_init__(self):
        """验证底池快照的有效性"""
        if self.main_pot < 0:
            raise ValueError("main_pot不能为负数")
        if self.total_pot < self.main_pot:
            raise ValueError("total_pot不能小于main_pot")


@dataclass(frozen=True)
class RoundSnapshot:
    """回合状态快照"""
    metadata: SnapshotMetadata
    round_id: str
    phase: RoundPhase
    players: Tuple[PlayerSnapshot, ...]
    pot: PotSnapshot
    action_history: Tuple[Dict[str, Any], ...]
    question: Dict[str, Any]
    settings: Dict[str, Any]
    betting: Dict[str, Any] = field(default_factory=dict)
    answered_this_phase: Tuple[str, ...] = ()
    transitions: Tuple[Dict[str, Any], ...] = ()
    initial_chips: Optional[int] = None
    paused: bool = False

    def __post_init__(self):
        if not self.round_id:
            raise ValueError("round_id不能为空")

    @property
    def current_bet(self) -> int:
        return max((p.current_bet for p in self.players), default=0)

    def get_player(self, player_id: str) -> Optional[PlayerSnapshot]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None
