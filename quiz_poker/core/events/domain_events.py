"""
Domain Events - 领域事件定义

该模块定义了问答扑克回合对外发出的领域事件。
事件的aggregate_id是回合ID。
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, List, Optional
from enum import Enum, auto
import time
import uuid


class EventType(Enum):
    """事件类型枚举"""
    # 回合生命周期事件
    ROUND_STARTED = auto()
    ROUND_FINISHED = auto()
    PHASE_CHANGED = auto()

    # 问题事件
    QUESTION_REVEALED = auto()
    HINT_REVEALED = auto()
    ANSWER_REVEALED = auto()

    # 下注事件
    BETTING_STARTED = auto()
    BETTING_FINISHED = auto()
    PLAYER_ACTION = auto()
    PLAYER_TIMEOUT = auto()
    PLAYER_ELIMINATED = auto()

    # 底池事件
    POT_UPDATED = auto()
    SIDE_POT_CREATED = auto()
    WINNERS_DETERMINED = auto()
    CHIPS_DISTRIBUTED = auto()

    # 计时器事件
    TIMER_STARTED = auto()
    TIMER_WARNING = auto()
    TIMER_EXPIRED = auto()


@dataclass(frozen=True)
class DomainEvent:
    """
    领域事件基类

    Attributes:
        event_id: 事件唯一标识符
        event_type: 事件类型
        aggregate_id: 回合ID
        timestamp: 事件发生时间戳
        data: 事件数据
        version: 事件版本号
        correlation_id: 关联ID，用于追踪同一次操作产生的事件
    """
    event_id: str
    event_type: EventType
    aggregate_id: str
    timestamp: float
    data: Dict[str, Any]
    version: int = 1
    correlation_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        event_type: EventType,
        aggregate_id: str,
        data: Dict[str, Any],
        correlation_id: Optional[str] = None
    ) -> DomainEvent:
        """
        创建领域事件的工厂方法

        Args:
            event_type: 事件类型
            aggregate_id: 回合ID
            data: 事件数据
            correlation_id: 关联ID

        Returns:
            DomainEvent: 创建的事件实例
        """
        return cls(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            aggregate_id=aggregate_id,
            timestamp=time.time(),
            data=data,
            correlation_id=correlation_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event_id,
            'event_type': self.event_type.name,
            'aggregate_id': self.aggregate_id,
            'timestamp': self.timestamp,
            'data': self.data,
            'version': self.version,
            'correlation_id': self.correlation_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DomainEvent:
        return cls(
            event_id=data['event_id'],
            event_type=EventType[data['event_type']],
            aggregate_id=data['aggregate_id'],
            timestamp=data['timestamp'],
            data=data['data'],
            version=data.get('version', 1),
            correlation_id=data.get('correlation_id')
        )


# 具体事件类型定义

@dataclass(frozen=True)
class RoundStartedEvent(DomainEvent):
    """回合开始事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        round_number: int,
        player_ids: List[str],
        ante_size: int,
        correlation_id: Optional[str] = None
    ) -> RoundStartedEvent:
        data = {
            'round_number': round_number,
            'player_ids': player_ids,
            'ante_size': ante_size
        }
        base_event = DomainEvent.create(EventType.ROUND_STARTED, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class PhaseChangedEvent(DomainEvent):
    """阶段转换事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        from_phase: str,
        to_phase: str,
        reason: str,
        correlation_id: Optional[str] = None
    ) -> PhaseChangedEvent:
        data = {
            'from_phase': from_phase,
            'to_phase': to_phase,
            'reason': reason
        }
        base_event = DomainEvent.create(EventType.PHASE_CHANGED, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class BettingStartedEvent(DomainEvent):
    """下注阶段开始事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        phase: str,
        current_bet: int,
        min_raise: int,
        next_player: Optional[str],
        correlation_id: Optional[str] = None
    ) -> BettingStartedEvent:
        data = {
            'phase': phase,
            'current_bet': current_bet,
            'min_raise': min_raise,
            'next_player': next_player
        }
        base_event = DomainEvent.create(EventType.BETTING_STARTED, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class PlayerActionEvent(DomainEvent):
    """玩家行动执行事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        player_id: str,
        action_type: str,
        amount: Optional[int],
        source: str,
        phase: str,
        correlation_id: Optional[str] = None
    ) -> PlayerActionEvent:
        data = {
            'player_id': player_id,
            'action_type': action_type,
            'amount': amount,
            'source': source,
            'phase': phase
        }
        base_event = DomainEvent.create(EventType.PLAYER_ACTION, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class PotUpdatedEvent(DomainEvent):
    """底池更新事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        total_pot: int,
        main_pot: int,
        side_pots: List[Dict[str, Any]],
        correlation_id: Optional[str] = None
    ) -> PotUpdatedEvent:
        data = {
            'total_pot': total_pot,
            'main_pot': main_pot,
            'side_pots': side_pots
        }
        base_event = DomainEvent.create(EventType.POT_UPDATED, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class WinnersDeterminedEvent(DomainEvent):
    """胜者确定事件"""

    @classmethod
    def create(
        cls,
        round_id: str,
        winners: List[Dict[str, Any]],
        total_distributed: int,
        undistributed: int,
        correlation_id: Optional[str] = None
    ) -> WinnersDeterminedEvent:
        data = {
            'winners': winners,
            'total_distributed': total_distributed,
            'undistributed': undistributed
        }
        base_event = DomainEvent.create(EventType.WINNERS_DETERMINED, round_id, data, correlation_id)
        return cls(**base_event.__dict__)


@dataclass(frozen=True)
class TimerEvent(DomainEvent):
    """计时器事件（启动、预警、到期）"""

    @classmethod
    def create(
        cls,
        event_type: EventType,
        round_id: str,
        timer_name: str,
        duration: float,
        remaining: float,
        phase: Optional[str] = None,
        player_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> TimerEvent:
        if event_type not in (EventType.TIMER_STARTED, EventType.TIMER_WARNING, EventType.TIMER_EXPIRED):
            raise ValueError(f"不是计时器事件类型: {event_type}")
        data = {
            'timer_name': timer_name,
            'duration': duration,
            'remaining': remaining,
            'phase': phase,
            'player_id': player_id
        }
        base_event = DomainEvent.create(event_type, round_id, data, correlation_id)
        return cls(**base_event.__dict__)
