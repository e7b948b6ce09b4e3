"""
Events Module - 领域事件

Classes:
    DomainEvent: 领域事件基类
    EventBus: 事件总线
    EventHandler: 事件处理器协议

Event Types:
    EventType: 事件类型枚举
    RoundStartedEvent: 回合开始事件
    PhaseChangedEvent: 阶段转换事件
    BettingStartedEvent: 下注阶段开始事件
    PlayerActionEvent: 玩家行动事件
    PotUpdatedEvent: 底池更新事件
    WinnersDeterminedEvent: 胜者确定事件
    TimerEvent: 计时器事件

Functions:
    create_function_handler: 创建基于函数的事件处理器
"""

from .domain_events import (
    EventType,
    DomainEvent,
    RoundStartedEvent,
    PhaseChangedEvent,
    BettingStartedEvent,
    PlayerActionEvent,
    PotUpdatedEvent,
    WinnersDeterminedEvent,
    TimerEvent,
)

from .event_bus import (
    EventHandler,
    EventBus,
    create_function_handler,
)

__all__ = [
    "EventType",
    "DomainEvent",
    "RoundStartedEvent",
    "PhaseChangedEvent",
    "BettingStartedEvent",
    "PlayerActionEvent",
    "PotUpdatedEvent",
    "WinnersDeterminedEvent",
    "TimerEvent",
    "EventHandler",
    "EventBus",
    "create_function_handler",
]
