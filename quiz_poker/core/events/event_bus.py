"""
Event Bus - 回合事件分发

回合引擎把每个领域事件先写入回合自身的event_log，再交给这里分发。
引擎单线程运行，处理器在publish内同步调用，订阅者看到的顺序与event_log一致。
"""

from __future__ import annotations
from collections import defaultdict, deque
from typing import Protocol, Callable, Deque, Dict, Iterable, List, Optional
import logging

from .domain_events import DomainEvent, EventType

logger = logging.getLogger(__name__)


class EventHandler(Protocol):
    """事件处理器协议"""

    def handle(self, event: DomainEvent) -> None:
        ...

    def can_handle(self, event_type: EventType) -> bool:
        """返回False时该事件对此处理器静默跳过"""
        ...


class EventBus:
    """
    事件总线

    按事件类型登记处理器，另有一组接收全部事件的全局处理器。
    最近的事件保存在定长历史中，可按回合ID查询，供快照与调试使用。
    """

    def __init__(self, max_history_size: int = 1000):
        self._typed: Dict[EventType, List[EventHandler]] = defaultdict(list)
        self._catch_all: List[EventHandler] = []
        self._history: Deque[DomainEvent] = deque(maxlen=max_history_size)
        self._published_count = 0
        self._failed_count = 0

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._typed[event_type].append(handler)
        logger.debug(f"[事件] {type(handler).__name__} 订阅 {event_type.name}")

    def subscribe_all(self, handler: EventHandler) -> None:
        self._catch_all.append(handler)
        logger.debug(f"[事件] {type(handler).__name__} 订阅全部事件")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """
        取消某类型事件的订阅

        Returns:
            bool: 处理器此前已订阅时返回True
        """
        return self._discard(self._typed[event_type], handler)

    def unsubscribe_all(self, handler: EventHandler) -> bool:
        return self._discard(self._catch_all, handler)

    @staticmethod
    def _discard(handlers: List[EventHandler], handler: EventHandler) -> bool:
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def publish(self, event: DomainEvent) -> None:
        """
        分发一个事件

        处理器抛出的异常只记录日志。回合状态在事件发出前已经提交，
        不会因为订阅者失败而回滚，后续处理器照常执行。

        Args:
            event: 要分发的领域事件
        """
        self._history.append(event)
        self._published_count += 1

        # 先复制列表，处理器内部增删订阅不影响本次分发
        recipients = list(self._typed.get(event.event_type, ())) + list(self._catch_all)
        for handler in recipients:
            accepts = getattr(handler, 'can_handle', None)
            if accepts is not None and not accepts(event.event_type):
                continue
            try:
                handler.handle(event)
            except Exception as e:
                self._failed_count += 1
                logger.error(f"[事件] 处理器 {type(handler).__name__} 处理 "
                             f"{event.event_type.name}({event.aggregate_id}) 失败: {e}", exc_info=True)

    def get_event_history(self,
                          event_type: Optional[EventType] = None,
                          aggregate_id: Optional[str] = None,
                          limit: Optional[int] = None) -> List[DomainEvent]:
        """
        查询最近的事件

        Args:
            event_type: 只返回该类型
            aggregate_id: 只返回该回合的事件
            limit: 只返回最后limit条

        Returns:
            List[DomainEvent]: 按发布顺序排列的事件
        """
        selected = [
            e for e in self._history
            if (event_type is None or e.event_type == event_type)
            and (aggregate_id is None or e.aggregate_id == aggregate_id)
        ]
        return selected[-limit:] if limit else selected

    def clear_history(self) -> None:
        self._history.clear()

    def get_handler_count(self, event_type: Optional[EventType] = None) -> int:
        """event_type为None时返回全局处理器数量"""
        if event_type is None:
            return len(self._catch_all)
        return len(self._typed.get(event_type, ()))

    def get_stats(self) -> Dict[str, int]:
        return {
            'published': self._published_count,
            'handler_failures': self._failed_count,
            'history_size': len(self._history),
        }


class _FunctionHandler:
    """把普通函数包装成EventHandler"""

    def __init__(self, func: Callable[[DomainEvent], None], event_types: Optional[Iterable[EventType]]):
        self._func = func
        self._event_types = frozenset(event_types) if event_types is not None else None

    def handle(self, event: DomainEvent) -> None:
        self._func(event)

    def can_handle(self, event_type: EventType) -> bool:
        return self._event_types is None or event_type in self._event_types


def create_function_handler(func: Callable[[DomainEvent], None],
                            event_types: Optional[Iterable[EventType]] = None) -> EventHandler:
    """
    用函数创建事件处理器

    Args:
        func: 接收DomainEvent的函数
        event_types: 只处理这些类型，None表示全部
    """
    return _FunctionHandler(func, event_types)
