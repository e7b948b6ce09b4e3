"""
状态机类型定义

定义阶段处理器协议和处理器共享的上下文。
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol

from ..betting.betting_engine import BettingEngine
from ..config import TimerConfig
from ..events.domain_events import DomainEvent
from ..round.types import RoundPhase
from ..showdown.winner_resolver import WinnerResolver
from ..timers.timer_scheduler import TimerScheduler

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['PhaseContext', 'PhaseHandler']


@dataclass
class PhaseContext:
    """
    阶段处理器共享的协作者

    emit负责把事件追加到回合事件日志并发布到事件总线；
    两个超时回调由回合引擎提供，计时器到期时经由它们把默认行动送回统一的处理路径。
    """
    betting_engine: BettingEngine
    resolver: WinnerResolver
    scheduler: TimerScheduler
    timer_config: TimerConfig
    emit: Callable[['Round', DomainEvent], None]
    on_action_timeout: Callable[['Round', RoundPhase, str], None]
    on_phase_timeout: Callable[['Round', RoundPhase], None]


class PhaseHandler(Protocol):
    """阶段处理器协议"""

    phase: RoundPhase

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        """进入阶段时的处理逻辑"""
        ...

    def on_exit(self, ctx: PhaseContext, round_: 'Round') -> None:
        """退出阶段时的处理逻辑"""
        ...

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        """阶段是否已经可以结束"""
        ...

    def on_resume(self, ctx: PhaseContext, round_: 'Round') -> None:
        """从快照恢复时重新布置计时器，不重复进入阶段的副作用"""
        ...
