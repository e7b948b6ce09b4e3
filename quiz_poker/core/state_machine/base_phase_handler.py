"""
基础阶段处理器模块
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ..events.domain_events import EventType, TimerEvent
from ..round.types import RoundPhase
from ..timers.types import TimerState
from .types import PhaseContext

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['BasePhaseHandler']

logger = logging.getLogger(__name__)


class BasePhaseHandler:
    """基础阶段处理器，提供通用功能"""

    def __init__(self, phase: RoundPhase):
        self.phase = phase

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        """进入阶段的默认处理"""
        logger.info(f"[游戏阶段] 回合 {round_.round_id} 进入阶段: {self.phase.name}")

    def on_exit(self, ctx: PhaseContext, round_: 'Round') -> None:
        """退出阶段的默认处理: 停止本阶段的计时器"""
        ctx.scheduler.stop_phase(self.phase.name, owner=round_.round_id)
        logger.info(f"[游戏阶段] 回合 {round_.round_id} 退出阶段: {self.phase.name}")

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        return False

    def on_resume(self, ctx: PhaseContext, round_: 'Round') -> None:
        pass

    def _arm_timer(self, ctx: PhaseContext, round_: 'Round', name: str, duration: float,
                   on_expire: Callable[[], None], player_id: Optional[str] = None) -> TimerState:
        """
        启动属于该回合的计时器，并发出启动、预警、到期事件

        Args:
            ctx: 阶段上下文
            round_: 当前回合
            name: 计时器名称
            duration: 时长（秒）
            on_expire: 到期后执行的默认处理
            player_id: 关联的玩家
        """
        def emit_timer(event_type: EventType, timer: TimerState) -> None:
            ctx.emit(round_, TimerEvent.create(
                event_type, round_.round_id, timer.name, timer.duration, timer.remaining,
                phase=timer.phase, player_id=timer.player_id))

        def warn(timer: TimerState) -> None:
            timer.remaining = ctx.scheduler.get_remaining(timer.name) or 0.0
            emit_timer(EventType.TIMER_WARNING, timer)

        def expire(timer: TimerState) -> None:
            emit_timer(EventType.TIMER_EXPIRED, timer)
            on_expire()

        timer = ctx.scheduler.start(
            name, duration, expire,
            on_warning=warn,
            warning_before=ctx.timer_config.warning_before_timeout,
            phase=self.phase.name,
            player_id=player_id,
            owner=round_.round_id,
        )
        emit_timer(EventType.TIMER_STARTED, timer)
        return timer

    @staticmethod
    def action_timer_name(round_: 'Round') -> str:
        return f"{round_.round_id}:action"

    @staticmethod
    def answer_timer_name(round_: 'Round', phase: RoundPhase) -> str:
        return f"{round_.round_id}:answer:{phase.name}"

    @staticmethod
    def reveal_timer_name(round_: 'Round') -> str:
        return f"{round_.round_id}:reveal"
