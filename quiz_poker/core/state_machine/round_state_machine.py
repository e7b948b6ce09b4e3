"""
回合状态机

唯一决定阶段推进的组件。阶段严格线性、一次只前进一步，FINISHED为终止状态。
"""

import logging
import time
from typing import TYPE_CHECKING, Dict, Optional

from ..events.domain_events import PhaseChangedEvent
from ..round.types import PhaseTransition, RoundPhase, TransitionReason
from ..rules.errors import PhaseTransitionError
from .phase_handlers import BettingHandler, default_handlers
from .types import PhaseContext, PhaseHandler

if TYPE_CHECKING:
    from ..betting.betting_engine import BetResult
    from ..round.round import Round

__all__ = ['RoundStateMachine']

logger = logging.getLogger(__name__)


class RoundStateMachine:
    """回合状态机"""

    def __init__(self, ctx: PhaseContext, handlers: Optional[Dict[RoundPhase, PhaseHandler]] = None):
        """
        初始化状态机

        Args:
            ctx: 阶段处理器共享的上下文
            handlers: 阶段处理器映射，默认使用default_handlers()
        """
        handlers = handlers or default_handlers()
        missing = set(RoundPhase) - set(handlers)
        if missing:
            raise ValueError(f"缺少必需的阶段处理器: {sorted(p.name for p in missing)}")
        self._ctx = ctx
        self._handlers = handlers

    def get_handler(self, phase: RoundPhase) -> PhaseHandler:
        return self._handlers[phase]

    def start(self, round_: 'Round') -> None:
        """
        进入ANTE阶段并自动推进到第一个需要玩家参与的阶段

        Raises:
            PhaseTransitionError: 回合已经开始过
        """
        if round_.phase != RoundPhase.ANTE or round_.transitions:
            raise PhaseTransitionError(f"回合 {round_.round_id} 已经开始，当前阶段 {round_.phase.name}")

        self.get_handler(RoundPhase.ANTE).on_enter(self._ctx, round_)
        self._advance_while_complete(round_)

    def advance(self, round_: Optional['Round'], reason: TransitionReason = TransitionReason.MANUAL) -> bool:
        """
        推进到下一个阶段，之后连续跳过已经完成的阶段

        没有回合或回合已结束时不做任何事。

        Args:
            round_: 当前回合
            reason: 触发原因

        Returns:
            是否发生了阶段转换
        """
        if round_ is None or round_.is_finished:
            return False

        self._transition(round_, reason)
        self._advance_while_complete(round_)
        return True

    def _advance_while_complete(self, round_: 'Round') -> None:
        while not round_.is_finished:
            handler = self.get_handler(round_.phase)
            if not handler.is_complete(self._ctx, round_):
                break
            reason = (TransitionReason.ALL_ACTIONS_COMPLETE
                      if round_.phase.is_betting or round_.phase.is_question
                      else TransitionReason.AUTOMATIC)
            self._transition(round_, reason)

    def _transition(self, round_: 'Round', reason: TransitionReason) -> None:
        current = round_.phase
        target = current.next
        if target is None:
            raise PhaseTransitionError(f"{current.name} 没有后继阶段")

        self.get_handler(current).on_exit(self._ctx, round_)
        round_.phase = target
        round_.record_transition(PhaseTransition(current, target, reason, time.time()))
        logger.info(f"[游戏流程] 回合 {round_.round_id}: {current.name} -> {target.name} ({reason.value})")
        self._ctx.emit(round_, PhaseChangedEvent.create(
            round_.round_id, current.name, target.name, reason.value))
        self.get_handler(target).on_enter(self._ctx, round_)

    def on_action_accepted(self, round_: 'Round', result: 'BetResult') -> None:
        """
        玩家行动被接受后调用: 阶段完成则推进，否则为下一位玩家重新布置计时器

        Args:
            round_: 当前回合
            result: 下注引擎的执行结果
        """
        if result.phase_complete:
            self.advance(round_, TransitionReason.ALL_ACTIONS_COMPLETE)
            return

        handler = self.get_handler(round_.phase)
        if isinstance(handler, BettingHandler):
            handler.arm_action_timer(self._ctx, round_)

    def resume(self, round_: 'Round') -> None:
        """从快照恢复后重新布置当前阶段的计时器"""
        if round_.is_finished:
            return
        self.get_handler(round_.phase).on_resume(self._ctx, round_)
        self._advance_while_complete(round_)
