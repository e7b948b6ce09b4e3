"""
RoundEngine - 回合引擎

对外层游戏生命周期提供的窄接口: 开始回合、提交行动、推进阶段、
暂停/恢复/关闭回合以及快照。玩家行动和计时器到期都经由同一条处理路径，
所有调用都在同一个线程内按到达顺序串行处理。
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from ..core.betting.betting_engine import BettingEngine
from ..core.betting.betting_types import ActionSource, ActionType, PlayerAction
from ..core.config import EngineConfig, RoundSettings
from ..core.events.domain_events import DomainEvent, EventType, PlayerActionEvent, RoundStartedEvent
from ..core.events.event_bus import EventBus
from ..core.invariant.chip_conservation_checker import ChipConservationChecker
from ..core.players.participant import Participant
from ..core.round.round import Round
from ..core.round.types import Question, RoundPhase, TransitionReason
from ..core.rules.errors import ErrorKind, InvalidActionError
from ..core.showdown.winner_resolver import WinnerResolver
from ..core.snapshot.snapshot_manager import SnapshotManager
from ..core.snapshot.types import RoundSnapshot
from ..core.state_machine.base_phase_handler import BasePhaseHandler
from ..core.state_machine.phase_handlers import pot_updated_event, side_pot_created_event
from ..core.state_machine.round_state_machine import RoundStateMachine
from ..core.state_machine.types import PhaseContext
from ..core.timers.timer_scheduler import TimerScheduler
from .types import ActionResult

__all__ = ['RoundEngine']

logger = logging.getLogger(__name__)


class RoundEngine:
    """
    回合引擎

    每个Round是独立的状态单元，引擎本身只持有无状态的协作者、
    共享的计时器调度器和事件总线，因此可以同时驱动多个互不相关的回合。
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 event_bus: Optional[EventBus] = None,
                 scheduler: Optional[TimerScheduler] = None):
        """
        初始化回合引擎

        Args:
            config: 引擎配置
            event_bus: 事件总线，默认新建
            scheduler: 计时器调度器，默认新建
        """
        self._config = config or EngineConfig()
        self._event_bus = event_bus or EventBus()
        self._scheduler = scheduler or TimerScheduler()
        self._betting_engine = BettingEngine()
        self._resolver = WinnerResolver()
        self._snapshots = SnapshotManager()
        self._round_counter = 0

        self._ctx = PhaseContext(
            betting_engine=self._betting_engine,
            resolver=self._resolver,
            scheduler=self._scheduler,
            timer_config=self._config.timers,
            emit=self._emit,
            on_action_timeout=self._handle_action_timeout,
            on_phase_timeout=self._handle_phase_timeout,
        )
        self._state_machine = RoundStateMachine(self._ctx)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def scheduler(self) -> TimerScheduler:
        return self._scheduler

    @property
    def betting_engine(self) -> BettingEngine:
        return self._betting_engine

    @property
    def resolver(self) -> WinnerResolver:
        return self._resolver

    def _emit(self, round_: Round, event: DomainEvent) -> None:
        round_.event_log.append(event)
        self._event_bus.publish(event)

    def _verify_chips(self, round_: Round) -> None:
        if self._config.check_chip_conservation:
            ChipConservationChecker.verify(round_)

    # ---- 回合生命周期 ----

    def start_round(self, players: Sequence[Participant], question: Question,
                    settings: Optional[RoundSettings] = None,
                    round_id: Optional[str] = None) -> Round:
        """
        开始一个新回合

        重置参与者的单回合字段，收取前注，揭示问题并进入第一个问题阶段。

        Args:
            players: 参与者，顺序即行动顺序
            question: 本回合的问题
            settings: 回合规则，默认使用引擎配置
            round_id: 回合ID，默认自动生成

        Returns:
            Round: 新回合
        """
        if not players:
            raise ValueError("回合至少需要一名参与者")

        round_ = Round(
            round_id=round_id or f"round_{uuid.uuid4().hex[:8]}",
            question=question,
            participants=list(players),
            settings=settings or self._config.round_settings,
            round_number=self._round_counter + 1,
            initial_chips=sum(p.stack for p in players),
        )
        self._round_counter = round_.round_number
        # 回合校验通过后才重置参与者，被拒绝的调用不改变玩家状态
        for participant in round_.participants:
            participant.reset_for_round()

        logger.info(f"[游戏流程] 开始回合 {round_.round_id}, 参与者 {round_.participant_ids}")
        self._emit(round_, RoundStartedEvent.create(
            round_.round_id, round_.round_number, round_.participant_ids, round_.settings.ante_size))
        self._state_machine.start(round_)
        self._verify_chips(round_)
        return round_

    def apply_action(self, round_: Optional[Round], player_id: str, action: PlayerAction,
                     source: ActionSource = ActionSource.PLAYER) -> ActionResult:
        """
        处理玩家行动

        被拒绝的行动不修改回合状态。被接受的下注行动会同步取消该玩家的行动计时器，
        因此之后到期的旧计时器不会再产生效果。

        Args:
            round_: 当前回合
            player_id: 玩家ID
            action: 玩家行动
            source: 行动来源

        Returns:
            ActionResult: 处理结果，包含本次产生的事件
        """
        if round_ is None:
            return ActionResult.rejected(ErrorKind.NO_ACTIVE_ROUND, "当前没有进行中的回合")

        start = len(round_.event_log)
        result = self._betting_engine.apply(round_, player_id, action, source)
        if not result:
            return ActionResult.rejected(result.reason, result.message, phase=round_.phase)

        if action.action_type != ActionType.ANSWER:
            self._scheduler.stop(BasePhaseHandler.action_timer_name(round_))

        record = result.record
        self._emit(round_, PlayerActionEvent.create(
            round_.round_id, player_id, action.action_type.name, record.amount, source.value, record.phase))
        for pot in result.new_side_pots:
            self._emit(round_, side_pot_created_event(round_, pot))
        if result.chips_moved or result.new_side_pots:
            self._emit(round_, pot_updated_event(round_))

        self._verify_chips(round_)
        self._state_machine.on_action_accepted(round_, result)
        self._verify_chips(round_)

        return ActionResult(
            accepted=True,
            message=result.message,
            events=round_.event_log[start:],
            phase_complete=result.phase_complete,
            phase=round_.phase,
        )

    def apply_action_or_raise(self, round_: Optional[Round], player_id: str, action: PlayerAction) -> ActionResult:
        """
        处理玩家行动，被拒绝时抛出异常

        Raises:
            InvalidActionError: 行动被拒绝
        """
        result = self.apply_action(round_, player_id, action)
        if not result:
            raise InvalidActionError(result.reason, result.message)
        return result

    def advance_phase(self, round_: Optional[Round], reason: TransitionReason = TransitionReason.MANUAL) -> bool:
        """
        手动推进阶段；没有回合、回合已结束或已关闭时不做任何事

        Returns:
            是否发生了阶段转换
        """
        if round_ is None or round_.closed:
            return False
        advanced = self._state_machine.advance(round_, reason)
        if advanced:
            self._verify_chips(round_)
        return advanced

    def pause_round(self, round_: Round) -> bool:
        """暂停回合: 冻结回合的所有计时器，暂停期间拒绝玩家行动"""
        if round_.paused or round_.closed or round_.is_finished:
            return False
        round_.paused = True
        paused = self._scheduler.pause_owner(round_.round_id)
        logger.info(f"[游戏流程] 回合 {round_.round_id} 暂停, 冻结 {paused} 个计时器")
        return True

    def resume_round(self, round_: Round) -> bool:
        if not round_.paused or round_.closed:
            return False
        round_.paused = False
        resumed = self._scheduler.resume_owner(round_.round_id)
        logger.info(f"[游戏流程] 回合 {round_.round_id} 恢复, 重新计时 {resumed} 个计时器")
        return True

    def close_round(self, round_: Round) -> int:
        """
        关闭回合并停止它拥有的全部计时器

        Returns:
            停止的计时器数量
        """
        round_.closed = True
        stopped = self._scheduler.stop_owner(round_.round_id)
        logger.info(f"[游戏流程] 回合 {round_.round_id} 关闭, 停止 {stopped} 个计时器")
        return stopped

    # ---- 计时器回调 ----

    def _handle_action_timeout(self, round_: Round, phase: RoundPhase, player_id: str) -> None:
        """下注超时: 以弃牌作为默认行动"""
        if (round_.closed or round_.paused or round_.phase != phase
                or round_.betting.next_to_act != player_id):
            logger.debug(f"[计时器] 忽略过期的行动超时: {round_.round_id} {phase.name} {player_id}")
            return

        logger.info(f"[计时器] 玩家 {player_id} 在 {phase.name} 行动超时，自动弃牌")
        self._emit(round_, DomainEvent.create(
            EventType.PLAYER_TIMEOUT, round_.round_id,
            {'player_id': player_id, 'phase': phase.name, 'default_action': ActionType.FOLD.name}))
        self.apply_action(round_, player_id, PlayerAction.fold(), source=ActionSource.TIMEOUT)

    def _handle_phase_timeout(self, round_: Round, phase: RoundPhase) -> None:
        """问题或揭示阶段超时: 未答题的玩家保留之前的答案（或没有答案），阶段推进"""
        if round_.closed or round_.paused or round_.phase != phase:
            logger.debug(f"[计时器] 忽略过期的阶段超时: {round_.round_id} {phase.name}")
            return

        if phase.is_question:
            for participant in round_.in_hand():
                if participant.player_id in round_.answered_this_phase:
                    continue
                self._emit(round_, DomainEvent.create(
                    EventType.PLAYER_TIMEOUT, round_.round_id,
                    {
                        'player_id': participant.player_id,
                        'phase': phase.name,
                        'default_action': 'NO_ANSWER',
                        'kept_previous_answer': participant.has_answered,
                    }))

        self._state_machine.advance(round_, TransitionReason.TIMER)
        self._verify_chips(round_)

    # ---- 快照 ----

    def create_snapshot(self, round_: Round, client_facing: bool = True,
                        viewer_id: Optional[str] = None) -> RoundSnapshot:
        return self._snapshots.create_snapshot(round_, client_facing=client_facing, viewer_id=viewer_id)

    def restore_round(self, snapshot: RoundSnapshot) -> Round:
        """
        从完整快照恢复回合并继续驱动

        当前阶段的计时器以完整时长重新布置，不重复阶段进入时的副作用；
        快照中处于暂停状态的回合恢复后仍然是暂停的。

        Raises:
            SnapshotError: 快照不能用于恢复
        """
        round_ = self._snapshots.restore_round(snapshot)
        self._state_machine.resume(round_)
        if round_.paused:
            self._scheduler.pause_owner(round_.round_id)
        return round_

    # ---- 查询 ----

    def get_betting_stats(self, round_: Round) -> Dict[str, Any]:
        return self._betting_engine.betting_stats(round_)

    def get_accuracy_stats(self, round_: Round) -> Optional[Dict[str, Any]]:
        return self._resolver.accuracy_stats(round_)

    def get_timer_stats(self) -> Dict[str, Any]:
        return self._scheduler.stats()

    def events_of(self, round_: Round, event_type: EventType) -> List[DomainEvent]:
        return [event for event in round_.event_log if event.event_type == event_type]
