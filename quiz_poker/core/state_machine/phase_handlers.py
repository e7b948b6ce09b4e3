"""
各阶段处理器

每个处理器只负责自己阶段的进入副作用、完成条件和计时器。
"""

import logging
import time
from typing import TYPE_CHECKING, Dict

from ..events.domain_events import (
    BettingStartedEvent,
    DomainEvent,
    EventType,
    PotUpdatedEvent,
    WinnersDeterminedEvent,
)
from ..players.participant import PlayerStatus
from ..round.types import RoundPhase
from ..showdown.types import RoundResult
from .base_phase_handler import BasePhaseHandler
from .types import PhaseContext, PhaseHandler

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = [
    'AnteHandler',
    'QuestionHandler',
    'BettingHandler',
    'RevealHandler',
    'ShowdownHandler',
    'FinishedHandler',
    'pot_updated_event',
    'side_pot_created_event',
    'default_handlers',
]

logger = logging.getLogger(__name__)


def pot_updated_event(round_: 'Round') -> PotUpdatedEvent:
    ledger = round_.ledger
    return PotUpdatedEvent.create(
        round_.round_id,
        ledger.total,
        ledger.main_pot,
        [pot.to_dict() for pot in ledger.side_pots],
    )


def side_pot_created_event(round_: 'Round', pot) -> DomainEvent:
    return DomainEvent.create(EventType.SIDE_POT_CREATED, round_.round_id, pot.to_dict())


class AnteHandler(BasePhaseHandler):
    """前注阶段: 进入时收取前注，随即完成"""

    def __init__(self):
        super().__init__(RoundPhase.ANTE)

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        _, created = ctx.betting_engine.collect_ante(round_)
        for pot in created:
            ctx.emit(round_, side_pot_created_event(round_, pot))
        ctx.emit(round_, pot_updated_event(round_))

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        return True


class QuestionHandler(BasePhaseHandler):
    """问题阶段: 第一问揭示题目，第二问揭示提示；收齐答案或超时后完成"""

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        round_.answered_this_phase = set()
        question = round_.question

        if self.phase == RoundPhase.QUESTION1:
            ctx.emit(round_, DomainEvent.create(
                EventType.QUESTION_REVEALED, round_.round_id, question.to_dict(include_answer=False)))
        else:
            ctx.emit(round_, DomainEvent.create(
                EventType.HINT_REVEALED, round_.round_id, {'hint': question.hint}))

        self._arm_answer_timer(ctx, round_)

    def on_resume(self, ctx: PhaseContext, round_: 'Round') -> None:
        self._arm_answer_timer(ctx, round_)

    def _arm_answer_timer(self, ctx: PhaseContext, round_: 'Round') -> None:
        phase = self.phase
        self._arm_timer(
            ctx, round_,
            self.answer_timer_name(round_, phase),
            ctx.timer_config.answer_timeout,
            lambda: ctx.on_phase_timeout(round_, phase),
        )

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        return ctx.betting_engine.all_answered(round_)


class BettingHandler(BasePhaseHandler):
    """下注阶段: 为下一位行动玩家布置计时器，下注完成后结束"""

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        engine = ctx.betting_engine
        engine.begin_phase(round_)
        ctx.emit(round_, BettingStartedEvent.create(
            round_.round_id,
            self.phase.name,
            engine.max_bet(round_),
            engine.min_raise(round_),
            round_.betting.next_to_act,
        ))
        self.arm_action_timer(ctx, round_)

    def on_exit(self, ctx: PhaseContext, round_: 'Round') -> None:
        ctx.emit(round_, DomainEvent.create(
            EventType.BETTING_FINISHED, round_.round_id,
            {'phase': self.phase.name, 'total_pot': round_.ledger.total}))
        super().on_exit(ctx, round_)

    def on_resume(self, ctx: PhaseContext, round_: 'Round') -> None:
        self.arm_action_timer(ctx, round_)

    def arm_action_timer(self, ctx: PhaseContext, round_: 'Round') -> None:
        """为下一位行动玩家启动计时器，同名计时器会替换上一位玩家的"""
        name = self.action_timer_name(round_)
        player_id = round_.betting.next_to_act
        if player_id is None:
            ctx.scheduler.stop(name)
            return

        phase = self.phase
        self._arm_timer(
            ctx, round_, name,
            ctx.timer_config.betting_timeout,
            lambda: ctx.on_action_timeout(round_, phase, player_id),
            player_id=player_id,
        )

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        return ctx.betting_engine.is_betting_complete(round_)


class RevealHandler(BasePhaseHandler):
    """揭示阶段: 公布正确答案和每个答案的偏差，展示时间结束后完成"""

    def __init__(self):
        super().__init__(RoundPhase.REVEAL)

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        answers = ctx.resolver.evaluate_answers(round_)
        ctx.emit(round_, DomainEvent.create(
            EventType.ANSWER_REVEALED, round_.round_id,
            {
                'correct_answer': round_.question.correct_answer,
                'answers': [answer.to_dict() for answer in answers],
            }))
        self._arm_reveal_timer(ctx, round_)

    def on_resume(self, ctx: PhaseContext, round_: 'Round') -> None:
        self._arm_reveal_timer(ctx, round_)

    def _arm_reveal_timer(self, ctx: PhaseContext, round_: 'Round') -> None:
        self._arm_timer(
            ctx, round_,
            self.reveal_timer_name(round_),
            ctx.timer_config.reveal_timeout,
            lambda: ctx.on_phase_timeout(round_, RoundPhase.REVEAL),
        )


class ShowdownHandler(BasePhaseHandler):
    """摊牌阶段: 判定胜者并分配底池，随即完成"""

    def __init__(self):
        super().__init__(RoundPhase.SHOWDOWN)

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        resolver = ctx.resolver

        distribution = resolver.resolve(round_)
        resolver.distribute_winnings(round_.participants, distribution.winners)
        carry_over = round_.ledger.settle(distribution.total_distributed)
        resolver.update_player_accuracy_stats(round_)

        round_.result = RoundResult(
            round_id=round_.round_id,
            correct_answer=round_.question.correct_answer,
            answers=resolver.evaluate_answers(round_),
            distribution=distribution,
            carry_over=carry_over,
        )

        ctx.emit(round_, WinnersDeterminedEvent.create(
            round_.round_id,
            [winner.to_dict() for winner in distribution.winners],
            distribution.total_distributed,
            distribution.undistributed,
        ))
        for player_id in sorted(distribution.payouts):
            participant = round_.get_participant(player_id)
            ctx.emit(round_, DomainEvent.create(
                EventType.CHIPS_DISTRIBUTED, round_.round_id,
                {
                    'player_id': player_id,
                    'amount': distribution.payouts[player_id],
                    'new_stack': participant.stack,
                }))
        ctx.emit(round_, pot_updated_event(round_))

    def is_complete(self, ctx: PhaseContext, round_: 'Round') -> bool:
        return True


class FinishedHandler(BasePhaseHandler):
    """结束阶段: 停止回合的全部计时器，标记出局玩家"""

    def __init__(self):
        super().__init__(RoundPhase.FINISHED)

    def on_enter(self, ctx: PhaseContext, round_: 'Round') -> None:
        super().on_enter(ctx, round_)
        stopped = ctx.scheduler.stop_owner(round_.round_id)
        if stopped:
            logger.debug(f"[游戏流程] 回合 {round_.round_id} 结束时停止了 {stopped} 个计时器")

        for participant in round_.participants:
            if participant.is_eliminated:
                continue
            participant.stats.rounds_played += 1
            if participant.stack == 0:
                participant.status = PlayerStatus.ELIMINATED
                ctx.emit(round_, DomainEvent.create(
                    EventType.PLAYER_ELIMINATED, round_.round_id, {'player_id': participant.player_id}))
                logger.info(f"[游戏流程] 玩家 {participant.player_id} 筹码耗尽，出局")

        round_.finished_at = time.time()
        ctx.emit(round_, DomainEvent.create(
            EventType.ROUND_FINISHED, round_.round_id,
            round_.result.to_dict() if round_.result else {'round_id': round_.round_id}))

    def on_exit(self, ctx: PhaseContext, round_: 'Round') -> None:
        pass


def default_handlers() -> Dict[RoundPhase, PhaseHandler]:
    """每个阶段对应的默认处理器"""
    return {
        RoundPhase.ANTE: AnteHandler(),
        RoundPhase.QUESTION1: QuestionHandler(RoundPhase.QUESTION1),
        RoundPhase.BETTING1: BettingHandler(RoundPhase.BETTING1),
        RoundPhase.QUESTION2: QuestionHandler(RoundPhase.QUESTION2),
        RoundPhase.BETTING2: BettingHandler(RoundPhase.BETTING2),
        RoundPhase.REVEAL: RevealHandler(),
        RoundPhase.BETTING3: BettingHandler(RoundPhase.BETTING3),
        RoundPhase.SHOWDOWN: ShowdownHandler(),
        RoundPhase.FINISHED: FinishedHandler(),
    }
