"""
单元测试: RoundStateMachine 与阶段处理器
"""

import pytest

from quiz_poker.core.betting.betting_engine import BettingEngine
from quiz_poker.core.betting.betting_types import PlayerAction
from quiz_poker.core.config import RoundSettings, TimerConfig
from quiz_poker.core.events.domain_events import EventType
from quiz_poker.core.players.participant import Participant
from quiz_poker.core.round.round import Round
from quiz_poker.core.round.types import Question, RoundPhase, TransitionReason
from quiz_poker.core.rules.errors import PhaseTransitionError
from quiz_poker.core.showdown.winner_resolver import WinnerResolver
from quiz_poker.core.state_machine.phase_handlers import default_handlers
from quiz_poker.core.state_machine.round_state_machine import RoundStateMachine
from quiz_poker.core.state_machine.types import PhaseContext
from quiz_poker.core.timers.timer_scheduler import TimerScheduler
from quiz_poker.tests.anti_cheat.core_usage_checker import CoreUsageChecker


class TestRoundPhase:

    def test_phases_are_strictly_linear(self):
        phase = RoundPhase.ANTE
        visited = [phase]
        while phase.next is not None:
            phase = phase.next
            visited.append(phase)

        assert visited == list(RoundPhase)
        assert RoundPhase.FINISHED.is_terminal

    def test_answer_revealed_from_reveal_onwards(self):
        assert not RoundPhase.BETTING2.answer_revealed
        assert RoundPhase.REVEAL.answer_revealed
        assert RoundPhase.SHOWDOWN.answer_revealed


class TestRoundStateMachine:

    def setup_method(self):
        self.events = []
        self.timeouts = []
        self.scheduler = TimerScheduler()
        self.ctx = PhaseContext(
            betting_engine=BettingEngine(),
            resolver=WinnerResolver(),
            scheduler=self.scheduler,
            timer_config=TimerConfig(),
            emit=lambda round_, event: self.events.append(event),
            on_action_timeout=lambda round_, phase, player_id: self.timeouts.append((phase, player_id)),
            on_phase_timeout=lambda round_, phase: self.timeouts.append((phase, None)),
        )
        self.machine = RoundStateMachine(self.ctx)
        CoreUsageChecker.verify_real_objects(self.machine, "RoundStateMachine")
        self.round = Round(
            round_id='r1',
            question=Question(text="光速是多少万公里每秒？", correct_answer=30, hint="接近30"),
            participants=[Participant('alice', 100), Participant('bob', 100)],
            settings=RoundSettings(ante_size=10),
        )

    def _types(self):
        return [event.event_type for event in self.events]

    def test_start_collects_ante_and_reveals_question(self):
        self.machine.start(self.round)

        assert self.round.phase == RoundPhase.QUESTION1
        assert self.round.ledger.total == 20
        transition = self.round.transitions[0]
        assert (transition.from_phase, transition.to_phase) == (RoundPhase.ANTE, RoundPhase.QUESTION1)
        assert transition.reason == TransitionReason.AUTOMATIC

        question_event = next(e for e in self.events if e.event_type == EventType.QUESTION_REVEALED)
        assert 'correct_answer' not in question_event.data
        assert self.scheduler.has_timer('r1:answer:QUESTION1')

    def test_start_twice_is_rejected(self):
        self.machine.start(self.round)
        with pytest.raises(PhaseTransitionError):
            self.machine.start(self.round)

    def test_manual_advance_moves_one_step(self):
        self.machine.start(self.round)

        assert self.machine.advance(self.round)

        assert self.round.phase == RoundPhase.BETTING1
        assert self.round.transitions[-1].reason == TransitionReason.MANUAL
        assert not self.scheduler.has_timer('r1:answer:QUESTION1')
        assert self.scheduler.get_state('r1:action').player_id == 'alice'
        assert EventType.BETTING_STARTED in self._types()

    def test_completed_phases_are_skipped_automatically(self):
        self.machine.start(self.round)
        engine = self.ctx.betting_engine
        for player_id in ('alice', 'bob'):
            engine.apply(self.round, player_id, PlayerAction.answer_with(30))

        assert self.machine.advance(self.round, TransitionReason.ALL_ACTIONS_COMPLETE)
        assert self.round.phase == RoundPhase.BETTING1

        for player_id in ('alice', 'bob'):
            result = engine.apply(self.round, player_id, PlayerAction.check())
            self.machine.on_action_accepted(self.round, result)

        assert self.round.phase == RoundPhase.QUESTION2
        hint_event = next(e for e in self.events if e.event_type == EventType.HINT_REVEALED)
        assert hint_event.data == {'hint': "接近30"}

    def test_advance_runs_through_showdown_to_finished(self):
        self.machine.start(self.round)
        self.ctx.betting_engine.apply(self.round, 'alice', PlayerAction.answer_with(29))

        while not self.round.is_finished:
            self.machine.advance(self.round)

        assert self.round.result.distribution.payouts == {'alice': 20}
        assert self.round.get_participant('alice').stack == 110
        assert self._types()[-1] == EventType.ROUND_FINISHED
        assert self.scheduler.active_timers(owner='r1') == []
        assert not self.machine.advance(self.round)

    def test_advance_without_round(self):
        assert not self.machine.advance(None)

    def test_missing_handler_is_rejected(self):
        handlers = default_handlers()
        del handlers[RoundPhase.REVEAL]
        with pytest.raises(ValueError):
            RoundStateMachine(self.ctx, handlers)

    def test_answer_timer_expiry_calls_phase_timeout(self):
        self.machine.start(self.round)

        self.scheduler.advance(TimerConfig().answer_timeout)

        assert self.timeouts == [(RoundPhase.QUESTION1, None)]
        assert EventType.TIMER_WARNING in self._types()
        assert EventType.TIMER_EXPIRED in self._types()
