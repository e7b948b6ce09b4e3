"""
Property-based Tests for Chip Conservation - 筹码守恒属性测试

使用hypothesis生成随机的投入、全押/弃牌组合以及完整回合中的随机行动序列，
确保在任何情况下筹码都守恒，并且底池被完整分配。
"""

from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from quiz_poker.application.round_engine import RoundEngine
from quiz_poker.core.betting.betting_types import PlayerAction
from quiz_poker.core.betting.betting_validator import BettingValidator
from quiz_poker.core.config import EngineConfig, RoundSettings
from quiz_poker.core.players.participant import Participant, PlayerStatus
from quiz_poker.core.pot.pot_ledger import PotLedger
from quiz_poker.core.round.types import Question, RoundPhase
from quiz_poker.tests.anti_cheat.core_usage_checker import CoreUsageChecker

pytestmark = pytest.mark.property_test

seat_strategy = st.tuples(
    st.integers(min_value=1, max_value=500),              # 投入
    st.sampled_from(['active', 'all_in', 'folded']),
)


@given(st.lists(seat_strategy, min_size=1, max_size=8))
def test_tiers_account_for_every_contribution(seats):
    ledger = PotLedger()
    participants = []
    for index, (amount, status) in enumerate(seats):
        player_id = f"player_{index}"
        participant = Participant(player_id=player_id, stack=0 if status == 'all_in' else 100,
                                  status=PlayerStatus.ACTIVE)
        if status == 'all_in':
            participant.mark_all_in()
        elif status == 'folded':
            participant.fold()
        participants.append(participant)
        ledger.post_contribution(player_id, amount)

    ledger.build_side_pots(participants)
    tiers = ledger.tiers()

    assert sum(tier.amount for tier in tiers) == sum(amount for amount, _ in seats)
    folded = {p.player_id for p in participants if p.is_folded}
    for lower, upper in zip(tiers, tiers[1:]):
        assert set(upper.eligible_player_ids) <= set(lower.eligible_player_ids)
    for tier in tiers:
        assert not folded & set(tier.eligible_player_ids)


@given(st.integers(min_value=0, max_value=100000),
       st.sets(st.sampled_from(['a', 'b', 'c', 'd', 'e']), min_size=1))
def test_distribute_hands_out_whole_pot(amount, winners):
    payouts = PotLedger.distribute(amount, winners)

    assert sum(payouts.values()) == amount
    assert max(payouts.values()) - min(payouts.values()) <= 1
    assert set(payouts) == winners


def _drive(engine: RoundEngine, round_, choices: List[int], answers: List[int]) -> None:
    """用随机选择驱动回合直到结束"""
    timers = engine.config.timers
    pending_choices = iter(choices)
    for _ in range(500):
        if round_.is_finished:
            return
        phase = round_.phase
        if phase.is_question:
            for index, participant in enumerate(round_.in_hand()):
                if next(pending_choices, 0) == 4:
                    continue
                engine.apply_action(round_, participant.player_id,
                                    PlayerAction.answer_with(answers[index % len(answers)]))
                if round_.phase != phase:
                    break
            if round_.phase == phase:
                engine.scheduler.advance(timers.answer_timeout)
        elif phase == RoundPhase.REVEAL:
            engine.scheduler.advance(timers.reveal_timeout)
        else:
            player_id = round_.betting.next_to_act
            assert player_id is not None, f"{phase.name} 未完成但没有待行动玩家"
            player = round_.get_participant(player_id)
            current_max = BettingValidator.max_bet(round_)
            choice = next(pending_choices, 0)
            if choice == 1:
                target = max(BettingValidator.min_raise_to(round_), current_max + 1)
                if target - player.current_bet <= player.stack:
                    action = PlayerAction.raise_to(target)
                else:
                    action = PlayerAction.all_in()
            elif choice == 2:
                action = PlayerAction.all_in()
            elif choice == 3:
                action = PlayerAction.fold()
            elif choice == 4:
                engine.scheduler.advance(timers.betting_timeout)
                continue
            elif player.current_bet == current_max:
                action = PlayerAction.check()
            else:
                action = PlayerAction.call()
            result = engine.apply_action(round_, player_id, action)
            assert result.accepted, result.message


@pytest.mark.anti_cheat
@settings(max_examples=60, deadline=None)
@given(
    stacks=st.lists(st.integers(min_value=0, max_value=400), min_size=2, max_size=6),
    ante=st.integers(min_value=0, max_value=80),
    choices=st.lists(st.integers(min_value=0, max_value=4), max_size=80),
    answers=st.lists(st.integers(min_value=-50, max_value=300), min_size=1, max_size=6),
)
def test_random_round_conserves_chips(stacks, ante, choices, answers):
    engine = RoundEngine(EngineConfig(round_settings=RoundSettings(ante_size=ante)))
    players = [Participant(player_id=f"player_{i}", stack=stack) for i, stack in enumerate(stacks)]
    round_ = engine.start_round(players, Question(text="随机问题", correct_answer=100))
    CoreUsageChecker.verify_real_objects(round_, "Round")

    _drive(engine, round_, choices, answers)

    assert round_.is_finished
    final_total = sum(p.stack for p in players) + round_.result.carry_over
    CoreUsageChecker.verify_chip_conservation(sum(stacks), final_total)
    distribution = round_.result.distribution
    assert distribution.total_distributed + distribution.undistributed == sum(
        p.total_bet_in_round for p in players)
    assert engine.scheduler.active_timers(owner=round_.round_id) == []
