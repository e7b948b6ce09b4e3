"""
单元测试: WinnerResolver
"""

import pytest

from quiz_poker.core.config import RoundSettings
from quiz_poker.core.players.participant import Participant, PlayerStatus
from quiz_poker.core.round.round import Round
from quiz_poker.core.round.types import Question, RoundPhase
from quiz_poker.core.pot.pot_ledger import SidePot
from quiz_poker.core.showdown.winner_resolver import WinnerResolver, round_half_up
from quiz_poker.tests.anti_cheat.core_usage_checker import CoreUsageChecker


def _showdown_round(entries, correct=100):
    """
    entries: (player_id, contribution, answer, status)
    all_in表示投入后没有剩余筹码
    """
    participants = []
    for player_id, contribution, answer, status in entries:
        participant = Participant(player_id=player_id, stack=0 if status == 'all_in' else 100,
                                  status=PlayerStatus.ACTIVE, total_bet_in_round=contribution)
        if status == 'all_in':
            participant.mark_all_in()
        elif status == 'folded':
            participant.fold()
        if answer is not None:
            participant.submit_answer(answer, 1.0)
        participants.append(participant)

    round_ = Round('r1', Question(text="q", correct_answer=correct), participants,
                   RoundSettings(ante_size=0), phase=RoundPhase.SHOWDOWN)
    for participant in participants:
        round_.ledger.post_contribution(participant.player_id, participant.total_bet_in_round)
    return round_


class TestAccuracy:

    @pytest.mark.parametrize("correct, answer, expected", [
        (100, 95, 95.0),
        (100, 250, 0.0),
        (1000, 900, 90.0),
        (5, 6, 99.0),
        (-50, -40, 90.0),
        (3, 3, 100.0),
    ])
    def test_calculate_accuracy(self, correct, answer, expected):
        assert WinnerResolver.calculate_accuracy(correct, answer) == expected

    @pytest.mark.parametrize("value, expected", [
        (87.125, 87.13),
        (0.125, 0.13),
        (12.5, 12.5),
        (99.994, 99.99),
    ])
    def test_halves_round_up(self, value, expected):
        assert round_half_up(value) == expected


class TestWinnerResolver:

    def setup_method(self):
        self.resolver = WinnerResolver()
        CoreUsageChecker.verify_real_objects(self.resolver, "WinnerResolver")

    def test_equal_deviation_splits_the_pot(self):
        round_ = _showdown_round([
            ('alice', 100, 95, 'active'),
            ('bob', 100, 105, 'active'),
            ('carol', 100, 80, 'active'),
        ])

        distribution = self.resolver.resolve(round_)

        assert distribution.payouts == {'alice': 150, 'bob': 150}
        assert distribution.total_distributed == 300
        assert distribution.undistributed == 0
        assert self.resolver.has_tie(round_)

    def test_side_pot_is_resolved_among_its_own_players(self):
        round_ = _showdown_round([
            ('alice', 50, 100, 'all_in'),
            ('bob', 100, 90, 'active'),
            ('carol', 100, 80, 'active'),
        ])

        distribution = self.resolver.resolve(round_)

        assert distribution.payouts == {'alice': 150, 'bob': 100}
        main, side = distribution.winners
        assert (main.player_id, main.pot_type, main.pot_index) == ('alice', 'main', 0)
        assert (side.player_id, side.pot_type, side.pot_index) == ('bob', 'side', 1)

    def test_resolve_single_pot(self):
        round_ = _showdown_round([
            ('alice', 50, 100, 'all_in'),
            ('bob', 100, 101, 'active'),
            ('carol', 100, 99, 'active'),
        ])
        side = SidePot(amount=101, eligible_player_ids=('bob', 'carol'), created_by='alice')

        assert self.resolver.resolve_pot(side, round_.participants, 100) == {'bob': 51, 'carol': 50}
        nobody = SidePot(amount=40, eligible_player_ids=('dave',), created_by='alice')
        assert self.resolver.resolve_pot(nobody, round_.participants, 100) is None

    def test_folded_player_cannot_win(self):
        round_ = _showdown_round([
            ('alice', 100, 100, 'folded'),
            ('bob', 100, 90, 'active'),
            ('carol', 100, 70, 'active'),
        ])

        assert self.resolver.resolve(round_).payouts == {'bob': 300}

    def test_pot_without_answering_contenders_is_left_undistributed(self):
        round_ = _showdown_round([
            ('alice', 50, 100, 'all_in'),
            ('bob', 100, None, 'active'),
            ('carol', 100, None, 'active'),
        ])

        distribution = self.resolver.resolve(round_)

        assert distribution.payouts == {'alice': 150}
        assert distribution.undistributed == 100

    def test_odd_chips_go_to_lowest_player_id(self):
        round_ = _showdown_round([
            ('carol', 33, 99, 'active'),
            ('alice', 34, 101, 'active'),
            ('bob', 34, 50, 'active'),
        ])

        assert self.resolver.resolve(round_).payouts == {'alice': 51, 'carol': 50}

    def test_winning_several_pots_counts_as_one_round_won(self):
        round_ = _showdown_round([
            ('alice', 100, 100, 'active'),
            ('bob', 50, 80, 'all_in'),
            ('carol', 100, 60, 'active'),
        ])

        distribution = self.resolver.resolve(round_)
        self.resolver.distribute_winnings(round_.participants, distribution.winners)

        alice = round_.get_participant('alice')
        assert len(distribution.winners) == 2
        assert alice.stack == 100 + 250
        assert alice.stats.rounds_won == 1
        assert alice.stats.total_winnings == 250

    def test_accuracy_stats(self):
        round_ = _showdown_round([
            ('alice', 10, 90, 'active'),
            ('bob', 10, 110, 'folded'),
            ('carol', 10, None, 'active'),
        ])

        stats = self.resolver.accuracy_stats(round_)

        assert stats['total_answers'] == 2
        assert stats['average_accuracy'] == 90.0
        assert stats['answers_range'] == {'min': 90, 'max': 110}

    def test_accuracy_stats_without_answers(self):
        round_ = _showdown_round([('alice', 10, None, 'active'), ('bob', 10, None, 'active')])
        assert self.resolver.accuracy_stats(round_) is None

    def test_update_player_accuracy_stats(self):
        round_ = _showdown_round([('alice', 10, 90, 'active'), ('bob', 10, None, 'active')])

        self.resolver.update_player_accuracy_stats(round_)

        assert round_.get_participant('alice').stats.average_accuracy == 90.0
        assert round_.get_participant('alice').stats.answered_rounds == 1
        assert round_.get_participant('bob').stats.answered_rounds == 0
