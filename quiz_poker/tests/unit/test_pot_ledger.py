"""
单元测试: PotLedger
"""

import pytest

from quiz_poker.core.players.participant import Participant, PlayerStatus
from quiz_poker.core.pot.pot_ledger import PotLedger, SidePot
from quiz_poker.core.rules.errors import PotLedgerError
from quiz_poker.tests.anti_cheat.core_usage_checker import CoreUsageChecker


def _participant(player_id: str, all_in: bool = False, folded: bool = False) -> Participant:
    participant = Participant(player_id=player_id, stack=0 if all_in else 500, status=PlayerStatus.ACTIVE)
    if all_in:
        participant.mark_all_in()
    if folded:
        participant.fold()
    return participant


def _ledger_with(contributions):
    ledger = PotLedger()
    for player_id, amount in contributions.items():
        ledger.post_contribution(player_id, amount)
    return ledger


class TestPotLedger:
    """测试 PotLedger 的功能"""

    def test_contributions_without_all_in_form_single_main_pot(self):
        ledger = _ledger_with({'alice': 100, 'bob': 100, 'carol': 100})
        CoreUsageChecker.verify_real_objects(ledger, "PotLedger")

        created = ledger.build_side_pots([_participant('alice'), _participant('bob'), _participant('carol')])

        assert created == []
        assert ledger.main_pot == 300
        assert ledger.side_pots == []
        assert ledger.main_pot_as_tier().eligible_player_ids == ('alice', 'bob', 'carol')

    def test_short_all_in_caps_the_main_pot(self):
        ledger = _ledger_with({'alice': 50, 'bob': 100, 'carol': 100})
        participants = [_participant('alice', all_in=True), _participant('bob'), _participant('carol')]

        created = ledger.build_side_pots(participants)

        assert ledger.main_pot == 150
        assert ledger.main_pot_as_tier().eligible_player_ids == ('alice', 'bob', 'carol')
        assert created == [SidePot(amount=100, eligible_player_ids=('bob', 'carol'), created_by='alice')]
        assert ledger.total == 250

    def test_folded_chips_stay_in_pot_without_eligibility(self):
        ledger = _ledger_with({'alice': 100, 'bob': 50, 'carol': 100})
        participants = [_participant('alice', folded=True), _participant('bob', all_in=True), _participant('carol')]

        ledger.build_side_pots(participants)

        tiers = ledger.tiers()
        assert [tier.amount for tier in tiers] == [150, 100]
        assert tiers[0].eligible_player_ids == ('bob', 'carol')
        assert tiers[1].eligible_player_ids == ('carol',)
        assert tiers[1].created_by == 'bob'

    def test_equal_all_ins_share_one_level(self):
        ledger = _ledger_with({'alice': 50, 'bob': 50, 'carol': 100})
        participants = [_participant('alice', all_in=True), _participant('bob', all_in=True), _participant('carol')]

        ledger.build_side_pots(participants)

        assert ledger.main_pot == 150
        assert len(ledger.side_pots) == 1
        assert ledger.side_pots[0].amount == 50
        assert ledger.side_pots[0].created_by == 'alice'

    def test_all_in_matching_top_contribution_creates_no_side_pot(self):
        ledger = _ledger_with({'alice': 100, 'bob': 100})

        ledger.build_side_pots([_participant('alice', all_in=True), _participant('bob')])

        assert ledger.main_pot == 200
        assert ledger.side_pots == []

    def test_nested_all_ins_build_ascending_tiers(self):
        ledger = _ledger_with({'alice': 20, 'bob': 60, 'carol': 100, 'dave': 100})
        participants = [
            _participant('alice', all_in=True),
            _participant('bob', all_in=True),
            _participant('carol'),
            _participant('dave'),
        ]

        ledger.build_side_pots(participants)

        tiers = ledger.tiers()
        assert [tier.amount for tier in tiers] == [80, 120, 80]
        assert [tier.eligible_player_ids for tier in tiers] == [
            ('alice', 'bob', 'carol', 'dave'),
            ('bob', 'carol', 'dave'),
            ('carol', 'dave'),
        ]
        assert sum(tier.amount for tier in tiers) == sum(ledger.contributions.values())

    def test_rebuild_reports_only_new_side_pots(self):
        ledger = _ledger_with({'alice': 50, 'bob': 100, 'carol': 100})
        participants = [_participant('alice', all_in=True), _participant('bob'), _participant('carol')]
        assert len(ledger.build_side_pots(participants)) == 1

        assert ledger.build_side_pots(participants) == []

    def test_growing_existing_side_pot_is_not_reported_as_new(self):
        ledger = _ledger_with({'alice': 50, 'bob': 50, 'carol': 50})
        participants = [_participant('alice', all_in=True), _participant('bob'), _participant('carol')]
        assert ledger.build_side_pots(participants) == []

        ledger.post_contribution('bob', 60)
        created = ledger.build_side_pots(participants)
        assert created == [SidePot(amount=60, eligible_player_ids=('bob',), created_by='alice')]

        ledger.post_contribution('carol', 60)
        assert ledger.build_side_pots(participants) == []
        assert ledger.side_pots == [SidePot(amount=120, eligible_player_ids=('bob', 'carol'), created_by='alice')]

    def test_second_all_in_level_reports_only_its_own_pot(self):
        ledger = _ledger_with({'alice': 50, 'bob': 100, 'carol': 100, 'dave': 100})
        participants = [_participant('alice', all_in=True), _participant('bob'),
                        _participant('carol'), _participant('dave')]
        assert len(ledger.build_side_pots(participants)) == 1

        ledger.post_contribution('carol', 50)
        ledger.post_contribution('dave', 50)
        participants[1] = _participant('bob', all_in=True)
        created = ledger.build_side_pots(participants)

        assert [pot.created_by for pot in created] == ['bob']
        assert created[0].amount == 100
        assert [pot.amount for pot in ledger.side_pots] == [150, 100]

    def test_everyone_folded_leaves_pot_without_eligible_players(self):
        ledger = _ledger_with({'alice': 30, 'bob': 40})

        ledger.build_side_pots([_participant('alice', folded=True), _participant('bob', folded=True)])

        assert ledger.main_pot == 70
        assert ledger.main_pot_as_tier().eligible_player_ids == ()

    def test_negative_contribution_is_rejected(self):
        with pytest.raises(PotLedgerError):
            PotLedger().post_contribution('alice', -1)

    def test_distribute_gives_remainder_by_player_id(self):
        assert PotLedger.distribute(100, ['carol', 'alice', 'bob']) == {'alice': 34, 'bob': 33, 'carol': 33}
        assert PotLedger.distribute(300, ['bob', 'alice']) == {'alice': 150, 'bob': 150}

    def test_distribute_without_winners_raises(self):
        with pytest.raises(PotLedgerError):
            PotLedger.distribute(10, [])

    def test_settle_reports_carry_over(self):
        ledger = _ledger_with({'alice': 60, 'bob': 40})

        carry_over = ledger.settle(60)

        assert carry_over == 40
        assert ledger.carry_over == 40
        assert ledger.total == 0

    def test_settle_more_than_pot_raises(self):
        ledger = _ledger_with({'alice': 10})
        with pytest.raises(PotLedgerError):
            ledger.settle(11)
