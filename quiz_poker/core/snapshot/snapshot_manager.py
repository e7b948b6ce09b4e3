"""
快照管理器

从回合创建状态快照，并从完整（服务端）快照恢复回合。
"""

import logging
import time
from typing import Any, Dict, Optional

from ..betting.betting_types import ActionRecord
from ..config import RoundSettings
from ..players.participant import Participant, PlayerStats, PlayerStatus
from ..pot.pot_ledger import SidePot
from ..round.round import BettingRoundState, Round
from ..round.types import PhaseTransition, Question, RoundPhase, TransitionReason
from ..rules.errors import ConfigError, SnapshotError
from .types import PlayerSnapshot, PotSnapshot, RoundSnapshot, SnapshotMetadata

__all__ = ['SnapshotManager']

logger = logging.getLogger(__name__)


class SnapshotManager:
    """
    快照管理器

    面向客户端的快照在REVEAL之前隐藏正确答案，
    并隐藏除viewer_id之外所有玩家的答案值。
    """

    def create_snapshot(self, round_: Round, client_facing: bool = True,
                        viewer_id: Optional[str] = None,
                        description: Optional[str] = None) -> RoundSnapshot:
        """
        创建回合状态快照

        Args:
            round_: 回合
            client_facing: 是否面向客户端
            viewer_id: 面向客户端时可以看到自己答案的玩家
            description: 快照描述

        Returns:
            RoundSnapshot: 快照
        """
        timestamp = time.time()
        hide_answers = client_facing and not round_.phase.answer_revealed

        def visible(player_id: str) -> bool:
            return not hide_answers or player_id == viewer_id

        metadata = SnapshotMetadata(
            snapshot_id=f"snapshot_{round_.round_id}_{int(timestamp * 1000000)}",
            created_at=timestamp,
            round_number=round_.round_number,
            client_facing=client_facing,
            viewer_id=viewer_id,
            description=description or f"回合快照 - {round_.phase.name}",
        )

        players = tuple(
            PlayerSnapshot(
                player_id=p.player_id,
                name=p.name,
                stack=p.stack,
                current_bet=p.current_bet,
                total_bet_in_round=p.total_bet_in_round,
                status=p.status.value,
                is_all_in=p.is_all_in,
                has_answered=p.has_answered,
                answer=p.answer if visible(p.player_id) else None,
                answered_at=p.answered_at,
                stats=p.stats.to_dict(),
            )
            for p in round_.participants
        )

        ledger = round_.ledger
        pot = PotSnapshot(
            main_pot=ledger.main_pot,
            side_pots=tuple(pot.to_dict() for pot in ledger.side_pots),
            total_pot=ledger.total,
            main_eligible=ledger.main_pot_as_tier().eligible_player_ids,
            contributions=ledger.contributions,
            carry_over=ledger.carry_over,
        )

        history = []
        for record in round_.action_history:
            data = record.to_dict()
            if not visible(record.player_id):
                data['answer'] = None
            history.append(data)

        return RoundSnapshot(
            metadata=metadata,
            round_id=round_.round_id,
            phase=round_.phase,
            players=players,
            pot=pot,
            action_history=tuple(history),
            question=round_.question.to_dict(include_answer=not hide_answers),
            settings=self._settings_to_dict(round_.settings),
            betting=round_.betting.to_dict(),
            answered_this_phase=tuple(sorted(round_.answered_this_phase)),
            transitions=tuple(
                {
                    'from_phase': t.from_phase.name,
                    'to_phase': t.to_phase.name,
                    'reason': t.reason.value,
                    'timestamp': t.timestamp,
                }
                for t in round_.transitions
            ),
            initial_chips=round_.initial_chips,
            paused=round_.paused,
        )

    @staticmethod
    def _settings_to_dict(settings: RoundSettings) -> Dict[str, Any]:
        return {
            'ante_size': settings.ante_size,
            'allow_re_raises': settings.allow_re_raises,
            'max_raises_per_phase': settings.max_raises_per_phase,
            'record_rejected_actions': settings.record_rejected_actions,
        }

    def restore_round(self, snapshot: RoundSnapshot) -> Round:
        """
        从完整快照恢复回合

        Args:
            snapshot: 非面向客户端的快照

        Returns:
            Round: 恢复的回合，计时器需要由回合引擎重新布置

        Raises:
            SnapshotError: 快照是面向客户端的或数据不完整
        """
        if snapshot.metadata.client_facing:
            raise SnapshotError("面向客户端的快照缺少答案信息，不能用于恢复回合")

        try:
            participants = [
                Participant(
                    player_id=p.player_id,
                    stack=p.stack,
                    name=p.name,
                    status=PlayerStatus(p.status),
                    current_bet=p.current_bet,
                    total_bet_in_round=p.total_bet_in_round,
                    answer=p.answer,
                    answered_at=p.answered_at,
                    is_all_in=p.is_all_in,
                    stats=PlayerStats.from_dict(p.stats) if p.stats else PlayerStats(),
                )
                for p in snapshot.players
            ]

            round_ = Round(
                round_id=snapshot.round_id,
                question=Question.from_dict(snapshot.question),
                participants=participants,
                settings=RoundSettings(**snapshot.settings),
                round_number=snapshot.metadata.round_number,
                phase=snapshot.phase,
                betting=BettingRoundState.from_dict(snapshot.betting) if snapshot.betting else BettingRoundState(),
                answered_this_phase=set(snapshot.answered_this_phase),
                initial_chips=snapshot.initial_chips,
                paused=snapshot.paused,
            )

            round_.ledger.restore(
                contributions=snapshot.pot.contributions,
                main_pot=snapshot.pot.main_pot,
                side_pots=[SidePot.from_dict(p) for p in snapshot.pot.side_pots],
                main_eligible=snapshot.pot.main_eligible,
                carry_over=snapshot.pot.carry_over,
            )
            round_.action_history = [ActionRecord.from_dict(r) for r in snapshot.action_history]
            round_.transitions = [
                PhaseTransition(
                    from_phase=RoundPhase[t['from_phase']],
                    to_phase=RoundPhase[t['to_phase']],
                    reason=TransitionReason(t['reason']),
                    timestamp=t['timestamp'],
                )
                for t in snapshot.transitions
            ]
        except (KeyError, TypeError, ValueError, ConfigError) as e:
            raise SnapshotError(f"快照恢复失败: {str(e)}") from e

        logger.info(f"[快照] 恢复回合 {round_.round_id}, 阶段 {round_.phase.name}")
        return round_
