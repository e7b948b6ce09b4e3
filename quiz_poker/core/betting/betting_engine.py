"""
下注引擎

验证并执行玩家行动，维护下注阶段的行动顺序，
通过底池账本记录投入并在出现全押时重建边池。
引擎只报告阶段是否完成，是否推进阶段由状态机决定。
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from ..players.participant import Participant, PlayerStatus
from ..pot.pot_ledger import SidePot
from ..rules.errors import ErrorKind
from .betting_types import ActionRecord, ActionSource, ActionType, PlayerAction
from .betting_validator import BettingValidator

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['BettingEngine', 'BetResult']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BetResult:
    """行动执行结果"""
    accepted: bool
    reason: Optional[ErrorKind] = None
    message: str = ""
    chips_moved: int = 0
    new_side_pots: Tuple[SidePot, ...] = ()
    phase_complete: bool = False
    record: Optional[ActionRecord] = None

    def __bool__(self) -> bool:
        return self.accepted


class BettingEngine:
    """
    下注引擎

    本身不持有状态，所有状态都保存在Round中，
    因此同一个引擎可以服务多个相互独立的回合。
    """

    def __init__(self, validator: Optional[BettingValidator] = None):
        self._validator = validator or BettingValidator()

    # ---- 阶段准备 ----

    def collect_ante(self, round_: 'Round') -> Tuple[int, List[SidePot]]:
        """
        向每位未出局的参与者收取前注

        前注超过筹码时投入全部筹码并立即成为全押状态。

        Args:
            round_: 当前回合

        Returns:
            (收取的前注总额, 新产生的边池)
        """
        ante = round_.settings.ante_size
        collected = 0
        for participant in round_.participants:
            if participant.is_eliminated:
                continue
            participant.status = PlayerStatus.ACTIVE
            posted = participant.post(min(ante, participant.stack))
            round_.ledger.post_contribution(participant.player_id, posted)
            collected += posted
            if participant.is_all_in:
                participant.stats.all_in_count += 1
                logger.info(f"[前注] {participant.player_id} 前注 {posted} 后全押")

        created = round_.ledger.build_side_pots(round_.participants)
        logger.info(f"[前注] 共收取 {collected}, 底池 {round_.ledger.total}")
        return collected, created

    def begin_phase(self, round_: 'Round') -> None:
        """
        开始一个新的下注阶段: 清零本阶段下注并确定需要行动的玩家

        Args:
            round_: 当前回合，phase必须是下注阶段
        """
        round_.betting.reset(round_.phase)
        for participant in round_.participants:
            participant.current_bet = 0

        can_wager = [p.player_id for p in round_.participants if p.can_wager]
        # 只剩一个能行动的玩家时没有人可以和他对抗
        if len(can_wager) >= 2:
            round_.betting.pending = set(can_wager)
        round_.betting.next_to_act = self.next_player_to_act(round_)
        logger.debug(f"[下注] {round_.phase.name} 开始, 待行动玩家 {sorted(round_.betting.pending)}")

    # ---- 行动 ----

    def apply(self, round_: 'Round', player_id: str, action: PlayerAction,
              source: ActionSource = ActionSource.PLAYER) -> BetResult:
        """
        验证并执行玩家行动

        Args:
            round_: 当前回合
            player_id: 玩家ID
            action: 玩家行动
            source: 行动来源（玩家或超时）

        Returns:
            执行结果；被拒绝时回合状态保持不变
        """
        validation = self._validator.validate(round_, player_id, action)
        if not validation:
            logger.warning(f"[下注] 拒绝 {player_id} 的 {action.action_type.name}: {validation.error_message}")
            record = None
            if round_.settings.record_rejected_actions:
                record = ActionRecord(
                    player_id=player_id,
                    action_type=action.action_type,
                    phase=round_.phase.name,
                    timestamp=action.timestamp,
                    amount=action.amount,
                    answer=action.answer,
                    source=source,
                    accepted=False,
                    reason=validation.error_kind.value,
                )
                round_.record_action(record)
            return BetResult(
                accepted=False,
                reason=validation.error_kind,
                message=validation.error_message,
                record=record,
            )

        player = round_.get_participant(player_id)
        if action.action_type == ActionType.ANSWER:
            return self._execute_answer(round_, player, action, source)
        return self._execute_wager(round_, player, action, source)

    def _execute_answer(self, round_: 'Round', player: Participant, action: PlayerAction,
                        source: ActionSource) -> BetResult:
        player.submit_answer(action.answer, action.timestamp)
        round_.answered_this_phase.add(player.player_id)

        record = ActionRecord(
            player_id=player.player_id,
            action_type=ActionType.ANSWER,
            phase=round_.phase.name,
            timestamp=action.timestamp,
            answer=action.answer,
            source=source,
        )
        round_.record_action(record)
        logger.debug(f"[答题] {player.player_id} 在 {round_.phase.name} 提交答案")
        return BetResult(
            accepted=True,
            message="答案已记录",
            phase_complete=self.all_answered(round_),
            record=record,
        )

    def _execute_wager(self, round_: 'Round', player: Participant, action: PlayerAction,
                       source: ActionSource) -> BetResult:
        betting = round_.betting
        previous_max = self.max_bet(round_)
        was_all_in = player.is_all_in
        action_type = action.action_type

        if action_type == ActionType.CHECK:
            chips, recorded_amount = 0, None
        elif action_type == ActionType.CALL:
            chips = self._execute_call(player, previous_max)
            recorded_amount = chips
        elif action_type == ActionType.RAISE:
            chips = self._execute_raise(player, action.amount)
            recorded_amount = action.amount
        elif action_type == ActionType.ALL_IN:
            chips = self._execute_all_in(player)
            recorded_amount = chips
        else:
            chips, recorded_amount = self._execute_fold(player), None

        round_.ledger.post_contribution(player.player_id, chips)
        if player.is_all_in and not was_all_in:
            player.stats.all_in_count += 1

        betting.pending.discard(player.player_id)
        betting.last_actor = player.player_id
        if player.current_bet > previous_max:
            self._reopen_action(round_, player)

        new_side_pots: List[SidePot] = []
        if chips or action_type == ActionType.FOLD:
            new_side_pots = round_.ledger.build_side_pots(round_.participants)

        betting.next_to_act = self.next_player_to_act(round_)

        record = ActionRecord(
            player_id=player.player_id,
            action_type=action_type,
            phase=round_.phase.name,
            timestamp=action.timestamp,
            amount=recorded_amount,
            source=source,
        )
        round_.record_action(record)

        complete = self.is_betting_complete(round_)
        logger.info(f"[下注] {player.player_id} {action_type.name} 投入 {chips}, "
                    f"底池 {round_.ledger.total}, 阶段完成: {complete}")
        return BetResult(
            accepted=True,
            message=f"{action_type.name} 成功",
            chips_moved=chips,
            new_side_pots=tuple(new_side_pots),
            phase_complete=complete,
            record=record,
        )

    @staticmethod
    def _execute_call(player: Participant, current_max: int) -> int:
        return player.post(min(current_max - player.current_bet, player.stack))

    @staticmethod
    def _execute_raise(player: Participant, raise_to: int) -> int:
        return player.post(raise_to - player.current_bet)

    @staticmethod
    def _execute_all_in(player: Participant) -> int:
        posted = player.post(player.stack)
        player.mark_all_in()
        return posted

    @staticmethod
    def _execute_fold(player: Participant) -> int:
        player.fold()
        player.stats.fold_count += 1
        return 0

    @staticmethod
    def _reopen_action(round_: 'Round', raiser: Participant) -> None:
        """加注后其他还能行动的玩家需要重新表态"""
        betting = round_.betting
        betting.raises_count += 1
        betting.raisers.add(raiser.player_id)
        betting.last_raiser = raiser.player_id
        betting.pending = {
            p.player_id for p in round_.participants
            if p.can_wager and p.player_id != raiser.player_id
        }

    # ---- 查询 ----

    @staticmethod
    def max_bet(round_: 'Round') -> int:
        return BettingValidator.max_bet(round_)

    @staticmethod
    def min_raise(round_: 'Round') -> int:
        """最小的"加注到"金额"""
        return BettingValidator.min_raise_to(round_)

    @staticmethod
    def betting_complete(participants: Iterable[Participant], pending: Iterable[str] = ()) -> bool:
        """
        判断下注阶段是否完成

        未弃牌的玩家不超过一个，或者所有未弃牌且未全押的玩家都已匹配最高下注
        并且没有人还欠一次表态时，下注阶段完成。

        Args:
            participants: 参与者
            pending: 仍需表态的玩家ID

        Returns:
            是否完成
        """
        participants = list(participants)
        in_hand = [p for p in participants if p.in_hand]
        if len(in_hand) <= 1:
            return True

        current_max = max((p.current_bet for p in participants), default=0)
        can_act = [p for p in in_hand if not p.is_all_in]
        if any(p.current_bet != current_max for p in can_act):
            return False

        waiting = set(pending)
        return not any(p.player_id in waiting for p in can_act if p.stack > 0)

    def is_betting_complete(self, round_: 'Round') -> bool:
        return self.betting_complete(round_.participants, round_.betting.pending)

    def next_player_to_act(self, round_: 'Round') -> Optional[str]:
        """
        按参与者列表顺序，从上一个行动者之后循环寻找下一个需要表态的玩家

        Returns:
            玩家ID，下注完成时为None
        """
        if self.is_betting_complete(round_):
            return None

        order = round_.participant_ids
        betting = round_.betting
        start = 0
        if betting.last_actor in order:
            start = order.index(betting.last_actor) + 1

        for offset in range(len(order)):
            candidate = round_.participants[(start + offset) % len(order)]
            if candidate.player_id in betting.pending and candidate.can_wager:
                return candidate.player_id
        return None

    @staticmethod
    def all_answered(round_: 'Round') -> bool:
        """所有仍在争夺底池的玩家都已在本问题阶段提交答案"""
        return all(p.player_id in round_.answered_this_phase for p in round_.in_hand())

    def betting_stats(self, round_: 'Round') -> Dict[str, Any]:
        """
        获取下注统计信息

        Returns:
            包含底池、边池数量与各状态玩家数量的字典
        """
        participants = round_.participants
        return {
            'phase': round_.phase.name,
            'total_pot': round_.ledger.total,
            'main_pot': round_.ledger.main_pot,
            'side_pots': len(round_.ledger.side_pots),
            'current_bet': self.max_bet(round_),
            'min_raise': self.min_raise(round_),
            'raises_this_phase': round_.betting.raises_count,
            'active_players': sum(1 for p in participants if p.status == PlayerStatus.ACTIVE),
            'all_in_players': sum(1 for p in participants if p.is_all_in),
            'folded_players': sum(1 for p in participants if p.is_folded),
            'next_to_act': round_.betting.next_to_act,
        }
