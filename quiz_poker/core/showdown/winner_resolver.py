"""
胜者判定器

按答案与正确答案的偏差确定每个底池的获胜者。
偏差最小者获胜，偏差相同的玩家共同获胜，不按提交时间或其他标准打破平局。
"""

import logging
import math
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from ..players.participant import Participant
from ..pot.pot_ledger import PotLedger, SidePot
from .types import Number, PlayerAnswerResult, RoundWinner, WinnerDistribution

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['WinnerResolver', 'round_half_up']

logger = logging.getLogger(__name__)

# 准确度归一化的下限，避免小数值问题的准确度过于敏感
MIN_NORMALIZATION = 100


def round_half_up(value: float, digits: int = 2) -> float:
    """
    四舍五入到指定小数位

    恰好在中点的值向正无穷方向进位，例如87.125得到87.13。
    与内置round()的银行家舍入不同，后者得到87.12。
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


class WinnerResolver:
    """
    胜者判定器

    主池和每个边池各自在自己的合格玩家中独立判定。
    没有合格答题者的底池不分配，计入undistributed。
    """

    @staticmethod
    def calculate_accuracy(correct_answer: Number, answer: Number) -> float:
        """
        计算答案准确度

        Args:
            correct_answer: 正确答案
            answer: 玩家答案

        Returns:
            0到100之间的准确度，四舍五入保留两位小数(见round_half_up)
        """
        deviation = abs(correct_answer - answer)
        normalization = max(correct_answer, MIN_NORMALIZATION)
        accuracy = max(0.0, 100 - (deviation / normalization) * 100)
        return round_half_up(accuracy)

    @staticmethod
    def _contenders(participants: Iterable[Participant]) -> List[Participant]:
        """可以参与摊牌的玩家: 未弃牌、未出局且提交了答案"""
        return [p for p in participants if p.in_hand and p.has_answered]

    def evaluate_answers(self, round_: 'Round') -> List[PlayerAnswerResult]:
        """评估所有提交了答案的玩家（包括弃牌玩家）"""
        correct = round_.question.correct_answer
        results = []
        for participant in round_.participants:
            if not participant.has_answered:
                continue
            results.append(PlayerAnswerResult(
                player_id=participant.player_id,
                answer=participant.answer,
                deviation=abs(correct - participant.answer),
                accuracy=self.calculate_accuracy(correct, participant.answer),
                in_showdown=participant.in_hand,
                answered_at=participant.answered_at,
            ))
        return results

    def best_answers(self, participants: Iterable[Participant], correct_answer: Number) -> List[Participant]:
        """
        找出偏差最小的玩家

        Returns:
            偏差最小的玩家列表，没有合格玩家时为空列表
        """
        contenders = self._contenders(participants)
        if not contenders:
            return []
        best = min(abs(correct_answer - p.answer) for p in contenders)
        return [p for p in contenders if abs(correct_answer - p.answer) == best]

    def determine_winners(self, round_: 'Round') -> List[RoundWinner]:
        """
        确定主池和各边池的获胜者

        Args:
            round_: 已到达摊牌阶段的回合

        Returns:
            每个底池每个获胜者一条记录
        """
        return self.resolve(round_).winners

    def resolve(self, round_: 'Round') -> WinnerDistribution:
        """
        计算完整的分配方案，不修改玩家筹码

        Args:
            round_: 已到达摊牌阶段的回合

        Returns:
            分配方案
        """
        correct = round_.question.correct_answer
        by_id = {p.player_id: p for p in round_.participants}
        round_.ledger.build_side_pots(round_.participants)

        winners: List[RoundWinner] = []
        payouts: Dict[str, int] = {}
        undistributed = 0

        for index, tier in enumerate(round_.ledger.tiers()):
            if tier.amount == 0:
                continue
            split = self.resolve_pot(tier, round_.participants, correct)
            if split is None:
                undistributed += tier.amount
                logger.warning(f"[摊牌] 底池 {index} ({tier.amount}) 没有合格的答题者")
                continue

            for player_id, amount in split.items():
                participant = by_id[player_id]
                winners.append(RoundWinner(
                    player_id=participant.player_id,
                    win_amount=amount,
                    pot_type='main' if index == 0 else 'side',
                    pot_index=index,
                    accuracy=self.calculate_accuracy(correct, participant.answer),
                    deviation=abs(correct - participant.answer),
                ))
                payouts[player_id] = payouts.get(player_id, 0) + amount

        total = sum(payouts.values())
        logger.info(f"[摊牌] 分配 {total}, 未分配 {undistributed}, 获胜者 {sorted(payouts)}")
        return WinnerDistribution(
            winners=winners,
            payouts=payouts,
            total_distributed=total,
            undistributed=undistributed,
        )

    def resolve_pot(self, pot: SidePot, participants: Iterable[Participant],
                    correct_answer: Number) -> Optional[Dict[str, int]]:
        """
        单独判定一个底池

        Returns:
            {player_id: 分得金额}，没有合格答题者时为None
        """
        by_id = {p.player_id: p for p in participants}
        eligible = [by_id[pid] for pid in pot.eligible_player_ids if pid in by_id]
        best = self.best_answers(eligible, correct_answer)
        if not best:
            return None
        return PotLedger.distribute(pot.amount, [p.player_id for p in best])

    @staticmethod
    def distribute_winnings(participants: Iterable[Participant], winners: Iterable[RoundWinner]) -> None:
        """
        把奖金加到获胜者筹码和统计数据中，这是筹码增加的唯一入口

        Args:
            participants: 参与者
            winners: 获胜记录
        """
        by_id = {p.player_id: p for p in participants}
        rewarded = set()
        for winner in winners:
            participant = by_id.get(winner.player_id)
            if participant is None:
                logger.error(f"[摊牌] 获胜者 {winner.player_id} 不在参与者中")
                continue
            participant.win(winner.win_amount)
            rewarded.add(participant.player_id)

        for player_id in rewarded:
            by_id[player_id].stats.rounds_won += 1

    def accuracy_stats(self, round_: 'Round') -> Optional[Dict[str, Any]]:
        """
        本回合的准确度统计

        Returns:
            统计字典，没有人答题时为None
        """
        answered = [p for p in round_.participants if p.has_answered]
        if not answered:
            return None

        correct = round_.question.correct_answer
        accuracies = [self.calculate_accuracy(correct, p.answer) for p in answered]
        answers = [p.answer for p in answered]
        return {
            'correct_answer': correct,
            'total_answers': len(answered),
            'average_accuracy': round_half_up(sum(accuracies) / len(accuracies)),
            'max_accuracy': max(accuracies),
            'min_accuracy': min(accuracies),
            'answers_range': {'min': min(answers), 'max': max(answers)},
        }

    def has_tie(self, round_: 'Round') -> bool:
        """最佳答案是否有多名玩家并列"""
        return len(self.best_answers(round_.participants, round_.question.correct_answer)) > 1

    def update_player_accuracy_stats(self, round_: 'Round') -> None:
        """把本回合的答案准确度计入每位答题玩家的平均准确度"""
        correct = round_.question.correct_answer
        for participant in round_.participants:
            if participant.has_answered:
                participant.stats.record_accuracy(self.calculate_accuracy(correct, participant.answer))
