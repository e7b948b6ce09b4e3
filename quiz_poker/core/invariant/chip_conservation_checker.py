"""
筹码守恒检查器

检查问答扑克回合中的筹码守恒不变量。
"""

import logging
from typing import TYPE_CHECKING, List

from ..rules.errors import ChipConservationError

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['ChipConservationChecker']

logger = logging.getLogger(__name__)


class ChipConservationChecker:
    """筹码守恒检查器

    验证以下规则：
    1. 筹码不能为负数
    2. 结算前: 主池 + 边池 = 所有玩家本回合投入之和，且与账本记录逐人一致
    3. 玩家筹码 + 底池 + 未分配金额 = 回合开始时的总筹码
    """

    @staticmethod
    def collect_violations(round_: 'Round') -> List[str]:
        """
        检查回合并返回所有违规描述

        Args:
            round_: 要检查的回合

        Returns:
            违规描述列表，为空表示通过
        """
        violations = []
        ledger = round_.ledger

        for participant in round_.participants:
            if participant.stack < 0:
                violations.append(f"玩家 {participant.player_id} 筹码为负数: {participant.stack}")

        if round_.result is None:
            contributed = sum(p.total_bet_in_round for p in round_.participants)
            if ledger.total != contributed:
                violations.append(f"底池 {ledger.total} 与玩家投入总和 {contributed} 不一致")
            for participant in round_.participants:
                recorded = ledger.contribution_of(participant.player_id)
                if recorded != participant.total_bet_in_round:
                    violations.append(
                        f"玩家 {participant.player_id} 投入 {participant.total_bet_in_round}, 账本记录 {recorded}")

        if round_.initial_chips is not None:
            current = sum(p.stack for p in round_.participants) + ledger.total + ledger.carry_over
            if current != round_.initial_chips:
                violations.append(f"总筹码不守恒: 初始{round_.initial_chips}, 当前{current}")

        return violations

    @classmethod
    def check(cls, round_: 'Round') -> bool:
        return not cls.collect_violations(round_)

    @classmethod
    def verify(cls, round_: 'Round') -> None:
        """
        检查回合，发现违规时抛出异常

        Raises:
            ChipConservationError: 筹码守恒被破坏
        """
        violations = cls.collect_violations(round_)
        if violations:
            for violation in violations:
                logger.error(f"[筹码守恒] 回合 {round_.round_id}: {violation}")
            raise ChipConservationError("; ".join(violations))
