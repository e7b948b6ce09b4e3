"""
底池账本

记录每位玩家在本回合的投入，按全押金额划分主池与分层边池，
并负责把一个底池金额确定性地分配给获胜者。
账本不了解回合阶段，只处理账务。
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..players.participant import Participant
from ..rules.errors import PotLedgerError

__all__ = ['SidePot', 'PotLedger']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SidePot:
    """
    底池层级
    第0层是主池，其后按层级升序排列的是边池
    """
    amount: int
    eligible_player_ids: Tuple[str, ...]
    created_by: Optional[str] = None   # 封顶下一层的全押玩家，主池为None

    def __post_init__(self):
        """验证边池数据的有效性"""
        if self.amount < 0:
            raise ValueError("边池金额不能为负数")

    def to_dict(self) -> Dict[str, object]:
        return {
            'amount': self.amount,
            'eligible_player_ids': list(self.eligible_player_ids),
            'created_by': self.created_by,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> 'SidePot':
        return cls(
            amount=int(data['amount']),
            eligible_player_ids=tuple(data.get('eligible_player_ids', ())),
            created_by=data.get('created_by'),
        )


class PotLedger:
    """
    底池账本

    不变量: main_pot + Σ side_pots.amount == Σ contributions
    筹码只能通过distribute/settle离开账本。
    """

    def __init__(self):
        self._contributions: Dict[str, int] = {}
        self._main_pot = 0
        self._side_pots: List[SidePot] = []
        self._main_eligible: Tuple[str, ...] = ()
        self._carry_over = 0

    @property
    def main_pot(self) -> int:
        return self._main_pot

    @property
    def side_pots(self) -> List[SidePot]:
        return list(self._side_pots)

    @property
    def carry_over(self) -> int:
        """摊牌后没有获胜者认领、留给调用方处理的金额"""
        return self._carry_over

    @property
    def total(self) -> int:
        return self._main_pot + sum(pot.amount for pot in self._side_pots)

    @property
    def contributions(self) -> Dict[str, int]:
        return dict(self._contributions)

    def contribution_of(self, player_id: str) -> int:
        return self._contributions.get(player_id, 0)

    def main_pot_as_tier(self) -> SidePot:
        """以层级形式返回主池"""
        return SidePot(amount=self._main_pot, eligible_player_ids=self._main_eligible)

    def tiers(self) -> List[SidePot]:
        """主池和全部边池，按层级升序"""
        return [self.main_pot_as_tier()] + self.side_pots

    def post_contribution(self, player_id: str, amount: int) -> None:
        """
        记录一笔投入

        Args:
            player_id: 玩家ID
            amount: 投入金额

        Raises:
            PotLedgerError: 金额为负数
        """
        if amount < 0:
            raise PotLedgerError(f"投入金额不能为负数: {player_id} {amount}")
        if amount == 0:
            return

        self._contributions[player_id] = self._contributions.get(player_id, 0) + amount
        self._main_pot += amount
        if player_id not in self._main_eligible:
            self._main_eligible = tuple(sorted(self._main_eligible + (player_id,)))

        logger.debug(f"[底池] {player_id} 投入 {amount}, 底池总额 {self.total}")

    def build_side_pots(self, participants: Iterable[Participant]) -> List[SidePot]:
        """
        按全押金额重建主池和分层边池

        层级边界是所有未弃牌全押玩家的累计投入（低于在手玩家最高投入者），
        再加上在手玩家的最高投入。每一层的金额是所有投入者在该层区间内的贡献，
        弃牌玩家的筹码留在池中但不具备资格。

        Args:
            participants: 回合的参与者

        Returns:
            本次重建后新出现的边池。边池以封顶它下边界的全押玩家(created_by)标识，
            已有边池的金额或资格变化不算新边池
        """
        by_id = {p.player_id: p for p in participants}
        contributions = {pid: amount for pid, amount in self._contributions.items() if amount > 0}
        known_creators = {pot.created_by for pot in self._side_pots}

        if not contributions:
            self._main_pot = 0
            self._main_eligible = ()
            self._side_pots = []
            return []

        def is_live(pid: str) -> bool:
            participant = by_id.get(pid)
            return participant is None or participant.in_hand

        def is_all_in(pid: str) -> bool:
            participant = by_id.get(pid)
            return participant is not None and participant.is_all_in

        live = {pid: amount for pid, amount in contributions.items() if is_live(pid)}
        if not live:
            # 全部投入者都已弃牌，只剩一个没有资格者的主池
            self._main_pot = sum(contributions.values())
            self._main_eligible = ()
            self._side_pots = []
            return []

        top = max(live.values())
        levels = sorted({amount for pid, amount in live.items() if is_all_in(pid) and amount < top})
        levels.append(top)

        tiers: List[SidePot] = []
        lower = 0
        creator: Optional[str] = None
        for position, level in enumerate(levels):
            is_last = position == len(levels) - 1
            amount = 0
            for contributed in contributions.values():
                upper = contributed if is_last else min(contributed, level)
                amount += max(0, upper - min(contributed, lower))
            eligible = tuple(sorted(pid for pid, contributed in live.items() if contributed > lower))
            tiers.append(SidePot(amount=amount, eligible_player_ids=eligible, created_by=creator))

            capped = sorted(pid for pid, contributed in live.items()
                            if contributed == level and is_all_in(pid))
            creator = capped[0] if capped else None
            lower = level

        self._main_pot = tiers[0].amount
        self._main_eligible = tiers[0].eligible_player_ids
        self._side_pots = tiers[1:]

        created = [pot for pot in self._side_pots if pot.created_by not in known_creators]
        for pot in created:
            logger.info(f"[底池] 创建边池: 金额 {pot.amount}, 资格玩家 {list(pot.eligible_player_ids)}")
        return created

    @staticmethod
    def distribute(pot_amount: int, winners: Iterable[str]) -> Dict[str, int]:
        """
        在获胜者之间平分一个底池

        整除后的余数按玩家ID升序逐个筹码分配，保证整个底池被分完。

        Args:
            pot_amount: 底池金额
            winners: 获胜玩家ID

        Returns:
            {player_id: 分得金额}

        Raises:
            PotLedgerError: 没有获胜者或金额为负数
        """
        ordered = sorted(set(winners))
        if not ordered:
            raise PotLedgerError("没有获胜者，无法分配底池")
        if pot_amount < 0:
            raise PotLedgerError(f"底池金额不能为负数: {pot_amount}")

        share, remainder = divmod(pot_amount, len(ordered))
        payouts = {pid: share for pid in ordered}
        for pid in ordered[:remainder]:
            payouts[pid] += 1
        return payouts

    def settle(self, distributed: int) -> int:
        """
        摊牌结束后清空底池

        Args:
            distributed: 已经分配给获胜者的总额

        Returns:
            未被分配、留给调用方处理的金额
        """
        total = self.total
        if distributed < 0 or distributed > total:
            raise PotLedgerError(f"分配总额 {distributed} 超出底池 {total}")

        self._carry_over = total - distributed
        self._main_pot = 0
        self._side_pots = []
        self._main_eligible = ()
        if self._carry_over:
            logger.warning(f"[底池] 有 {self._carry_over} 筹码无人认领，留待调用方处理")
        return self._carry_over

    def restore(self, contributions: Dict[str, int], main_pot: int, side_pots: List[SidePot],
                main_eligible: Iterable[str] = (), carry_over: int = 0) -> None:
        """从快照恢复账本状态"""
        if main_pot < 0 or carry_over < 0:
            raise PotLedgerError("恢复的底池金额不能为负数")
        self._contributions = {pid: int(amount) for pid, amount in contributions.items()}
        self._main_pot = int(main_pot)
        self._side_pots = list(side_pots)
        self._main_eligible = tuple(sorted(main_eligible))
        self._carry_over = int(carry_over)
