"""
行动验证器

按固定顺序验证玩家行动的合法性，验证过程不修改任何状态。
"""

import math
from typing import TYPE_CHECKING, Any, Optional

from ..players.participant import Participant
from ..rules.errors import ErrorKind
from .betting_types import ActionType, PlayerAction

if TYPE_CHECKING:
    from ..round.round import Round

__all__ = ['BettingValidator', 'ValidationResult']


class ValidationResult:
    """行动验证结果"""

    def __init__(self, is_valid: bool, error_kind: Optional[ErrorKind] = None, error_message: str = ""):
        self.is_valid = is_valid
        self.error_kind = error_kind
        self.error_message = error_message

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls(True)

    @classmethod
    def reject(cls, kind: ErrorKind, message: str) -> 'ValidationResult':
        return cls(False, kind, message)

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        kind = self.error_kind.value if self.error_kind else None
        return f"ValidationResult(valid={self.is_valid}, kind={kind}, error='{self.error_message}')"


class BettingValidator:
    """
    行动验证器

    通用检查依次为: 回合是否进行中、玩家是否存在、是否出局、
    是否已弃牌（仅下注类行动）、阶段是否匹配、是否轮到该玩家（仅下注类行动），
    之后才进入各行动类型自己的规则。
    """

    @staticmethod
    def max_bet(round_: 'Round') -> int:
        """当前下注阶段的最高下注"""
        return max((p.current_bet for p in round_.participants), default=0)

    @staticmethod
    def min_raise_to(round_: 'Round') -> int:
        """最小的"加注到"金额"""
        return BettingValidator.max_bet(round_) + round_.settings.ante_size

    @classmethod
    def validate(cls, round_: 'Round', player_id: str, action: PlayerAction) -> ValidationResult:
        """
        验证玩家行动

        Args:
            round_: 当前回合
            player_id: 玩家ID
            action: 玩家行动

        Returns:
            验证结果
        """
        if not round_.is_active():
            return ValidationResult.reject(ErrorKind.GAME_NOT_ACTIVE, f"回合 {round_.round_id} 当前不接受行动")

        player = round_.get_participant(player_id)
        if player is None:
            return ValidationResult.reject(ErrorKind.PLAYER_NOT_FOUND, f"玩家 {player_id} 不在本回合中")
        if player.is_eliminated:
            return ValidationResult.reject(ErrorKind.PLAYER_ELIMINATED, f"玩家 {player_id} 已出局")

        is_wager = action.action_type.is_wager
        if is_wager and player.is_folded:
            return ValidationResult.reject(ErrorKind.PLAYER_FOLDED, f"玩家 {player_id} 已弃牌")

        if is_wager and not round_.phase.is_betting:
            return ValidationResult.reject(
                ErrorKind.WRONG_PHASE_FOR_ACTION, f"{round_.phase.name} 阶段不能下注")
        if not is_wager and not round_.phase.is_question:
            return ValidationResult.reject(
                ErrorKind.WRONG_PHASE_FOR_ACTION, f"{round_.phase.name} 阶段不能提交答案")

        if is_wager and round_.betting.next_to_act != player_id:
            return ValidationResult.reject(
                ErrorKind.NOT_PLAYERS_TURN,
                f"现在轮到 {round_.betting.next_to_act} 行动，而不是 {player_id}")

        return cls.validate_specific_action(round_, player, action)

    @classmethod
    def validate_specific_action(cls, round_: 'Round', player: Participant, action: PlayerAction) -> ValidationResult:
        current_max = cls.max_bet(round_)
        action_type = action.action_type

        if action_type == ActionType.CHECK:
            return cls.validate_check(player, current_max)
        if action_type == ActionType.CALL:
            return cls.validate_call(player, current_max)
        if action_type == ActionType.RAISE:
            return cls.validate_raise(round_, player, action.amount, current_max)
        if action_type == ActionType.ALL_IN:
            return cls.validate_all_in(player)
        if action_type == ActionType.FOLD:
            return ValidationResult.ok()
        return cls.validate_answer(action.answer)

    @staticmethod
    def validate_check(player: Participant, current_max: int) -> ValidationResult:
        if player.current_bet != current_max:
            return ValidationResult.reject(
                ErrorKind.CANNOT_CHECK,
                f"当前最高下注 {current_max}，玩家只下注了 {player.current_bet}，不能过牌")
        return ValidationResult.ok()

    @staticmethod
    def validate_call(player: Participant, current_max: int) -> ValidationResult:
        if player.current_bet >= current_max:
            return ValidationResult.reject(ErrorKind.NOTHING_TO_CALL, "没有需要跟注的下注")
        if player.stack <= 0:
            return ValidationResult.reject(ErrorKind.INSUFFICIENT_CHIPS, "没有筹码可以跟注")
        return ValidationResult.ok()

    @staticmethod
    def validate_raise(round_: 'Round', player: Participant, amount: Optional[int], current_max: int) -> ValidationResult:
        """
        验证加注

        Args:
            round_: 当前回合
            player: 加注的玩家
            amount: 加注到的总额
            current_max: 当前最高下注
        """
        if amount is None:
            return ValidationResult.reject(ErrorKind.INVALID_RAISE_AMOUNT, "没有指定加注金额")
        if isinstance(amount, bool) or not isinstance(amount, int):
            return ValidationResult.reject(ErrorKind.INVALID_RAISE_AMOUNT, f"加注金额必须是整数: {amount!r}")
        if amount <= current_max:
            return ValidationResult.reject(
                ErrorKind.INVALID_RAISE_AMOUNT, f"加注金额 {amount} 必须大于当前最高下注 {current_max}")
        if amount - player.current_bet > player.stack:
            return ValidationResult.reject(
                ErrorKind.INSUFFICIENT_CHIPS,
                f"加注需要 {amount - player.current_bet} 筹码，玩家只有 {player.stack}")

        minimum = current_max + round_.settings.ante_size
        if amount < minimum:
            return ValidationResult.reject(ErrorKind.INVALID_RAISE_AMOUNT, f"最小加注到 {minimum}")

        settings = round_.settings
        betting = round_.betting
        if not settings.allow_re_raises and player.player_id in betting.raisers:
            return ValidationResult.reject(ErrorKind.INVALID_RAISE_AMOUNT, "本阶段不允许再次加注")
        if settings.max_raises_per_phase is not None and betting.raises_count >= settings.max_raises_per_phase:
            return ValidationResult.reject(
                ErrorKind.INVALID_RAISE_AMOUNT, f"本阶段已达到最大加注次数 {settings.max_raises_per_phase}")
        return ValidationResult.ok()

    @staticmethod
    def validate_all_in(player: Participant) -> ValidationResult:
        if player.stack <= 0:
            return ValidationResult.reject(ErrorKind.INSUFFICIENT_CHIPS, "没有筹码可以全押")
        return ValidationResult.ok()

    @staticmethod
    def validate_answer(answer: Any) -> ValidationResult:
        """答案必须是有限的实数，布尔值不算数字"""
        if answer is None:
            return ValidationResult.reject(ErrorKind.MISSING_ANSWER, "没有提交答案")
        if isinstance(answer, bool) or not isinstance(answer, (int, float)):
            return ValidationResult.reject(
                ErrorKind.ANSWER_WRONG_TYPE, f"答案必须是数字，收到 {type(answer).__name__}")
        if not math.isfinite(answer):
            return ValidationResult.reject(ErrorKind.ANSWER_WRONG_TYPE, f"答案必须是有限数字: {answer}")
        return ValidationResult.ok()
