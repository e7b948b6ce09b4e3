"""
回合引擎配置相关类的实现
包含回合规则设置、计时器设置和日志设置
"""

from dataclasses import dataclass, field
from typing import Optional

from .rules.errors import ConfigError

__all__ = ['RoundSettings', 'TimerConfig', 'LoggingConfig', 'EngineConfig']


@dataclass(frozen=True)
class RoundSettings:
    """
    单个回合的规则设置
    """
    ante_size: int = 50                          # 前注金额，同时也是最小加注增量
    allow_re_raises: bool = True                 # 同一下注阶段内是否允许同一玩家再次加注
    max_raises_per_phase: Optional[int] = None   # 每个下注阶段的最大加注次数，None表示不限制
    record_rejected_actions: bool = False        # 是否把被拒绝的行动也写入行动历史（审计用途）

    def __post_init__(self):
        """验证设置的有效性"""
        if self.ante_size < 0:
            raise ConfigError(f"前注金额不能为负数: {self.ante_size}")
        if self.max_raises_per_phase is not None and self.max_raises_per_phase < 0:
            raise ConfigError(f"每阶段最大加注次数不能为负数: {self.max_raises_per_phase}")


@dataclass(frozen=True)
class TimerConfig:
    """
    计时器设置（单位：秒）
    """
    answer_timeout: float = 30.0          # 问题阶段的答题时间
    betting_timeout: float = 30.0         # 下注阶段每位玩家的行动时间
    reveal_timeout: float = 5.0           # 揭示正确答案的展示时间
    warning_before_timeout: float = 10.0  # 到期前多少秒发出预警

    def __post_init__(self):
        for name in ('answer_timeout', 'betting_timeout', 'reveal_timeout'):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigError(f"{name}必须大于0: {value}")
        if self.warning_before_timeout < 0:
            raise ConfigError(f"warning_before_timeout不能为负数: {self.warning_before_timeout}")


@dataclass(frozen=True)
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    log_file_path: Optional[str] = None
    enable_console_logging: bool = True


@dataclass(frozen=True)
class EngineConfig:
    """回合引擎的整体配置"""
    round_settings: RoundSettings = field(default_factory=RoundSettings)
    timers: TimerConfig = field(default_factory=TimerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    check_chip_conservation: bool = True
