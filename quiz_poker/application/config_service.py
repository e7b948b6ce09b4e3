"""
ConfigService - 配置管理服务

集中管理回合引擎的配置档案（规则、计时器、日志），
并负责按日志配置初始化标准库logging。
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List

from ..core.config import EngineConfig, LoggingConfig, RoundSettings, TimerConfig
from ..core.rules.errors import ConfigError
from .types import QueryResult

__all__ = ['ConfigService']


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._profiles: Dict[str, EngineConfig] = {}
        self._load_default_profiles()

    def _load_default_profiles(self) -> None:
        """加载默认配置档案"""
        self._profiles['default'] = EngineConfig()
        self._profiles['blitz'] = EngineConfig(
            round_settings=RoundSettings(ante_size=20),
            timers=TimerConfig(answer_timeout=15.0, betting_timeout=10.0,
                               reveal_timeout=3.0, warning_before_timeout=5.0),
        )
        self._profiles['tournament'] = EngineConfig(
            round_settings=RoundSettings(ante_size=100, allow_re_raises=False, max_raises_per_phase=3),
            timers=TimerConfig(answer_timeout=45.0, betting_timeout=30.0),
            logging=LoggingConfig(log_level='WARNING'),
        )

    def get_engine_config(self, profile: str = "default") -> QueryResult[EngineConfig]:
        """
        获取回合引擎配置

        Args:
            profile: 配置档案名 (default, blitz, tournament)

        Returns:
            查询结果，包含引擎配置；未知档案时回退到默认配置
        """
        if profile not in self._profiles:
            self.logger.warning(f"未找到配置档案 '{profile}'，使用默认配置")
            profile = "default"
        return QueryResult.success_result(self._profiles[profile])

    def list_available_profiles(self) -> QueryResult[List[str]]:
        return QueryResult.success_result(sorted(self._profiles))

    def register_profile(self, name: str, config: EngineConfig) -> QueryResult[bool]:
        if not name:
            return QueryResult.validation_error("配置档案名不能为空", error_code="EMPTY_PROFILE_NAME")
        self._profiles[name] = config
        self.logger.info(f"注册配置档案 {name}")
        return QueryResult.success_result(True)

    def update_timer_config(self, profile: str, updates: Dict[str, Any]) -> QueryResult[TimerConfig]:
        """
        更新某个档案的计时器配置

        Args:
            profile: 配置档案名
            updates: 要更新的字段

        Returns:
            查询结果，包含更新后的计时器配置
        """
        if profile not in self._profiles:
            return QueryResult.failure_result(f"配置档案 {profile} 不存在", error_code="CONFIG_PROFILE_NOT_FOUND")

        current = self._profiles[profile]
        unknown = [key for key in updates if not hasattr(current.timers, key)]
        if unknown:
            return QueryResult.validation_error(f"未知的计时器配置项: {unknown}", error_code="UNKNOWN_CONFIG_KEY")

        try:
            timers = replace(current.timers, **updates)
        except ConfigError as e:
            return QueryResult.validation_error(str(e), error_code="INVALID_TIMER_CONFIG")

        self._profiles[profile] = replace(current, timers=timers)
        self.logger.info(f"配置档案 {profile} 的计时器配置已更新: {updates}")
        return QueryResult.success_result(timers)

    def setup_logging(self, profile: str = "default") -> QueryResult[LoggingConfig]:
        """
        按配置档案初始化日志

        Args:
            profile: 配置档案名

        Returns:
            查询结果，包含使用的日志配置
        """
        config = self.get_engine_config(profile).data.logging
        level = getattr(logging, config.log_level.upper(), None)
        if not isinstance(level, int):
            return QueryResult.validation_error(f"未知的日志级别: {config.log_level}", error_code="INVALID_LOG_LEVEL")

        handlers: List[logging.Handler] = []
        if config.enable_console_logging:
            handlers.append(logging.StreamHandler())
        if config.log_file_path:
            handlers.append(logging.FileHandler(config.log_file_path, encoding='utf-8'))
        if not handlers:
            handlers.append(logging.NullHandler())

        logging.basicConfig(level=level, format=config.log_format, handlers=handlers, force=True)
        self.logger.info(f"日志已按配置档案 {profile} 初始化")
        return QueryResult.success_result(config)
