"""
单元测试: ConfigService 与配置数据类
"""

import logging

import pytest

from quiz_poker.application.config_service import ConfigService
from quiz_poker.application.types import ResultStatus
from quiz_poker.core.config import EngineConfig, LoggingConfig, RoundSettings, TimerConfig
from quiz_poker.core.rules.errors import ConfigError


class TestConfigDataclasses:

    def test_defaults(self):
        config = EngineConfig()

        assert config.round_settings.ante_size == 50
        assert config.round_settings.allow_re_raises
        assert config.timers.answer_timeout == 30.0
        assert config.check_chip_conservation

    @pytest.mark.parametrize("kwargs", [{'ante_size': -1}, {'max_raises_per_phase': -2}])
    def test_invalid_round_settings(self, kwargs):
        with pytest.raises(ConfigError):
            RoundSettings(**kwargs)

    @pytest.mark.parametrize("kwargs", [
        {'answer_timeout': 0},
        {'betting_timeout': -5},
        {'warning_before_timeout': -1},
    ])
    def test_invalid_timer_config(self, kwargs):
        with pytest.raises(ConfigError):
            TimerConfig(**kwargs)


class TestConfigService:

    def setup_method(self):
        self.service = ConfigService()

    def test_builtin_profiles(self):
        result = self.service.list_available_profiles()

        assert result.success
        assert result.data == ['blitz', 'default', 'tournament']
        assert self.service.get_engine_config('tournament').data.round_settings.max_raises_per_phase == 3

    def test_unknown_profile_falls_back_to_default(self):
        result = self.service.get_engine_config('no-such-profile')

        assert result.success
        assert result.data == EngineConfig()

    def test_register_profile(self):
        config = EngineConfig(round_settings=RoundSettings(ante_size=5))

        assert self.service.register_profile('tiny', config).success
        assert self.service.get_engine_config('tiny').data is config
        assert self.service.register_profile('', config).status == ResultStatus.VALIDATION_ERROR

    def test_update_timer_config(self):
        result = self.service.update_timer_config('default', {'betting_timeout': 12.0})

        assert result.success
        assert result.data.betting_timeout == 12.0
        assert self.service.get_engine_config('default').data.timers.betting_timeout == 12.0

    def test_update_timer_config_rejects_bad_input(self):
        assert self.service.update_timer_config('missing', {}).error_code == "CONFIG_PROFILE_NOT_FOUND"
        assert self.service.update_timer_config('default', {'foo': 1}).error_code == "UNKNOWN_CONFIG_KEY"
        assert self.service.update_timer_config(
            'default', {'answer_timeout': 0}).error_code == "INVALID_TIMER_CONFIG"

    def test_setup_logging(self, tmp_path):
        log_file = tmp_path / "quiz_poker.log"
        self.service.register_profile('file', EngineConfig(
            logging=LoggingConfig(log_level='DEBUG', log_file_path=str(log_file), enable_console_logging=False)))

        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            result = self.service.setup_logging('file')

            assert result.success
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0], logging.FileHandler)
            assert log_file.exists()
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

    def test_setup_logging_rejects_unknown_level(self):
        self.service.register_profile('bad', EngineConfig(logging=LoggingConfig(log_level='LOUD')))

        assert self.service.setup_logging('bad').error_code == "INVALID_LOG_LEVEL"
