"""
Quiz Poker Test Configuration - pytest配置文件

提供测试共用的fixture:
- 使用逻辑时钟的回合引擎
- 标准的三人参与者与问题
- 反作弊检查器
"""

from typing import Callable, List

import pytest

from quiz_poker.application.round_engine import RoundEngine
from quiz_poker.core.config import EngineConfig, RoundSettings, TimerConfig
from quiz_poker.core.events.domain_events import DomainEvent
from quiz_poker.core.events.event_bus import EventBus, create_function_handler
from quiz_poker.core.players.participant import Participant
from quiz_poker.core.round.types import Question
from quiz_poker.core.timers.timer_scheduler import TimerScheduler
from quiz_poker.tests.anti_cheat.core_usage_checker import CoreUsageChecker


@pytest.fixture
def core_usage_checker():
    """核心使用检查器fixture"""
    return CoreUsageChecker()


@pytest.fixture
def question() -> Question:
    return Question(
        text="埃菲尔铁塔有多少米高？",
        correct_answer=100,
        hint="比100米的跑道稍长",
        category="地理",
        difficulty="easy",
    )


@pytest.fixture
def make_players() -> Callable[..., List[Participant]]:
    """按筹码列表创建参与者，默认名称为Alice、Bob、Carol、Dave..."""
    names = ["alice", "bob", "carol", "dave", "erin", "frank", "grace", "heidi"]

    def _make(*stacks: int) -> List[Participant]:
        return [Participant(player_id=names[i], stack=stack) for i, stack in enumerate(stacks)]

    return _make


@pytest.fixture
def timer_config() -> TimerConfig:
    return TimerConfig(answer_timeout=30.0, betting_timeout=20.0, reveal_timeout=5.0,
                       warning_before_timeout=5.0)


@pytest.fixture
def scheduler() -> TimerScheduler:
    return TimerScheduler()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def make_engine(timer_config, scheduler, event_bus) -> Callable[..., RoundEngine]:
    """创建共享逻辑时钟和事件总线的回合引擎"""

    def _make(ante_size: int = 0, **settings) -> RoundEngine:
        config = EngineConfig(
            round_settings=RoundSettings(ante_size=ante_size, **settings),
            timers=timer_config,
        )
        engine = RoundEngine(config=config, event_bus=event_bus, scheduler=scheduler)
        CoreUsageChecker.verify_real_objects(engine, "RoundEngine")
        return engine

    return _make


@pytest.fixture
def engine(make_engine) -> RoundEngine:
    return make_engine()


@pytest.fixture
def collected_events(event_bus) -> List[DomainEvent]:
    """收集事件总线上发布的全部事件"""
    events: List[DomainEvent] = []
    event_bus.subscribe_all(create_function_handler(events.append))
    return events


def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line("markers", "anti_cheat: 标记需要反作弊检查的测试")
    config.addinivalue_line("markers", "property_test: 标记基于属性的测试")
    config.addinivalue_line("markers", "integration: 标记集成测试")
