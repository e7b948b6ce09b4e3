"""
计时器模块

提供按名称管理的逻辑计时器调度器。
"""

from .types import TimerState, TimerCallback
from .timer_scheduler import TimerScheduler

__all__ = ['TimerState', 'TimerCallback', 'TimerScheduler']
