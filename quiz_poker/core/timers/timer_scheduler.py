"""
逻辑计时器调度器

单线程、按名称管理的倒计时。逻辑时钟只在advance()中前进，
因此测试可以精确控制时间；run()是按真实时间推进时钟的asyncio驱动。
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from .types import TimerCallback, TimerState

__all__ = ['TimerScheduler']

logger = logging.getLogger(__name__)


class TimerScheduler:
    """
    计时器调度器

    同名计时器只能存在一个，重新启动会取消并替换旧的计时器。
    计时器到期时先被移除，再调用一次到期回调。
    """

    def __init__(self):
        self._timers: Dict[str, TimerState] = {}
        self._now = 0.0
        self._sequence = 0

    @property
    def now(self) -> float:
        """当前逻辑时间（秒）"""
        return self._now

    def start(self, name: str, duration: float, on_expire: TimerCallback, *,
              on_warning: Optional[TimerCallback] = None,
              warning_before: float = 0.0,
              phase: Optional[str] = None,
              player_id: Optional[str] = None,
              owner: Optional[str] = None) -> TimerState:
        """
        启动计时器

        Args:
            name: 计时器名称，已存在时替换
            duration: 时长（秒）
            on_expire: 到期回调
            on_warning: 预警回调
            warning_before: 到期前多少秒预警
            phase: 关联的阶段
            player_id: 关联的玩家
            owner: 所属回合

        Returns:
            新的计时器状态
        """
        if name in self._timers:
            logger.debug(f"[计时器] 替换已有计时器 {name}")
            del self._timers[name]

        self._sequence += 1
        timer = TimerState(
            name=name,
            duration=duration,
            remaining=duration,
            on_expire=on_expire,
            on_warning=on_warning,
            warning_before=warning_before,
            phase=phase,
            player_id=player_id,
            owner=owner,
            deadline=self._now + duration,
            sequence=self._sequence,
        )
        self._timers[name] = timer
        logger.debug(f"[计时器] 启动 {name}, 时长 {duration}s")
        return timer

    def stop(self, name: str) -> bool:
        timer = self._timers.pop(name, None)
        if timer is None:
            return False
        logger.debug(f"[计时器] 停止 {name}")
        return True

    def pause(self, name: str) -> bool:
        """暂停计时器并记录剩余时间"""
        timer = self._timers.get(name)
        if timer is None or timer.paused:
            return False
        timer.remaining = max(0.0, timer.deadline - self._now)
        timer.paused = True
        logger.debug(f"[计时器] 暂停 {name}, 剩余 {timer.remaining:.2f}s")
        return True

    def resume(self, name: str) -> bool:
        """以暂停时记录的剩余时间重新计时"""
        timer = self._timers.get(name)
        if timer is None or not timer.paused:
            return False
        timer.deadline = self._now + timer.remaining
        timer.paused = False
        logger.debug(f"[计时器] 恢复 {name}, 剩余 {timer.remaining:.2f}s")
        return True

    def get_state(self, name: str) -> Optional[TimerState]:
        timer = self._timers.get(name)
        if timer is not None and not timer.paused:
            timer.remaining = max(0.0, timer.deadline - self._now)
        return timer

    def get_remaining(self, name: str) -> Optional[float]:
        timer = self.get_state(name)
        return timer.remaining if timer else None

    def has_timer(self, name: str) -> bool:
        return name in self._timers

    def active_timers(self, owner: Optional[str] = None) -> List[TimerState]:
        """返回计时器列表（包括暂停的），可按所属回合过滤"""
        timers = [self.get_state(name) for name in list(self._timers)]
        if owner is not None:
            timers = [t for t in timers if t.owner == owner]
        return sorted(timers, key=lambda t: t.sequence)

    # ---- 批量操作 ----

    def _stop_where(self, predicate) -> int:
        names = [name for name, timer in self._timers.items() if predicate(timer)]
        for name in names:
            self.stop(name)
        return len(names)

    def stop_owner(self, owner: str) -> int:
        """停止某个回合拥有的全部计时器"""
        return self._stop_where(lambda t: t.owner == owner)

    def stop_player(self, player_id: str, owner: Optional[str] = None) -> int:
        return self._stop_where(
            lambda t: t.player_id == player_id and (owner is None or t.owner == owner))

    def stop_phase(self, phase: str, owner: Optional[str] = None) -> int:
        return self._stop_where(
            lambda t: t.phase == phase and (owner is None or t.owner == owner))

    def pause_owner(self, owner: str) -> int:
        return sum(1 for t in self.active_timers(owner) if self.pause(t.name))

    def resume_owner(self, owner: str) -> int:
        return sum(1 for t in self.active_timers(owner) if self.resume(t.name))

    # ---- 时钟推进 ----

    def _next_due(self, until: float):
        """找出until之前最早到期的预警或到期事件"""
        best = None
        for timer in self._timers.values():
            if timer.paused:
                continue
            warning_at = timer.warning_at
            if warning_at is not None and warning_at <= until:
                candidate = (warning_at, 0, timer.sequence, timer)
                if best is None or candidate[:3] < best[:3]:
                    best = candidate
            if timer.deadline <= until:
                candidate = (timer.deadline, 1, timer.sequence, timer)
                if best is None or candidate[:3] < best[:3]:
                    best = candidate
        return best

    def advance(self, seconds: float) -> int:
        """
        推进逻辑时钟，按时间顺序触发预警和到期回调

        回调中可以启动或停止其他计时器，新的计时器同样会在本次推进的时间范围内被处理。

        Args:
            seconds: 推进的秒数

        Returns:
            本次到期的计时器数量
        """
        if seconds < 0:
            raise ValueError(f"不能让时钟倒退: {seconds}")

        until = self._now + seconds
        expired = 0
        while True:
            due = self._next_due(until)
            if due is None:
                break
            at, kind, _, timer = due
            self._now = max(self._now, at)

            if kind == 0:
                timer.warning_fired = True
                logger.debug(f"[计时器] {timer.name} 即将到期")
                timer.on_warning(timer)
                continue

            # 先移除再回调，回调里可以安全地启动同名计时器
            self._timers.pop(timer.name, None)
            timer.remaining = 0.0
            expired += 1
            logger.debug(f"[计时器] {timer.name} 到期")
            timer.on_expire(timer)

        self._now = until
        return expired

    async def run(self, interval: float = 0.1, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        以真实时间驱动逻辑时钟

        Args:
            interval: 每次推进的间隔（秒）
            stop_event: 设置后退出循环
        """
        loop = asyncio.get_running_loop()
        last = loop.time()
        while stop_event is None or not stop_event.is_set():
            await asyncio.sleep(interval)
            current = loop.time()
            self.advance(current - last)
            last = current

    def stats(self) -> Dict[str, Any]:
        """计时器统计信息"""
        timers = self.active_timers()
        by_phase: Dict[str, int] = {}
        by_player: Dict[str, int] = {}
        for timer in timers:
            if timer.phase:
                by_phase[timer.phase] = by_phase.get(timer.phase, 0) + 1
            if timer.player_id:
                by_player[timer.player_id] = by_player.get(timer.player_id, 0) + 1
        return {
            'total': len(timers),
            'running': sum(1 for t in timers if not t.paused),
            'paused': sum(1 for t in timers if t.paused),
            'by_phase': by_phase,
            'by_player': by_player,
        }
