"""
计时器类型定义
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

__all__ = ['TimerState', 'TimerCallback']

TimerCallback = Callable[['TimerState'], None]


@dataclass
class TimerState:
    """
    单个逻辑计时器的状态
    运行中的计时器以deadline为准，暂停时以remaining为准
    """
    name: str
    duration: float
    remaining: float
    on_expire: TimerCallback
    on_warning: Optional[TimerCallback] = None
    warning_before: float = 0.0
    phase: Optional[str] = None
    player_id: Optional[str] = None
    owner: Optional[str] = None
    deadline: float = 0.0
    paused: bool = False
    warning_fired: bool = False
    sequence: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("计时器名称不能为空")
        if self.duration <= 0:
            raise ValueError(f"计时器时长必须大于0: {self.duration}")
        if self.warning_before < 0:
            raise ValueError(f"预警提前量不能为负数: {self.warning_before}")

    @property
    def warning_at(self) -> Optional[float]:
        """预警触发的逻辑时间；不需要预警时为None"""
        if self.on_warning is None or self.warning_fired:
            return None
        if self.warning_before <= 0 or self.warning_before >= self.duration:
            return None
        return self.deadline - self.warning_before

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'duration': self.duration,
            'remaining': self.remaining,
            'phase': self.phase,
            'player_id': self.player_id,
            'owner': self.owner,
            'paused': self.paused,
            'warning_fired': self.warning_fired,
        }
