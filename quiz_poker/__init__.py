"""
Quiz Poker - 问答扑克回合引擎

玩家先下前注，随后在问题揭示与三轮下注之间交替行动，
最终按答案的准确度分配底池（包括全押产生的分层边池）。

Packages:
    core: 纯领域逻辑层（底池账本、下注引擎、阶段状态机、胜者判定、计时器）
    application: 对外提供的回合引擎API与配置服务
"""

from .application.round_engine import RoundEngine
from .core.betting.betting_types import ActionType, PlayerAction
from .core.config import RoundSettings, TimerConfig, EngineConfig
from .core.players.participant import Participant, PlayerStatus
from .core.round.types import Question, RoundPhase
from .core.rules.errors import ErrorKind

__version__ = "1.0.0"

__all__ = [
    'RoundEngine',
    'ActionType',
    'PlayerAction',
    'RoundSettings',
    'TimerConfig',
    'EngineConfig',
    'Participant',
    'PlayerStatus',
    'Question',
    'RoundPhase',
    'ErrorKind',
]
