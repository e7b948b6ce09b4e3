"""
Application Layer - 应用层

对外提供回合引擎API与配置服务，编排核心层的各个组件。
"""

from .types import ResultStatus, QueryResult, ActionResult
from .config_service import ConfigService
from .round_engine import RoundEngine

__all__ = [
    'ResultStatus',
    'QueryResult',
    'ActionResult',
    'ConfigService',
    'RoundEngine',
]
