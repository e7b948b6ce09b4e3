"""
Core Module - 纯领域逻辑层

该模块包含问答扑克回合的核心业务逻辑。
核心模块只能依赖其他核心模块，不能依赖应用层。

Modules:
    rules: 错误类型与异常
    players: 回合参与者
    round: 回合状态与阶段定义
    pot: 底池账本与分层边池
    betting: 下注引擎和下注验证
    state_machine: 回合阶段状态机和阶段处理器
    showdown: 答案评估与胜者判定
    timers: 逻辑计时器调度
    events: 领域事件系统
    invariant: 筹码守恒检查
    snapshot: 回合状态快照
"""

__all__ = []
