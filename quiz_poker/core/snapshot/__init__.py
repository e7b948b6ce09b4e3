"""
快照模块

提供回合状态快照的创建、JSON序列化以及从完整快照恢复回合。
"""

from .types import SnapshotMetadata, PlayerSnapshot, PotSnapshot, RoundSnapshot
from .serializer import SnapshotSerializer, SerializationError, DeserializationError
from .snapshot_manager import SnapshotManager

__all__ = [
    'SnapshotMetadata',
    'PlayerSnapshot',
    'PotSnapshot',
    'RoundSnapshot',
    'SnapshotSerializer',
    'SerializationError',
    'DeserializationError',
    'SnapshotManager',
]
