"""
快照序列化器

实现回合状态快照与JSON之间的转换。
"""

import json
from typing import Any, Dict

from ..round.types import RoundPhase
from ..rules.errors import SnapshotError
from .types import PlayerSnapshot, PotSnapshot, RoundSnapshot, SnapshotMetadata

__all__ = ['SnapshotSerializer', 'SerializationError', 'DeserializationError']


class SerializationError(SnapshotError):
    """序列化错误"""
    pass


class DeserializationError(SnapshotError):
    """反序列化错误"""
    pass


class SnapshotSerializer:
    """
    快照序列化器

    负责回合状态快照的序列化和反序列化。
    """

    @staticmethod
    def serialize(snapshot: RoundSnapshot) -> str:
        """
        将快照序列化为JSON字符串

        Args:
            snapshot: 回合状态快照

        Returns:
            str: JSON格式的序列化字符串

        Raises:
            SerializationError: 序列化失败时抛出
        """
        try:
            return json.dumps(SnapshotSerializer.to_dict(snapshot), ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"快照序列化失败: {str(e)}") from e

    @staticmethod
    def deserialize(json_str: str) -> RoundSnapshot:
        """
        从JSON字符串反序列化快照

        Raises:
            DeserializationError: 反序列化失败时抛出
        """
        try:
            return SnapshotSerializer.from_dict(json.loads(json_str))
        except (KeyError, TypeError, ValueError) as e:
            raise DeserializationError(f"快照反序列化失败: {str(e)}") from e

    @staticmethod
    def to_dict(snapshot: RoundSnapshot) -> Dict[str, Any]:
        """将快照对象转换为字典"""
        return {
            'metadata': SnapshotSerializer._metadata_to_dict(snapshot.metadata),
            'round_id': snapshot.round_id,
            'phase': snapshot.phase.name,
            'players': [SnapshotSerializer._player_to_dict(p) for p in snapshot.players],
            'pot': SnapshotSerializer._pot_to_dict(snapshot.pot),
            'action_history': [dict(record) for record in snapshot.action_history],
            'question': dict(snapshot.question),
            'settings': dict(snapshot.settings),
            'betting': dict(snapshot.betting),
            'answered_this_phase': list(snapshot.answered_this_phase),
            'transitions': [dict(t) for t in snapshot.transitions],
            'initial_chips': snapshot.initial_chips,
            'paused': snapshot.paused,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> RoundSnapshot:
        """将字典转换为快照对象"""
        return RoundSnapshot(
            metadata=SnapshotSerializer._dict_to_metadata(data['metadata']),
            round_id=data['round_id'],
            phase=RoundPhase[data['phase']],
            players=tuple(SnapshotSerializer._dict_to_player(p) for p in data['players']),
            pot=SnapshotSerializer._dict_to_pot(data['pot']),
            action_history=tuple(data.get('action_history', [])),
            question=data['question'],
            settings=data['settings'],
            betting=data.get('betting', {}),
            answered_this_phase=tuple(data.get('answered_this_phase', [])),
            transitions=tuple(data.get('transitions', [])),
            initial_chips=data.get('initial_chips'),
            paused=data.get('paused', False),
        )

    @staticmethod
    def _metadata_to_dict(metadata: SnapshotMetadata) -> Dict[str, Any]:
        return {
            'snapshot_id': metadata.snapshot_id,
            'created_at': metadata.created_at,
            'round_number': metadata.round_number,
            'client_facing': metadata.client_facing,
            'viewer_id': metadata.viewer_id,
            'description': metadata.description,
        }

    @staticmethod
    def _dict_to_metadata(data: Dict[str, Any]) -> SnapshotMetadata:
        return SnapshotMetadata(
            snapshot_id=data['snapshot_id'],
            created_at=data['created_at'],
            round_number=data['round_number'],
            client_facing=data['client_facing'],
            viewer_id=data.get('viewer_id'),
            description=data.get('description'),
        )

    @staticmethod
    def _player_to_dict(player: PlayerSnapshot) -> Dict[str, Any]:
        return {
            'player_id': player.player_id,
            'name': player.name,
            'stack': player.stack,
            'current_bet': player.current_bet,
            'total_bet_in_round': player.total_bet_in_round,
            'status': player.status,
            'is_all_in': player.is_all_in,
            'has_answered': player.has_answered,
            'answer': player.answer,
            'answered_at': player.answered_at,
            'stats': dict(player.stats),
        }

    @staticmethod
    def _dict_to_player(data: Dict[str, Any]) -> PlayerSnapshot:
        return PlayerSnapshot(
            player_id=data['player_id'],
            name=data['name'],
            stack=data['stack'],
            current_bet=data['current_bet'],
            total_bet_in_round=data['total_bet_in_round'],
            status=data['status'],
            is_all_in=data['is_all_in'],
            has_answered=data['has_answered'],
            answer=data.get('answer'),
            answered_at=data.get('answered_at'),
            stats=data.get('stats', {}),
        )

    @staticmethod
    def _pot_to_dict(pot: PotSnapshot) -> Dict[str, Any]:
        return {
            'main_pot': pot.main_pot,
            'side_pots': [dict(p) for p in pot.side_pots],
            'total_pot': pot.total_pot,
            'main_eligible': list(pot.main_eligible),
            'contributions': dict(pot.contributions),
            'carry_over': pot.carry_over,
        }

    @staticmethod
    def _dict_to_pot(data: Dict[str, Any]) -> PotSnapshot:
        return PotSnapshot(
            main_pot=data['main_pot'],
            side_pots=tuple(data.get('side_pots', [])),
            total_pot=data['total_pot'],
            main_eligible=tuple(data.get('main_eligible', [])),
            contributions=data.get('contributions', {}),
            carry_over=data.get('carry_over', 0),
        )
