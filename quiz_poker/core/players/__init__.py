"""
参与者模块

提供回合参与者的状态与统计数据。
"""

from .participant import Participant, PlayerStatus, PlayerStats

__all__ = ['Participant', 'PlayerStatus', 'PlayerStats']
