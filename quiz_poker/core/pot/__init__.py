"""
底池模块

提供主池与分层边池的纯账务处理。
"""

from .pot_ledger import PotLedger, SidePot

__all__ = ['PotLedger', 'SidePot']
