"""
不变量检查模块
"""

from .chip_conservation_checker import ChipConservationChecker

__all__ = ['ChipConservationChecker']
