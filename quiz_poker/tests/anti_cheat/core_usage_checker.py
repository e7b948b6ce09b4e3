"""
Core Usage Checker - 核心模块使用检查器

确保测试真正驱动quiz_poker的核心对象，而不是mock数据或绕过引擎的手工状态。

Classes:
    CoreUsageChecker: 核心使用检查器
"""

from typing import Any, List


def _is_mock_object(obj: Any) -> bool:
    """检测unittest.mock创建的对象"""
    module_name = type(obj).__module__
    if module_name.startswith('unittest.mock') or module_name == 'mock':
        return True
    return hasattr(obj, '_mock_name') or hasattr(obj, 'assert_called')


class CoreUsageChecker:
    """核心模块使用检查器"""

    @staticmethod
    def verify_real_objects(obj: Any, expected_type_name: str) -> None:
        """
        验证对象是真实的核心对象

        Args:
            obj: 要检查的对象
            expected_type_name: 期望的类型名称

        Raises:
            AssertionError: 对象不是期望的真实类型
        """
        actual_type_name = type(obj).__name__
        assert actual_type_name == expected_type_name, \
            f"必须使用真实的{expected_type_name}，当前类型: {actual_type_name}"
        assert not _is_mock_object(obj), f"禁止使用mock对象，必须使用真实的{expected_type_name}"

        module_name = obj.__class__.__module__
        assert module_name.startswith('quiz_poker.'), \
            f"对象必须来自quiz_poker模块，当前模块: {module_name}"

    @staticmethod
    def verify_chip_conservation(initial_total: int, final_total: int) -> None:
        """
        验证筹码守恒

        Raises:
            AssertionError: 筹码不守恒
        """
        assert isinstance(initial_total, int) and initial_total >= 0, \
            f"初始筹码必须是非负整数: {initial_total}"
        assert isinstance(final_total, int) and final_total >= 0, \
            f"最终筹码必须是非负整数: {final_total}"
        assert initial_total == final_total, \
            f"筹码必须守恒: 初始{initial_total}, 最终{final_total}, 差异{final_total - initial_total}"

    @staticmethod
    def verify_module_boundaries(obj: Any, allowed_modules: List[str]) -> None:
        """
        验证对象来自允许的模块

        Raises:
            AssertionError: 对象来自不允许的模块
        """
        module_name = obj.__class__.__module__
        if any(module_name.startswith(allowed) for allowed in allowed_modules):
            return
        raise AssertionError(f"对象来自不允许的模块: {module_name}, 允许的模块: {allowed_modules}")
