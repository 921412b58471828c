"""错误处理模块

提供逐元素的错误隔离：
- 单个元素处理失败不会中断整个文档的遍历
- 可配置失败策略（记录 / 跳过 / 抛出）
- 失败时通过回调通知调用方（例如写入文档的告警列表）
"""

from functools import wraps
from logger import setup_logger, _ as _t

# 获取 logger 实例
logger = setup_logger(__name__)

FAIL_STRATEGIES = ('log', 'skip', 'raise')


class ErrorHandler:
    """错误处理器，把可预期的失败限制在单次调用内"""

    def __init__(self, fail_strategy='log', contained_errors=(ValueError,), on_failure=None):
        """初始化错误处理器

        Args:
            fail_strategy: 失败策略，可选值：'log'（记录告警）, 'skip'（静默跳过）, 'raise'（抛出异常）
            contained_errors: 需要隔离的异常类型
            on_failure: 失败回调，参数为异常对象
        """
        if fail_strategy not in FAIL_STRATEGIES:
            raise ValueError(f"未知的失败策略: {fail_strategy}")
        self.fail_strategy = fail_strategy
        self.contained_errors = tuple(contained_errors)
        self.on_failure = on_failure
        self.failure_count = 0

    def contain(self, func):
        """隔离装饰器

        被装饰的函数抛出 contained_errors 中的异常时，按失败策略处理并返回 None。

        Args:
            func: 要装饰的函数

        Returns:
            装饰后的函数
        """
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except self.contained_errors as e:
                return self._handle_failure(e)
        return wrapper

    def _handle_failure(self, error):
        """处理失败

        Args:
            error: 异常对象

        Returns:
            失败时的返回值
        """
        if self.fail_strategy == 'raise':
            raise error

        self.failure_count += 1
        if self.fail_strategy == 'skip':
            logger.debug(_t("跳过失败的元素") + f": {error}")
        else:  # 'log'
            logger.warning(_t("元素处理失败") + f": {error}")

        if self.on_failure is not None:
            self.on_failure(error)
        return None
