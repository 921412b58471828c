"""链接处理异常"""


class LinkError(Exception):
    """链接处理相关异常的基类"""


class MalformedDestinationError(LinkError, ValueError):
    """链接目标无法解析为 URL 或路径"""

    def __init__(self, destination, reason=""):
        self.destination = destination
        self.reason = reason
        message = f"无法解析链接目标 {destination!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
