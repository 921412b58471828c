# Utils 模块
"""
工具模块，提供插件管理和错误处理。
"""

__version__ = "0.1.0"

from .plugin_manager import Plugin, PluginManager
from .error_handler import ErrorHandler

__all__ = [
    "Plugin",
    "PluginManager",
    "ErrorHandler",
]
