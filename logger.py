"""日志配置模块

提供统一的日志记录功能：
- 文件日志：RotatingFileHandler，自动轮转
- 控制台日志：StreamHandler
- 日志消息可通过 _ 翻译
- 程序退出时正确释放资源
"""

import atexit
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

# 日志配置常量
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "linkthesite.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_ENCODING = 'utf-8'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 全局标志：是否已经初始化
_initialized = False


def _load_logging_config():
    """加载日志配置

    Returns:
        dict: 日志配置项，配置模块尚未加载完成时返回空字典
    """
    try:
        from config import LOGGING_CONFIG
        return LOGGING_CONFIG
    except (ImportError, AttributeError):
        return {}


def _get_log_settings():
    """获取日志设置

    Returns:
        tuple: (log_dir, log_file, log_level, max_bytes, backup_count)
    """
    config = _load_logging_config()

    log_file = config.get('file', os.path.join(DEFAULT_LOG_DIR, DEFAULT_LOG_FILE))
    log_dir = os.path.dirname(log_file) or DEFAULT_LOG_DIR

    level_str = config.get('level', 'INFO')
    log_level = getattr(logging, str(level_str).upper(), logging.INFO)

    max_bytes = config.get('max_bytes', DEFAULT_MAX_BYTES)
    backup_count = config.get('backup_count', DEFAULT_BACKUP_COUNT)

    return log_dir, log_file, log_level, max_bytes, backup_count


# 翻译函数封装，使用 builtins._ 以支持 gettext.install 安装的翻译
def _(message):
    """翻译函数，从 builtins 获取实际的翻译函数"""
    import builtins
    trans_func = getattr(builtins, '_', None)
    if trans_func and callable(trans_func):
        return trans_func(message)
    return message


def _ensure_root_logger_configured():
    """确保根日志记录器已配置（只执行一次）"""
    global _initialized

    if _initialized:
        return

    log_dir, log_file, log_level, max_bytes, backup_count = _get_log_settings()
    # 加载配置模块时可能已经完成了初始化
    if _initialized:
        return

    log_file = os.path.abspath(log_file)
    os.makedirs(os.path.abspath(log_dir), exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 根记录器设置最低级别
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    try:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding=DEFAULT_ENCODING,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        print(f"[Logger Error] 无法创建文件处理器: {e}", file=sys.stderr, flush=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _initialized = True


def setup_logger(name=__name__):
    """设置并返回一个配置好的 logger 实例

    Args:
        name: logger 名称，默认使用模块名称

    Returns:
        配置好的 logger 实例
    """
    _ensure_root_logger_configured()
    return logging.getLogger(name)


def close_all_loggers():
    """关闭所有日志处理器，释放文件锁

    在程序退出前调用，确保日志文件被正确关闭
    """
    global _initialized

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        try:
            # 流已关闭时（如测试框架收回了 stdout）只移除处理器
            if not getattr(getattr(handler, "stream", None), "closed", False):
                handler.flush()
            handler.close()
        except (OSError, ValueError) as e:
            print(f"[Logger Error] 关闭日志处理器时出错: {e}", file=sys.stderr, flush=True)
        finally:
            root_logger.removeHandler(handler)

    _initialized = False


# 确保程序退出时清理日志
atexit.register(close_all_loggers)
