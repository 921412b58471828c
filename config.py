"""配置管理模块

负责加载和管理YAML配置文件，支持：
1. 默认配置（default.yaml）
2. 用户配置（config.yaml）覆盖默认配置
3. 命令行参数覆盖配置文件（见 link_the_site.update_config）

配置优先级：命令行 > 用户配置 > 默认配置
"""

import copy
import os
from typing import Dict, Any
import yaml
from logger import setup_logger
from links.resolver import OPTION_ALIASES, STRATEGIES as LINK_STRATEGIES

logger = setup_logger(__name__)

# 配置文件路径
CONFIG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config")
DEFAULT_CONFIG_FILE = os.path.join(CONFIG_DIR, "default.yaml")
USER_CONFIG_FILE = os.path.join(CONFIG_DIR, "config.yaml")

# 配置文件都不可用时的内置配置
FALLBACK_CONFIG = {
    "input_dir": "public",
    "output_dir": "output",
    "links": {
        "markdown_link_resolution": "absolute",
        "pretty_links": True,
        "open_links_in_new_tab": False,
        "lazy_load": False,
        "external_link_icon": True,
    },
    "error_handling": {
        "fail_strategy": "log",
    },
    "logging": {
        "level": "INFO",
        "file": "logs/linkthesite.log",
        "max_bytes": 10485760,
        "backup_count": 5,
    },
    "plugins": {
        "link_processing": True,
    },
}


def _read_yaml(path: str) -> Dict[str, Any]:
    """读取一个 YAML 文件，文件为空时返回空字典"""
    with open(path, "r", encoding="utf-8") as f:
        return normalize_link_keys(yaml.safe_load(f) or {})


def normalize_link_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    """把 links 段中的驼峰写法改为下划线写法，两种写法同时出现时驼峰写法优先

    Args:
        config: 配置字典

    Returns:
        dict: 同一个配置字典
    """
    links_config = config.get("links")
    if isinstance(links_config, dict):
        for alias, key in OPTION_ALIASES.items():
            if alias in links_config:
                links_config[key] = links_config.pop(alias)
    return config


def load_config(default_file: str = DEFAULT_CONFIG_FILE, user_file: str = USER_CONFIG_FILE) -> Dict[str, Any]:
    """加载配置文件

    Args:
        default_file: 默认配置文件路径
        user_file: 用户配置文件路径

    Returns:
        dict: 合并后的配置
    """
    config: Dict[str, Any] = {}
    config_loaded = False

    if os.path.exists(default_file):
        try:
            config = merge_configs(config, _read_yaml(default_file))
            logger.debug(f"已加载默认配置文件: {default_file}")
            config_loaded = True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"加载默认配置文件失败: {e}")
    else:
        logger.warning(f"默认配置文件不存在: {default_file}")

    if os.path.exists(user_file):
        try:
            config = merge_configs(config, _read_yaml(user_file))
            logger.debug(f"已加载用户配置文件: {user_file}")
            config_loaded = True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"加载用户配置文件失败: {e}")
    else:
        logger.debug(f"用户配置文件不存在: {user_file}")

    if not config_loaded:
        logger.error("配置文件加载失败，使用内置配置")
        config = copy.deepcopy(FALLBACK_CONFIG)

    # 缺失的段落用内置配置补齐
    config = merge_configs(copy.deepcopy(FALLBACK_CONFIG), config)

    validate_config(config)
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """合并配置

    Args:
        base: 基础配置
        override: 覆盖配置

    Returns:
        dict: 合并后的配置
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            base[key] = merge_configs(base[key], value)
        else:
            base[key] = value
    return base


def validate_config(config: Dict[str, Any]) -> None:
    """验证配置，无效值恢复为内置默认值

    Args:
        config: 配置字典
    """
    normalize_link_keys(config)
    links_config = config.get("links") or {}
    strategy = links_config.get("markdown_link_resolution")
    if strategy not in LINK_STRATEGIES:
        logger.warning(f"未知的链接解析策略 {strategy!r}，使用 absolute")
        links_config["markdown_link_resolution"] = "absolute"

    for key in ("pretty_links", "open_links_in_new_tab", "lazy_load", "external_link_icon"):
        if key in links_config and not isinstance(links_config[key], bool):
            logger.warning(f"{key} 必须是布尔值，使用默认值")
            links_config[key] = FALLBACK_CONFIG["links"][key]
    config["links"] = links_config

    error_config = config.get("error_handling") or {}
    if error_config.get("fail_strategy") not in ("log", "skip", "raise"):
        logger.warning(f"未知的失败策略 {error_config.get('fail_strategy')!r}，使用 log")
        error_config["fail_strategy"] = "log"
    config["error_handling"] = error_config


# 加载配置
config = load_config()

# 导出配置项
LOGGING_CONFIG = config.get("logging", {})

# 导出完整配置对象
CONFIG = config
