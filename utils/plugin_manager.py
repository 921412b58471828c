# 插件管理器模块

import os
import importlib
import inspect
from logger import setup_logger, _ as _t

# 获取 logger 实例
logger = setup_logger(__name__)

# 插件目录
PLUGINS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'plugins')


class Plugin:
    """插件基类，所有插件都应该继承自这个类"""

    # 插件名称
    name = "Base Plugin"

    # 插件描述
    description = "基础插件类"

    def __init__(self, config=None):
        """初始化插件

        Args:
            config: 配置字典
        """
        self.config = config or {}
        self.logger = setup_logger(self.name)
        self.enabled = True

    def on_init(self):
        """插件初始化时调用"""
        self.logger.info(_t("插件初始化") + f": {self.name}")

    def on_build_start(self, ctx):
        """构建开始时调用

        Args:
            ctx: 构建上下文（links.document.BuildCtx）
        """
        self.logger.info(_t("构建开始") + f": {self.name}")

    def on_transform_document(self, document):
        """处理单个文档时调用

        Args:
            document: 文档（links.document.Document），可原地修改
        """
        pass

    def on_build_end(self, documents):
        """构建结束时调用

        Args:
            documents: 全部文档列表
        """
        self.logger.info(_t("构建结束") + f": {self.name}")

    def on_cleanup(self):
        """插件清理时调用"""
        self.logger.info(_t("插件清理") + f": {self.name}")


class PluginManager:
    """插件管理器，负责插件的发现、加载、注册和管理"""

    def __init__(self, config=None, plugins_dir=PLUGINS_DIR):
        """初始化插件管理器

        Args:
            config: 配置字典
            plugins_dir: 插件目录
        """
        self.config = config
        self.plugins_dir = plugins_dir
        self.plugins = []
        self.enabled_plugins = []
        self.plugin_paths = []

    def discover_plugins(self):
        """发现插件"""
        self.plugin_paths = []
        if os.path.exists(self.plugins_dir):
            for item in sorted(os.listdir(self.plugins_dir)):
                plugin_path = os.path.join(self.plugins_dir, item)
                if os.path.isdir(plugin_path) and os.path.exists(os.path.join(plugin_path, '__init__.py')):
                    self.plugin_paths.append(plugin_path)

        logger.info(_t("发现插件目录") + f": {len(self.plugin_paths)}")

    def load_plugins(self):
        """加载插件"""
        for plugin_path in self.plugin_paths:
            plugin_name = os.path.basename(plugin_path)
            try:
                module = importlib.import_module(f'plugins.{plugin_name}')
            except ImportError as e:
                logger.error(_t("加载插件失败") + f": {plugin_path}, " + _t("错误") + f": {e}")
                continue

            # 只实例化插件模块自己定义的 Plugin 子类
            for _name, cls in inspect.getmembers(module, inspect.isclass):
                if issubclass(cls, Plugin) and cls is not Plugin and cls.__module__ == module.__name__:
                    try:
                        plugin = cls(self.config)
                    except Exception as e:
                        logger.error(_t("加载插件失败") + f": {plugin_path}, " + _t("错误") + f": {e}")
                        continue
                    plugin.module_name = plugin_name
                    self.plugins.append(plugin)
                    logger.info(_t("加载插件") + f": {plugin.name} ({plugin_name})")

        logger.info(_t("已加载插件数") + f": {len(self.plugins)}")

    def register_plugin(self, plugin, module_name=None):
        """注册插件

        Args:
            plugin: 插件实例
            module_name: 插件模块名，用于启用/禁用
        """
        if isinstance(plugin, Plugin) and plugin not in self.plugins:
            plugin.module_name = module_name or getattr(plugin, 'module_name', plugin.name)
            self.plugins.append(plugin)
            logger.info(_t("注册插件") + f": {plugin.name}")

    def enable_plugins(self, plugin_names=None):
        """启用插件

        Args:
            plugin_names: 要启用的插件模块名列表，或 {模块名: 是否启用} 字典；
                为 None 时启用所有插件
        """
        if isinstance(plugin_names, dict):
            plugin_names = [name for name, enabled in plugin_names.items() if enabled]

        self.enabled_plugins = []
        for plugin in self.plugins:
            if plugin_names is None or getattr(plugin, 'module_name', None) in plugin_names:
                plugin.enabled = True
                self.enabled_plugins.append(plugin)
                plugin.on_init()
                logger.info(_t("启用插件") + f": {plugin.name}")
            else:
                plugin.enabled = False
                logger.info(_t("禁用插件") + f": {plugin.name}")

        logger.info(_t("已启用插件数") + f": {len(self.enabled_plugins)}")

    def get_plugin(self, name):
        """获取插件

        Args:
            name: 插件名称

        Returns:
            Plugin: 插件实例，如果不存在则返回None
        """
        for plugin in self.plugins:
            if plugin.name == name:
                return plugin
        return None

    def call_hook(self, hook_name, *args, **kwargs):
        """调用插件钩子

        单个插件的钩子失败只记录错误，不影响其他插件。

        Args:
            hook_name: 钩子名称
            *args: 位置参数
            **kwargs: 关键字参数
        """
        for plugin in self.enabled_plugins:
            if not plugin.enabled:
                continue
            method = getattr(plugin, hook_name, None)
            if not callable(method):
                continue
            try:
                method(*args, **kwargs)
            except Exception as e:
                logger.error(_t("调用插件钩子失败") + f": {plugin.name}.{hook_name}, " + _t("错误") + f": {e}")

    def cleanup(self):
        """清理插件"""
        for plugin in self.enabled_plugins:
            if plugin.enabled:
                try:
                    plugin.on_cleanup()
                except Exception as e:
                    logger.error(_t("插件清理失败") + f": {plugin.name}, " + _t("错误") + f": {e}")

        self.plugins = []
        self.enabled_plugins = []
        logger.info(_t("插件管理器清理完成"))

    def get_available_plugins(self):
        """获取可用的插件列表

        Returns:
            list: 插件模块名（目录名）列表
        """
        if not self.plugin_paths:
            self.discover_plugins()
        return [os.path.basename(path) for path in self.plugin_paths]
