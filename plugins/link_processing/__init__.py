"""链接处理插件

核心插件，对每个文档运行 links.crawl_links.CrawlLinks：
- 标注外部 / 站内链接
- 按解析策略改写站内链接和资源地址
- 把出链集合写入文档元数据
"""

from links.crawl_links import LINKS_FIELD, CrawlLinks, CrawlLinksOptions
from links.document import BuildCtx
from utils.plugin_manager import Plugin
from logger import _ as _t


class LinkProcessingPlugin(Plugin):
    """链接处理插件"""

    # 插件名称
    name = "LinkProcessing"

    # 插件描述
    description = "标注和改写页面中的链接，并收集出链"

    def __init__(self, config=None):
        """初始化插件

        Args:
            config: 配置字典，使用其中的 links 和 error_handling 段落
        """
        super().__init__(config)
        options = CrawlLinksOptions.from_dict(self.config.get("links"))
        fail_strategy = (self.config.get("error_handling") or {}).get("fail_strategy", "log")
        self.crawl_links = CrawlLinks(options, fail_strategy=fail_strategy)
        self.ctx = BuildCtx()
        self.link_count = 0
        self.warning_count = 0

    def on_build_start(self, ctx):
        """构建开始时记录全站 slug 目录

        Args:
            ctx: 构建上下文
        """
        super().on_build_start(ctx)
        self.ctx = ctx
        self.link_count = 0
        self.warning_count = 0
        self.logger.info(_t("解析策略") + f": {self.crawl_links.options.markdown_link_resolution}, "
                         + _t("文档总数") + f": {len(ctx.all_slugs)}")

    def on_transform_document(self, document):
        """处理单个文档

        Args:
            document: 文档
        """
        # 失败在 ErrorHandler 中已记录日志，这里只统计本次新增的警告
        known_warnings = len(document.warnings)
        self.crawl_links.transform(document, self.ctx)
        self.link_count += len(document.data[LINKS_FIELD])
        self.warning_count += len(document.warnings) - known_warnings

    def on_build_end(self, documents):
        """构建结束时输出统计

        Args:
            documents: 全部文档列表
        """
        super().on_build_end(documents)
        self.logger.info(_t("链接处理完成，共") + f" {len(documents)} " + _t("个页面") + ", "
                         + _t("出链") + f" {self.link_count}, "
                         + _t("警告") + f" {self.warning_count}")
