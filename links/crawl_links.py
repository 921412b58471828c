"""链接处理模块

对单个已渲染页面的文档树做一次遍历，负责：
1. 链接分类：外部链接 / 页内锚点 / 站内链接
2. 站内链接目标规范化为 slug，并收集页面的出链集合
3. 标注链接：CSS 类、新标签页打开、外部链接图标、别名标记
4. 改写图片、视频、音频、iframe 的资源地址

出链集合写入 document.data["links"]，供外部的链接图构建使用。
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Set, Tuple
from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from links.document import BuildCtx, Document
from links.errors import LinkError, MalformedDestinationError
from links.resolver import OPTION_ALIASES, STRATEGIES, Resolver, TransformOptions, transform_link
from links.slugs import (
    INDEX,
    FullSlug,
    SimpleSlug,
    basename,
    folder_of,
    is_absolute_url,
    simplify_slug,
    strip_slashes,
)
from logger import setup_logger, _ as _t
from utils.error_handler import ErrorHandler

# 获取 logger 实例
logger = setup_logger(__name__)

# 出链集合写入的元数据字段
LINKS_FIELD = "links"
# 站内链接上记录目标 FullSlug 的属性
SLUG_ATTRIBUTE = "data-slug"
# 需要改写 src 的资源标签
ASSET_TAGS = ("img", "video", "audio", "iframe")

# 解析相对链接时使用的虚拟站点地址，只取其路径部分
CANONICAL_BASE = "https://base.com/"

EXTERNAL_ICON_CLASS = "external-icon"
EXTERNAL_ICON_PATH = (
    "M320 0H288V64h32 82.7L201.4 265.4 178.7 288 224 333.3l22.6-22.6L448 109.3V192v32h64V192 32 0H480 320z"
    "M32 32H0V64 480v32H32 456h32V480 352 320H424v32 96H64V96h96 32V32H160 32z"
)


class LinkKind(Enum):
    """链接分类"""
    EXTERNAL = "external"
    ANCHOR = "anchor"
    INTERNAL = "internal"


@dataclass(frozen=True)
class CrawlLinksOptions:
    """链接处理选项

    Attributes:
        markdown_link_resolution: 站内链接解析策略（absolute / relative / shortest）
        pretty_links: 站内链接文本只保留最后一段路径
        open_links_in_new_tab: 外部链接在新标签页打开
        lazy_load: 资源标签添加 loading="lazy"
        external_link_icon: 外部链接末尾添加图标
    """
    markdown_link_resolution: str = "absolute"
    pretty_links: bool = True
    open_links_in_new_tab: bool = False
    lazy_load: bool = False
    external_link_icon: bool = True

    def __post_init__(self):
        if self.markdown_link_resolution not in STRATEGIES:
            raise ValueError(f"未知的链接解析策略: {self.markdown_link_resolution}")

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "CrawlLinksOptions":
        """从配置字典创建选项，未设置的项使用默认值

        Args:
            values: 配置字典，键可以是下划线或驼峰写法

        Returns:
            CrawlLinksOptions: 选项
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (values or {}).items():
            key = OPTION_ALIASES.get(key, key)
            if key in known:
                kwargs[key] = value
            else:
                logger.warning(_t("忽略未知的链接配置项") + f": {key}")
        return cls(**kwargs)


def classify_link(dest: str) -> LinkKind:
    """链接分类

    Args:
        dest: 书写的链接目标

    Returns:
        LinkKind: 分类结果
    """
    if is_absolute_url(dest):
        return LinkKind.EXTERNAL
    if dest.startswith("#"):
        return LinkKind.ANCHOR
    return LinkKind.INTERNAL


def canonicalize_destination(dest: str, cur_slug: FullSlug) -> Tuple[FullSlug, SimpleSlug]:
    """把解析后的站内链接规范化为 slug

    以当前文档所在位置为基准解析链接，丢弃查询串和锚点；
    以 / 结尾的目录链接指向该目录的 index 文档。

    Args:
        dest: 解析器输出的 href
        cur_slug: 当前文档的 FullSlug

    Returns:
        tuple: (FullSlug, SimpleSlug)

    Raises:
        MalformedDestinationError: 链接无法解析
    """
    try:
        path = urlsplit(urljoin(CANONICAL_BASE + folder_of(cur_slug), dest)).path
    except ValueError as e:
        raise MalformedDestinationError(dest, str(e)) from e

    if path.endswith("/"):
        path += INDEX

    # 解析过程可能对原本未编码的字符做了百分号编码
    full = strip_slashes(unquote(path))
    return full, simplify_slug(full)


def _class_list(node: Tag) -> list:
    value = node.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def _add_class(node: Tag, name: str) -> None:
    classes = _class_list(node)
    if name not in classes:
        classes.append(name)
    node["class"] = classes


def _sole_text_child(node: Tag) -> Optional[NavigableString]:
    """元素只有一个文本子节点时返回该节点"""
    if len(node.contents) != 1:
        return None
    child = node.contents[0]
    if isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
        return child
    return None


def _has_external_icon(node: Tag) -> bool:
    for child in node.find_all("svg", recursive=False):
        if EXTERNAL_ICON_CLASS in _class_list(child):
            return True
    return False


def _make_external_icon(tree: BeautifulSoup) -> Tag:
    icon = tree.new_tag("svg", attrs={
        "aria-hidden": "true",
        "class": EXTERNAL_ICON_CLASS,
        "style": "max-width:0.8em;max-height:0.8em",
        "viewBox": "0 0 512 512",
    })
    icon.append(tree.new_tag("path", attrs={"d": EXTERNAL_ICON_PATH}))
    return icon


class CrawlLinks:
    """单文档链接处理器

    选项和解析器在构造时确定，transform 的所有中间状态都只存在于单次调用内，
    因此同一个实例可以并发处理不同的文档。
    """

    def __init__(self, options: Optional[CrawlLinksOptions] = None,
                 resolver: Resolver = transform_link, fail_strategy: str = "log"):
        """初始化链接处理器

        Args:
            options: 处理选项，默认使用 CrawlLinksOptions()
            resolver: 站内链接解析器
            fail_strategy: 单个元素失败时的处理策略，见 utils.error_handler
        """
        self.options = options or CrawlLinksOptions()
        self.resolver = resolver
        self.fail_strategy = fail_strategy

    def transform(self, document: Document, ctx: BuildCtx) -> Document:
        """处理一个文档

        原地修改文档树，并把出链集合写入 document.data["links"]。

        Args:
            document: 待处理文档，data 中必须有 slug
            ctx: 构建上下文

        Returns:
            Document: 同一个文档对象
        """
        file_slug = document.data.get("slug")
        if not file_slug:
            raise LinkError(_t("文档缺少 slug"))

        outgoing: Set[SimpleSlug] = set()
        transform_options = TransformOptions(
            strategy=self.options.markdown_link_resolution,
            all_slugs=tuple(ctx.all_slugs),
        )

        def record_failure(error):
            document.warn(f"{file_slug}: {error}")

        handler = ErrorHandler(
            fail_strategy=self.fail_strategy,
            contained_errors=(LinkError, ValueError),
            on_failure=record_failure,
        )
        resolve_anchor = handler.contain(self._resolve_anchor)
        resolve_asset = handler.contain(self._resolve_asset)

        # 先取快照，注入的图标节点不会被遍历到
        for node in document.tree.find_all(True):
            if node.name == "a" and isinstance(node.get("href"), str):
                self._process_anchor(document.tree, node, file_slug, transform_options,
                                     outgoing, resolve_anchor)

            if node.name in ASSET_TAGS and isinstance(node.get("src"), str):
                if self.options.lazy_load:
                    node["loading"] = "lazy"
                if not is_absolute_url(node["src"]):
                    resolve_asset(node, file_slug, transform_options)

        document.data[LINKS_FIELD] = list(outgoing)
        logger.debug(_t("处理链接完成") + f": {file_slug}, " + _t("出链") + f" {len(outgoing)}")
        return document

    def _process_anchor(self, tree, node, file_slug, transform_options, outgoing, resolve_anchor):
        dest = node["href"]
        kind = classify_link(dest)
        is_external = kind is LinkKind.EXTERNAL
        _add_class(node, "external" if is_external else "internal")
        # 上一次处理留下的 data-slug：href、文本和 alias 都已是最终结果
        processed_slug = node.get(SLUG_ATTRIBUTE) if kind is LinkKind.INTERNAL else None

        if is_external and self.options.external_link_icon and not _has_external_icon(node):
            node.append(_make_external_icon(tree))

        text_child = _sole_text_child(node)
        if processed_slug is None and text_child is not None and str(text_child) != dest:
            _add_class(node, "alias")

        if is_external and self.options.open_links_in_new_tab:
            node["target"] = "_blank"

        if kind is not LinkKind.INTERNAL:
            return

        if processed_slug is not None:
            outgoing.add(simplify_slug(processed_slug))
            return

        simple = resolve_anchor(node, dest, file_slug, transform_options)
        if simple is not None:
            outgoing.add(simple)

        if self.options.pretty_links:
            text_child = _sole_text_child(node)
            if text_child is not None and not str(text_child).startswith("#"):
                text_child.replace_with(basename(str(text_child)))

    def _resolve_anchor(self, node, dest, file_slug, transform_options):
        """改写站内链接的 href 并返回目标 SimpleSlug"""
        dest = node["href"] = self.resolver(file_slug, dest, transform_options)

        # 解析结果只剩锚点（或解析器给出了绝对 URL）时不进入出链集合
        if classify_link(dest) is not LinkKind.INTERNAL:
            return None

        full, simple = canonicalize_destination(dest, file_slug)
        node[SLUG_ATTRIBUTE] = full
        return simple

    def _resolve_asset(self, node, file_slug, transform_options):
        node["src"] = self.resolver(file_slug, node["src"], transform_options)
