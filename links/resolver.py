"""链接解析器

把文档中书写的站内链接转换为输出 HTML 中使用的 href。
支持三种解析策略：
- absolute：相对于站点根目录的路径
- relative：保持书写时的相对路径
- shortest：文件名在全站唯一时只用文件名定位，否则退回 absolute
"""

from dataclasses import dataclass
from typing import Callable, Tuple
from urllib.parse import unquote

from links.slugs import (
    FullSlug,
    is_folder_path,
    join_segments,
    path_to_root,
    resolve_relative,
    simplify_slug,
    slugify_file_path,
    split_anchor,
    strip_slashes,
)

STRATEGIES = ("absolute", "relative", "shortest")

# 链接选项在配置文件中允许的驼峰写法
OPTION_ALIASES = {
    "markdownLinkResolution": "markdown_link_resolution",
    "prettyLinks": "pretty_links",
    "openLinksInNewTab": "open_links_in_new_tab",
    "lazyLoad": "lazy_load",
    "externalLinkIcon": "external_link_icon",
}


@dataclass(frozen=True)
class TransformOptions:
    """解析选项

    Attributes:
        strategy: 解析策略，取值见 STRATEGIES
        all_slugs: 全站 FullSlug 目录（只读）
    """
    strategy: str = "absolute"
    all_slugs: Tuple[FullSlug, ...] = ()


# 解析器签名：(当前文档 slug, 书写的目标, 选项) -> 输出 href
Resolver = Callable[[FullSlug, str, TransformOptions], str]


def _is_relative_segment(segment: str) -> bool:
    return segment in ("", ".", "..")


def _add_relative_to_start(s: str) -> str:
    if s == "":
        s = "."
    if not s.startswith("."):
        s = join_segments(".", s)
    return s


def transform_internal_link(link: str) -> str:
    """规范化书写的站内链接

    例如 ../Some Folder/Note.md#My Heading -> ../Some-Folder/Note#my-heading

    Args:
        link: 书写的链接

    Returns:
        str: 以 ./ 或 ../ 开头的相对链接
    """
    fplike, anchor = split_anchor(unquote(link))

    folder_path = is_folder_path(fplike)
    segments = [seg for seg in fplike.split("/") if seg]
    prefix = "/".join(seg for seg in segments if _is_relative_segment(seg))
    fp = "/".join(seg for seg in segments if not _is_relative_segment(seg))

    simple = simplify_slug(slugify_file_path(fp))
    joined = join_segments(strip_slashes(prefix), strip_slashes(simple))
    trail = "/" if folder_path else ""
    return _add_relative_to_start(joined) + trail + anchor


def transform_link(src: FullSlug, target: str, opts: TransformOptions) -> str:
    """按策略把站内链接转换为 href

    Args:
        src: 当前文档的 FullSlug
        target: 书写的链接目标
        opts: 解析选项

    Returns:
        str: 输出 HTML 中使用的 href
    """
    target_slug = transform_internal_link(target)

    if opts.strategy == "relative":
        return target_slug

    folder_tail = "/" if is_folder_path(target_slug) else ""
    # 链接按站点根目录解释，./ 和 ../ 前缀不改变目标，去掉后再次解析结果不变
    canonical_slug = "/".join(
        seg for seg in target_slug.split("/") if not _is_relative_segment(seg)
    )
    target_canonical, target_anchor = split_anchor(canonical_slug)

    if opts.strategy == "shortest":
        matching = [
            slug for slug in opts.all_slugs
            if slug.split("/")[-1] == target_canonical
        ]
        # 文件名唯一时直接链接到该文档
        if len(matching) == 1:
            return resolve_relative(src, matching[0]) + target_anchor

    return join_segments(path_to_root(src), canonical_slug) + folder_tail
