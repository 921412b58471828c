"""Slug 工具模块

站点内文档标识（slug）的基础操作：
- FullSlug：保留目录/index 区分的完整标识，如 notes/index
- SimpleSlug：去掉末尾 index 的简化标识，作为链接图的节点键
- URL 判定、锚点拆分、路径拼接
"""

import re
import posixpath
from typing import Tuple

FullSlug = str
SimpleSlug = str

INDEX = "index"

# 带协议的绝对 URL（不限于 http/https）
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*?:")
# Windows 盘符路径不是 URL
_WINDOWS_PATH_RE = re.compile(r"^[a-zA-Z]:\\")
# 锚点 slug 化时保留的字符
_ANCHOR_STRIP_RE = re.compile(r"[^\w\- ]")


def is_absolute_url(url: str) -> bool:
    """判断是否为绝对 URL

    任意协议（mailto:、ftp:、https: 等）以及协议相对形式（//host/path）都算绝对 URL。

    Args:
        url: 链接目标

    Returns:
        bool: 是否为绝对 URL
    """
    if url.startswith("//"):
        return True
    if _WINDOWS_PATH_RE.match(url):
        return False
    return bool(_SCHEME_RE.match(url))


def strip_slashes(s: str, only_strip_prefix: bool = False) -> str:
    """去掉开头（以及可选的结尾）的一个 /"""
    if s.startswith("/"):
        s = s[1:]
    if not only_strip_prefix and s.endswith("/"):
        s = s[:-1]
    return s


def _ends_with_segment(s: str, suffix: str) -> bool:
    return s == suffix or s.endswith("/" + suffix)


def _trim_suffix(s: str, suffix: str) -> str:
    if _ends_with_segment(s, suffix):
        s = s[:-len(suffix)]
    return s


def simplify_slug(fp: FullSlug) -> SimpleSlug:
    """FullSlug 转 SimpleSlug

    去掉末尾的 index 段和首尾的 /，结果为空时返回 "/"。
    例如：notes/index -> notes，index -> /，a/b -> a/b
    因此 a、a/ 和 a/index 在链接图中是同一个节点。

    Args:
        fp: 完整 slug

    Returns:
        str: 简化 slug
    """
    res = strip_slashes(_trim_suffix(fp, INDEX))
    return res if res else "/"


def folder_of(fp: FullSlug) -> str:
    """文档所在目录形式的路径

    去掉末尾的 index 段但保留目录分隔符，用作解析相对链接的基准。
    例如：notes/index -> notes/，a/b -> a/b，index -> 空字符串
    """
    return strip_slashes(_trim_suffix(fp, INDEX), True)


def slug_anchor(anchor: str) -> str:
    """锚点文本 slug 化（GitHub 标题锚点规则）"""
    return _ANCHOR_STRIP_RE.sub("", anchor.lower()).replace(" ", "-")


def split_anchor(link: str) -> Tuple[str, str]:
    """拆分路径和锚点

    锚点部分会被 slug 化；PDF 链接的锚点（页码等）保持原样。

    Args:
        link: 链接，如 page#Some Heading

    Returns:
        tuple: (路径, 锚点)，锚点带 # 前缀，没有锚点时为空字符串
    """
    fp, sep, anchor = link.partition("#")
    if not sep:
        return fp, ""
    if fp.endswith(".pdf"):
        return fp, "#" + anchor
    return fp, "#" + slug_anchor(anchor)


def get_file_extension(fp: str) -> str:
    """返回文件扩展名（含 .），没有扩展名时返回空字符串"""
    match = re.search(r"\.[A-Za-z0-9]+$", fp)
    return match.group(0) if match else ""


def _sluggify(s: str) -> str:
    segments = []
    for segment in s.split("/"):
        segment = re.sub(r"\s", "-", segment)
        segment = segment.replace("&", "-and-").replace("%", "-percent")
        segment = segment.replace("?", "").replace("#", "")
        segments.append(segment)
    joined = "/".join(segments)
    return joined[:-1] if joined.endswith("/") else joined


def slugify_file_path(fp: str, exclude_ext: bool = False) -> FullSlug:
    """文件路径转 FullSlug

    .md / .html 扩展名会被去掉，其他扩展名（如 .png、.pdf）保留。
    _index 视为 index。

    Args:
        fp: 相对于站点根目录的文件路径
        exclude_ext: 是否总是去掉扩展名

    Returns:
        str: 完整 slug
    """
    fp = strip_slashes(fp.replace("\\", "/"))
    ext = get_file_extension(fp)
    without_ext = fp[:-len(ext)] if ext else fp
    if exclude_ext or ext in (".md", ".html", ""):
        ext = ""

    slug = _sluggify(without_ext)
    if _ends_with_segment(slug, "_index"):
        slug = slug[:-len("_index")] + INDEX

    return slug + ext


def is_folder_path(fplike: str) -> bool:
    """判断路径是否指向目录（以 / 结尾或以 index 结尾）"""
    return (
        fplike.endswith("/")
        or _ends_with_segment(fplike, INDEX)
        or _ends_with_segment(fplike, INDEX + ".md")
        or _ends_with_segment(fplike, INDEX + ".html")
    )


def join_segments(*args: str) -> str:
    """拼接路径段，保留首段开头和末段结尾的 /"""
    if not args:
        return ""
    parts = [strip_slashes(seg) for seg in args if seg not in ("", "/")]
    joined = "/".join(parts)
    if args[0].startswith("/"):
        joined = "/" + joined
    if args[-1].endswith("/"):
        joined = joined + "/"
    return joined


def path_to_root(slug: FullSlug) -> str:
    """从当前文档回到站点根目录的相对路径，如 a/b/c -> ../.."""
    depth = len([x for x in slug.split("/") if x]) - 1
    if depth <= 0:
        return "."
    return "/".join([".."] * depth)


def resolve_relative(current: FullSlug, target: FullSlug) -> str:
    """计算从 current 指向 target 的相对链接，目录型目标保留末尾的 /"""
    simple = simplify_slug(target)
    res = join_segments(path_to_root(current), simple)
    if simple != "/" and is_folder_path(target):
        res += "/"
    return res


def basename(value: str) -> str:
    """取路径最后一段（忽略末尾的 /），与 Node 的 path.basename 一致，"/" 得到空串"""
    return posixpath.basename(value.rstrip("/"))
