"""站内链接处理模块

负责页面中链接的分类、改写和出链收集。
"""

__version__ = "0.1.0"

from .crawl_links import (
    LINKS_FIELD,
    SLUG_ATTRIBUTE,
    CrawlLinks,
    CrawlLinksOptions,
    LinkKind,
    canonicalize_destination,
    classify_link,
)
from .document import BuildCtx, Document
from .errors import LinkError, MalformedDestinationError
from .resolver import TransformOptions, transform_link

__all__ = [
    "LINKS_FIELD",
    "SLUG_ATTRIBUTE",
    "CrawlLinks",
    "CrawlLinksOptions",
    "LinkKind",
    "canonicalize_destination",
    "classify_link",
    "BuildCtx",
    "Document",
    "LinkError",
    "MalformedDestinationError",
    "TransformOptions",
    "transform_link",
]
