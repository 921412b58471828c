"""文档与构建上下文

Document 是单个页面在处理流程中的载体：
- tree：BeautifulSoup 解析出的文档树，处理过程中原地修改
- data：文档元数据，slug 字段为文档自身的 FullSlug
- warnings：处理过程中的告警，由外部流程决定如何展示
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from bs4 import BeautifulSoup

from links.slugs import FullSlug


@dataclass
class Document:
    """单个页面"""
    tree: BeautifulSoup
    data: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_html(cls, html_content: str, slug: FullSlug) -> "Document":
        """解析 HTML 并创建文档

        Args:
            html_content: 已渲染的 HTML
            slug: 文档的 FullSlug

        Returns:
            Document: 新文档
        """
        return cls(tree=BeautifulSoup(html_content, "html.parser"), data={"slug": slug})

    @property
    def slug(self) -> FullSlug:
        return self.data["slug"]

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def render(self) -> str:
        return str(self.tree)


@dataclass(frozen=True)
class BuildCtx:
    """一次站点构建的只读上下文

    Attributes:
        all_slugs: 全站所有文档的 FullSlug
    """
    all_slugs: Tuple[FullSlug, ...] = ()
