"""Queryable HTML tree used by the extractors and the fragment resolver.

Everything outside this module talks to :class:`QueryableNode`, so the parsing
backend can be replaced without touching the extraction rules. The default backend
is BeautifulSoup with the lxml parser.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag

HTML_PARSER = "lxml"


class QueryableNode(Protocol):
    """Minimal capabilities required from an HTML element."""

    @property
    def id(self) -> Optional[str]: ...

    def select(self, selector: str) -> List["QueryableNode"]: ...

    def select_one(self, selector: str) -> Optional["QueryableNode"]: ...

    def find_by_id(self, element_id: str) -> Optional["QueryableNode"]: ...

    def attr(self, name: str) -> Optional[str]: ...

    def has_class(self, name: str) -> bool: ...

    def children(self) -> List["QueryableNode"]: ...

    def next_sibling(self) -> Optional["QueryableNode"]: ...

    def parent(self) -> Optional["QueryableNode"]: ...

    def inner_html(self) -> str: ...

    def text(self) -> str: ...

    def remove(self) -> None: ...


class SoupNode:
    """:class:`QueryableNode` implementation wrapping a BeautifulSoup tag."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name} id={self.id!r}>)"

    @property
    def id(self) -> Optional[str]:
        return self.attr("id")

    def select(self, selector: str) -> List[SoupNode]:
        return [SoupNode(tag) for tag in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional[SoupNode]:
        tag = self._tag.select_one(selector)
        return SoupNode(tag) if tag is not None else None

    def find_by_id(self, element_id: str) -> Optional[SoupNode]:
        # Rustdoc ids contain dots, so CSS id selectors would need escaping.
        tag = self._tag.find(id=element_id)
        return SoupNode(tag) if isinstance(tag, Tag) else None

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def has_class(self, name: str) -> bool:
        return name in (self._tag.get("class") or [])

    def children(self) -> List[SoupNode]:
        return [SoupNode(child) for child in self._tag.children if isinstance(child, Tag)]

    def next_sibling(self) -> Optional[SoupNode]:
        sibling = self._tag.find_next_sibling()
        return SoupNode(sibling) if sibling is not None else None

    def parent(self) -> Optional[SoupNode]:
        parent = self._tag.parent
        return SoupNode(parent) if parent is not None else None

    def inner_html(self) -> str:
        return self._tag.decode_contents()

    def text(self) -> str:
        return self._tag.get_text()

    def remove(self) -> None:
        self._tag.decompose()


def parse_html(markup: str | bytes) -> SoupNode:
    """Parse a complete HTML document and return its root node."""
    return SoupNode(BeautifulSoup(markup, HTML_PARSER))


def load_html(path: Path) -> SoupNode:
    """Read and parse an HTML file."""
    return parse_html(path.read_text(encoding="utf-8"))


def iter_subtree(node: QueryableNode) -> Iterator[QueryableNode]:
    """Yield ``node`` and its element descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))
