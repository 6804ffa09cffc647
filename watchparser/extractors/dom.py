"""watchparser.extractors.dom - tree-query capability used by the extractors.

The extractors only talk to a :class:`Node`: select descendants by a CSS
pattern, read an attribute, read trimmed text, step to the parent.  Any
object with those four methods can back them; :class:`SoupNode` is the
default, wrapping BeautifulSoup with the lxml parser.

Usage::

    from watchparser.extractors.dom import parse_html

    root = parse_html(html)
    for anchor in root.select("a[href]"):
        print(anchor.attr("href"), anchor.text())
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag


@runtime_checkable
class Node(Protocol):
    """Minimal read-only view of one element in a markup tree."""

    def select(self, pattern: str) -> list[Node]:
        """Return descendants matching CSS *pattern*, in document order."""
        ...

    def attr(self, name: str) -> str | None:
        ...

    def text(self) -> str:
        """Text content of the element, whitespace-trimmed."""
        ...

    def parent(self) -> Node | None:
        ...


def first(node: Node, pattern: str) -> Node | None:
    """Return the first descendant of *node* matching *pattern*, or ``None``."""
    matches = node.select(pattern)
    return matches[0] if matches else None


class SoupNode:
    """:class:`Node` backed by a BeautifulSoup ``Tag``."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name}>)"

    def select(self, pattern: str) -> list[Node]:
        return [SoupNode(t) for t in self._tag.select(pattern) if isinstance(t, Tag)]

    def attr(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        # multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text(self) -> str:
        return self._tag.get_text().strip()

    def parent(self) -> Node | None:
        parent = self._tag.parent
        if parent is None or not isinstance(parent, Tag):
            return None
        return SoupNode(parent)


def parse_html(html: str) -> SoupNode:
    """Parse *html* into a :class:`SoupNode` rooted at the document."""
    return SoupNode(BeautifulSoup(html or "", "lxml"))
