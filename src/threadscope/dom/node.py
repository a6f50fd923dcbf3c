"""Read-only document tree used as extraction input.

A ``Node`` is either an element (tag, attributes, ordered children) or a text
leaf.  Trees are built bottom-up with :func:`element` and :func:`text` (or from
HTML via :mod:`threadscope.dom.html`) and are never mutated afterwards: a node
can be attached to exactly one parent, and the only state computed later is a
lazily cached text concatenation and document-order index.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType


class NodeKind(StrEnum):
    """Discriminator between element and text nodes."""

    ELEMENT = "element"
    TEXT = "text"


class Node:
    """A node in a read-only document tree.

    Attributes:
        kind: Element or text.
        tag: Lower-cased tag name (empty for text nodes).
        attrs: Immutable attribute mapping (empty for text nodes).
        children: Ordered child nodes (empty for text nodes).
        value: Raw text of a text node (empty for elements).
        parent: The enclosing element, or ``None`` for the root.
    """

    __slots__ = ("kind", "tag", "attrs", "children", "value", "parent", "_text", "_order")

    def __init__(
        self,
        kind: NodeKind,
        *,
        tag: str = "",
        attrs: Mapping[str, str] | None = None,
        children: Iterable[Node] = (),
        value: str = "",
    ) -> None:
        self.kind = kind
        self.tag = tag.lower()
        self.attrs: Mapping[str, str] = MappingProxyType(dict(attrs or {}))
        self.children: tuple[Node, ...] = tuple(children)
        self.value = value
        self.parent: Node | None = None
        self._text: str | None = None
        self._order: dict[int, int] | None = None

        if kind is NodeKind.TEXT and self.children:
            raise ValueError("Text nodes cannot have children")
        for child in self.children:
            if child.parent is not None:
                raise ValueError("Node is already attached to a parent")
            child.parent = self

    def __repr__(self) -> str:
        if self.kind is NodeKind.TEXT:
            return f"Node(text={self.value[:30]!r})"
        return f"Node(<{self.tag}> attrs={dict(self.attrs)!r}, children={len(self.children)})"

    # -- basic accessors -------------------------------------------------------

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.kind is NodeKind.TEXT

    @property
    def text(self) -> str:
        """Concatenated text of this node and all descendants."""
        if self._text is None:
            if self.kind is NodeKind.TEXT:
                self._text = self.value
            else:
                self._text = "".join(node.value for node in self.iter_descendants() if node.is_text)
        return self._text

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(self.attrs.get("class", "").split())

    @property
    def id(self) -> str:
        return self.attrs.get("id", "")

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of attribute *name*, or *default*."""
        return self.attrs.get(name, default)

    @property
    def single_text_child(self) -> bool:
        """True when this element has exactly one child and it is a text node."""
        return len(self.children) == 1 and self.children[0].is_text

    # -- traversal -------------------------------------------------------------

    def iter_descendants(self) -> Iterator[Node]:
        """Yield all descendants depth-first in document order (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def iter_elements(self) -> Iterator[Node]:
        """Yield descendant elements in document order."""
        return (node for node in self.iter_descendants() if node.is_element)

    def ancestors(self, limit: int | None = None) -> Iterator[Node]:
        """Yield the parent chain, nearest first, at most *limit* nodes."""
        current = self.parent
        hops = 0
        while current is not None and (limit is None or hops < limit):
            yield current
            current = current.parent
            hops += 1

    def root(self) -> Node:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def contains(self, other: Node) -> bool:
        """True if *other* is this node or one of its descendants."""
        if other is self:
            return True
        return any(ancestor is self for ancestor in other.ancestors())

    @property
    def position(self) -> int:
        """Pre-order index of this node within its whole tree."""
        root = self.root()
        if root._order is None:
            order = {id(root): 0}
            for index, node in enumerate(root.iter_descendants(), start=1):
                order[id(node)] = index
            root._order = order
        return root._order[id(self)]

    def precedes(self, other: Node) -> bool:
        """True if this node comes before *other* in document order."""
        return self.position < other.position


def text(value: str) -> Node:
    """Create a text leaf."""
    return Node(NodeKind.TEXT, value=value)


def element(
    tag: str,
    attrs: Mapping[str, str] | None = None,
    *children: Node | str,
) -> Node:
    """Create an element; string children become text nodes.

    Example::

        element("div", {"class": "OZZZK"}, "Jane Doe<jane@x.com>")
    """
    return Node(
        NodeKind.ELEMENT,
        tag=tag,
        attrs=attrs,
        children=[text(child) if isinstance(child, str) else child for child in children],
    )
