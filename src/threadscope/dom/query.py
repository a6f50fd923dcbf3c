"""Selector objects and query helpers over :class:`~threadscope.dom.node.Node` trees.

Selectors are small frozen value objects, so locator chains can be declared as
data.  Each selector matches element nodes only and renders a CSS-like
description for logging (``str(selector)``).  Selectors combine with ``&``::

    Tag("div") & AttrEquals("tabindex", "0") & ClassContains("GNoVo")
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from threadscope.dom.node import Node


class Selector:
    """Base class for node predicates."""

    def matches(self, node: Node) -> bool:
        raise NotImplementedError

    def __call__(self, node: Node) -> bool:
        return node.is_element and self.matches(node)

    def __and__(self, other: Selector) -> Selector:
        left = self.selectors if isinstance(self, AllOf) else (self,)
        right = other.selectors if isinstance(other, AllOf) else (other,)
        return AllOf((*left, *right))


@dataclass(frozen=True)
class Tag(Selector):
    name: str

    def matches(self, node: Node) -> bool:
        return node.tag == self.name.lower()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class HasClass(Selector):
    """Matches ``.name`` (whole class token)."""

    name: str

    def matches(self, node: Node) -> bool:
        return self.name in node.classes

    def __str__(self) -> str:
        return f".{self.name}"


@dataclass(frozen=True)
class ClassContains(Selector):
    """Matches ``[class*=fragment]`` (substring of the raw class attribute)."""

    fragment: str

    def matches(self, node: Node) -> bool:
        return self.fragment in node.attrs.get("class", "")

    def __str__(self) -> str:
        return f'[class*="{self.fragment}"]'


@dataclass(frozen=True)
class HasAttr(Selector):
    name: str

    def matches(self, node: Node) -> bool:
        return self.name in node.attrs

    def __str__(self) -> str:
        return f"[{self.name}]"


@dataclass(frozen=True)
class AttrEquals(Selector):
    name: str
    value: str

    def matches(self, node: Node) -> bool:
        return node.attrs.get(self.name) == self.value

    def __str__(self) -> str:
        return f'[{self.name}="{self.value}"]'


@dataclass(frozen=True)
class AttrContains(Selector):
    name: str
    fragment: str

    def matches(self, node: Node) -> bool:
        value = node.attrs.get(self.name)
        return value is not None and self.fragment in value

    def __str__(self) -> str:
        return f'[{self.name}*="{self.fragment}"]'


@dataclass(frozen=True)
class AttrPrefix(Selector):
    name: str
    prefix: str

    def matches(self, node: Node) -> bool:
        value = node.attrs.get(self.name)
        return value is not None and value.startswith(self.prefix)

    def __str__(self) -> str:
        return f'[{self.name}^="{self.prefix}"]'


@dataclass(frozen=True)
class AllOf(Selector):
    selectors: tuple[Selector, ...]

    def matches(self, node: Node) -> bool:
        return all(selector.matches(node) for selector in self.selectors)

    def __str__(self) -> str:
        return "".join(str(selector) for selector in self.selectors)


@dataclass(frozen=True)
class ChildOf(Selector):
    """Matches ``parent > selector``: a direct child of a *parent* match."""

    parent: Selector
    selector: Selector

    def matches(self, node: Node) -> bool:
        return (
            self.selector.matches(node)
            and node.parent is not None
            and self.parent(node.parent)
        )

    def __str__(self) -> str:
        return f"{self.parent} > {self.selector}"


@dataclass(frozen=True)
class Within(Selector):
    """Matches ``ancestor selector``: a descendant of any *ancestor* match."""

    ancestor: Selector
    selector: Selector

    def matches(self, node: Node) -> bool:
        return self.selector.matches(node) and any(
            self.ancestor(parent) for parent in node.ancestors()
        )

    def __str__(self) -> str:
        return f"{self.ancestor} {self.selector}"


# ---------------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------------


def iter_matches(root: Node, selector: Selector) -> Iterator[Node]:
    """Yield descendants of *root* matching *selector*, in document order."""
    return (node for node in root.iter_elements() if selector.matches(node))


def select_one(root: Node, selector: Selector) -> Node | None:
    """Return the first descendant of *root* matching *selector*."""
    return next(iter_matches(root, selector), None)


def select_all(root: Node, selector: Selector) -> list[Node]:
    """Return every descendant of *root* matching *selector*."""
    return list(iter_matches(root, selector))


def closest(
    node: Node,
    selector: Selector,
    *,
    limit: int | None = None,
    within: Node | None = None,
) -> Node | None:
    """Return *node* or its nearest ancestor matching *selector*.

    Args:
        node: Starting node (checked first).
        selector: Predicate to match.
        limit: Maximum number of ancestor hops.
        within: Stop before leaving this subtree (the boundary itself is
            never returned).
    """
    if selector(node):
        return node
    for ancestor in node.ancestors(limit):
        if ancestor is within:
            return None
        if selector(ancestor):
            return ancestor
    return None
