"""Document tree: read-only node type, selectors, and the HTML adapter."""

from threadscope.dom.html import parse_html
from threadscope.dom.node import Node, NodeKind, element, text
from threadscope.dom.query import (
    AllOf,
    AttrContains,
    AttrEquals,
    AttrPrefix,
    ChildOf,
    ClassContains,
    HasAttr,
    HasClass,
    Selector,
    Tag,
    Within,
    closest,
    iter_matches,
    select_all,
    select_one,
)

__all__ = [
    "AllOf",
    "AttrContains",
    "AttrEquals",
    "AttrPrefix",
    "ChildOf",
    "ClassContains",
    "HasAttr",
    "HasClass",
    "Node",
    "NodeKind",
    "Selector",
    "Tag",
    "Within",
    "closest",
    "element",
    "iter_matches",
    "parse_html",
    "select_all",
    "select_one",
    "text",
]
