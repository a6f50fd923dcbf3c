"""Build a :class:`~threadscope.dom.node.Node` tree from HTML markup.

Uses BeautifulSoup with the stdlib ``html.parser`` backend by default.
Comments, doctypes and processing instructions are dropped, as are the
contents of ``script``/``style``/``template`` elements, so text concatenation
matches what a reader sees in the rendered page.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from threadscope.dom.node import Node, NodeKind
from threadscope.domain.errors import MalformedDocumentError

DOCUMENT_TAG = "#document"

_SKIPPED_TAGS = frozenset({"script", "style", "template", "noscript"})
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction, CData)


def parse_html(markup: str | bytes, *, parser: str = "html.parser") -> Node:
    """Parse *markup* into a read-only node tree.

    Args:
        markup: HTML document or fragment.
        parser: BeautifulSoup tree builder name (``html.parser``, ``lxml``...).

    Returns:
        A ``#document`` element whose children are the parsed top-level nodes.

    Raises:
        MalformedDocumentError: If *markup* is not ``str``/``bytes``.
    """
    if not isinstance(markup, (str, bytes)):
        raise MalformedDocumentError(
            f"Expected HTML as str or bytes, got {type(markup).__name__}"
        )
    soup = BeautifulSoup(markup, parser)
    return Node(NodeKind.ELEMENT, tag=DOCUMENT_TAG, children=_convert_children(soup))


def _convert_children(tag: Tag) -> list[Node]:
    children: list[Node] = []
    for child in tag.children:
        if isinstance(child, Tag):
            if child.name in _SKIPPED_TAGS:
                continue
            children.append(
                Node(
                    NodeKind.ELEMENT,
                    tag=child.name,
                    attrs=_normalize_attrs(child.attrs),
                    children=_convert_children(child),
                )
            )
        elif isinstance(child, NavigableString) and not isinstance(child, _SKIPPED_STRINGS):
            children.append(Node(NodeKind.TEXT, value=str(child)))
    return children


def _normalize_attrs(attrs: dict[str, object]) -> dict[str, str]:
    """Flatten multi-valued attributes (``class``, ``rel``...) to strings."""
    normalized: dict[str, str] = {}
    for name, value in attrs.items():
        if isinstance(value, (list, tuple)):
            normalized[name] = " ".join(str(item) for item in value)
        else:
            normalized[name] = "" if value is None else str(value)
    return normalized
