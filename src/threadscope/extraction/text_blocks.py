"""Text heuristics used when structural locators come up empty.

Provides helpers for:
- Ranking raw text leaves by length to recover a message body
- Enumerating "leaf text" elements (one element wrapping one text node)
- Spotting date-shaped strings in attributes and short text
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator

from threadscope.dom.node import Node

DATE_TEXT = re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}|\d{1,2}:\d{2}|AM|PM", re.IGNORECASE)


def iter_text_nodes(root: Node) -> Iterator[str]:
    """Yield the trimmed value of every text node under *root*, depth-first."""
    nodes = [root] if root.is_text else root.iter_descendants()
    for node in nodes:
        if node.is_text:
            value = node.value.strip()
            if value:
                yield value


def iter_leaf_texts(root: Node) -> Iterator[tuple[Node, str]]:
    """Yield ``(element, trimmed_text)`` for elements wrapping a single text node."""
    for node in root.iter_elements():
        if node.single_text_child:
            yield node, node.text.strip()


def longest_text_block(
    root: Node,
    *,
    exclude: Collection[str] = (),
    exclude_containing: Collection[str] = (),
    min_length: int = 30,
) -> str | None:
    """Return the longest text node under *root* that could be a message body.

    Candidates must be longer than *min_length* after trimming, must not equal
    any value in *exclude* and must not contain any value in
    *exclude_containing*.  Ties keep the earliest node in document order.

    Args:
        root: Subtree to scan.
        exclude: Exact values already claimed by other fields (e.g. subject).
        exclude_containing: Fragments that disqualify a candidate (e.g. the
            sender label in a thread message header).
        min_length: Minimum trimmed length, exclusive.

    Returns:
        The winning text, or ``None`` if no candidate qualifies.
    """
    best: str | None = None
    for value in iter_text_nodes(root):
        if len(value) <= min_length or value in exclude:
            continue
        if any(fragment and fragment in value for fragment in exclude_containing):
            continue
        if best is None or len(value) > len(best):
            best = value
    return best


def longest_leaf_text(root: Node, *, exclude: Collection[str] = ()) -> str | None:
    """Return the longest non-empty leaf text not listed in *exclude*."""
    best: str | None = None
    for _, value in iter_leaf_texts(root):
        if value and value not in exclude and (best is None or len(value) > len(best)):
            best = value
    return best


def largest_leaf_div(root: Node, *, min_length: int = 100) -> Node | None:
    """Return the ``div`` with the most text among those without nested ``div``s."""
    best: Node | None = None
    best_length = min_length
    for node in root.iter_elements():
        if node.tag != "div":
            continue
        length = len(node.text.strip())
        if length > best_length and not any(child.tag == "div" for child in node.iter_elements()):
            best = node
            best_length = length
    return best


def find_date_attribute(root: Node, *, attribute: str = "title") -> str | None:
    """Return the first *attribute* value under *root* that looks like a date.

    A colon or a hyphen anywhere in the value counts as date-shaped.
    """
    for node in root.iter_elements():
        value = node.attrs.get(attribute)
        if value and (":" in value or "-" in value):
            return value.strip()
    return None


def find_date_text(root: Node) -> str | None:
    """Return the first leaf text under *root* matching :data:`DATE_TEXT`."""
    for _, value in iter_leaf_texts(root):
        if value and DATE_TEXT.search(value):
            return value
    return None
