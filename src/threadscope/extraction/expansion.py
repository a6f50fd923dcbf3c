"""Expansion detection: which message in a thread is the one being read.

Webmail threads render one message fully ("expanded") and the rest as
collapsed summaries.  Three signals are checked in order and the first
decisive one wins; they are never combined or scored:

1. a structural flag (``aria-expanded="true"`` or a marker class) on the
   message subtree or one of its close ancestors;
2. the uniquely-tagged rendered body node, attributed to the message that
   contains it or, failing that, to the nearest message preceding it;
3. caller-supplied content patterns found in a message's text.

When none fires the result is ``-1`` and no message is treated as expanded.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from threadscope.dom.node import Node
from threadscope.dom.query import Selector, select_all, select_one
from threadscope.extraction.locators import VariantProfile

logger = structlog.get_logger()

NOT_EXPANDED = -1


def detect_expanded_index(
    candidates: Sequence[Node],
    container: Node,
    profile: VariantProfile,
    *,
    anchors: Sequence[Node] | None = None,
    patterns: Iterable[str] = (),
    ancestor_limit: int = 7,
) -> int:
    """Return the index of the expanded message among *candidates*.

    Args:
        candidates: Message subtrees in document order.
        container: The thread container holding all candidates.
        profile: Variant profile supplying markers and the unique-body selector.
        anchors: Per-candidate nodes used for the "nearest preceding" rule
            (the sender labels); defaults to *candidates*.
        patterns: Literal text fragments identifying the open message.
        ancestor_limit: Maximum ancestor hops for the structural flag.

    Returns:
        The index of the expanded candidate, or ``-1`` if undecidable.
    """
    if not candidates:
        return NOT_EXPANDED

    anchors = anchors or candidates
    index = _by_structural_flag(candidates, anchors, profile.structural_flags, ancestor_limit)
    if index != NOT_EXPANDED:
        logger.debug("expansion_detected", signal="structural_flag", index=index)
        return index

    if profile.unique_body is not None:
        index = _by_unique_body(candidates, anchors, container, profile.unique_body)
        if index != NOT_EXPANDED:
            logger.debug("expansion_detected", signal="unique_body", index=index)
            return index

    index = _by_content_pattern(candidates, tuple(patterns))
    if index != NOT_EXPANDED:
        logger.debug("expansion_detected", signal="content_pattern", index=index)
        return index

    logger.info("expansion_ambiguous", candidates=len(candidates))
    return NOT_EXPANDED


def _is_flagged(node: Node, markers: Sequence[Selector]) -> bool:
    return any(marker(node) for marker in markers)


def _flag_owner(node: Node, candidates: Sequence[Node], anchors: Sequence[Node]) -> int:
    """Index of the message a flagged node belongs to, or ``-1`` if shared.

    A node holding exactly one anchor belongs to that anchor's message.
    Otherwise the one candidate enclosing it without holding another anchor
    owns it, and failing that the last anchor preceding it.
    """
    held = [index for index, anchor in enumerate(anchors) if node.contains(anchor)]
    if held:
        return held[0] if len(held) == 1 else NOT_EXPANDED

    owners = [
        index
        for index, candidate in enumerate(candidates)
        if candidate.contains(node)
        and not any(
            other_index != index and candidate.contains(anchor)
            for other_index, anchor in enumerate(anchors)
        )
    ]
    if len(owners) == 1:
        return owners[0]

    preceding = [index for index, anchor in enumerate(anchors) if anchor.precedes(node)]
    return preceding[-1] if preceding else NOT_EXPANDED


def _by_structural_flag(
    candidates: Sequence[Node],
    anchors: Sequence[Node],
    markers: Sequence[Selector],
    ancestor_limit: int,
) -> int:
    if not markers:
        return NOT_EXPANDED
    for index, candidate in enumerate(candidates):
        for node in (candidate, *candidate.iter_elements()):
            # Subtrees of short messages can overlap; a flag counts only for its owner.
            if _is_flagged(node, markers) and _flag_owner(node, candidates, anchors) == index:
                return index
        for ancestor in candidate.ancestors(ancestor_limit):
            # A flag shared with another message says nothing about this one.
            if any(
                other_index != index and ancestor.contains(other)
                for other_index, other in enumerate(candidates)
            ):
                break
            if _is_flagged(ancestor, markers):
                return index
    return NOT_EXPANDED


def _by_unique_body(
    candidates: Sequence[Node],
    anchors: Sequence[Node],
    container: Node,
    unique_body: Selector,
) -> int:
    for body in select_all(container, unique_body):
        for index, candidate in enumerate(candidates):
            if candidate.contains(body):
                return index
        preceding = [index for index, anchor in enumerate(anchors) if anchor.precedes(body)]
        if preceding:
            return preceding[-1]
    return NOT_EXPANDED


def _by_content_pattern(candidates: Sequence[Node], patterns: tuple[str, ...]) -> int:
    patterns = tuple(pattern for pattern in patterns if pattern)
    if not patterns:
        return NOT_EXPANDED
    for index, candidate in enumerate(candidates):
        content = candidate.text
        if any(pattern in content for pattern in patterns):
            return index
    return NOT_EXPANDED


def contains_pattern(node: Node, patterns: Iterable[str]) -> bool:
    """True if any non-empty pattern occurs in the text of *node*."""
    content = node.text
    return any(pattern and pattern in content for pattern in patterns)


def find_expanded_container(
    node: Node,
    profile: VariantProfile,
    *,
    patterns: Iterable[str] = (),
    ancestor_limit: int = 7,
) -> Node | None:
    """Return the expanded message container enclosing (or equal to) *node*.

    *node* itself is returned when it holds an expansion flag, a caller
    pattern or a unique body.  Otherwise its ancestors are walked (bounded by
    *ancestor_limit*) looking for a flagged node or one holding a flag, a
    unique body or a body indicator.

    Returns:
        The container, or ``None`` if the message does not look expanded.
    """
    patterns = tuple(patterns)
    flag = profile.expansion_flag
    if flag is not None and select_one(node, flag):
        return node
    if contains_pattern(node, patterns):
        return node
    if profile.unique_body is not None and select_one(node, profile.unique_body):
        return node

    for current in (node, *node.ancestors(ancestor_limit)):
        if _is_flagged(current, profile.structural_flags):
            return current
        if flag is not None and select_one(current, flag):
            return current
        if profile.unique_body is not None and select_one(current, profile.unique_body):
            return current
        if any(select_one(current, indicator) for indicator in profile.body_indicators):
            return current
    return None
