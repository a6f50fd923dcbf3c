"""Thread reconstruction and primary-message selection.

Provides helpers for:
- Enumerating the messages of a rendered thread from its sender labels
- Extracting each message with expansion-aware body locators
- Choosing the primary message (the one the reader has open) and the history
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from threadscope.config import Settings
from threadscope.dom.node import Node
from threadscope.dom.query import closest, iter_matches, select_all
from threadscope.domain.models import MessageRecord
from threadscope.extraction.expansion import contains_pattern, detect_expanded_index
from threadscope.extraction.fields import (
    extract_timestamp,
    finalize_body,
    finalize_timestamp,
    sender_from_node,
)
from threadscope.extraction.locators import VariantProfile
from threadscope.extraction.text_blocks import iter_leaf_texts, longest_text_block

logger = structlog.get_logger()


def find_message_subtree(
    label: Node,
    profile: VariantProfile,
    *,
    container: Node,
    ancestor_limit: int = 5,
) -> Node:
    """Return the subtree holding the whole message introduced by *label*.

    The nearest ancestor matching one of the variant's message-container
    selectors (inside *container*) is preferred.  Without one, or when it holds
    nothing but the label, ancestors are walked until one has more than twice
    the label's text; if none does within *ancestor_limit* hops the label's
    immediate parent is used.
    """
    label_text = label.text.strip()

    for selector in profile.message_containers:
        found = closest(label, selector, within=container)
        if found is not None and found.text.strip() != label_text:
            return found

    for ancestor in label.ancestors(ancestor_limit):
        if len(ancestor.text.strip()) > len(label_text) * 2:
            return ancestor

    return label.parent or label


def _pattern_body(
    container: Node,
    profile: VariantProfile,
    patterns: tuple[str, ...],
    settings: Settings,
) -> str:
    for selector in profile.content_areas:
        for area in iter_matches(container, selector):
            if contains_pattern(area, patterns):
                return area.text.strip()
    for _, value in iter_leaf_texts(container):
        if len(value) > settings.substantial_text_length and any(p in value for p in patterns):
            return value
    return ""


def _owned_unique_body(
    label: Node,
    labels: Sequence[Node],
    subtree: Node,
    unique_bodies: Sequence[Node],
) -> Node | None:
    for node in unique_bodies:
        if node.contains(label) or label.contains(node) or subtree.contains(node):
            return node
    for node in unique_bodies:
        preceding = [candidate for candidate in labels if candidate.precedes(node)]
        if preceding and preceding[-1] is label:
            return node
    return None


def _expanded_body(
    container: Node,
    label: Node,
    labels: Sequence[Node],
    subtree: Node,
    profile: VariantProfile,
    unique_bodies: Sequence[Node],
    patterns: tuple[str, ...],
    settings: Settings,
) -> str:
    if patterns:
        # Scoped to the message subtree.
        body = _pattern_body(subtree, profile, patterns, settings)
        if body:
            logger.debug("thread_body_from_pattern", length=len(body))
            return body

    owned = _owned_unique_body(label, labels, subtree, unique_bodies)
    if owned is not None:
        body = owned.text.strip()
        if body:
            return body

    node = profile.thread_expanded_body.locate(subtree)
    if node is None:
        node = profile.thread_expanded_body.locate(container)
    return node.text.strip() if node is not None else ""


def _collapsed_body(subtree: Node, profile: VariantProfile) -> str:
    node = profile.thread_collapsed_body.locate(subtree)
    return node.text.strip() if node is not None else ""


def reconstruct_thread(
    container: Node,
    profile: VariantProfile,
    settings: Settings,
    *,
    patterns: Iterable[str] = (),
) -> list[MessageRecord]:
    """Extract every message of the thread rendered under *container*.

    Args:
        container: Root of the rendered thread.
        profile: Locator tables for the document variant.
        settings: Heuristic thresholds and post-processing switches.
        patterns: Caller-supplied fragments identifying the open message.

    Returns:
        Messages in document order; empty when the variant has no thread
        support or no sender label is present ("not a thread").
    """
    if profile.thread_sender_label is None:
        return []

    labels = [
        node
        for node in select_all(container, profile.thread_sender_label)
        if node.text.strip()
    ]
    if not labels:
        logger.info("thread_not_detected", variant=str(profile.variant))
        return []

    patterns = tuple(pattern for pattern in patterns if pattern)
    subtrees = [
        find_message_subtree(
            label,
            profile,
            container=container,
            ancestor_limit=settings.container_ancestor_limit,
        )
        for label in labels
    ]
    expanded_index = detect_expanded_index(
        subtrees,
        container,
        profile,
        anchors=labels,
        patterns=patterns,
        ancestor_limit=settings.expansion_ancestor_limit,
    )
    unique_bodies = select_all(container, profile.unique_body) if profile.unique_body else []

    messages: list[MessageRecord] = []
    for index, (label, subtree) in enumerate(zip(labels, subtrees, strict=True)):
        sender, label_text = sender_from_node(label)
        timestamp = extract_timestamp(subtree, (profile.thread_timestamp,))
        is_expanded = index == expanded_index

        if is_expanded:
            body = _expanded_body(
                container, label, labels, subtree, profile, unique_bodies, patterns, settings
            )
        else:
            body = _collapsed_body(subtree, profile)

        if not body:
            body = longest_text_block(
                subtree,
                exclude=(label_text,),
                exclude_containing=(label_text,),
                min_length=settings.min_text_block_length,
            ) or settings.placeholder_body

        subject = None
        if index == 0:
            subject_node = profile.subject.locate(container)
            subject = subject_node.text.strip() if subject_node is not None else None

        messages.append(
            MessageRecord(
                sender=sender,
                subject=subject,
                timestamp=finalize_timestamp(timestamp, settings),
                body=finalize_body(body, settings),
                is_expanded=is_expanded,
            )
        )
        logger.debug(
            "thread_message_extracted",
            index=index,
            sender=sender.name,
            expanded=is_expanded,
            body_length=len(body),
        )

    logger.info("thread_extracted", messages=len(messages), expanded_index=expanded_index)
    return messages


def select_primary(
    messages: Sequence[MessageRecord], *, placeholder: str
) -> tuple[MessageRecord, list[MessageRecord]]:
    """Split *messages* into the primary message and the thread history.

    The first message is primary unless it is collapsed while a later
    message is expanded with a recovered body; that later message is then
    promoted and the original first message takes its place in the history.
    Only the first expanded message is considered.

    Raises:
        ValueError: If *messages* is empty.
    """
    if not messages:
        raise ValueError("Cannot select a primary message from an empty thread")

    primary = messages[0]
    history = list(messages[1:])
    if primary.is_expanded:
        return primary, history

    expanded_index = next(
        (index for index, message in enumerate(messages) if message.is_expanded), None
    )
    if expanded_index is None:
        return primary, history

    promoted = messages[expanded_index]
    if not promoted.body.strip() or promoted.body == placeholder:
        logger.debug("reselection_skipped", index=expanded_index, reason="no_body")
        return primary, history

    history[expanded_index - 1] = primary
    logger.info("primary_reselected", index=expanded_index, sender=promoted.sender.name)
    return promoted, history
