"""Field extraction for a single message subtree.

Each field is resolved by its variant's locator chain first and then by
progressively more generic fallbacks.  Sender and subject are required for a
single-message extraction; timestamp and body always resolve to something
(the current instant and the placeholder body respectively).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from threadscope.config import Settings
from threadscope.dom.node import Node
from threadscope.domain.errors import MissingRequiredFieldError
from threadscope.domain.models import MessageRecord, Sender
from threadscope.domain.types import ExtractionField
from threadscope.extraction.expansion import find_expanded_container
from threadscope.extraction.locators import LocatorChain, VariantProfile
from threadscope.extraction.replies import strip_quoted_history
from threadscope.extraction.text_blocks import (
    find_date_attribute,
    find_date_text,
    largest_leaf_div,
    longest_leaf_text,
    longest_text_block,
)
from threadscope.extraction.timestamps import now_iso, standardize_timestamp

logger = structlog.get_logger()


def sender_from_node(node: Node) -> tuple[Sender, str]:
    """Build a :class:`Sender` from a located sender node.

    Nodes carrying ``email`` (and optionally ``name``) attributes are read
    from those attributes; otherwise the node text is split with
    :meth:`Sender.from_label`.

    Returns:
        The sender and the raw label text it was derived from.
    """
    label = node.text.strip()
    email = (node.get("email") or "").strip()
    if email:
        name = (node.get("name") or "").strip() or label or email
        return Sender(name=name, email=email), label
    return Sender.from_label(label), label


def extract_timestamp(root: Node, chains: Sequence[LocatorChain]) -> str:
    """Resolve the timestamp text for the message under *root*.

    Order: each chain in *chains*, a date-shaped ``title`` attribute, a leaf
    text matching the date regex, and finally the current instant.
    """
    for locator in chains:
        node = locator.locate(root)
        if node is not None:
            return node.text.strip()

    value = find_date_attribute(root)
    if value:
        logger.debug("timestamp_from_attribute", value=value)
        return value

    value = find_date_text(root)
    if value:
        logger.debug("timestamp_from_text", value=value)
        return value

    logger.debug("timestamp_defaulted_to_now")
    return now_iso()


def extract_body(
    root: Node,
    profile: VariantProfile,
    settings: Settings,
    *,
    subject: str = "",
    sender_label: str = "",
    timestamp: str = "",
    patterns: Iterable[str] = (),
) -> str:
    """Resolve the body text of a single message.

    Structural chains are tried first (expansion-aware for variants that
    define an expanded chain), then the largest leaf ``div`` where the variant
    allows it, then the longest text block, then the placeholder.  A body that
    merely repeats the subject is replaced by the longest other leaf text.
    """
    node = profile.body.locate(root)

    if node is None and profile.expansion_aware:
        expanded = find_expanded_container(
            root,
            profile,
            patterns=patterns,
            ancestor_limit=settings.expansion_ancestor_limit,
        )
        flagged = profile.expansion_flag is not None and profile.expansion_flag(root)
        logger.debug("body_expansion_checked", expanded=expanded is not None or flagged)
        if expanded is not None or flagged:
            node = profile.expanded_body.locate(expanded or root)

    if node is None:
        node = profile.fallback_body.locate(root)

    if node is None and profile.scan_content_divs:
        node = largest_leaf_div(root, min_length=settings.substantial_text_length)

    if node is not None:
        body = node.text.strip()
    else:
        logger.debug("body_locators_exhausted", fallback="text_blocks")
        body = longest_text_block(
            root,
            exclude=(subject,) if subject else (),
            min_length=settings.min_text_block_length,
        ) or settings.placeholder_body

    if subject and body == subject:
        logger.warning("body_matches_subject", subject=subject)
        excluded = {value for value in (subject, sender_label, timestamp) if value}
        body = longest_leaf_text(root, exclude=excluded) or settings.placeholder_body

    return body


def finalize_body(body: str, settings: Settings) -> str:
    """Apply optional post-processing to a resolved body."""
    if settings.strip_quoted_replies and body != settings.placeholder_body:
        return strip_quoted_history(body)
    return body


def finalize_timestamp(timestamp: str, settings: Settings) -> str:
    """Apply optional normalization to a resolved timestamp."""
    if settings.normalize_timestamps:
        return standardize_timestamp(timestamp)
    return timestamp


def extract_message(
    root: Node,
    profile: VariantProfile,
    settings: Settings,
    *,
    patterns: Iterable[str] = (),
) -> MessageRecord:
    """Extract one message (sender, subject, timestamp, body) from *root*.

    Args:
        root: Subtree holding exactly one rendered message.
        profile: Locator tables for the document variant.
        settings: Heuristic thresholds and post-processing switches.
        patterns: Caller-supplied fragments identifying the open message.

    Returns:
        The extracted ``MessageRecord`` (never marked expanded).

    Raises:
        MissingRequiredFieldError: If no sender or no subject is found.
    """
    sender_node = profile.sender.locate(root)
    if sender_node is None:
        logger.warning("required_field_missing", field=ExtractionField.SENDER.value)
        raise MissingRequiredFieldError(ExtractionField.SENDER)
    sender, sender_label = sender_from_node(sender_node)

    subject_node = profile.subject.locate(root)
    if subject_node is None:
        logger.warning("required_field_missing", field=ExtractionField.SUBJECT.value)
        raise MissingRequiredFieldError(ExtractionField.SUBJECT)
    subject = subject_node.text.strip()

    timestamp = extract_timestamp(root, (profile.timestamp, profile.timestamp_fallback))
    body = extract_body(
        root,
        profile,
        settings,
        subject=subject,
        sender_label=sender_label,
        timestamp=timestamp,
        patterns=patterns,
    )

    logger.info(
        "message_extracted",
        variant=str(profile.variant),
        sender=sender.name,
        body_length=len(body),
    )
    return MessageRecord(
        sender=sender,
        subject=subject,
        timestamp=finalize_timestamp(timestamp, settings),
        body=finalize_body(body, settings),
    )
