"""Top-level extraction entry point.

``extract(root, location)`` is the single call hosts make.  It never raises:
every fault, expected or not, comes back as an ``ExtractionFailure`` whose
``reason`` carries the underlying message.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from threadscope.config import Settings, get_settings
from threadscope.dom.node import Node
from threadscope.domain.errors import ThreadscopeError
from threadscope.domain.models import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    ThreadRecord,
)
from threadscope.extraction.fields import extract_message
from threadscope.extraction.identity import detect_variant, resolve_identity
from threadscope.extraction.locators import get_profile
from threadscope.extraction.thread import reconstruct_thread, select_primary

logger = structlog.get_logger()


def extract(
    root: Node,
    location: str,
    *,
    settings: Settings | None = None,
    patterns: Iterable[str] | None = None,
) -> ExtractionResult:
    """Extract the conversation rendered under *root*.

    The document variant and conversation identity are derived from
    *location*.  Variants with thread support are reconstructed as a
    ``ThreadRecord``; when that yields nothing (or the variant has no thread
    support) a single ``MessageRecord`` is extracted from *root* instead.

    Args:
        root: Root of the (read-only) document tree.
        location: Address of the document as observed by the caller.
        settings: Extraction settings; defaults to ``get_settings()``.
        patterns: Content fragments identifying the open message; defaults
            to ``settings.content_patterns``.

    Returns:
        ``ExtractionSuccess`` with the record, or ``ExtractionFailure``.
    """
    try:
        settings = settings or get_settings()
        active_patterns = tuple(settings.content_patterns if patterns is None else patterns)

        variant = detect_variant(location)
        profile = get_profile(variant)
        conversation_id = resolve_identity(location)
        log = logger.bind(variant=str(variant), conversation_id=conversation_id)

        if profile.supports_threads:
            messages = reconstruct_thread(root, profile, settings, patterns=active_patterns)
            if messages:
                primary, history = select_primary(
                    messages, placeholder=settings.placeholder_body
                )
                record = ThreadRecord(
                    primary=primary,
                    history=history,
                    subject=messages[0].subject,
                    conversation_id=conversation_id,
                    location_ref=location,
                )
                log.info("extraction_succeeded", mode="thread", messages=len(messages))
                return ExtractionSuccess(
                    data=record, conversation_id=conversation_id, location_ref=location
                )
            log.info("thread_extraction_empty", fallback="single_message")

        message = extract_message(root, profile, settings, patterns=active_patterns)
        log.info("extraction_succeeded", mode="single_message")
        return ExtractionSuccess(
            data=message, conversation_id=conversation_id, location_ref=location
        )

    except ThreadscopeError as exc:
        logger.warning("extraction_failed", reason=str(exc))
        return ExtractionFailure(reason=str(exc))
    except Exception as exc:
        logger.exception("extraction_crashed", error_type=type(exc).__name__)
        return ExtractionFailure(reason=str(exc) or type(exc).__name__)
