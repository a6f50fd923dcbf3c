"""Conversation identity and document variant from the location string.

Both helpers are pure: they never raise and only look at the string they are
given.  A missing identity is normal (``None``), not an error.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

import structlog

from threadscope.domain.types import DocumentVariant
from threadscope.extraction.locators import iter_profiles

logger = structlog.get_logger()

# Ordered: the first pattern producing a non-empty decoded value wins.
IDENTITY_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("id_segment", re.compile(r"/id/([^/?#]+)", re.IGNORECASE)),
    (
        "mail_folder_fragment",
        re.compile(r"[#/](?:inbox|sent|drafts|trash|spam|category/\w+)/([^/?#]+)", re.IGNORECASE),
    ),
    ("trailing_segment", re.compile(r"/([A-Za-z0-9%]+)$")),
)


def resolve_identity(location: str) -> str | None:
    """Extract the conversation/message identifier from *location*.

    Tries each pattern in :data:`IDENTITY_PATTERNS` and returns the first
    non-empty match, URL-percent-decoded.

    Args:
        location: The document's address, e.g.
            ``https://outlook.office.com/mail/inbox/id/AAQk%3D``.

    Returns:
        The decoded identifier, or ``None`` if nothing matched.
    """
    if not isinstance(location, str):
        logger.info("identity_unresolved", reason="location is not a string")
        return None

    for name, pattern in IDENTITY_PATTERNS:
        match = pattern.search(location)
        if not match:
            continue
        try:
            identity = unquote(match.group(1), errors="strict")
        except UnicodeDecodeError as exc:
            logger.info("identity_decode_failed", pattern=name, error=str(exc))
            continue
        if identity:
            logger.debug("identity_resolved", pattern=name, identity=identity)
            return identity

    logger.info("identity_unresolved", location=location)
    return None


def detect_variant(location: str) -> str:
    """Return the registered variant whose location markers appear in *location*.

    Falls back to :attr:`DocumentVariant.GENERIC` when no profile matches.
    """
    if isinstance(location, str):
        for profile in iter_profiles():
            if any(marker in location for marker in profile.location_markers):
                return profile.variant
    return DocumentVariant.GENERIC
