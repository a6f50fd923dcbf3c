"""Timestamp fallback and normalization.

Webmail clients render timestamps in many display formats (``Mon 3/4/2024
10:15 AM``, ``Apr 24 (2 days ago)``...).  ``standardize_timestamp`` turns the
ones it can parse into ISO 8601; everything else is returned unchanged.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

import structlog
from dateutil import parser as date_parser

logger = structlog.get_logger()

_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_YEAR = re.compile(r"\b\d{4}\b")


def now_iso() -> str:
    """Return the current instant as an ISO 8601 string in UTC."""
    return datetime.now(UTC).isoformat()


def standardize_timestamp(raw: str, *, today: datetime | None = None) -> str:
    """Convert a displayed timestamp to ISO 8601 where possible.

    Relative suffixes in parentheses (``"Apr 24 (2 days ago)"``) are dropped,
    and dates without a year get the current year.

    Args:
        raw: Timestamp text as found in the document.
        today: Reference date for year completion (defaults to now, UTC).

    Returns:
        An ISO 8601 string, or *raw* unchanged if it cannot be parsed.
    """
    value = raw.strip()
    if not value:
        return raw
    if _ISO_PREFIX.match(value):
        return value

    today = today or datetime.now(UTC)
    if "(" in value and ")" in value:
        value = value.split("(", 1)[0].strip()
        if not _YEAR.search(value):
            value = f"{value}, {today.year}"

    default = datetime(today.year, today.month, today.day)
    try:
        return date_parser.parse(value, default=default).isoformat()
    except (ValueError, OverflowError) as exc:
        logger.debug("timestamp_unparsed", raw=raw, error=str(exc))
        return raw
