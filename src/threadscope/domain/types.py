"""Domain enumerations for thread extraction."""

from enum import StrEnum


class DocumentVariant(StrEnum):
    """Known webmail document shapes, detected from the location string."""

    OUTLOOK_LIVE = "outlook_live"
    OUTLOOK_OFFICE = "outlook_office"
    GMAIL = "gmail"
    GENERIC = "generic"


class ExtractionField(StrEnum):
    """Fields of a message record located through locator chains."""

    SENDER = "sender"
    SUBJECT = "subject"
    TIMESTAMP = "timestamp"
    BODY = "body"
