"""Pydantic v2 models for extracted messages, threads, and extraction results.

All models are frozen: records are built once per extraction call and handed
to the caller as immutable, JSON-serializable values.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

_ANGLE_ADDRESS = re.compile(r"<([^>]+)>")


class Sender(BaseModel):
    """Message author split into display name and address."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str = ""

    @classmethod
    def from_label(cls, label: str) -> Sender:
        """Split a raw sender label into name and email.

        ``"Jane Doe<jane@x.com>"`` yields name ``"Jane Doe"`` and email
        ``"jane@x.com"``.  A bare address such as ``"jane@x.com"`` yields name
        ``"jane"`` and the whole label as email.  Anything else is taken as
        the name with an empty email.  The name is never empty for a
        non-empty label.
        """
        label = label.strip()
        name = label
        email = ""

        match = _ANGLE_ADDRESS.search(label)
        if match and match.group(1).strip():
            email = match.group(1).strip()
            name = label.split("<", 1)[0].strip()
        elif "@" in label:
            email = label
            name = label.split("@", 1)[0].strip()

        return cls(name=name or label, email=email)


class MessageRecord(BaseModel):
    """One message reconstructed from a document subtree.

    ``timestamp`` and ``body`` are always populated: they fall back to the
    extraction instant and the placeholder body respectively.  ``subject`` is
    only set for a single-message extraction or the first message of a thread.
    """

    model_config = ConfigDict(frozen=True)

    sender: Sender
    subject: str | None = None
    timestamp: str
    body: str
    is_expanded: bool = False


class ThreadRecord(BaseModel):
    """A primary message plus the rest of its thread.

    ``history`` never contains ``primary``; it keeps document order for the
    remaining messages.  ``subject`` is the thread subject, read from the
    first message, and survives when another message is promoted to primary.
    """

    model_config = ConfigDict(frozen=True)

    primary: MessageRecord
    history: list[MessageRecord] = Field(default_factory=list)
    subject: str | None = None
    conversation_id: str | None = None
    location_ref: str = ""


class ExtractionSuccess(BaseModel):
    """Successful extraction: a thread or a single message."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    data: ThreadRecord | MessageRecord
    conversation_id: str | None = None
    location_ref: str = ""


class ExtractionFailure(BaseModel):
    """Failed extraction with a human-readable reason."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    reason: str


ExtractionResult = ExtractionSuccess | ExtractionFailure
