"""Domain types, models, and errors for thread extraction."""

from threadscope.domain.errors import (
    MalformedDocumentError,
    MissingRequiredFieldError,
    ThreadscopeError,
)
from threadscope.domain.models import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    MessageRecord,
    Sender,
    ThreadRecord,
)
from threadscope.domain.types import DocumentVariant, ExtractionField

__all__ = [
    "DocumentVariant",
    "ExtractionFailure",
    "ExtractionField",
    "ExtractionResult",
    "ExtractionSuccess",
    "MalformedDocumentError",
    "MessageRecord",
    "MissingRequiredFieldError",
    "Sender",
    "ThreadRecord",
    "ThreadscopeError",
]
