"""Domain-specific exception classes for thread extraction."""

from threadscope.domain.types import ExtractionField


class ThreadscopeError(Exception):
    """Base class for all domain errors raised during extraction."""


class MissingRequiredFieldError(ThreadscopeError):
    """Raised when a field required for single-message extraction is absent.

    Attributes:
        field: The field no locator strategy could find.
    """

    def __init__(self, field: ExtractionField) -> None:
        self.field = field
        super().__init__(f"{field.capitalize()} element not found ({field} field)")


class MalformedDocumentError(ThreadscopeError):
    """Raised when the input cannot be turned into a document tree."""
