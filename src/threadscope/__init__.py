"""threadscope: rebuild email threads from loosely-labeled webmail document trees."""

from threadscope.dom import Node, element, parse_html, text
from threadscope.domain import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    MessageRecord,
    Sender,
    ThreadRecord,
)
from threadscope.extraction import extract

__all__ = [
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "MessageRecord",
    "Node",
    "Sender",
    "ThreadRecord",
    "element",
    "extract",
    "parse_html",
    "text",
]
