"""Logging setup for threadscope hosts."""

from threadscope.observability.logging import configure_logging

__all__ = ["configure_logging"]
