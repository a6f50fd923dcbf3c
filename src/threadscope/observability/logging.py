"""structlog configuration shared by the CLI and embedding hosts.

Library modules only call ``structlog.get_logger()``; hosts call
``configure_logging()`` once at startup to choose a renderer.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(production: bool = False, *, stream: TextIO | None = None) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Log lines go to *stream* (stderr by default) so that command output on
    stdout stays machine-readable.

    Args:
        production: Enable production mode if ``True``.
        stream: Destination for rendered log lines.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service="threadscope")
