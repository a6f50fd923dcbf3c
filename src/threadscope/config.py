"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables (prefix ``THREADSCOPE_``) and a cached ``get_settings()`` accessor.
Extraction functions take a ``Settings`` argument explicitly; the cached
accessor is only the default for callers that do not pass one.

IMPORTANT: This module has ZERO imports from the ``threadscope`` package to
prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

from functools import lru_cache

import structlog
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Extraction tuning knobs loaded from environment variables and ``.env``.

    The ancestor limits bound every upward tree walk; the length thresholds
    decide which text counts as a plausible message body.  The default
    ``placeholder_body`` wording, "No message content could be extracted", is
    what hosts display and compare against; override it with
    ``THREADSCOPE_PLACEHOLDER_BODY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="THREADSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False

    # -- Heuristics ------------------------------------------------------------
    min_text_block_length: int = Field(default=30, ge=0)
    substantial_text_length: int = Field(default=100, ge=0)
    expansion_ancestor_limit: int = Field(default=7, ge=0)
    container_ancestor_limit: int = Field(default=5, ge=0)
    placeholder_body: str = "No message content could be extracted"

    # Literal fragments that identify the message the reader has open, used
    # as the last expansion signal (e.g. a known signature line).
    content_patterns: list[str] = Field(default_factory=list)

    # -- Post-processing -------------------------------------------------------
    normalize_timestamps: bool = False
    strip_quoted_replies: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    The ``@lru_cache`` decorator ensures environment variables are parsed
    exactly once.  Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.

    Raises:
        ValidationError: If an environment override has the wrong type.
    """
    try:
        return Settings()
    except ValidationError as exc:
        logger.error("settings_validation_failed", errors=exc.errors())
        raise
