"""Tests for Settings defaults, environment overrides, and the cached accessor."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from threadscope.config import Settings, get_settings

# ---------------------------------------------------------------------------
# Settings defaults
# ---------------------------------------------------------------------------


class TestSettingsDefaults:
    """Verify that Settings fields have the expected default values."""

    def test_settings_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is False
        assert s.min_text_block_length == 30
        assert s.substantial_text_length == 100
        assert s.expansion_ancestor_limit == 7
        assert s.container_ancestor_limit == 5
        assert s.placeholder_body == "No message content could be extracted"
        assert s.content_patterns == []
        assert s.normalize_timestamps is False
        assert s.strip_quoted_replies is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("THREADSCOPE_PRODUCTION", "true")
        monkeypatch.setenv("THREADSCOPE_EXPANSION_ANCESTOR_LIMIT", "3")
        monkeypatch.setenv("THREADSCOPE_CONTENT_PATTERNS", '["Kind regards, Jane"]')
        monkeypatch.setenv("THREADSCOPE_NORMALIZE_TIMESTAMPS", "1")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is True
        assert s.expansion_ancestor_limit == 3
        assert s.content_patterns == ["Kind regards, Jane"]
        assert s.normalize_timestamps is True

    def test_unprefixed_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRODUCTION", "true")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is False

    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("THREADSCOPE_MIN_TEXT_BLOCK_LENGTH=12\n")

        s = Settings(_env_file=env_file)  # type: ignore[call-arg]

        assert s.min_text_block_length == 12

    def test_negative_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, container_ancestor_limit=-1)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# get_settings cache
# ---------------------------------------------------------------------------


class TestGetSettings:
    """Verify get_settings caching and validation failures."""

    def test_returns_same_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("THREADSCOPE_PLACEHOLDER_BODY", "(empty)")
        get_settings.cache_clear()

        second = get_settings()

        assert second is not first
        assert second.placeholder_body == "(empty)"

    def test_invalid_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("THREADSCOPE_SUBSTANTIAL_TEXT_LENGTH", "many")

        with pytest.raises(ValidationError):
            get_settings()
