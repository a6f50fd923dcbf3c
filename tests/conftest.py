"""Shared pytest fixtures for the threadscope test suite.

HTML snapshots below are trimmed-down versions of real webmail reading panes.
Sender labels use ``&lt;``/``&gt;`` so the address survives HTML parsing as
text, exactly as the rendered page shows it.
"""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
import structlog

from threadscope.config import Settings, get_settings
from threadscope.dom.html import parse_html
from threadscope.dom.node import Node
from threadscope.observability.logging import configure_logging

OFFICE_THREAD_HTML = """
<div class="thread-pane">
  <div role="heading">Quarterly planning</div>
  <div role="listitem">
    <span class="OZZZK">Alice Smith&lt;alice@x.com&gt;</span>
    <span class="AL_OM">Mon 3/4/2024 9:15 AM</span>
    <div class="_nzWz">Preview of the first message in the conversation.</div>
  </div>
  <div role="listitem">
    <span class="OZZZK">Bob Stone&lt;bob@x.com&gt;</span>
    <span class="AL_OM">Tue 3/5/2024 10:00 AM</span>
    <div class="_nzWz">Second message preview shown while collapsed.</div>
  </div>
  <div role="listitem" aria-expanded="true">
    <span class="OZZZK">Carol Jones&lt;carol@x.com&gt;</span>
    <span class="AL_OM">Wed 3/6/2024 11:30 AM</span>
    <div role="document"><div id="UniqueMessageBody_3" aria-label="Message body" tabindex="0">Full body of the third message, the one currently open.</div></div>
  </div>
</div>
"""

SINGLE_MESSAGE_HTML = """
<div class="reading-pane">
  <h1>Hello</h1>
  <span class="OZZZK">Jane Doe&lt;jane@x.com&gt;</span>
  <div role="region" aria-label="Message body"><p>See you then.</p></div>
</div>
"""


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Clear get_settings lru_cache before each test."""
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Send log output to an in-memory stream instead of the captured stderr."""
    configure_logging(stream=io.StringIO())
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from any ``.env`` file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def placeholder(settings: Settings) -> str:
    return settings.placeholder_body


@pytest.fixture
def office_thread() -> Node:
    """A three-message Outlook Office thread with the last message expanded."""
    return parse_html(OFFICE_THREAD_HTML)


@pytest.fixture
def single_message() -> Node:
    """A generic reading pane with sender, heading subject and body region."""
    return parse_html(SINGLE_MESSAGE_HTML)
