"""Tests for the extraction CLI: argument parsing, output formats, exit codes."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from threadscope import cli
from threadscope.cli import build_parser, format_table, main
from threadscope.domain.models import ExtractionFailure

OFFICE_URL = "https://outlook.office.com/mail/inbox/id/AAQk%3D"
GENERIC_URL = "https://webmail.example.org/message/48213"

THREAD_HTML = """
<div>
  <div role="heading">Venue options</div>
  <div role="listitem">
    <span class="OZZZK">Alice Smith&lt;alice@x.com&gt;</span>
    <span class="AL_OM">Mon 3/4/2024 9:15 AM</span>
    <div class="_nzWz">Three venues shortlisted for the offsite.</div>
  </div>
  <div role="listitem" aria-expanded="true">
    <span class="OZZZK">Bob Stone&lt;bob@x.com&gt;</span>
    <span class="AL_OM">Tue 3/5/2024 10:00 AM</span>
    <div id="UniqueMessageBody_2">The lakeside one looks best to me.</div>
  </div>
</div>
"""

MESSAGE_HTML = """
<h1>Hello</h1>
<span class="OZZZK">Jane Doe&lt;jane@x.com&gt;</span>
<span class="AL_OM">Mon 3/4/2024 9:15 AM</span>
<div role="region" aria-label="Message body"><p>See you then.</p></div>
"""


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the test suite's logging configuration in place."""
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)


def _write(tmp_path: Path, markup: str) -> Path:
    path = tmp_path / "page.html"
    path.write_text(markup, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestBuildParser:
    """Tests for build_parser."""

    def test_accepts_all_arguments(self) -> None:
        args = build_parser().parse_args(
            [
                "page.html",
                "--url",
                OFFICE_URL,
                "--pattern",
                "Best, DR",
                "--pattern",
                "Cheers",
                "--format",
                "table",
                "--normalize-timestamps",
                "--strip-quoted",
            ]
        )

        assert args.path == Path("page.html")
        assert args.url == OFFICE_URL
        assert args.patterns == ["Best, DR", "Cheers"]
        assert args.format == "table"
        assert args.normalize_timestamps is True
        assert args.strip_quoted is True

    def test_default_values(self) -> None:
        args = build_parser().parse_args(["page.html"])

        assert args.url == ""
        assert args.patterns is None
        assert args.format == "json"
        assert args.normalize_timestamps is False
        assert args.strip_quoted is False

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["page.html", "--format", "xml"])


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestFormatTable:
    """Tests for format_table."""

    def test_failure(self) -> None:
        assert format_table(ExtractionFailure(reason="boom")) == "FAILED: boom"


class TestMain:
    """Tests for the main() entry point."""

    def test_thread_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main([str(_write(tmp_path, THREAD_HTML)), "--url", OFFICE_URL])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["ok"] is True
        assert payload["conversation_id"] == "AAQk="
        assert payload["data"]["subject"] == "Venue options"
        assert payload["data"]["primary"]["sender"]["name"] == "Bob Stone"
        assert [m["sender"]["name"] for m in payload["data"]["history"]] == ["Alice Smith"]

    def test_thread_table(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(
            [str(_write(tmp_path, THREAD_HTML)), "--url", OFFICE_URL, "--format", "table"]
        )

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Conversation: AAQk=" in out
        assert "Subject:      Venue options" in out
        lines = out.splitlines()
        primary = next(line for line in lines if line.startswith("*"))
        assert "Bob Stone <bob@x.com>" in primary

    def test_single_message_with_normalized_timestamp(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = main(
            [
                str(_write(tmp_path, MESSAGE_HTML)),
                "--url",
                GENERIC_URL,
                "--normalize-timestamps",
            ]
        )

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["data"]["timestamp"] == "2024-03-04T09:15:00"
        assert payload["data"]["body"] == "See you then."

    def test_reads_stdin(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(MESSAGE_HTML))

        exit_code = main(["-", "--url", GENERIC_URL])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["data"]["subject"] == "Hello"

    def test_failure_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main([str(_write(tmp_path, "<p>nothing here</p>")), "--url", GENERIC_URL])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert payload["ok"] is False
        assert "sender" in payload["reason"].lower()

    def test_unreadable_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main([str(tmp_path / "missing.html")])

        assert exit_code == 2
        assert "Cannot read" in capsys.readouterr().err
