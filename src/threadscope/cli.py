"""Command-line host for extracting a thread from a saved webmail page.

Reads an HTML snapshot, runs the extraction pipeline with the page's
address, and prints the result.  Output formats: JSON (default) or a short
table.  Exits 0 on success and 1 when extraction fails.

Usage::

    python -m threadscope.cli page.html --url "https://outlook.office.com/mail/inbox/id/AAQk%3D"
    python -m threadscope.cli page.html --url "$URL" --format table --pattern "Kind regards, Jane"
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from threadscope.config import get_settings
from threadscope.dom.html import parse_html
from threadscope.domain.models import (
    ExtractionResult,
    ExtractionSuccess,
    MessageRecord,
    ThreadRecord,
)
from threadscope.extraction.orchestrator import extract
from threadscope.observability.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the extraction command.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(description="Extract an email thread from an HTML snapshot")

    parser.add_argument("path", type=Path, help="HTML file to read ('-' for stdin)")
    parser.add_argument(
        "--url",
        type=str,
        default="",
        help="Address the page was captured from (selects the webmail variant)",
    )
    parser.add_argument(
        "--pattern",
        action="append",
        dest="patterns",
        help="Text fragment identifying the open message (repeatable)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "table"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--normalize-timestamps",
        action="store_true",
        help="Convert displayed timestamps to ISO 8601",
    )
    parser.add_argument(
        "--strip-quoted",
        action="store_true",
        help="Keep only the newest reply in each body",
    )

    return parser


def _format_message(message: MessageRecord, marker: str) -> str:
    sender = message.sender.name
    if message.sender.email:
        sender = f"{sender} <{message.sender.email}>"
    preview = message.body.replace("\n", " ")
    if len(preview) > 60:
        preview = preview[:57] + "..."
    return f"{marker:<3}{message.timestamp:<28}{sender:<40}{preview}"


def format_table(result: ExtractionResult) -> str:
    """Render *result* as a compact human-readable table."""
    if not isinstance(result, ExtractionSuccess):
        return f"FAILED: {result.reason}"

    lines = [
        f"Location:     {result.location_ref or '-'}",
        f"Conversation: {result.conversation_id or '-'}",
        f"Subject:      {result.data.subject or '-'}",
        "",
    ]
    data = result.data
    if isinstance(data, ThreadRecord):
        lines.append(_format_message(data.primary, "*"))
        lines.extend(_format_message(message, "") for message in data.history)
    else:
        lines.append(_format_message(data, "*"))
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the extraction CLI.

    Args:
        argv: Command-line arguments (defaults to ``sys.argv[1:]``).

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(production=settings.production)

    updates: dict[str, object] = {}
    if args.normalize_timestamps:
        updates["normalize_timestamps"] = True
    if args.strip_quoted:
        updates["strip_quoted_replies"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    if str(args.path) == "-":
        markup = sys.stdin.read()
    else:
        try:
            markup = args.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            print(f"Cannot read {args.path}: {exc}", file=sys.stderr)
            return 2

    result = extract(parse_html(markup), args.url, settings=settings, patterns=args.patterns)

    if args.format == "json":
        print(result.model_dump_json(indent=2))
    else:
        print(format_table(result))

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
