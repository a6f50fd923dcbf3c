"""Strip quoted history from extracted message bodies.

Rendered webmail bodies often carry the previous messages underneath the new
text ("On Mon, ... wrote:", forwarded headers, signatures).  When enabled via
``Settings.strip_quoted_replies`` the extractor keeps only the newest part.
"""

from __future__ import annotations

from mailparser_reply import EmailReplyParser  # type: ignore[import-untyped]


def strip_quoted_history(body: str, *, languages: tuple[str, ...] = ("en",)) -> str:
    """Return the newest reply in *body*, or *body* itself if nothing remains.

    Args:
        body: Body text as recovered from the document.
        languages: Reply-header languages understood by ``mail-parser-reply``.
    """
    latest: str = EmailReplyParser(languages=list(languages)).parse_reply(text=body)
    if not latest or not latest.strip():
        return body
    return latest.strip()
