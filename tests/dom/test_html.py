"""Tests for the BeautifulSoup-backed HTML adapter."""

from __future__ import annotations

import pytest

from threadscope.dom.html import DOCUMENT_TAG, parse_html
from threadscope.dom.query import HasClass, Tag, select_one
from threadscope.domain.errors import MalformedDocumentError


class TestParseHtml:
    """Tests for parse_html."""

    def test_root_is_document(self) -> None:
        root = parse_html("<p>x</p>")
        assert root.tag == DOCUMENT_TAG
        assert root.parent is None

    def test_entities_are_decoded(self) -> None:
        root = parse_html('<span class="OZZZK">Jane Doe&lt;jane@x.com&gt;</span>')
        node = select_one(root, HasClass("OZZZK"))
        assert node is not None
        assert node.text == "Jane Doe<jane@x.com>"

    def test_class_list_is_flattened(self) -> None:
        root = parse_html('<div class="a  b c">x</div>')
        node = select_one(root, Tag("div"))
        assert node is not None
        assert node.attrs["class"] == "a b c"
        assert node.classes == ("a", "b", "c")

    def test_scripts_styles_and_comments_are_dropped(self) -> None:
        root = parse_html(
            "<div><script>var x = 1;</script><style>p{}</style><!-- hidden -->Visible</div>"
        )
        assert root.text == "Visible"

    def test_bytes_input(self) -> None:
        root = parse_html("<p>café</p>".encode())
        assert "café" in root.text

    def test_rejects_non_markup(self) -> None:
        with pytest.raises(MalformedDocumentError):
            parse_html(42)  # type: ignore[arg-type]
