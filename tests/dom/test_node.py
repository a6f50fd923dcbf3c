"""Tests for the read-only document tree."""

from __future__ import annotations

import pytest

from threadscope.dom.node import Node, NodeKind, element, text

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sample_tree() -> tuple[Node, Node, Node, Node]:
    """Build ``<div><p>Hi <b>there</b></p><span>x</span></div>``."""
    bold = element("b", None, "there")
    para = element("p", {"class": "lead  intro"}, "Hi ", bold)
    span = element("span", {"id": "tail"}, "x")
    root = element("div", None, para, span)
    return root, para, bold, span


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    """Tests for building nodes."""

    def test_string_children_become_text_nodes(self) -> None:
        node = element("p", None, "hello")
        assert node.children[0].kind is NodeKind.TEXT
        assert node.children[0].value == "hello"

    def test_tag_is_lowercased(self) -> None:
        assert element("DIV").tag == "div"

    def test_parent_links_are_set(self) -> None:
        root, para, bold, _ = _sample_tree()
        assert bold.parent is para
        assert para.parent is root
        assert root.parent is None

    def test_node_cannot_be_attached_twice(self) -> None:
        child = text("shared")
        element("p", None, child)
        with pytest.raises(ValueError, match="already attached"):
            element("p", None, child)

    def test_text_node_cannot_have_children(self) -> None:
        with pytest.raises(ValueError):
            Node(NodeKind.TEXT, value="x", children=[text("y")])

    def test_attrs_are_read_only(self) -> None:
        node = element("a", {"href": "/x"})
        with pytest.raises(TypeError):
            node.attrs["href"] = "/y"  # type: ignore[index]


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


class TestAccessors:
    """Tests for text, classes, and attributes."""

    def test_text_concatenates_descendants(self) -> None:
        root, para, _, _ = _sample_tree()
        assert para.text == "Hi there"
        assert root.text == "Hi therex"

    def test_classes_split_on_whitespace(self) -> None:
        _, para, _, _ = _sample_tree()
        assert para.classes == ("lead", "intro")

    def test_id_and_get(self) -> None:
        _, _, _, span = _sample_tree()
        assert span.id == "tail"
        assert span.get("missing") is None
        assert span.get("missing", "d") == "d"

    def test_single_text_child(self) -> None:
        _, para, bold, _ = _sample_tree()
        assert bold.single_text_child is True
        assert para.single_text_child is False


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


class TestTraversal:
    """Tests for document-order iteration and ancestry."""

    def test_iter_descendants_is_preorder(self) -> None:
        root, para, bold, span = _sample_tree()
        elements = list(root.iter_elements())
        assert elements == [para, bold, span]

    def test_iter_descendants_excludes_self(self) -> None:
        root, *_ = _sample_tree()
        assert root not in list(root.iter_descendants())

    def test_ancestors_respects_limit(self) -> None:
        root, para, bold, _ = _sample_tree()
        assert list(bold.ancestors()) == [para, root]
        assert list(bold.ancestors(1)) == [para]
        assert list(bold.ancestors(0)) == []

    def test_contains(self) -> None:
        root, para, bold, span = _sample_tree()
        assert root.contains(bold)
        assert para.contains(para)
        assert not para.contains(span)

    def test_precedes_follows_document_order(self) -> None:
        root, para, bold, span = _sample_tree()
        assert root.precedes(para)
        assert bold.precedes(span)
        assert not span.precedes(para)

    def test_root(self) -> None:
        root, _, bold, _ = _sample_tree()
        assert bold.root() is root
