from __future__ import annotations

import gc

import pytest

from docpager.core.exceptions import DocumentStructureError
from docpager.document.nodes import (
    DocumentNode,
    NodeTag,
    TextNode,
    ancestors,
    depth_first,
    is_last_child,
    make_document_node,
    make_text_node,
    sibling_index,
    text_content,
)


def test_add_child_keeps_order_and_sets_parent() -> None:
    paragraph = DocumentNode(NodeTag.PARAGRAPH)
    first = paragraph.add_child(TextNode("a"))
    second = paragraph.add_child(TextNode("b"))

    assert paragraph.children == [first, second]
    assert first.parent is paragraph
    assert second.parent is paragraph
    assert paragraph.first_child is first


def test_make_helpers_attach_to_parent() -> None:
    root = make_document_node(NodeTag.ROOT)
    heading = make_document_node(NodeTag.HEADING, root, {"level": 2})
    leaf = make_text_node("title", heading)

    assert root.children == [heading]
    assert heading.get("level") == 2
    assert leaf.parent is heading
    assert [node.tag for node in ancestors(leaf)] == [NodeTag.HEADING, NodeTag.ROOT]


def test_node_cannot_have_two_parents() -> None:
    leaf = TextNode("shared")
    first = DocumentNode(NodeTag.PARAGRAPH)
    second = DocumentNode(NodeTag.PARAGRAPH)
    first.add_child(leaf)

    with pytest.raises(DocumentStructureError, match="already belongs"):
        second.add_child(leaf)
    assert second.children == []


def test_root_cannot_be_a_child() -> None:
    with pytest.raises(DocumentStructureError, match="root"):
        DocumentNode(NodeTag.FRAGMENT).add_child(DocumentNode(NodeTag.ROOT))


def test_cycles_are_rejected() -> None:
    outer = DocumentNode(NodeTag.FRAGMENT)
    inner = DocumentNode(NodeTag.FRAGMENT)
    outer.add_child(inner)

    with pytest.raises(DocumentStructureError, match="cycle"):
        inner.add_child(outer)
    with pytest.raises(DocumentStructureError, match="cycle"):
        outer.add_child(outer)


def test_void_tags_take_no_children() -> None:
    with pytest.raises(DocumentStructureError, match="cannot have children"):
        DocumentNode(NodeTag.LINE_BREAK).add_child(TextNode("x"))


def test_text_tag_is_not_a_container() -> None:
    with pytest.raises(DocumentStructureError, match="leaf tag"):
        DocumentNode(NodeTag.TEXT)


def test_tag_properties() -> None:
    assert NodeTag.TEXT.is_leaf
    assert not NodeTag.PARAGRAPH.is_leaf
    assert NodeTag.HORIZONTAL_RULE.is_void
    assert NodeTag.LIST_ITEM.is_splittable
    assert NodeTag.ROOT.is_splittable
    assert not NodeTag.BOLD.is_splittable
    assert not NodeTag.PARAGRAPH.is_splittable


def test_nodes_compare_by_identity() -> None:
    assert TextNode("same") != TextNode("same")
    node = TextNode("same")
    assert node == node


def test_sibling_helpers() -> None:
    parent = DocumentNode(NodeTag.UNORDERED_LIST)
    items = [parent.add_child(DocumentNode(NodeTag.LIST_ITEM)) for _ in range(3)]

    assert [sibling_index(item) for item in items] == [0, 1, 2]
    assert [is_last_child(item) for item in items] == [False, False, True]
    assert is_last_child(parent)


def test_remove_child_detaches() -> None:
    parent = DocumentNode(NodeTag.PARAGRAPH)
    leaf = parent.add_child(TextNode("gone"))
    parent.remove_child(leaf)

    assert parent.children == []
    assert leaf.parent is None
    DocumentNode(NodeTag.PARAGRAPH).add_child(leaf)
    with pytest.raises(DocumentStructureError):
        parent.remove_child(leaf)


def test_parent_reference_does_not_own_the_parent() -> None:
    leaf = TextNode("orphan")
    DocumentNode(NodeTag.PARAGRAPH).add_child(leaf)
    gc.collect()

    assert leaf.parent is None


def test_depth_first_and_text_content() -> None:
    root = DocumentNode(NodeTag.ROOT)
    paragraph = root.add_child(DocumentNode(NodeTag.PARAGRAPH))
    assert isinstance(paragraph, DocumentNode)
    paragraph.add_child(TextNode("hello "))
    bold = paragraph.add_child(DocumentNode(NodeTag.BOLD))
    assert isinstance(bold, DocumentNode)
    bold.add_child(TextNode("world"))

    assert [node.tag for node in depth_first(root)] == [
        NodeTag.ROOT,
        NodeTag.PARAGRAPH,
        NodeTag.TEXT,
        NodeTag.BOLD,
        NodeTag.TEXT,
    ]
    assert text_content(root) == "hello world"
