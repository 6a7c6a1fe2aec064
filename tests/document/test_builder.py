from __future__ import annotations

import pytest

from docpager.core.exceptions import DocumentStructureError
from docpager.document.builder import (
    bold,
    code_block,
    heading,
    line_break,
    link,
    make_node,
    ordered_list,
    paragraph,
    root,
    span,
)
from docpager.document.nodes import DocumentNode, NodeTag, TextNode


def test_strings_and_numbers_become_text_leaves() -> None:
    node = paragraph("count: ", 3, " ", 1.5)

    assert all(isinstance(child, TextNode) for child in node.children)
    assert [child.data for child in node.children] == ["count: ", "3", " ", "1.5"]


def test_lists_are_flattened_and_empty_values_skipped() -> None:
    rooms = ["!a:example.org", "!b:example.org"]
    node = root(
        [paragraph(room) for room in rooms],
        None,
        False,
        (paragraph("tail"),),
    )

    assert [child.tag for child in node.children] == [NodeTag.PARAGRAPH] * 3
    assert all(child.parent is node for child in node.children)


@pytest.mark.parametrize("raw", [True, {"tag": "bold"}, object()])
def test_unexpected_children_are_rejected(raw: object) -> None:
    with pytest.raises(DocumentStructureError, match="Unexpected raw child"):
        make_node(NodeTag.FRAGMENT, raw)  # type: ignore[arg-type]


def test_attributes_are_recorded_and_none_dropped() -> None:
    title = heading("Status", level=2)
    block = code_block("print(1)")
    target = link("matrix", href="https://matrix.org")
    spoiler = span("secret", **{"data-mx-spoiler": ""})

    assert title.attributes == {"level": 2}
    assert block.attributes == {}
    assert target.attributes == {"href": "https://matrix.org"}
    assert spoiler.attributes == {"data-mx-spoiler": ""}
    assert ordered_list(start=None).attributes == {}


def test_existing_nodes_are_attached_not_copied() -> None:
    inner = bold("x")
    outer = paragraph(inner, line_break())

    assert outer.children[0] is inner
    assert inner.parent is outer
    assert isinstance(outer.children[1], DocumentNode)
