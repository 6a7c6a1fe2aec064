"""Terse tree construction.

``make_node`` accepts loosely typed children the way a template would write
them: strings and numbers become text leaves, nested lists are flattened and
``None``/``False`` are skipped so conditional content can be inlined::

    root(
        heading("Protected rooms", level=2),
        unordered_list([list_item(link(room, href=url)) for room, url in rooms]),
        paragraph("No rooms are protected.") if not rooms else None,
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Union

from ..core.exceptions import DocumentStructureError
from .nodes import AbstractNode, DocumentNode, NodeTag, TextNode

RawChild = Union[AbstractNode, str, int, float, None, bool, Iterable["RawChild"]]


def _ensure_child(node: DocumentNode, raw: Any) -> None:
    if raw is None or raw is False:
        return
    if isinstance(raw, AbstractNode):
        node.add_child(raw)
    elif isinstance(raw, str):
        node.add_child(TextNode(raw))
    elif isinstance(raw, bool):
        raise DocumentStructureError(f"Unexpected raw child {raw!r}")
    elif isinstance(raw, (int, float)):
        node.add_child(TextNode(str(raw)))
    elif isinstance(raw, (list, tuple)):
        for item in raw:
            _ensure_child(node, item)
    else:
        raise DocumentStructureError(f"Unexpected raw child {raw!r}")


def make_node(tag: NodeTag, *children: RawChild, **attributes: Any) -> DocumentNode:
    node = DocumentNode(tag, {k: v for k, v in attributes.items() if v is not None})
    for raw in children:
        _ensure_child(node, raw)
    return node


def text(data: Any) -> TextNode:
    return TextNode(str(data))


def root(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.ROOT, *children)


def fragment(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.FRAGMENT, *children)


def heading(*children: RawChild, level: int = 1) -> DocumentNode:
    return make_node(NodeTag.HEADING, *children, level=level)


def paragraph(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.PARAGRAPH, *children)


def bold(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.BOLD, *children)


def italic(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.ITALIC, *children)


def code(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.CODE, *children)


def code_block(*children: RawChild, language: str | None = None) -> DocumentNode:
    return make_node(NodeTag.CODE_BLOCK, *children, language=language)


def link(*children: RawChild, href: str | None = None) -> DocumentNode:
    return make_node(NodeTag.LINK, *children, href=href)


def unordered_list(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.UNORDERED_LIST, *children)


def ordered_list(*children: RawChild, start: int | None = None) -> DocumentNode:
    return make_node(NodeTag.ORDERED_LIST, *children, start=start)


def list_item(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.LIST_ITEM, *children)


def line_break() -> DocumentNode:
    return make_node(NodeTag.LINE_BREAK)


def horizontal_rule() -> DocumentNode:
    return make_node(NodeTag.HORIZONTAL_RULE)


def details(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.DETAILS, *children)


def summary(*children: RawChild) -> DocumentNode:
    return make_node(NodeTag.SUMMARY, *children)


def span(*children: RawChild, **attributes: Any) -> DocumentNode:
    return make_node(NodeTag.SPAN, *children, **attributes)
