"""Markdown-flavoured plain text renderer.

Text payloads are emitted verbatim; this is the ``body`` a client without rich
text support shows, so it favours readability over round-trip fidelity.
"""

from __future__ import annotations

from typing import cast

from ..document.nodes import (
    LIST_TAGS,
    AbstractNode,
    DocumentNode,
    NodeTag,
    TextNode,
    ancestors,
    is_last_child,
    sibling_index,
)
from .base import EMIT_NOTHING, FringeRenderer, TagRenderer, static, wrap

INDENT = "  "


def _text(node: AbstractNode) -> str:
    return cast(TextNode, node).data


def _attr(node: AbstractNode, name: str, default: object = None) -> object:
    return node.get(name, default) if isinstance(node, DocumentNode) else default


def _heading_level(node: AbstractNode) -> int:
    try:
        level = int(_attr(node, "level", 1))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        level = 1
    return min(max(level, 1), 6)


def _parent_tag(node: AbstractNode) -> NodeTag | None:
    parent = node.parent
    return parent.tag if parent is not None else None


def _list_depth(node: AbstractNode) -> int:
    return sum(1 for ancestor in ancestors(node) if ancestor.tag in LIST_TAGS)


def _list_item_enter(node: AbstractNode) -> str:
    indent = INDENT * max(_list_depth(node) - 1, 0)
    parent = node.parent
    if parent is not None and parent.tag is NodeTag.ORDERED_LIST:
        try:
            start = int(parent.get("start", 1))
        except (TypeError, ValueError):
            start = 1
        return f"{indent}{start + sibling_index(node)}. "
    return f"{indent}- "


def _list_item_leave(node: AbstractNode) -> str:
    if isinstance(node, DocumentNode) and node.children:
        if node.children[-1].tag in LIST_TAGS:
            return ""
    return "\n"


def _list_enter(node: AbstractNode) -> str:
    return "\n" if _parent_tag(node) is NodeTag.LIST_ITEM else ""


def _list_leave(node: AbstractNode) -> str:
    return "" if _parent_tag(node) is NodeTag.LIST_ITEM else "\n"


def _paragraph_leave(node: AbstractNode) -> str:
    if _parent_tag(node) is NodeTag.LIST_ITEM:
        return "" if is_last_child(node) else "\n"
    return "\n\n"


def _code_block_enter(node: AbstractNode) -> str:
    language = _attr(node, "language") or ""
    return f"```{language}\n"


def _link_enter(node: AbstractNode) -> str:
    return "[" if _attr(node, "href") else ""


def _link_leave(node: AbstractNode) -> str:
    href = _attr(node, "href")
    return f"]({href})" if href else ""


MARKDOWN_RENDERER = FringeRenderer(
    "markdown",
    {
        NodeTag.ROOT: EMIT_NOTHING,
        NodeTag.FRAGMENT: EMIT_NOTHING,
        NodeTag.HEADING: TagRenderer(
            lambda node: "#" * _heading_level(node) + " ", static("\n\n")
        ),
        NodeTag.PARAGRAPH: TagRenderer(None, _paragraph_leave),
        NodeTag.UNORDERED_LIST: TagRenderer(_list_enter, _list_leave),
        NodeTag.ORDERED_LIST: TagRenderer(_list_enter, _list_leave),
        NodeTag.LIST_ITEM: TagRenderer(_list_item_enter, _list_item_leave),
        NodeTag.BOLD: wrap("**"),
        NodeTag.ITALIC: wrap("*"),
        NodeTag.CODE: wrap("`"),
        NodeTag.CODE_BLOCK: TagRenderer(_code_block_enter, static("\n```\n")),
        NodeTag.LINK: TagRenderer(_link_enter, _link_leave),
        NodeTag.LINE_BREAK: TagRenderer(static("\n")),
        NodeTag.HORIZONTAL_RULE: TagRenderer(static("---\n")),
        NodeTag.DETAILS: TagRenderer(None, static("\n")),
        NodeTag.SUMMARY: TagRenderer(None, static("\n")),
        NodeTag.SPAN: EMIT_NOTHING,
        NodeTag.TEXT: TagRenderer(_text),
    },
)
