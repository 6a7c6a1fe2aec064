"""HTML renderer producing Matrix ``formatted_body`` markup.

Every text payload and attribute value is escaped, so content supplied by
users can never be interpreted as markup.
"""

from __future__ import annotations

from html import escape
from typing import cast

from ..document.nodes import AbstractNode, DocumentNode, NodeTag, TextNode
from .base import EMIT_NOTHING, FringeRenderer, TagRenderer, static, wrap

SPAN_ATTRIBUTES = (
    "data-mx-bg-color",
    "data-mx-color",
    "data-mx-spoiler",
    "color",
)


def _text(node: AbstractNode) -> str:
    return escape(cast(TextNode, node).data)


def _attributes(pairs: list[tuple[str, object]]) -> str:
    return "".join(f' {name}="{escape(str(value))}"' for name, value in pairs)


def _element(name: str) -> TagRenderer:
    return wrap(f"<{name}>", f"</{name}>")


def _heading_level(node: AbstractNode) -> int:
    try:
        level = int(cast(DocumentNode, node).get("level", 1))
    except (TypeError, ValueError):
        level = 1
    return min(max(level, 1), 6)


def _ordered_list_enter(node: AbstractNode) -> str:
    start = cast(DocumentNode, node).get("start")
    if start is None or str(start) == "1":
        return "<ol>"
    return f"<ol{_attributes([('start', start)])}>"


def _code_block_enter(node: AbstractNode) -> str:
    language = cast(DocumentNode, node).get("language")
    if not language:
        return "<pre><code>"
    return f"<pre><code{_attributes([('class', f'language-{language}')])}>"


def _link_enter(node: AbstractNode) -> str:
    href = cast(DocumentNode, node).get("href")
    if not href:
        return "<a>"
    return f"<a{_attributes([('href', href)])}>"


def _span_enter(node: AbstractNode) -> str:
    attributes = cast(DocumentNode, node).attributes
    pairs = [
        (name, attributes[name]) for name in SPAN_ATTRIBUTES if name in attributes
    ]
    return f"<span{_attributes(pairs)}>"


HTML_RENDERER = FringeRenderer(
    "html",
    {
        NodeTag.ROOT: EMIT_NOTHING,
        NodeTag.FRAGMENT: EMIT_NOTHING,
        NodeTag.HEADING: TagRenderer(
            lambda node: f"<h{_heading_level(node)}>",
            lambda node: f"</h{_heading_level(node)}>",
        ),
        NodeTag.PARAGRAPH: _element("p"),
        NodeTag.UNORDERED_LIST: _element("ul"),
        NodeTag.ORDERED_LIST: TagRenderer(_ordered_list_enter, static("</ol>")),
        NodeTag.LIST_ITEM: _element("li"),
        NodeTag.BOLD: _element("b"),
        NodeTag.ITALIC: _element("i"),
        NodeTag.CODE: _element("code"),
        NodeTag.CODE_BLOCK: TagRenderer(_code_block_enter, static("</code></pre>")),
        NodeTag.LINK: TagRenderer(_link_enter, static("</a>")),
        NodeTag.LINE_BREAK: TagRenderer(static("<br/>")),
        NodeTag.HORIZONTAL_RULE: TagRenderer(static("<hr/>")),
        NodeTag.DETAILS: _element("details"),
        NodeTag.SUMMARY: _element("summary"),
        NodeTag.SPAN: TagRenderer(_span_enter, static("</span>")),
        NodeTag.TEXT: TagRenderer(_text),
    },
)
