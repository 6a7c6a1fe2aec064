"""Render document trees to paired markdown/HTML chat messages, page by page."""

from .document.builder import make_node
from .document.nodes import DocumentNode, NodeTag, TextNode
from .render import RenderedDocument, render_document, render_pages

__all__ = [
    "DocumentNode",
    "NodeTag",
    "RenderedDocument",
    "TextNode",
    "make_node",
    "render_document",
    "render_pages",
]
