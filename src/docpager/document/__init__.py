"""Document tree, traversal and paging primitives."""

from .nodes import (
    AbstractNode,
    DocumentNode,
    NodeTag,
    TextNode,
    make_document_node,
    make_text_node,
)
from .stream import PagedDuplexStream
from .walker import FringeType, FringeWalker, render_text

__all__ = [
    "AbstractNode",
    "DocumentNode",
    "FringeType",
    "FringeWalker",
    "NodeTag",
    "PagedDuplexStream",
    "TextNode",
    "make_document_node",
    "make_text_node",
    "render_text",
]
