from .base import EMIT_NOTHING, FringeRenderer, TagRenderer, static, wrap
from .html import HTML_RENDERER
from .markdown import MARKDOWN_RENDERER

__all__ = [
    "EMIT_NOTHING",
    "FringeRenderer",
    "HTML_RENDERER",
    "MARKDOWN_RENDERER",
    "TagRenderer",
    "static",
    "wrap",
]
