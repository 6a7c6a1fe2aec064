"""Render a document tree to paired markdown/HTML pages.

Two walkers, one per format, are stepped in strict alternation over the same
tree. Each writes to its own ``PagedDuplexStream``. Whenever either stream has
a full page, both are cut after the same number of commits so the two texts
handed to the send callback always describe the same span of the document.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar, Union

from .core.exceptions import DocumentStructureError, WalkerDesyncError
from .core.logging_utils import log_event
from .document.nodes import AbstractNode, DocumentNode, NodeTag
from .document.stream import PagedDuplexStream
from .document.walker import FringeType, FringeWalker, TextSink, WalkerContext
from .renderers.base import FringeRenderer
from .renderers.html import HTML_RENDERER
from .renderers.markdown import MARKDOWN_RENDERER

logger = logging.getLogger(__name__)

MessageID = TypeVar("MessageID")
SendPageCallback = Callable[[str, str], Union[Awaitable[MessageID], MessageID]]


@dataclass(frozen=True)
class RenderedDocument:
    text: str
    html: str


def _require_root(node: AbstractNode) -> DocumentNode:
    if not isinstance(node, DocumentNode) or node.tag is not NodeTag.ROOT:
        raise DocumentStructureError(
            f"Tried to render a {node.tag.value!r} node without a root; "
            "it would never be committed"
        )
    return node


def _check_lockstep(
    text_walker: FringeWalker,
    text_node: Optional[AbstractNode],
    html_walker: FringeWalker,
    html_node: Optional[AbstractNode],
) -> None:
    if text_node is not html_node:
        raise WalkerDesyncError(
            "Walkers visited different nodes: "
            f"{text_walker.renderer!r} at {_describe(text_node)}, "
            f"{html_walker.renderer!r} at {_describe(html_node)}"
        )
    if text_walker.last_fringe_type is not html_walker.last_fringe_type:
        raise WalkerDesyncError(
            f"Walkers disagree on the phase of {_describe(text_node)}: "
            f"{_phase(text_walker.last_fringe_type)} != "
            f"{_phase(html_walker.last_fringe_type)}"
        )


def _describe(node: Optional[AbstractNode]) -> str:
    return "end of document" if node is None else f"{node.tag.value} node"


def _phase(fringe_type: Optional[FringeType]) -> str:
    return fringe_type.value if fringe_type is not None else "finished"


class _LockstepPair:
    """Markdown and HTML walkers advanced together and checked after each step."""

    def __init__(
        self,
        root: DocumentNode,
        text_output: Any,
        html_output: Any,
        *,
        text_renderer: FringeRenderer = MARKDOWN_RENDERER,
        html_renderer: FringeRenderer = HTML_RENDERER,
    ) -> None:
        self.text_walker = FringeWalker(root, WalkerContext(text_output), text_renderer)
        self.html_walker = FringeWalker(root, WalkerContext(html_output), html_renderer)

    def step(self) -> Optional[AbstractNode]:
        text_node = self.text_walker.increment()
        html_node = self.html_walker.increment()
        _check_lockstep(self.text_walker, text_node, self.html_walker, html_node)
        return text_node


def render_document(
    root: AbstractNode,
    *,
    text_renderer: FringeRenderer = MARKDOWN_RENDERER,
    html_renderer: FringeRenderer = HTML_RENDERER,
) -> RenderedDocument:
    """Render both formats in full, without pagination."""
    document = _require_root(root)
    text_sink = TextSink()
    html_sink = TextSink()
    pair = _LockstepPair(
        document,
        text_sink,
        html_sink,
        text_renderer=text_renderer,
        html_renderer=html_renderer,
    )
    while pair.step() is not None:
        pass
    return RenderedDocument(text=text_sink.getvalue(), html=html_sink.getvalue())


async def render_pages(
    root: AbstractNode,
    *,
    max_page_size: int,
    send: SendPageCallback[MessageID],
    sent: Optional[list[MessageID]] = None,
    text_renderer: FringeRenderer = MARKDOWN_RENDERER,
    html_renderer: FringeRenderer = HTML_RENDERER,
) -> list[MessageID]:
    """Render ``root`` and deliver it page by page through ``send``.

    ``send(text, html)`` is called once per page, in document order, and may
    return the message id directly or an awaitable resolving to it. A failure
    raised by ``send`` stops the render and propagates unchanged; pages that
    were already delivered stay delivered and their ids are in ``sent`` when
    the caller supplied that list.

    Returns the message ids in send order.
    """
    document = _require_root(root)
    text_output = PagedDuplexStream(max_page_size)
    html_output = PagedDuplexStream(max_page_size)
    outputs = (text_output, html_output)
    pair = _LockstepPair(
        document,
        text_output,
        html_output,
        text_renderer=text_renderer,
        html_renderer=html_renderer,
    )
    message_ids: list[MessageID] = sent if sent is not None else []
    log_event(
        logger,
        logging.DEBUG,
        "docpager.render.started",
        max_page_size=max_page_size,
    )

    async def _send_page() -> None:
        page_index = len(message_ids)
        text = text_output.read_page(cut=False) or ""
        html = html_output.read_page(cut=False) or ""
        if len(text) > max_page_size or len(html) > max_page_size:
            log_event(
                logger,
                logging.WARNING,
                "docpager.render.page_oversize",
                page_index=page_index,
                max_page_size=max_page_size,
                text_chars=len(text),
                html_chars=len(html),
            )
        try:
            result = send(text, html)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "docpager.render.send_failed",
                page_index=page_index,
                pages_sent=len(message_ids),
                exc=exc,
            )
            raise
        message_ids.append(result)
        log_event(
            logger,
            logging.DEBUG,
            "docpager.render.page_sent",
            page_index=page_index,
            text_chars=len(text),
            html_chars=len(html),
        )

    async def _flush_ready_pages() -> None:
        while any(output.peek_page() for output in outputs):
            cut = min(output.cut_point() for output in outputs if output.peek_page())
            for output in outputs:
                output.ensure_new_page(cut)
            await _send_page()

    while pair.step() is not None:
        await _flush_ready_pages()

    for output in outputs:
        output.ensure_new_page()
    while any(output.peek_page() for output in outputs):
        await _send_page()

    log_event(
        logger,
        logging.INFO,
        "docpager.render.completed",
        pages=len(message_ids),
    )
    return message_ids

