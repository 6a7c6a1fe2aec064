"""Glue between ``render_pages`` and a ``ChatTransport``."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from ...core.logging_utils import log_event
from ...core.retry import retry_transient
from ...document.nodes import AbstractNode
from ...render import render_pages
from .models import ChatMessageRef, ChatThreadRef
from .transport import ChatTransport, new_txn_id

logger = logging.getLogger(__name__)

PageSender = Callable[[str, str], Awaitable[ChatMessageRef]]


def build_page_sender(
    transport: ChatTransport,
    thread: ChatThreadRef,
    *,
    reply_to: Optional[ChatMessageRef] = None,
    retry: bool = True,
    max_attempts: int = 5,
    base_wait: float = 1.0,
) -> PageSender:
    """Build a ``send`` callback for ``render_pages``.

    With ``retry`` each page is retried on ``TransientError`` with exponential
    backoff before the failure is allowed to abort the render. Every attempt
    for one page reuses that page's transaction id.
    """

    async def _attempt(text: str, html: str, txn_id: str) -> ChatMessageRef:
        return await transport.send_formatted(
            thread, text, html, reply_to=reply_to, txn_id=txn_id
        )

    deliver = _attempt
    if retry:
        deliver = retry_transient(max_attempts=max_attempts, base_wait=base_wait)(
            _attempt
        )

    async def _send(text: str, html: str) -> ChatMessageRef:
        return await deliver(text, html, new_txn_id())

    return _send


async def render_and_send(
    root: AbstractNode,
    transport: ChatTransport,
    thread: ChatThreadRef,
    *,
    max_page_size: int,
    reply_to: Optional[ChatMessageRef] = None,
    retry: bool = True,
) -> list[str]:
    """Render ``root`` and deliver every page to ``thread``.

    Returns the platform message ids in the order the pages were sent.
    """
    sent: list[ChatMessageRef] = []
    sender = build_page_sender(transport, thread, reply_to=reply_to, retry=retry)
    try:
        await render_pages(root, max_page_size=max_page_size, send=sender, sent=sent)
    except Exception as exc:
        if sent:
            log_event(
                logger,
                logging.WARNING,
                "docpager.chat.partial_delivery",
                platform=thread.platform,
                chat_id=thread.chat_id,
                delivered=[ref.message_id for ref in sent],
                exc=exc,
            )
        raise
    return [ref.message_id for ref in sent]
