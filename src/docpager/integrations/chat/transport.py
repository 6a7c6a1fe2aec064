"""Outbound delivery contract for rendered pages.

Transports own the network: retries, rate limits and message encoding belong
here and in the platform adapters, never in the renderer.
"""

from __future__ import annotations

import uuid
from typing import Optional, Protocol, runtime_checkable

from .models import ChatMessageRef, ChatThreadRef


@runtime_checkable
class ChatTransport(Protocol):
    """Delivery contract implemented by platform transports."""

    async def send_formatted(
        self,
        thread: ChatThreadRef,
        text: str,
        html: str,
        *,
        reply_to: Optional[ChatMessageRef] = None,
        txn_id: Optional[str] = None,
    ) -> ChatMessageRef:
        """Send one message carrying a plain body and its HTML rendering.

        Repeating a call with the same ``txn_id`` must not deliver the message
        twice on platforms that support idempotent sends.
        """


def new_txn_id() -> str:
    """Fresh idempotency key for one outbound message."""
    return f"docpager.{uuid.uuid4().hex}"
