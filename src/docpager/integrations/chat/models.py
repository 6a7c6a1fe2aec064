"""Platform-agnostic conversation and message references."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChatThreadRef:
    """Normalized conversation identity for any chat platform."""

    platform: str
    chat_id: str
    thread_id: Optional[str] = None


@dataclass(frozen=True)
class ChatMessageRef:
    """Reference to a concrete message inside a conversation."""

    thread: ChatThreadRef
    message_id: str
