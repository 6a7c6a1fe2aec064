"""Matrix implementation of the chat transport contract."""

from __future__ import annotations

from typing import Any, Optional

from ..chat.models import ChatMessageRef, ChatThreadRef
from ..chat.transport import ChatTransport
from .rest import MatrixRestClient, notice_content

MATRIX_PLATFORM = "matrix"


class MatrixChatTransport(ChatTransport):
    def __init__(self, client: MatrixRestClient, *, msgtype: str = "m.notice") -> None:
        self._client = client
        self._msgtype = msgtype

    async def send_formatted(
        self,
        thread: ChatThreadRef,
        text: str,
        html: str,
        *,
        reply_to: Optional[ChatMessageRef] = None,
        txn_id: Optional[str] = None,
    ) -> ChatMessageRef:
        content: dict[str, Any] = notice_content(text, html, msgtype=self._msgtype)
        if reply_to is not None:
            content["m.relates_to"] = {
                "m.in_reply_to": {"event_id": reply_to.message_id}
            }
        event_id = await self._client.send_message(
            thread.chat_id, content, txn_id=txn_id
        )
        return ChatMessageRef(thread=thread, message_id=event_id)


def room_thread(room_id: str) -> ChatThreadRef:
    return ChatThreadRef(platform=MATRIX_PLATFORM, chat_id=room_id)
