from __future__ import annotations

from typing import Any, Optional

import httpx
import pytest

from docpager.integrations.chat.models import ChatMessageRef
from docpager.integrations.chat.sender import build_page_sender
from docpager.integrations.matrix.rest import MatrixRestClient
from docpager.integrations.matrix.transport import MatrixChatTransport, room_thread


class _FakeMatrixClient:
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any]]] = []
        self.txn_ids: list[Optional[str]] = []

    async def send_message(
        self, room_id: str, content: dict[str, Any], *, txn_id: Optional[str] = None
    ) -> str:
        self.sent.append((room_id, content))
        self.txn_ids.append(txn_id)
        return f"$event{len(self.sent)}"


@pytest.mark.anyio
async def test_send_formatted_builds_notice_content() -> None:
    client = _FakeMatrixClient()
    transport = MatrixChatTransport(client)  # type: ignore[arg-type]
    thread = room_thread("!room:example.org")

    ref = await transport.send_formatted(thread, "hi", "<p>hi</p>")

    assert ref == ChatMessageRef(thread=thread, message_id="$event1")
    assert thread.platform == "matrix"
    assert client.sent == [
        (
            "!room:example.org",
            {
                "msgtype": "m.notice",
                "body": "hi",
                "format": "org.matrix.custom.html",
                "formatted_body": "<p>hi</p>",
            },
        )
    ]


@pytest.mark.anyio
async def test_send_formatted_adds_reply_relation_and_msgtype() -> None:
    client = _FakeMatrixClient()
    transport = MatrixChatTransport(client, msgtype="m.text")  # type: ignore[arg-type]
    thread = room_thread("!room:example.org")
    origin = ChatMessageRef(thread=thread, message_id="$origin")

    await transport.send_formatted(thread, "hi", "<p>hi</p>", reply_to=origin)

    content = client.sent[0][1]
    assert content["msgtype"] == "m.text"
    assert content["m.relates_to"] == {"m.in_reply_to": {"event_id": "$origin"}}


@pytest.mark.anyio
async def test_send_formatted_forwards_transaction_id() -> None:
    client = _FakeMatrixClient()
    transport = MatrixChatTransport(client)  # type: ignore[arg-type]

    await transport.send_formatted(
        room_thread("!room:example.org"), "hi", "<p>hi</p>", txn_id="docpager.fixed"
    )

    assert client.txn_ids == ["docpager.fixed"]


@pytest.mark.anyio
async def test_retried_page_reuses_transaction_id_after_lost_response() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if len(paths) == 1:
            raise httpx.ReadTimeout("response lost", request=request)
        return httpx.Response(200, json={"event_id": "$delivered"})

    client = MatrixRestClient(homeserver_url="https://matrix.test", access_token="tok")
    await client._client.aclose()
    client._client = httpx.AsyncClient(
        base_url="https://matrix.test",
        transport=httpx.MockTransport(handler),
        timeout=10.0,
    )
    send = build_page_sender(
        MatrixChatTransport(client), room_thread("!r:x"), base_wait=0
    )
    try:
        ref = await send("a", "<p>a</p>")
    finally:
        await client.close()

    assert ref.message_id == "$delivered"
    assert len(paths) == 2
    assert paths[0] == paths[1]
