from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ...core.logging_utils import log_event
from ..chat.transport import new_txn_id
from .errors import MatrixAPIError, MatrixPermanentError, MatrixTransientError

logger = logging.getLogger(__name__)

CLIENT_API_PREFIX = "/_matrix/client/v3"
HTML_FORMAT = "org.matrix.custom.html"


def notice_content(text: str, html: str, *, msgtype: str = "m.notice") -> dict[str, Any]:
    """Event content carrying both the plain body and its HTML rendering."""
    return {
        "msgtype": msgtype,
        "body": text,
        "format": HTML_FORMAT,
        "formatted_body": html,
    }


class MatrixRestClient:
    """Minimal Matrix client-server API client for sending room messages.

    Requests are made once; classifying failures as transient or permanent is
    all the retry policy this client has. Callers decide whether to retry.
    """

    def __init__(
        self,
        *,
        homeserver_url: str,
        access_token: str,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=homeserver_url.rstrip("/"), timeout=timeout_seconds
        )
        self._authorization_header = f"Bearer {access_token}"

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "MatrixRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method,
                f"{CLIENT_API_PREFIX}{path}",
                json=payload,
                headers={"Authorization": self._authorization_header},
            )
        except httpx.TransportError as exc:
            log_event(
                logger,
                logging.WARNING,
                "docpager.matrix.error",
                method=method,
                path=path,
                exc=exc,
            )
            raise MatrixTransientError(
                f"Matrix network error for {method} {path}: {exc}",
                user_message="Matrix homeserver is unreachable.",
            ) from exc
        if 200 <= response.status_code < 300:
            if not response.content:
                return {}
            try:
                data = response.json()
            except ValueError as exc:
                raise MatrixAPIError(
                    f"Matrix API returned non-JSON success response for {method} {path}",
                    status_code=response.status_code,
                ) from exc
            return data if isinstance(data, dict) else {}
        raise self._classify_failure(method, path, response)

    def _classify_failure(
        self, method: str, path: str, response: httpx.Response
    ) -> MatrixAPIError:
        status_code = response.status_code
        errcode: Optional[str] = None
        retry_after: Optional[float] = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            raw_errcode = body.get("errcode")
            errcode = raw_errcode if isinstance(raw_errcode, str) else None
            retry_ms = body.get("retry_after_ms")
            if isinstance(retry_ms, (int, float)) and not isinstance(retry_ms, bool):
                retry_after = max(float(retry_ms) / 1000.0, 0.0)
        body_preview = (response.text or "").strip().replace("\n", " ")[:200]
        message = (
            f"Matrix API request failed for {method} {path}: "
            f"status={status_code} errcode={errcode} body={body_preview!r}"
        )
        log_event(
            logger,
            logging.WARNING,
            "docpager.matrix.error",
            method=method,
            path=path,
            status_code=status_code,
            errcode=errcode,
        )
        if status_code == 429 or errcode == "M_LIMIT_EXCEEDED" or status_code >= 500:
            return MatrixTransientError(
                message,
                status_code=status_code,
                errcode=errcode,
                retry_after=retry_after,
            )
        return MatrixPermanentError(message, status_code=status_code, errcode=errcode)

    async def send_message(
        self,
        room_id: str,
        content: dict[str, Any],
        *,
        txn_id: Optional[str] = None,
    ) -> str:
        """Send an ``m.room.message`` event and return its event id."""
        txn = txn_id or new_txn_id()
        path = (
            f"/rooms/{quote(room_id, safe='')}/send/m.room.message/"
            f"{quote(txn, safe='')}"
        )
        payload = await self._request("PUT", path, payload=content)
        event_id = payload.get("event_id")
        if not isinstance(event_id, str) or not event_id:
            raise MatrixAPIError(f"Matrix API response for {path} has no event_id")
        log_event(
            logger,
            logging.DEBUG,
            "docpager.matrix.send",
            room_id=room_id,
            event_id=event_id,
            body_chars=len(str(content.get("body", ""))),
        )
        return event_id
