"""Single-request execution against the ArchivesSpace backend API."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger

from .codec import decode_envelope
from .errors import DecodeError, RequestCancelledError, StatusError, TransportError
from .models.envelope import ResponseEnvelope

if TYPE_CHECKING:
    from .auth import SessionManager


class RequestExecutor:
    """Send one authenticated JSON request per call and return the raw body.

    Every call builds its own request from the client's base URL, so one
    executor can serve overlapping calls without sharing request state.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        session: SessionManager,
        *,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self._timeout = timeout

    async def execute(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        *,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> bytes:
        """Send ``method path`` and return the response body.

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: Path relative to the API base URL, e.g. a record ``uri``
            body: Encoded JSON payload
            params: Query parameters
            timeout: Seconds before the request fails; defaults to the configured timeout
            cancel: When set before the response arrives, the request is abandoned

        Raises:
            TransportError: No HTTP response (connection, DNS, timeout)
            RequestCancelledError: ``cancel`` fired first
            StatusError: Any non-2xx status
        """
        method = method.upper()
        context: dict[str, Any] = {"method": method, "path": path}
        headers = {"Content-Type": "application/json", **self._session.headers()}
        options: dict[str, Any] = {}
        if timeout is not None or self._timeout is not None:
            options["timeout"] = timeout if timeout is not None else self._timeout
        request = self._client.build_request(
            method, path, content=body, params=params, headers=headers, **options
        )

        logger.debug(f"Making {method} request to {path}")
        try:
            if cancel is None:
                response = await self._client.send(request)
            else:
                response = await self._send_cancellable(request, cancel, context)
        except httpx.TransportError as exc:
            logger.error(f"Request error: {method} {path}: {exc!r}")
            raise TransportError(
                f"Request error for {method} {path}: {exc}",
                context | {"cause": repr(exc)},
            ) from exc

        logger.debug(f"API response status: {response.status_code}")
        if not response.is_success:
            logger.error(f"ArchivesSpace API error {response.status_code} for {method} {path}")
            raise StatusError(
                f"ArchivesSpace API error {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
                envelope=_error_envelope(response.content),
                context=context | {"status_code": response.status_code},
            )
        return response.content

    async def _send_cancellable(
        self,
        request: httpx.Request,
        cancel: asyncio.Event,
        context: dict[str, Any],
    ) -> httpx.Response:
        if cancel.is_set():
            raise RequestCancelledError("Request cancelled before it was sent", context)

        send_task = asyncio.ensure_future(self._client.send(request))
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait(
                {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()

        if send_task not in done:
            with contextlib.suppress(asyncio.CancelledError):
                await send_task
            logger.info(f"Cancelled {request.method} {request.url.path}")
            raise RequestCancelledError(
                f"Request cancelled: {request.method} {request.url.path}", context
            )
        return send_task.result()


def _error_envelope(content: bytes) -> ResponseEnvelope | None:
    try:
        envelope = decode_envelope(content)
    except DecodeError:
        return None
    return None if envelope.ok else envelope
