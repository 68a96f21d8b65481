"""httpx backed implementation of :class:`~apimux.core.protocols.RequestExecutor`.

This module is the **only** place in the codebase that imports
``httpx``.  All httpx exceptions are caught here and re-raised as typed
:class:`~apimux.exceptions.ProviderError` subclasses — nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import anyio
import httpx

from apimux.config import FacadeConfig
from apimux.core.models import HttpRequest, ProviderReply
from apimux.exceptions import (
    UpstreamMalformedError,
    UpstreamRequestError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


class HttpxExecutor:
    """Concrete :class:`RequestExecutor` for :class:`HttpRequest` objects.

    Usage::

        executor = HttpxExecutor(FacadeConfig())
        reply = await executor.execute(HttpRequest("GET", "https://..."))

    A fresh :class:`httpx.AsyncClient` is opened per call, so concurrent
    capability calls never share connection state.  *transport* lets
    tests plug in :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        config: FacadeConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            headers={"User-Agent": self._config.user_agent},
            follow_redirects=True,
            transport=self._transport,
        )

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    async def execute(self, request: HttpRequest) -> ProviderReply:
        """Send *request* once and decode the body as ``request.expect`` says.

        Raises
        ------
        UpstreamTimeoutError
            When the configured timeout elapses.
        UpstreamRequestError
            On connection errors or a non-2xx status code.
        UpstreamMalformedError
            When a JSON body cannot be decoded.
        """
        logger.debug("%s %s params=%s", request.method, request.url, dict(request.params))
        try:
            # httpx times each phase separately; this bounds the whole call.
            with anyio.fail_after(self._config.timeout):
                async with self._client() as client:
                    response = await client.request(
                        request.method,
                        request.url,
                        params=dict(request.params) or None,
                        headers=dict(request.headers) or None,
                        json=request.json,
                        data=dict(request.data) if request.data is not None else None,
                    )
                    response.raise_for_status()
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise UpstreamTimeoutError(
                f"Timed out after {self._config.timeout:g}s",
                provider=request.url,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamRequestError(
                f"HTTP {exc.response.status_code}: {_error_message(exc.response)}",
                provider=request.url,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamRequestError(
                f"Request failed: {exc}",
                provider=request.url,
            ) from exc

        return ProviderReply(
            url=str(response.url),
            status_code=response.status_code,
            payload=self._decode(request, response),
        )

    @staticmethod
    def _decode(request: HttpRequest, response: httpx.Response) -> Any:
        if request.expect == "none":
            return None
        if request.expect == "text":
            return response.text
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise UpstreamMalformedError(
                "Response body is not valid JSON",
                provider=request.url,
            ) from exc


def _error_message(response: httpx.Response) -> str:
    """Best-effort short reason from an error response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.reason_phrase or "error"
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, dict):
            message = message.get("message")
        if isinstance(message, str) and message:
            return message
    return response.reason_phrase or "error"
