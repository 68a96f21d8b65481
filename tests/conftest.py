"""Shared pytest fixtures and configuration for the apimux test suite.

Guidelines
----------
* No internet access in any test.
* HTTP is mocked with ``httpx.MockTransport`` at the infra boundary,
  or replaced entirely by :class:`ScriptedExecutor` for façade tests.
* yt-dlp is mocked at the infra boundary.
* Async tests run on the AnyIO pytest plugin (asyncio backend).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from apimux.core.models import ExtractRequest, HttpRequest, ProviderReply


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


Handler = Callable[[Any], ProviderReply]


class ScriptedExecutor:
    """Fake :class:`RequestExecutor` that records every request.

    Each call pops the next scripted outcome: a :class:`ProviderReply`
    is returned, an exception is raised, and a callable is invoked with
    the request.
    """

    def __init__(self, *outcomes: ProviderReply | BaseException | Handler) -> None:
        self._outcomes = list(outcomes)
        self.requests: list[HttpRequest | ExtractRequest] = []

    @property
    def urls(self) -> list[str]:
        return [
            request.url if isinstance(request, HttpRequest) else request.target
            for request in self.requests
        ]

    async def execute(self, request: HttpRequest | ExtractRequest) -> ProviderReply:
        self.requests.append(request)
        if not self._outcomes:
            raise AssertionError(f"Unexpected request: {request}")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, ProviderReply):
            return outcome
        return outcome(request)


def reply(payload: Any, url: str = "https://upstream.test/") -> ProviderReply:
    return ProviderReply(url=url, status_code=200, payload=payload)
