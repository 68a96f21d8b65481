"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure executors satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so the façade can be driven by fakes in tests.
"""

from __future__ import annotations

from typing import Protocol

from apimux.core.models import ExtractRequest, HttpRequest, ProviderReply


class RequestExecutor(Protocol):
    """Contract for anything that turns a built request into a reply.

    Any object that implements :meth:`execute` with the correct
    signature satisfies this protocol structurally (no explicit
    inheritance required).
    """

    async def execute(self, request: HttpRequest | ExtractRequest) -> ProviderReply:
        """Perform *request* once and return the raw reply.

        Implementations must not retry, and must map every
        backend-specific exception to an
        :class:`~apimux.exceptions.ProviderError` subclass.

        Raises
        ------
        UpstreamTimeoutError
            When the fixed timeout elapses.
        UpstreamRequestError
            On transport failures or non-success status codes.
        UpstreamMalformedError
            When the body cannot be decoded as announced.
        """
        ...  # pragma: no cover
