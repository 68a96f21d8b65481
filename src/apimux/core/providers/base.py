"""Provider descriptor type and helpers shared by the catalog modules."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from apimux.config import FacadeConfig
from apimux.core.models import CapabilityRequest, ExtractRequest, HttpRequest, ProviderReply

Builder = Callable[[CapabilityRequest, FacadeConfig], "HttpRequest | ExtractRequest"]
Normalizer = Callable[[ProviderReply, CapabilityRequest, str], Any]
Predicate = Callable[[CapabilityRequest, FacadeConfig], bool]


@dataclass(frozen=True, slots=True)
class ProviderDescriptor:
    """One upstream provider for one capability.

    ``build`` maps a :class:`CapabilityRequest` to a concrete request,
    ``normalize`` turns the raw reply into the capability's result model
    (raising :class:`~apimux.exceptions.UpstreamMalformedError` when the
    shape check fails).  ``accepts`` lets a provider sit out requests it
    cannot serve, e.g. audio-only downloads or a missing API key.
    """

    name: str
    build: Builder
    normalize: Normalizer
    transport: Literal["http", "ytdlp"] = "http"
    accepts: Predicate | None = None

    def supports(self, request: CapabilityRequest, config: FacadeConfig) -> bool:
        return self.accepts is None or self.accepts(request, config)


def aggregator_get(config: FacadeConfig, path: str, **params: str) -> HttpRequest:
    """GET against the configurable aggregation provider."""
    if config.api_token:
        params["api_key"] = config.api_token
    return HttpRequest("GET", f"{config.aggregator_url}/{path.lstrip('/')}", params=params)


def rapidapi_headers(config: FacadeConfig, host: str) -> dict[str, str]:
    return {
        "X-RapidAPI-Key": config.rapidapi_key or "demo-key",
        "X-RapidAPI-Host": host,
    }
