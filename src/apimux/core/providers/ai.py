"""Generative and image-processing providers."""

from __future__ import annotations

from urllib.parse import quote

from apimux.config import FacadeConfig
from apimux.core.models import (
    NO_RESPONSE,
    CapabilityRequest,
    ChatResult,
    HttpRequest,
    ImageResult,
    ProcessedImageResult,
    ProviderReply,
)
from apimux.core.normalize import first_text, require_mapping, require_text
from apimux.core.providers.base import ProviderDescriptor, aggregator_get
from apimux.exceptions import UpstreamMalformedError

# Checked in order; the first non-empty string wins.
CHAT_TEXT_PATHS = (
    ("choices", 0, "message", "content"),
    ("result",),
)


# ---------------------------------------------------------------------------
# Chat completion
# ---------------------------------------------------------------------------

def _openai_compatible(endpoint: str):
    def build(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
        return HttpRequest(
            "POST",
            endpoint,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {config.chat_api_key}",
            },
            json={
                "model": config.chat_model,
                "messages": [{"role": "user", "content": request.param("prompt")}],
                "temperature": 0.7,
            },
        )

    return build


def normalize_chat(reply: ProviderReply, request: CapabilityRequest, source: str) -> ChatResult:
    payload = require_mapping(reply.payload, source)
    if payload.get("error"):
        raise UpstreamMalformedError(
            f"Provider reported an error: {first_text(payload, (('error', 'message'), ('error',)), 'unknown')}",
            provider=source,
        )
    return ChatResult(text=first_text(payload, CHAT_TEXT_PATHS, NO_RESPONSE), source=source)


CHAT_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        "pawan", _openai_compatible("https://api.pawan.krd/chat/completions"), normalize_chat,
    ),
    ProviderDescriptor(
        "chatanywhere",
        _openai_compatible("https://api.chatanywhere.com.cn/v1/chat/completions"),
        normalize_chat,
    ),
    ProviderDescriptor(
        "churchless",
        _openai_compatible("https://free.churchless.tech/v1/chat/completions"),
        normalize_chat,
    ),
)


# ---------------------------------------------------------------------------
# Text to image
# ---------------------------------------------------------------------------

def _pollinations(base: str, *, nologo: bool):
    def build(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
        size = str(config.image_size)
        params = {"width": size, "height": size}
        if nologo:
            params["nologo"] = "true"
        # HEAD only checks that the image renders; the URL itself is the result.
        return HttpRequest(
            "HEAD",
            f"{base}/{quote(request.param('prompt'), safe='')}",
            params=params,
            expect="none",
        )

    return build


def normalize_generated_image(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> ImageResult:
    return ImageResult(
        image_url=require_text(reply.url, "image URL", source),
        prompt=request.param("prompt"),
        source=source,
    )


IMAGE_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        "pollinations",
        _pollinations("https://pollinations.ai/p", nologo=True),
        normalize_generated_image,
    ),
    ProviderDescriptor(
        "pollinations-image",
        _pollinations("https://image.pollinations.ai/prompt", nologo=False),
        normalize_generated_image,
    ),
)


# ---------------------------------------------------------------------------
# Background removal / upscaling
# ---------------------------------------------------------------------------

PROCESSED_URL_PATHS = (("url",), ("image",), ("result",), ("data", "url"))


def _aggregator_tool(path: str):
    def build(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
        return aggregator_get(config, path, url=request.param("image_url"))

    return build


def normalize_processed_image(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> ProcessedImageResult:
    payload = require_mapping(reply.payload, source)
    return ProcessedImageResult(
        image_url=require_text(first_text(payload, PROCESSED_URL_PATHS), "image URL", source),
        original_url=request.param("image_url"),
        source=source,
    )


def _removebg(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "POST",
        "https://api.remove.bg/v1.0/removebg",
        headers={"X-Api-Key": config.removebg_api_key, "Accept": "application/json"},
        data={"image_url": request.param("image_url"), "size": "auto"},
    )


def normalize_removebg(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> ProcessedImageResult:
    encoded = first_text(require_mapping(reply.payload, source), (("data", "result_b64"),))
    require_text(encoded, "result image", source)
    return ProcessedImageResult(
        image_url=f"data:image/png;base64,{encoded}",
        original_url=request.param("image_url"),
        source=source,
    )


REMOVE_BACKGROUND_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("aggregator", _aggregator_tool("tools/remove-bg"), normalize_processed_image),
    ProviderDescriptor(
        "remove.bg",
        _removebg,
        normalize_removebg,
        accepts=lambda request, config: bool(config.removebg_api_key),
    ),
)

UPSCALE_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("aggregator", _aggregator_tool("tools/upscale"), normalize_processed_image),
)
