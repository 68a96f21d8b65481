"""Media download providers: YouTube, TikTok and Instagram.

Aggregator-style APIs disagree on where they put the download link
(``url``, ``download``, ``data.play``, ``media[0].url`` ...), so each
provider declares the key paths it is known to use and one shared
normalizer walks them in order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from apimux.config import FacadeConfig
from apimux.core.format_filter import parse_stream_formats, select_stream
from apimux.core.models import (
    CapabilityRequest,
    ExtractRequest,
    HttpRequest,
    MediaResult,
    ProviderReply,
)
from apimux.core.normalize import (
    KeyPath,
    first_text,
    first_value,
    require_mapping,
    require_text,
    to_seconds,
)
from apimux.core.providers.base import ProviderDescriptor, aggregator_get, rapidapi_headers
from apimux.exceptions import UpstreamMalformedError


@dataclass(frozen=True, slots=True)
class MediaShape:
    """Key paths where one provider keeps each media field."""

    url: Sequence[KeyPath]
    title: Sequence[KeyPath] = (("title",),)
    duration: Sequence[KeyPath] = (("duration",),)
    thumbnail: Sequence[KeyPath] = (("thumbnail",),)
    quality: Sequence[KeyPath] = (("quality",),)


AGGREGATOR_SHAPE = MediaShape(
    url=(("url",), ("download",), ("data", "url")),
    title=(("title",), ("data", "title")),
    duration=(("total_duration_in_seconds",), ("duration",), ("data", "duration")),
    thumbnail=(("thumbnail",), ("data", "thumbnail")),
)


def normalize_media(payload: Any, source: str, shape: MediaShape) -> MediaResult:
    data = require_mapping(payload, source)
    if data.get("error") or data.get("status") == "error" or data.get("success") is False:
        raise UpstreamMalformedError(
            f"Provider reported an error: {first_text(data, (('message',), ('error',), ('text',)), 'unknown')}",
            provider=source,
        )
    download_url = require_text(first_text(data, shape.url), "download URL", source)
    return MediaResult(
        download_url=download_url,
        title=first_text(data, shape.title),
        duration=to_seconds(first_value(data, shape.duration)),
        thumbnail=first_text(data, shape.thumbnail),
        quality=first_text(data, shape.quality),
        source=source,
    )


def _shaped(shape: MediaShape):
    def normalize(reply: ProviderReply, request: CapabilityRequest, source: str) -> MediaResult:
        return normalize_media(reply.payload, source, shape)

    return normalize


def _wants_audio(request: CapabilityRequest) -> bool:
    return (request.hint or "").lower() == "mp3"


# ---------------------------------------------------------------------------
# YouTube
# ---------------------------------------------------------------------------

def _yt_aggregator(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    kind = "yt-mp3" if _wants_audio(request) else "yt-mp4"
    return aggregator_get(config, f"downloads/{kind}", url=request.param("url"))


def _yt_adonix(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://myapiadonix.vercel.app/api/ytmp4",
        params={"url": request.param("url")},
    )


def _yt_y2mate(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "POST",
        "https://y2mate.nu/api/json/convert",
        json={
            "url": request.param("url"),
            "format": "mp3" if _wants_audio(request) else "mp4",
            "quality": "720",
        },
    )


def _yt_cobalt(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "POST",
        "https://api.cobalt.tools/api/json",
        headers={"Accept": "application/json"},
        json={"url": request.param("url"), "isAudioOnly": _wants_audio(request)},
    )


def _yt_local(request: CapabilityRequest, config: FacadeConfig) -> ExtractRequest:
    return ExtractRequest(target=request.param("url"))


def normalize_ytdlp_media(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> MediaResult:
    """Pick a directly playable stream out of a yt-dlp info dict."""
    info = require_mapping(reply.payload, source)
    audio_only = _wants_audio(request)
    stream = select_stream(parse_stream_formats(info), audio_only=audio_only)
    if stream is not None:
        download_url = stream.url
        quality = "audio" if audio_only else (f"{stream.height}p" if stream.height else "")
    else:
        # Single-format sites put the URL on the top level.
        download_url = require_text(first_text(info, (("url",),)), "playable stream", source)
        quality = ""
    return MediaResult(
        download_url=download_url,
        title=first_text(info, (("title",),)),
        duration=to_seconds(info.get("duration")),
        thumbnail=first_text(info, (("thumbnail",),)),
        quality=quality,
        source=source,
    )


YOUTUBE_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("aggregator", _yt_aggregator, _shaped(AGGREGATOR_SHAPE)),
    ProviderDescriptor(
        "adonix",
        _yt_adonix,
        _shaped(
            MediaShape(
                url=(("data", "download"),),
                title=(("data", "title"),),
                duration=(("data", "duration"),),
                thumbnail=(("data", "thumbnail"),),
                quality=(("data", "quality"),),
            )
        ),
        accepts=lambda request, config: not _wants_audio(request),
    ),
    ProviderDescriptor(
        "y2mate",
        _yt_y2mate,
        _shaped(MediaShape(url=(("url",), ("download",), ("link",)))),
    ),
    ProviderDescriptor("cobalt", _yt_cobalt, _shaped(MediaShape(url=(("url",),)))),
    ProviderDescriptor("yt-dlp", _yt_local, normalize_ytdlp_media, transport="ytdlp"),
)


# ---------------------------------------------------------------------------
# TikTok
# ---------------------------------------------------------------------------

TIKWM_SHAPE = MediaShape(
    url=(("data", "play"), ("data", "wmplay"), ("play",)),
    title=(("data", "title"), ("title",)),
    duration=(("data", "duration"), ("duration",)),
    thumbnail=(("data", "cover"), ("data", "origin_cover"), ("cover",)),
)


def _tt_aggregator(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return aggregator_get(config, "downloads/tik-tok", url=request.param("url"))


def _tt_ssstik(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://api.ssstik.io/tiktok",
        params={"url": request.param("url")},
    )


def _tt_rapidapi(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    host = "tiktok-scraper7.p.rapidapi.com"
    return HttpRequest(
        "GET",
        f"https://{host}/tiktok",
        params={"url": request.param("url")},
        headers=rapidapi_headers(config, host),
    )


TIKTOK_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("aggregator", _tt_aggregator, _shaped(AGGREGATOR_SHAPE)),
    ProviderDescriptor(
        "ssstik",
        _tt_ssstik,
        _shaped(
            MediaShape(
                url=(("url",), ("download",), ("video",), ("data", "play")),
                title=(("title",), ("desc",)),
                thumbnail=(("thumbnail",), ("cover",)),
            )
        ),
    ),
    ProviderDescriptor("tiktok-scraper7", _tt_rapidapi, _shaped(TIKWM_SHAPE)),
)


# ---------------------------------------------------------------------------
# Instagram
# ---------------------------------------------------------------------------

def _ig_aggregator(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return aggregator_get(config, "downloads/instagram", url=request.param("url"))


def _ig_rapidapi(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    host = "instagram-downloader-download-instagram-videos-stories.p.rapidapi.com"
    return HttpRequest(
        "GET",
        f"https://{host}/index",
        params={"url": request.param("url")},
        headers=rapidapi_headers(config, host),
    )


def _ig_scraper(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://api.instagram-scraper.com/v1.0/media",
        params={"url": request.param("url")},
    )


INSTAGRAM_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("aggregator", _ig_aggregator, _shaped(AGGREGATOR_SHAPE)),
    ProviderDescriptor(
        "instagram-downloader",
        _ig_rapidapi,
        _shaped(
            MediaShape(
                url=(("media",), ("media", 0, "url"), ("url",)),
                title=(("title",), ("caption",)),
                thumbnail=(("thumbnail",), ("thumb",)),
            )
        ),
    ),
    ProviderDescriptor(
        "instagram-scraper",
        _ig_scraper,
        _shaped(
            MediaShape(
                url=(("video_url",), ("display_url",), ("data", "video_url"), ("url",)),
                title=(("caption",), ("title",), ("data", "caption")),
                duration=(("video_duration",), ("duration",)),
                thumbnail=(("thumbnail_url",), ("display_url",), ("thumbnail",)),
            )
        ),
    ),
)
