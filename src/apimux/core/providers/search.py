"""Search providers: YouTube videos and music tracks."""

from __future__ import annotations

from typing import Any

from apimux.config import FacadeConfig
from apimux.core.models import (
    UNKNOWN_ALBUM,
    CapabilityRequest,
    ExtractRequest,
    HttpRequest,
    ProviderReply,
    SearchResults,
    TrackResult,
    VideoSearchResult,
)
from apimux.core.normalize import (
    dig,
    first_text,
    ms_to_seconds,
    require_list,
    require_mapping,
    require_text,
    to_seconds,
)
from apimux.core.providers.base import ProviderDescriptor

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


def _limit(request: CapabilityRequest) -> int:
    return int(request.param("limit", "1"))


# ---------------------------------------------------------------------------
# Video search
# ---------------------------------------------------------------------------

def _youtube_data_api(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://www.googleapis.com/youtube/v3/search",
        params={
            "part": "snippet",
            "q": request.param("query"),
            "type": "video",
            "maxResults": str(_limit(request)),
            "key": config.youtube_api_key,
        },
    )


def normalize_youtube_data_api(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> SearchResults:
    items = require_list(require_mapping(reply.payload, source).get("items"), "items", source)
    results: list[VideoSearchResult] = []
    for item in items:
        video_id = first_text(item, (("id", "videoId"),))
        if not video_id:
            continue
        results.append(
            VideoSearchResult(
                title=first_text(item, (("snippet", "title"),)),
                url=f"{YOUTUBE_WATCH_URL}{video_id}",
                # The search endpoint does not report durations.
                duration=None,
                author=first_text(item, (("snippet", "channelTitle"),)),
                thumbnail=first_text(
                    item,
                    (
                        ("snippet", "thumbnails", "high", "url"),
                        ("snippet", "thumbnails", "default", "url"),
                    ),
                ),
                source=source,
            )
        )
    require_list(results, "video results", source)
    return SearchResults(results=tuple(results[: _limit(request)]))


def _ytdlp_search(request: CapabilityRequest, config: FacadeConfig) -> ExtractRequest:
    return ExtractRequest(
        target=f"ytsearch{_limit(request)}:{request.param('query')}",
        flat=True,
    )


def _entry_url(entry: dict[str, Any]) -> str:
    url = first_text(entry, (("webpage_url",), ("url",)))
    if url.startswith(("http://", "https://")):
        return url
    video_id = first_text(entry, (("id",),))
    return f"{YOUTUBE_WATCH_URL}{video_id}" if video_id else ""


def normalize_ytdlp_search(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> SearchResults:
    info = require_mapping(reply.payload, source)
    entries = require_list(info.get("entries"), "search entries", source)
    results: list[VideoSearchResult] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        url = _entry_url(entry)
        if not url:
            continue
        results.append(
            VideoSearchResult(
                title=first_text(entry, (("title",),)),
                url=url,
                duration=to_seconds(entry.get("duration")),
                author=first_text(entry, (("channel",), ("uploader",))),
                thumbnail=first_text(entry, (("thumbnail",), ("thumbnails", -1, "url"))),
                source=source,
            )
        )
    require_list(results, "video results", source)
    return SearchResults(results=tuple(results[: _limit(request)]))


VIDEO_SEARCH_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        "youtube-data-api",
        _youtube_data_api,
        normalize_youtube_data_api,
        accepts=lambda request, config: bool(config.youtube_api_key),
    ),
    ProviderDescriptor("yt-dlp", _ytdlp_search, normalize_ytdlp_search, transport="ytdlp"),
)


# ---------------------------------------------------------------------------
# Music search
# ---------------------------------------------------------------------------

def _deezer(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://api.deezer.com/search",
        params={"q": request.param("query"), "limit": "1"},
    )


def normalize_deezer(reply: ProviderReply, request: CapabilityRequest, source: str) -> TrackResult:
    track = require_list(require_mapping(reply.payload, source).get("data"), "tracks", source)[0]
    return TrackResult(
        title=first_text(track, (("title",),)),
        artist=first_text(track, (("artist", "name"),)),
        album=first_text(track, (("album", "title"),), UNKNOWN_ALBUM),
        duration=to_seconds(dig(track, ("duration",))),
        thumbnail=first_text(track, (("album", "cover_medium"), ("album", "cover"))),
        preview_url=require_text(first_text(track, (("preview",),)), "preview URL", source),
        source=source,
    )


def _itunes(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://itunes.apple.com/search",
        params={"term": request.param("query"), "media": "music", "limit": "1"},
    )


def normalize_itunes(reply: ProviderReply, request: CapabilityRequest, source: str) -> TrackResult:
    track = require_list(require_mapping(reply.payload, source).get("results"), "tracks", source)[0]
    return TrackResult(
        title=first_text(track, (("trackName",),)),
        artist=first_text(track, (("artistName",),)),
        album=first_text(track, (("collectionName",),), UNKNOWN_ALBUM),
        duration=ms_to_seconds(dig(track, ("trackTimeMillis",))),
        thumbnail=first_text(track, (("artworkUrl100",), ("artworkUrl60",))),
        preview_url=require_text(first_text(track, (("previewUrl",),)), "preview URL", source),
        source=source,
    )


MUSIC_SEARCH_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("deezer", _deezer, normalize_deezer),
    ProviderDescriptor("itunes", _itunes, normalize_itunes),
)
