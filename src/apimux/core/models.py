"""Domain models for apimux.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and no dependency on
external packages.

Three groups live here:

* the *request* side (:class:`CapabilityRequest`, :class:`HttpRequest`,
  :class:`ExtractRequest`) built before any network call,
* :class:`ProviderReply`, the untyped boundary payload handed back by an
  executor,
* the *normalized results* returned to callers.  Every field is always
  present; absent upstream values are ``""``, ``None`` or a documented
  placeholder.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

UNKNOWN_ALBUM = "Unknown album"
NO_RESPONSE = "No response."


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CapabilityRequest:
    """One capability invocation: name, string parameters and a hint."""

    capability: str
    """Capability name, e.g. ``"youtube-download"`` or ``"translate"``."""

    params: Mapping[str, str] = field(default_factory=dict)

    hint: str | None = None
    """Optional target format / quality / language hint."""

    def param(self, name: str, default: str = "") -> str:
        return self.params.get(name, default)


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """A concrete HTTP call produced by a provider descriptor."""

    method: str
    url: str
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any = None
    data: Mapping[str, str] | None = None

    expect: Literal["json", "text", "none"] = "json"
    """How the executor decodes the body (``"none"`` skips it, e.g. HEAD)."""


@dataclass(frozen=True, slots=True)
class ExtractRequest:
    """A yt-dlp extraction: a page URL or a ``ytsearchN:`` query."""

    target: str

    flat: bool = False
    """Resolve playlist/search entries without visiting every video."""


@dataclass(frozen=True, slots=True)
class ProviderReply:
    """Raw executor output; never leaves the façade."""

    url: str
    """The URL that was actually requested (after redirects)."""

    status_code: int
    payload: Any


# ---------------------------------------------------------------------------
# Normalized results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MediaResult:
    """A downloadable media file resolved by one of the download providers."""

    download_url: str
    title: str
    duration: int | None
    """Duration in seconds, or ``None`` if the provider does not report it."""

    thumbnail: str = ""
    quality: str = ""
    source: str = ""


@dataclass(frozen=True, slots=True)
class VideoSearchResult:
    """One hit of a video search."""

    title: str
    url: str
    duration: int | None
    author: str = ""
    thumbnail: str = ""
    source: str = ""


@dataclass(frozen=True, slots=True)
class SearchResults:
    """Immutable, ordered collection of :class:`VideoSearchResult` entries."""

    results: tuple[VideoSearchResult, ...]

    def __len__(self) -> int:
        return len(self.results)

    def __bool__(self) -> bool:
        return len(self.results) > 0

    def __iter__(self) -> Iterator[VideoSearchResult]:
        return iter(self.results)

    @property
    def first(self) -> VideoSearchResult:
        return self.results[0]


@dataclass(frozen=True, slots=True)
class TrackResult:
    """A music track with a short preview clip."""

    title: str
    artist: str
    album: str
    duration: int | None
    thumbnail: str
    preview_url: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class ChatResult:
    text: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class ImageResult:
    image_url: str
    prompt: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class ProcessedImageResult:
    """Output of an image tool (background removal, upscaling)."""

    image_url: str
    original_url: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class TranslationResult:
    text: str
    source_language: str
    target_language: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class ShortUrlResult:
    short_url: str
    original_url: str
    source: str = ""


@dataclass(frozen=True, slots=True)
class WeatherResult:
    """Current conditions for a city.

    ``raw`` keeps the upstream payload untouched for callers that want
    fields beyond the common subset.
    """

    city: str
    temperature: float | None
    feels_like: float | None
    description: str
    humidity: int | None
    wind_speed: float | None
    raw: Mapping[str, Any] = field(default_factory=dict)
    source: str = ""


@dataclass(frozen=True, slots=True)
class StickerResult:
    sticker_url: str
    text: str
    animated: bool


@dataclass(frozen=True, slots=True)
class CheckReport:
    """One row of :meth:`ProviderFacade.check_providers`."""

    capability: str
    ok: bool
    detail: str


@dataclass(frozen=True, slots=True)
class StreamFormat:
    """A single stream reported by yt-dlp, reduced to what selection needs."""

    format_id: str
    ext: str
    url: str
    height: int | None
    vcodec: str
    """Video codec name.  ``"none"`` when the stream has no video."""

    acodec: str
    """Audio codec name.  ``"none"`` when the stream has no audio."""
