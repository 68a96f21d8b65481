"""Provider façade — one stable async function per capability.

This is the central class consumed by command handlers and the CLI.
It depends on :class:`~apimux.core.protocols.RequestExecutor` objects
injected at construction time (dependency inversion), keeping the core
free of any network imports.

Guarantees
----------
* Required arguments are validated before any executor is touched.
* Providers are tried strictly in catalog order, one at a time, each
  exactly once.  No retry, no racing, no caching.
* A call either returns a fully normalized result or raises an
  :class:`~apimux.exceptions.ApimuxError` subclass.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from apimux.config import FacadeConfig
from apimux.core import providers
from apimux.core.models import (
    CapabilityRequest,
    ChatResult,
    CheckReport,
    ImageResult,
    MediaResult,
    ProcessedImageResult,
    SearchResults,
    ShortUrlResult,
    StickerResult,
    TrackResult,
    TranslationResult,
    VideoSearchResult,
    WeatherResult,
)
from apimux.core.protocols import RequestExecutor
from apimux.core.providers import Catalog, ProviderDescriptor
from apimux.exceptions import (
    ApimuxError,
    EnvironmentError,
    InvalidArgumentError,
    ProviderError,
    UpstreamMalformedError,
    UpstreamRequestError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

PLATFORMS: Mapping[str, str] = {
    "youtube": providers.YOUTUBE_DOWNLOAD,
    "tiktok": providers.TIKTOK_DOWNLOAD,
    "instagram": providers.INSTAGRAM_DOWNLOAD,
}
YOUTUBE_FORMATS = ("mp4", "mp3")
MAX_SEARCH_RESULTS = 25
SAMPLE_VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
SAMPLE_TIKTOK_URL = "https://www.tiktok.com/@test/video/123"


class ProviderFacade:
    """Stateless façade over the provider catalog.

    Parameters
    ----------
    executors:
        Mapping of transport name (``"http"``, ``"ytdlp"``) to an object
        satisfying :class:`RequestExecutor`.
    config:
        Shared read-only configuration.  Defaults to :class:`FacadeConfig`.
    catalog:
        Capability → ordered providers.  Defaults to
        :data:`~apimux.core.providers.DEFAULT_CATALOG`.
    """

    def __init__(
        self,
        executors: Mapping[str, RequestExecutor],
        config: FacadeConfig | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self._executors: Mapping[str, RequestExecutor] = executors
        self._config: FacadeConfig = config or FacadeConfig()
        self._catalog: Catalog = catalog if catalog is not None else providers.DEFAULT_CATALOG

    @property
    def config(self) -> FacadeConfig:
        return self._config

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    async def download_media(self, platform: str, url: str, fmt: str = "") -> MediaResult:
        """Resolve a downloadable file for *url* on *platform*.

        *fmt* only applies to YouTube (``mp4`` by default, or ``mp3``).

        Raises
        ------
        InvalidArgumentError
            If *platform* is unknown or *url* is empty.
        UpstreamUnavailableError
            If every provider for the platform failed.
        """
        key = _require(platform=platform).lower()
        if key not in PLATFORMS:
            raise InvalidArgumentError(
                f"Unsupported platform: {platform}",
                hint=f"Choose one of: {', '.join(PLATFORMS)}",
            )
        if key == "youtube":
            return await self.youtube_download(url, fmt or "mp4")
        url = _require(url=url)
        return await self._run(CapabilityRequest(PLATFORMS[key], {"url": url}))

    async def youtube_download(self, url: str, fmt: str = "mp4") -> MediaResult:
        url = _require(url=url)
        fmt = (fmt or "mp4").lower()
        if fmt not in YOUTUBE_FORMATS:
            raise InvalidArgumentError(
                f"Unsupported format: {fmt}",
                hint="Use mp4 for video or mp3 for audio.",
            )
        return await self._run(
            CapabilityRequest(providers.YOUTUBE_DOWNLOAD, {"url": url}, hint=fmt)
        )

    async def tiktok_download(self, url: str) -> MediaResult:
        return await self.download_media("tiktok", url)

    async def instagram_download(self, url: str) -> MediaResult:
        return await self.download_media("instagram", url)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_video(self, query: str, limit: int = 1) -> SearchResults:
        query = _require(query=query)
        if not 1 <= limit <= MAX_SEARCH_RESULTS:
            raise InvalidArgumentError(
                f"limit must be between 1 and {MAX_SEARCH_RESULTS}, got {limit}",
            )
        return await self._run(
            CapabilityRequest(providers.SEARCH_VIDEO, {"query": query, "limit": str(limit)})
        )

    async def search_music(self, query: str) -> TrackResult:
        query = _require(query=query)
        return await self._run(CapabilityRequest(providers.SEARCH_MUSIC, {"query": query}))

    async def play(self, query: str, *, audio: bool = False) -> tuple[VideoSearchResult, MediaResult]:
        """Search YouTube for *query* and resolve the first hit.

        Raises
        ------
        InvalidArgumentError
            If *query* is empty or a link, or the video is longer than
            :attr:`FacadeConfig.max_play_duration`.
        """
        query = _require(query=query)
        if "http://" in query or "https://" in query:
            raise InvalidArgumentError(
                "Links are not accepted here, send a search term.",
                hint="Use the download command for direct links.",
            )
        video = (await self.search_video(query)).first
        self._check_play_duration(video.duration)
        media = await self.youtube_download(video.url, "mp3" if audio else "mp4")
        # Some search providers do not report durations.
        self._check_play_duration(media.duration)
        return video, media

    def _check_play_duration(self, duration: int | None) -> None:
        limit = self._config.max_play_duration
        if duration is not None and duration > limit:
            raise InvalidArgumentError(
                f"Video is too long ({duration}s, limit {limit}s).",
            )

    # ------------------------------------------------------------------
    # AI
    # ------------------------------------------------------------------

    async def chat(self, prompt: str) -> ChatResult:
        prompt = _require(prompt=prompt)
        return await self._run(CapabilityRequest(providers.CHAT, {"prompt": prompt}))

    async def text_to_image(self, prompt: str) -> ImageResult:
        prompt = _require(prompt=prompt)
        return await self._run(CapabilityRequest(providers.TEXT_TO_IMAGE, {"prompt": prompt}))

    async def remove_background(self, image_url: str) -> ProcessedImageResult:
        image_url = _require(image_url=image_url)
        return await self._run(
            CapabilityRequest(providers.REMOVE_BACKGROUND, {"image_url": image_url})
        )

    async def upscale_image(self, image_url: str) -> ProcessedImageResult:
        image_url = _require(image_url=image_url)
        return await self._run(
            CapabilityRequest(providers.UPSCALE_IMAGE, {"image_url": image_url})
        )

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    async def translate(self, text: str, target_lang: str = "") -> TranslationResult:
        """Translate *text*; an empty *target_lang* means the configured default."""
        text = _require(text=text)
        language = target_lang.strip().lower() or self._config.default_language
        return await self._run(
            CapabilityRequest(providers.TRANSLATE, {"text": text}, hint=language)
        )

    async def shorten_url(self, url: str) -> ShortUrlResult:
        url = _require(url=url)
        return await self._run(CapabilityRequest(providers.SHORTEN_URL, {"url": url}))

    async def weather(self, city: str) -> WeatherResult:
        city = _require(city=city)
        return await self._run(
            CapabilityRequest(
                providers.WEATHER, {"city": city}, hint=self._config.default_language
            )
        )

    async def text_sticker(self, text: str, *, animated: bool = False) -> StickerResult:
        text = _require(text=text)
        return providers.build_sticker(text, animated=animated)

    # ------------------------------------------------------------------
    # Health probe
    # ------------------------------------------------------------------

    async def check_providers(self) -> list[CheckReport]:
        """Run one sample call per capability; never raises."""
        probes: tuple[tuple[str, Callable[..., Awaitable[Any]], str], ...] = (
            (providers.YOUTUBE_DOWNLOAD, self.youtube_download, SAMPLE_VIDEO_URL),
            (providers.TIKTOK_DOWNLOAD, self.tiktok_download, SAMPLE_TIKTOK_URL),
            (providers.SEARCH_VIDEO, self.search_video, "lofi hip hop"),
            (providers.SEARCH_MUSIC, self.search_music, "Bad Bunny"),
            (providers.CHAT, self.chat, "Hola"),
            (providers.TEXT_TO_IMAGE, self.text_to_image, "cat"),
            (providers.TRANSLATE, self.translate, "Hello"),
            (providers.SHORTEN_URL, self.shorten_url, "https://www.python.org"),
            (providers.WEATHER, self.weather, "Lima"),
        )
        reports: list[CheckReport] = []
        for capability, probe, sample in probes:
            try:
                await probe(sample)
            except ApimuxError as exc:
                reports.append(CheckReport(capability, False, str(exc)))
            else:
                reports.append(CheckReport(capability, True, "OK"))
        return reports

    # ------------------------------------------------------------------
    # Provider loop
    # ------------------------------------------------------------------

    async def _run(self, request: CapabilityRequest) -> Any:
        """Try each provider of ``request.capability`` in order."""
        capability = request.capability
        last_error = ""
        for descriptor in self._catalog.get(capability, ()):
            if not descriptor.supports(request, self._config):
                logger.debug("%s: skipping %s for this request", capability, descriptor.name)
                continue
            logger.debug("%s: trying %s", capability, descriptor.name)
            try:
                result = await self._attempt(descriptor, request)
            except (ProviderError, EnvironmentError) as exc:
                last_error = f"{descriptor.name}: {exc}"
                logger.warning("%s: provider %s failed: %s", capability, descriptor.name, exc)
                continue
            logger.info("%s: served by %s", capability, descriptor.name)
            return result

        logger.error("%s: all providers failed (%s)", capability, last_error or "none usable")
        raise UpstreamUnavailableError(capability, last_error or "no provider accepts this request")

    async def _attempt(self, descriptor: ProviderDescriptor, request: CapabilityRequest) -> Any:
        executor = self._executors.get(descriptor.transport)
        if executor is None:
            raise UpstreamRequestError(
                f"No executor configured for transport '{descriptor.transport}'",
                provider=descriptor.name,
            )
        outgoing = descriptor.build(request, self._config)
        reply = await executor.execute(outgoing)
        try:
            return descriptor.normalize(reply, request, descriptor.name)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamMalformedError(
                f"Unexpected response shape: {exc}",
                provider=descriptor.name,
            ) from exc


def _require(**arguments: str) -> str:
    """Return the single stripped argument or raise :class:`InvalidArgumentError`."""
    ((name, value),) = arguments.items()
    stripped = value.strip() if isinstance(value, str) else ""
    if not stripped:
        raise InvalidArgumentError(
            f"Missing required argument: {name}",
            hint=f"Provide a non-empty {name.replace('_', ' ')}.",
        )
    return stripped
