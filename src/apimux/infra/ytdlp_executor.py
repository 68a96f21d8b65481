"""yt-dlp backed implementation of :class:`~apimux.core.protocols.RequestExecutor`.

This module is the **only** place in the codebase that imports
``yt_dlp``.  Extraction is blocking, so it runs in a worker thread; all
yt-dlp exceptions are caught here and re-raised as typed
:class:`~apimux.exceptions.ProviderError` subclasses.
"""

from __future__ import annotations

import logging
from typing import Any

import anyio.to_thread

from apimux.config import FacadeConfig
from apimux.core.models import ExtractRequest, ProviderReply
from apimux.exceptions import (
    EnvironmentError,
    UpstreamMalformedError,
    UpstreamRequestError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


class YtDlpExecutor:
    """Concrete :class:`RequestExecutor` for :class:`ExtractRequest` objects.

    Works as the local last-resort provider: no third-party API is
    involved, yt-dlp talks to the video site directly.
    """

    _TIMEOUT_SIGNALS: tuple[str, ...] = ("timed out", "timeout")

    def __init__(self, config: FacadeConfig) -> None:
        self._config = config

    def _build_opts(self, request: ExtractRequest) -> dict[str, Any]:
        """Return yt-dlp options for metadata-only extraction."""
        opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "no_color": True,
            "skip_download": True,
            "socket_timeout": self._config.timeout,
            "http_headers": {"User-Agent": self._config.user_agent},
        }
        if request.flat:
            opts["extract_flat"] = "in_playlist"
        return opts

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    async def execute(self, request: ExtractRequest) -> ProviderReply:
        """Extract *request.target* without downloading.

        Raises
        ------
        EnvironmentError
            When yt-dlp is not installed.
        UpstreamTimeoutError
            When yt-dlp reports a socket timeout.
        UpstreamRequestError
            For any other extraction failure.
        UpstreamMalformedError
            When yt-dlp returns no usable info dict.
        """
        logger.debug("yt-dlp extract %s (flat=%s)", request.target, request.flat)
        info = await anyio.to_thread.run_sync(self._extract, request)
        return ProviderReply(
            url=str(info.get("webpage_url") or request.target),
            status_code=200,
            payload=info,
        )

    def _extract(self, request: ExtractRequest) -> dict[str, Any]:
        try:
            import yt_dlp
            import yt_dlp.utils
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "yt-dlp is not installed. Install with: pip install yt-dlp",
            ) from exc

        try:
            with yt_dlp.YoutubeDL(self._build_opts(request)) as ydl:
                info: Any = ydl.extract_info(request.target, download=False)
        except yt_dlp.utils.DownloadError as exc:
            self._raise_mapped(exc)
        except Exception as exc:
            raise UpstreamRequestError(
                f"Unexpected yt-dlp error: {exc}",
                provider="yt-dlp",
            ) from exc

        if not isinstance(info, dict):
            raise UpstreamMalformedError(
                "yt-dlp returned no metadata for the given target.",
                provider="yt-dlp",
            )
        return dict(info)

    @classmethod
    def _raise_mapped(cls, exc: Exception) -> None:
        """Translate a yt-dlp ``DownloadError`` into a provider error."""
        msg_lower = str(exc).lower()
        if any(signal in msg_lower for signal in cls._TIMEOUT_SIGNALS):
            raise UpstreamTimeoutError(str(exc), provider="yt-dlp") from exc
        raise UpstreamRequestError(str(exc), provider="yt-dlp") from exc
