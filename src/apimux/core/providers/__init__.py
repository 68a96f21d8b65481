"""Provider catalog — the fixed, ordered provider list of every capability.

Order is configuration, not logic: the façade always tries the first
entry first.  Adding or reordering providers only touches the tuples
referenced here.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from apimux.core.providers.ai import (
    CHAT_PROVIDERS,
    IMAGE_PROVIDERS,
    REMOVE_BACKGROUND_PROVIDERS,
    UPSCALE_PROVIDERS,
)
from apimux.core.providers.base import ProviderDescriptor
from apimux.core.providers.media import (
    INSTAGRAM_PROVIDERS,
    TIKTOK_PROVIDERS,
    YOUTUBE_PROVIDERS,
)
from apimux.core.providers.search import MUSIC_SEARCH_PROVIDERS, VIDEO_SEARCH_PROVIDERS
from apimux.core.providers.tools import (
    SHORTEN_PROVIDERS,
    TRANSLATE_PROVIDERS,
    WEATHER_PROVIDERS,
    build_sticker,
)

YOUTUBE_DOWNLOAD = "youtube-download"
TIKTOK_DOWNLOAD = "tiktok-download"
INSTAGRAM_DOWNLOAD = "instagram-download"
SEARCH_VIDEO = "search-video"
SEARCH_MUSIC = "search-music"
CHAT = "chat"
TEXT_TO_IMAGE = "text-to-image"
REMOVE_BACKGROUND = "remove-background"
UPSCALE_IMAGE = "upscale-image"
TRANSLATE = "translate"
SHORTEN_URL = "shorten-url"
WEATHER = "weather"

Catalog = Mapping[str, tuple[ProviderDescriptor, ...]]

DEFAULT_CATALOG: Catalog = MappingProxyType(
    {
        YOUTUBE_DOWNLOAD: YOUTUBE_PROVIDERS,
        TIKTOK_DOWNLOAD: TIKTOK_PROVIDERS,
        INSTAGRAM_DOWNLOAD: INSTAGRAM_PROVIDERS,
        SEARCH_VIDEO: VIDEO_SEARCH_PROVIDERS,
        SEARCH_MUSIC: MUSIC_SEARCH_PROVIDERS,
        CHAT: CHAT_PROVIDERS,
        TEXT_TO_IMAGE: IMAGE_PROVIDERS,
        REMOVE_BACKGROUND: REMOVE_BACKGROUND_PROVIDERS,
        UPSCALE_IMAGE: UPSCALE_PROVIDERS,
        TRANSLATE: TRANSLATE_PROVIDERS,
        SHORTEN_URL: SHORTEN_PROVIDERS,
        WEATHER: WEATHER_PROVIDERS,
    }
)

__all__: list[str] = [
    "CHAT",
    "DEFAULT_CATALOG",
    "INSTAGRAM_DOWNLOAD",
    "REMOVE_BACKGROUND",
    "SEARCH_MUSIC",
    "SEARCH_VIDEO",
    "SHORTEN_URL",
    "TEXT_TO_IMAGE",
    "TIKTOK_DOWNLOAD",
    "TRANSLATE",
    "UPSCALE_IMAGE",
    "WEATHER",
    "YOUTUBE_DOWNLOAD",
    "Catalog",
    "ProviderDescriptor",
    "build_sticker",
]
