"""Utility providers: translation, URL shortening, weather, stickers."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlencode

from apimux.config import FacadeConfig
from apimux.core.models import (
    CapabilityRequest,
    HttpRequest,
    ProviderReply,
    ShortUrlResult,
    StickerResult,
    TranslationResult,
    WeatherResult,
)
from apimux.core.normalize import (
    dig,
    first_text,
    optional_float,
    optional_int,
    require_list,
    require_mapping,
    require_text,
)
from apimux.core.providers.base import ProviderDescriptor
from apimux.exceptions import UpstreamMalformedError

STICKER_BASE_URL = "https://api.erdwpe.com/api/maker"


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

def _target(request: CapabilityRequest) -> str:
    return request.hint or ""


def _google(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://translate.googleapis.com/translate_a/single",
        params={
            "client": "gtx",
            "sl": "auto",
            "tl": _target(request),
            "dt": "t",
            "q": request.param("text"),
        },
    )


def normalize_google(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> TranslationResult:
    payload = reply.payload
    segments = require_list(payload[0] if isinstance(payload, list) and payload else None, "translation", source)
    # Long inputs come back split into one segment per sentence.
    text = "".join(
        segment[0] for segment in segments
        if isinstance(segment, list) and segment and isinstance(segment[0], str)
    )
    detected = payload[2] if len(payload) > 2 and isinstance(payload[2], str) else "auto"
    return TranslationResult(
        text=require_text(text.strip(), "translated text", source),
        source_language=detected,
        target_language=_target(request),
        source=source,
    )


def _mymemory(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://api.mymemory.translated.net/get",
        params={"q": request.param("text"), "langpair": f"auto|{_target(request)}"},
    )


def normalize_mymemory(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> TranslationResult:
    payload = require_mapping(reply.payload, source)
    if str(payload.get("responseStatus", "200")) != "200":
        raise UpstreamMalformedError(
            f"Provider reported an error: {first_text(payload, (('responseDetails',),), 'unknown')}",
            provider=source,
        )
    text = first_text(payload, (("responseData", "translatedText"),))
    return TranslationResult(
        text=require_text(text, "translated text", source),
        source_language=first_text(payload, (("responseData", "detectedLanguage"),), "auto"),
        target_language=_target(request),
        source=source,
    )


TRANSLATE_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("google", _google, normalize_google),
    ProviderDescriptor("mymemory", _mymemory, normalize_mymemory),
)


# ---------------------------------------------------------------------------
# URL shortening
# ---------------------------------------------------------------------------

def _tinyurl(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://tinyurl.com/api-create.php",
        params={"url": request.param("url")},
        expect="text",
    )


def _isgd(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://is.gd/create.php",
        params={"format": "simple", "url": request.param("url")},
        expect="text",
    )


def normalize_short_url(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> ShortUrlResult:
    text = reply.payload.strip() if isinstance(reply.payload, str) else ""
    if not text.startswith(("http://", "https://")):
        raise UpstreamMalformedError("Response is not a URL", provider=source)
    return ShortUrlResult(short_url=text, original_url=request.param("url"), source=source)


SHORTEN_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor("tinyurl", _tinyurl, normalize_short_url),
    ProviderDescriptor("is.gd", _isgd, normalize_short_url),
)


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------

def _openweather(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        "https://api.openweathermap.org/data/2.5/weather",
        params={
            "q": request.param("city"),
            "appid": config.openweather_api_key,
            "units": "metric",
            "lang": config.default_language,
        },
    )


def normalize_openweather(
    reply: ProviderReply,
    request: CapabilityRequest,
    source: str,
) -> WeatherResult:
    payload = require_mapping(reply.payload, source)
    temperature = optional_float(dig(payload, ("main", "temp")))
    if temperature is None:
        raise UpstreamMalformedError("Response has no temperature", provider=source)
    return WeatherResult(
        city=first_text(payload, (("name",),), request.param("city")),
        temperature=temperature,
        feels_like=optional_float(dig(payload, ("main", "feels_like"))),
        description=first_text(payload, (("weather", 0, "description"),)),
        humidity=optional_int(dig(payload, ("main", "humidity"))),
        wind_speed=optional_float(dig(payload, ("wind", "speed"))),
        raw=payload,
        source=source,
    )


def _wttr(request: CapabilityRequest, config: FacadeConfig) -> HttpRequest:
    return HttpRequest(
        "GET",
        f"https://wttr.in/{quote(request.param('city'), safe='')}",
        params={"format": "j1", "lang": config.default_language},
    )


def normalize_wttr(reply: ProviderReply, request: CapabilityRequest, source: str) -> WeatherResult:
    payload = require_mapping(reply.payload, source)
    current: Any = require_list(payload.get("current_condition"), "current conditions", source)[0]
    temperature = optional_float(dig(current, ("temp_C",)))
    if temperature is None:
        raise UpstreamMalformedError("Response has no temperature", provider=source)
    wind_kmh = optional_float(dig(current, ("windspeedKmph",)))
    return WeatherResult(
        city=first_text(payload, (("nearest_area", 0, "areaName", 0, "value"),), request.param("city")),
        temperature=temperature,
        feels_like=optional_float(dig(current, ("FeelsLikeC",))),
        description=first_text(
            current,
            (
                (f"lang_{request.hint}", 0, "value"),
                ("weatherDesc", 0, "value"),
            ),
        ),
        humidity=optional_int(dig(current, ("humidity",))),
        # Reported in km/h; results carry m/s like OpenWeatherMap's metric units.
        wind_speed=round(wind_kmh / 3.6, 1) if wind_kmh is not None else None,
        raw=payload,
        source=source,
    )


WEATHER_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        "openweathermap",
        _openweather,
        normalize_openweather,
        accepts=lambda request, config: bool(config.openweather_api_key),
    ),
    ProviderDescriptor("wttr.in", _wttr, normalize_wttr),
)


# ---------------------------------------------------------------------------
# Text stickers (URL only, no request)
# ---------------------------------------------------------------------------

def build_sticker(text: str, *, animated: bool) -> StickerResult:
    kind = "attp" if animated else "ttp"
    query = urlencode({"text": text, "apikey": "erdwpe"}, quote_via=quote)
    return StickerResult(
        sticker_url=f"{STICKER_BASE_URL}/{kind}?{query}",
        text=text,
        animated=animated,
    )
