"""Tests for the provider catalog: request builders and normalizers.

Each normalizer is fed a realistic sample payload for its upstream and
must produce a fully populated result model, or raise
``UpstreamMalformedError`` when the shape check fails.
"""

from __future__ import annotations

from typing import Any

import pytest

from conftest import reply

from apimux.config import FacadeConfig
from apimux.core.models import CapabilityRequest, HttpRequest
from apimux.core.providers import DEFAULT_CATALOG, build_sticker
from apimux.core.providers import ai, media, search, tools
from apimux.exceptions import UpstreamMalformedError


def _names(capability: str) -> list[str]:
    return [descriptor.name for descriptor in DEFAULT_CATALOG[capability]]


def _build(capability: str, name: str, request: CapabilityRequest, config: FacadeConfig | None = None) -> Any:
    (descriptor,) = [d for d in DEFAULT_CATALOG[capability] if d.name == name]
    return descriptor.build(request, config or FacadeConfig())


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestCatalogOrder:
    @pytest.mark.parametrize(
        ("capability", "expected"),
        [
            ("youtube-download", ["aggregator", "adonix", "y2mate", "cobalt", "yt-dlp"]),
            ("tiktok-download", ["aggregator", "ssstik", "tiktok-scraper7"]),
            ("instagram-download", ["aggregator", "instagram-downloader", "instagram-scraper"]),
            ("search-video", ["youtube-data-api", "yt-dlp"]),
            ("search-music", ["deezer", "itunes"]),
            ("chat", ["pawan", "chatanywhere", "churchless"]),
            ("text-to-image", ["pollinations", "pollinations-image"]),
            ("remove-background", ["aggregator", "remove.bg"]),
            ("upscale-image", ["aggregator"]),
            ("translate", ["google", "mymemory"]),
            ("shorten-url", ["tinyurl", "is.gd"]),
            ("weather", ["openweathermap", "wttr.in"]),
        ],
    )
    def test_fixed_order(self, capability: str, expected: list[str]) -> None:
        assert _names(capability) == expected

    def test_catalog_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_CATALOG["chat"] = ()  # type: ignore[index]

    def test_key_gated_providers(self) -> None:
        request = CapabilityRequest("weather", {"city": "Lima"})
        (openweather,) = [d for d in DEFAULT_CATALOG["weather"] if d.name == "openweathermap"]
        assert not openweather.supports(request, FacadeConfig())
        assert openweather.supports(request, FacadeConfig(openweather_api_key="k"))


# ---------------------------------------------------------------------------
# Media
# ---------------------------------------------------------------------------

YT = CapabilityRequest("youtube-download", {"url": "https://youtu.be/x"}, hint="mp4")
YT_AUDIO = CapabilityRequest("youtube-download", {"url": "https://youtu.be/x"}, hint="mp3")


class TestMediaNormalizers:
    def test_adonix_nested_data(self) -> None:
        payload = {
            "status": True,
            "data": {
                "title": "Song",
                "duration": "3:32",
                "thumbnail": "https://i.ytimg.com/x.jpg",
                "quality": "360p",
                "download": "https://cdn.test/v.mp4",
            },
        }
        (adonix,) = [d for d in DEFAULT_CATALOG["youtube-download"] if d.name == "adonix"]

        result = adonix.normalize(reply(payload), YT, "adonix")

        assert result.download_url == "https://cdn.test/v.mp4"
        assert result.duration == 212
        assert result.quality == "360p"
        assert result.source == "adonix"

    def test_adonix_sits_out_audio(self) -> None:
        (adonix,) = [d for d in DEFAULT_CATALOG["youtube-download"] if d.name == "adonix"]
        assert adonix.supports(YT, FacadeConfig())
        assert not adonix.supports(YT_AUDIO, FacadeConfig())

    @pytest.mark.parametrize(
        "payload",
        [
            {"error": "Video unavailable"},
            {"status": "error", "message": "rate limited"},
            {"success": False},
            {"title": "no link"},
            "<html>captcha</html>",
        ],
    )
    def test_rejected_payloads(self, payload: Any) -> None:
        with pytest.raises(UpstreamMalformedError):
            media.normalize_media(payload, "aggregator", media.AGGREGATOR_SHAPE)

    def test_tikwm_shape(self) -> None:
        payload = {
            "code": 0,
            "data": {
                "title": "dance",
                "duration": 15,
                "cover": "https://p16.test/c.jpg",
                "play": "https://v16.test/p.mp4",
                "wmplay": "https://v16.test/wm.mp4",
            },
        }

        result = media.normalize_media(payload, "tiktok-scraper7", media.TIKWM_SHAPE)

        assert result.download_url == "https://v16.test/p.mp4"
        assert result.thumbnail == "https://p16.test/c.jpg"
        assert result.duration == 15

    def test_missing_optional_fields_are_empty(self) -> None:
        result = media.normalize_media({"url": "https://cdn.test/a"}, "x", media.AGGREGATOR_SHAPE)

        assert result.title == ""
        assert result.duration is None
        assert result.thumbnail == ""

    def test_ytdlp_audio_picks_audio_only_stream(self) -> None:
        info = {
            "title": "Song",
            "duration": 212.4,
            "formats": [
                {"format_id": "18", "ext": "mp4", "height": 360, "vcodec": "avc1",
                 "acodec": "mp4a", "url": "https://g.test/18"},
                {"format_id": "140", "ext": "m4a", "vcodec": "none",
                 "acodec": "mp4a", "url": "https://g.test/140"},
            ],
        }

        result = media.normalize_ytdlp_media(reply(info), YT_AUDIO, "yt-dlp")

        assert result.download_url == "https://g.test/140"
        assert result.quality == "audio"
        assert result.duration == 212

    def test_ytdlp_falls_back_to_top_level_url(self) -> None:
        info = {"title": "Clip", "url": "https://direct.test/clip.mp4", "formats": []}

        result = media.normalize_ytdlp_media(reply(info), YT, "yt-dlp")

        assert result.download_url == "https://direct.test/clip.mp4"
        assert result.quality == ""

    def test_ytdlp_without_any_stream(self) -> None:
        with pytest.raises(UpstreamMalformedError, match="playable stream"):
            media.normalize_ytdlp_media(reply({"title": "x"}), YT, "yt-dlp")

    def test_rapidapi_headers_use_configured_key(self) -> None:
        request = CapabilityRequest("tiktok-download", {"url": "https://vm.tiktok.com/x"})

        built = _build("tiktok-download", "tiktok-scraper7", request, FacadeConfig(rapidapi_key="rk"))

        assert built.headers["X-RapidAPI-Key"] == "rk"
        assert built.headers["X-RapidAPI-Host"] == "tiktok-scraper7.p.rapidapi.com"


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class TestSearchNormalizers:
    def test_ytdlp_search_truncates_to_limit(self) -> None:
        request = CapabilityRequest("search-video", {"query": "lofi", "limit": "2"})
        entries = [
            {"id": f"id{i}", "title": f"T{i}", "duration": 60 * i,
             "thumbnails": [{"url": "small"}, {"url": f"https://i.test/{i}.jpg"}]}
            for i in range(1, 4)
        ]

        results = search.normalize_ytdlp_search(reply({"entries": entries}), request, "yt-dlp")

        assert len(results) == 2
        assert results.first.thumbnail == "https://i.test/1.jpg"
        assert [r.duration for r in results] == [60, 120]

    def test_ytdlp_search_without_entries(self) -> None:
        request = CapabilityRequest("search-video", {"query": "x", "limit": "1"})
        with pytest.raises(UpstreamMalformedError):
            search.normalize_ytdlp_search(reply({"entries": []}), request, "yt-dlp")

    def test_youtube_data_api_skips_channels(self) -> None:
        request = CapabilityRequest("search-video", {"query": "x", "limit": "5"})
        payload = {
            "items": [
                {"id": {"kind": "youtube#channel", "channelId": "c"}, "snippet": {"title": "Chan"}},
                {"id": {"videoId": "v"}, "snippet": {"title": "Vid", "channelTitle": "C"}},
            ]
        }

        results = search.normalize_youtube_data_api(reply(payload), request, "youtube-data-api")

        assert len(results) == 1
        assert results.first.url == "https://www.youtube.com/watch?v=v"
        assert results.first.duration is None

    def test_deezer(self) -> None:
        payload = {
            "data": [
                {
                    "title": "Tití Me Preguntó",
                    "duration": 243,
                    "preview": "https://cdn.deezer.test/p.mp3",
                    "artist": {"name": "Bad Bunny"},
                    "album": {"title": "Un Verano Sin Ti", "cover_medium": "https://e.test/c.jpg"},
                }
            ]
        }

        track = search.normalize_deezer(reply(payload), CapabilityRequest("search-music"), "deezer")

        assert track.artist == "Bad Bunny"
        assert track.album == "Un Verano Sin Ti"
        assert track.duration == 243
        assert track.thumbnail == "https://e.test/c.jpg"

    def test_deezer_without_preview_is_malformed(self) -> None:
        payload = {"data": [{"title": "x", "artist": {"name": "y"}}]}
        with pytest.raises(UpstreamMalformedError, match="preview URL"):
            search.normalize_deezer(reply(payload), CapabilityRequest("search-music"), "deezer")

    def test_itunes_exact_seconds(self) -> None:
        payload = {
            "results": [
                {"trackName": "a", "artistName": "b", "collectionName": "c",
                 "trackTimeMillis": 185000, "previewUrl": "https://p.test/a.m4a"}
            ]
        }

        track = search.normalize_itunes(reply(payload), CapabilityRequest("search-music"), "itunes")

        assert track.duration == 185
        assert track.album == "c"


# ---------------------------------------------------------------------------
# AI
# ---------------------------------------------------------------------------

CHAT = CapabilityRequest("chat", {"prompt": "Hola"})


class TestAiProviders:
    def test_chat_request_shape(self) -> None:
        config = FacadeConfig(chat_model="m", chat_api_key="secret")

        built = _build("chat", "pawan", CHAT, config)

        assert built.method == "POST"
        assert built.headers["Authorization"] == "Bearer secret"
        assert built.json["model"] == "m"
        assert built.json["messages"] == [{"role": "user", "content": "Hola"}]

    def test_chat_choices(self) -> None:
        payload = {"choices": [{"message": {"content": " ¡Hola! "}}]}
        assert ai.normalize_chat(reply(payload), CHAT, "pawan").text == "¡Hola!"

    def test_chat_result_field(self) -> None:
        assert ai.normalize_chat(reply({"result": "ok"}), CHAT, "pawan").text == "ok"

    def test_chat_empty_gets_sentinel(self) -> None:
        assert ai.normalize_chat(reply({"choices": []}), CHAT, "pawan").text == "No response."

    def test_chat_error_object(self) -> None:
        payload = {"error": {"message": "Invalid API key"}}
        with pytest.raises(UpstreamMalformedError, match="Invalid API key"):
            ai.normalize_chat(reply(payload), CHAT, "pawan")

    def test_image_request_is_head_without_body(self) -> None:
        request = CapabilityRequest("text-to-image", {"prompt": "a cat/dog"})

        built = _build("text-to-image", "pollinations", request, FacadeConfig(image_size=256))

        assert built.method == "HEAD"
        assert built.expect == "none"
        assert built.url == "https://pollinations.ai/p/a%20cat%2Fdog"
        assert built.params == {"width": "256", "height": "256", "nologo": "true"}

    def test_generated_image_uses_final_url(self) -> None:
        request = CapabilityRequest("text-to-image", {"prompt": "cat"})
        final = "https://image.pollinations.ai/prompt/cat?width=512"

        result = ai.normalize_generated_image(reply(None, url=final), request, "pollinations")

        assert result.image_url == final
        assert result.prompt == "cat"

    def test_processed_image(self) -> None:
        request = CapabilityRequest("upscale-image", {"image_url": "https://img.test/a.png"})

        result = ai.normalize_processed_image(
            reply({"data": {"url": "https://cdn.test/up.png"}}), request, "aggregator"
        )

        assert result.image_url == "https://cdn.test/up.png"
        assert result.original_url == "https://img.test/a.png"

    def test_removebg_data_url(self) -> None:
        request = CapabilityRequest("remove-background", {"image_url": "https://img.test/a.png"})

        result = ai.normalize_removebg(
            reply({"data": {"result_b64": "iVBORw0KGgo="}}), request, "remove.bg"
        )

        assert result.image_url == "data:image/png;base64,iVBORw0KGgo="

    def test_removebg_sends_form_data(self) -> None:
        request = CapabilityRequest("remove-background", {"image_url": "https://img.test/a.png"})

        built = _build("remove-background", "remove.bg", request, FacadeConfig(removebg_api_key="rb"))

        assert isinstance(built, HttpRequest)
        assert built.data == {"image_url": "https://img.test/a.png", "size": "auto"}
        assert built.headers["X-Api-Key"] == "rb"


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

class TestToolProviders:
    def test_google_joins_segments(self) -> None:
        request = CapabilityRequest("translate", {"text": "Hello. World."}, hint="es")
        payload = [[["Hola. ", "Hello. ", None], ["Mundo.", "World.", None]], None, "en"]

        result = tools.normalize_google(reply(payload), request, "google")

        assert result.text == "Hola. Mundo."
        assert result.source_language == "en"
        assert result.target_language == "es"

    def test_mymemory_error_status(self) -> None:
        request = CapabilityRequest("translate", {"text": "x"}, hint="es")
        payload = {"responseStatus": 403, "responseDetails": "INVALID LANGUAGE PAIR"}

        with pytest.raises(UpstreamMalformedError, match="INVALID LANGUAGE PAIR"):
            tools.normalize_mymemory(reply(payload), request, "mymemory")

    def test_mymemory_request(self) -> None:
        request = CapabilityRequest("translate", {"text": "hi"}, hint="fr")
        built = _build("translate", "mymemory", request)
        assert built.params == {"q": "hi", "langpair": "auto|fr"}

    def test_short_url(self) -> None:
        request = CapabilityRequest("shorten-url", {"url": "https://www.python.org"})

        result = tools.normalize_short_url(reply("https://tinyurl.com/abc\n"), request, "tinyurl")

        assert result.short_url == "https://tinyurl.com/abc"
        assert result.original_url == "https://www.python.org"

    def test_short_url_error_body(self) -> None:
        request = CapabilityRequest("shorten-url", {"url": "nope"})
        with pytest.raises(UpstreamMalformedError):
            tools.normalize_short_url(reply("Error"), request, "tinyurl")

    def test_openweather(self) -> None:
        request = CapabilityRequest("weather", {"city": "lima"}, hint="es")
        payload = {
            "name": "Lima",
            "main": {"temp": 19.3, "feels_like": 19.0, "humidity": 77},
            "weather": [{"description": "nubes"}],
            "wind": {"speed": 4.1},
        }

        result = tools.normalize_openweather(reply(payload), request, "openweathermap")

        assert result.city == "Lima"
        assert result.temperature == 19.3
        assert result.humidity == 77
        assert result.description == "nubes"
        assert result.raw is payload

    def test_wttr_converts_wind_and_localizes(self) -> None:
        request = CapabilityRequest("weather", {"city": "Lima"}, hint="es")
        payload = {
            "current_condition": [
                {
                    "temp_C": "19",
                    "FeelsLikeC": "18",
                    "humidity": "80",
                    "windspeedKmph": "18",
                    "weatherDesc": [{"value": "Partly cloudy"}],
                    "lang_es": [{"value": "Parcialmente nublado"}],
                }
            ],
            "nearest_area": [{"areaName": [{"value": "Lima"}]}],
        }

        result = tools.normalize_wttr(reply(payload), request, "wttr.in")

        assert result.temperature == 19.0
        assert result.wind_speed == 5.0
        assert result.description == "Parcialmente nublado"
        assert result.humidity == 80

    def test_weather_without_temperature(self) -> None:
        request = CapabilityRequest("weather", {"city": "x"})
        with pytest.raises(UpstreamMalformedError, match="temperature"):
            tools.normalize_openweather(reply({"cod": "404"}), request, "openweathermap")

    def test_static_sticker(self) -> None:
        sticker = build_sticker("hi", animated=False)
        assert sticker.sticker_url.startswith("https://api.erdwpe.com/api/maker/ttp?text=hi")
        assert not sticker.animated
