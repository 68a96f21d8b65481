"""Tests for domain models (core/models.py).

All models are frozen dataclasses — these tests verify immutability,
equality semantics, and collection behaviour.
"""

from __future__ import annotations

import pytest

from apimux.core.models import (
    CapabilityRequest,
    HttpRequest,
    MediaResult,
    SearchResults,
    VideoSearchResult,
    WeatherResult,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _make_video(**overrides: object) -> VideoSearchResult:
    defaults: dict[str, object] = {
        "title": "Lofi",
        "url": "https://www.youtube.com/watch?v=abc123",
        "duration": 3600,
    }
    defaults.update(overrides)
    return VideoSearchResult(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

class TestCapabilityRequest:
    def test_param_default(self) -> None:
        request = CapabilityRequest("chat", {"prompt": "hi"})
        assert request.param("prompt") == "hi"
        assert request.param("missing") == ""
        assert request.param("limit", "1") == "1"
        assert request.hint is None

    def test_frozen(self) -> None:
        request = CapabilityRequest("chat")
        with pytest.raises(AttributeError):
            request.hint = "mp3"  # type: ignore[misc]


class TestHttpRequest:
    def test_defaults(self) -> None:
        request = HttpRequest("GET", "https://api.test/")
        assert request.params == {}
        assert request.json is None
        assert request.data is None
        assert request.expect == "json"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class TestMediaResult:
    def test_optional_fields_default_empty(self) -> None:
        media = MediaResult(download_url="https://cdn.test/a", title="", duration=None)
        assert media.thumbnail == ""
        assert media.quality == ""
        assert media.source == ""

    def test_equality(self) -> None:
        a = MediaResult("https://cdn.test/a", "t", 10, source="x")
        b = MediaResult("https://cdn.test/a", "t", 10, source="x")
        assert a == b


class TestWeatherResult:
    def test_raw_defaults_to_empty_mapping(self) -> None:
        weather = WeatherResult("Lima", 19.0, None, "", None, None)
        assert weather.raw == {}


# ---------------------------------------------------------------------------
# SearchResults
# ---------------------------------------------------------------------------

class TestSearchResults:
    def test_len(self) -> None:
        col = SearchResults(results=(_make_video(), _make_video(title="Other")))
        assert len(col) == 2

    def test_empty_is_falsy(self) -> None:
        col = SearchResults(results=())
        assert not col
        assert len(col) == 0

    def test_non_empty_is_truthy(self) -> None:
        assert SearchResults(results=(_make_video(),))

    def test_iteration_keeps_order(self) -> None:
        col = SearchResults(results=(_make_video(title="a"), _make_video(title="b")))
        assert [v.title for v in col] == ["a", "b"]
        assert col.first.title == "a"

    def test_first_of_empty_raises(self) -> None:
        with pytest.raises(IndexError):
            SearchResults(results=()).first

    def test_frozen(self) -> None:
        col = SearchResults(results=())
        with pytest.raises(AttributeError):
            col.results = ()  # type: ignore[misc]
