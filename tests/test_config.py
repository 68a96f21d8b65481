"""Tests for FacadeConfig (config.py)."""

from __future__ import annotations

import dataclasses

import pytest

from apimux.config import DEFAULT_BASE_URL, FacadeConfig
from apimux.exceptions import InvalidArgumentError
from apimux.version import __version__


class TestDefaults:
    def test_documented_defaults(self) -> None:
        config = FacadeConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout == 30.0
        assert config.default_language == "es"
        assert config.user_agent == f"apimux/{__version__}"
        assert config.max_play_duration == 3780

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            FacadeConfig().timeout = 1.0  # type: ignore[misc]

    def test_aggregator_url_strips_slash(self) -> None:
        assert FacadeConfig(base_url="https://x.test/api/").aggregator_url == "https://x.test/api"


class TestFromEnv:
    def test_reads_prefixed_variables(self) -> None:
        config = FacadeConfig.from_env(
            {
                "APIMUX_BASE_URL": "https://mirror.test/api",
                "APIMUX_TIMEOUT": "12.5",
                "APIMUX_IMAGE_SIZE": "1024",
                "APIMUX_DEFAULT_LANGUAGE": "pt",
                "APIMUX_RAPIDAPI_KEY": "rk",
                "UNRELATED": "ignored",
            }
        )
        assert config.base_url == "https://mirror.test/api"
        assert config.timeout == 12.5
        assert config.image_size == 1024
        assert config.default_language == "pt"
        assert config.rapidapi_key == "rk"

    def test_empty_values_keep_defaults(self) -> None:
        config = FacadeConfig.from_env({"APIMUX_TIMEOUT": "  ", "APIMUX_BASE_URL": ""})
        assert config == FacadeConfig()

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APIMUX_API_TOKEN", "secret")
        assert FacadeConfig.from_env().api_token == "secret"

    @pytest.mark.parametrize(
        ("name", "raw"),
        [("APIMUX_TIMEOUT", "soon"), ("APIMUX_MAX_PLAY_DURATION", "1.5")],
    )
    def test_invalid_number(self, name: str, raw: str) -> None:
        with pytest.raises(InvalidArgumentError, match=name) as exc_info:
            FacadeConfig.from_env({name: raw})
        assert exc_info.value.hint


class TestOverrides:
    def test_returns_copy(self) -> None:
        base = FacadeConfig()
        changed = base.with_overrides(timeout=5.0)
        assert changed.timeout == 5.0
        assert base.timeout == 30.0
