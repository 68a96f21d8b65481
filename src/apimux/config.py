"""Runtime configuration for the provider façade.

Every knob that used to be a module-level constant (timeout, user
agent, aggregator base URL, API keys) lives on :class:`FacadeConfig`,
which is passed into the façade at construction time.  Values come
from the documented defaults unless overridden through ``APIMUX_*``
environment variables or :meth:`FacadeConfig.with_overrides`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace

from apimux.exceptions import InvalidArgumentError
from apimux.version import __version__

ENV_PREFIX = "APIMUX_"

DEFAULT_BASE_URL = "https://api.spiderx.com.br/api"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LANGUAGE = "es"


@dataclass(frozen=True, slots=True)
class FacadeConfig:
    """Read-only configuration shared by every capability call."""

    base_url: str = DEFAULT_BASE_URL
    """Base URL of the primary aggregation provider."""

    api_token: str = ""
    """Token sent to the aggregation provider as ``api_key``."""

    timeout: float = DEFAULT_TIMEOUT
    """Per-request timeout in seconds."""

    user_agent: str = f"apimux/{__version__}"

    default_language: str = DEFAULT_LANGUAGE
    """Target language for translation and weather descriptions."""

    chat_model: str = "gpt-3.5-turbo"
    chat_api_key: str = "free-key"
    youtube_api_key: str = ""
    rapidapi_key: str = ""
    removebg_api_key: str = ""
    openweather_api_key: str = ""

    image_size: int = 512
    """Width and height requested from image generators."""

    max_play_duration: int = 3780
    """Longest video (seconds) that :meth:`ProviderFacade.play` accepts."""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> FacadeConfig:
        """Build a config from ``APIMUX_<FIELD>`` variables.

        Unset or empty variables keep the field default.

        Raises
        ------
        InvalidArgumentError
            If a numeric variable cannot be parsed.
        """
        source = os.environ if env is None else env
        values: dict[str, object] = {}
        for field in fields(cls):
            name = f"{ENV_PREFIX}{field.name.upper()}"
            raw = source.get(name, "").strip()
            if not raw:
                continue
            values[field.name] = _coerce(name, raw, field.type)
        return cls(**values)  # type: ignore[arg-type]

    def with_overrides(self, **changes: object) -> FacadeConfig:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)  # type: ignore[arg-type]

    @property
    def aggregator_url(self) -> str:
        return self.base_url.rstrip("/")


def _coerce(name: str, raw: str, annotation: object) -> object:
    """Convert *raw* to the type named by a dataclass field annotation."""
    # Annotations are strings under ``from __future__ import annotations``.
    kind = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", "")
    try:
        if kind == "float":
            return float(raw)
        if kind == "int":
            return int(raw)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Invalid value for {name}: {raw!r}",
            hint=f"{name} must be a {kind}.",
        ) from exc
    return raw
