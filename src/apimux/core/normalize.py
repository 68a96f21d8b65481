"""Pure helpers shared by the per-provider normalizers.

Every function here is a deterministic transformation of untyped
upstream values into the primitives the result models expect.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from apimux.exceptions import UpstreamMalformedError

KeyPath = Sequence[str | int]


def ms_to_seconds(value: Any) -> int | None:
    """Convert a millisecond count to whole seconds, truncating.

    ``185999`` and ``"185999.0"`` become ``185``; ``None`` and
    unparsable values become ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value) // 1000)
    except (TypeError, ValueError, OverflowError):
        return None


def to_seconds(value: Any) -> int | None:
    """Coerce a duration into whole seconds.

    Accepts numbers, numeric strings and clock strings such as
    ``"3:05"`` or ``"1:02:03"``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    if ":" in text:
        total = 0
        for part in text.split(":"):
            if not part.isdigit():
                return None
            total = total * 60 + int(part)
        return total
    try:
        return int(float(text))
    except ValueError:
        return None


def dig(payload: Any, path: KeyPath) -> Any:
    """Follow *path* through nested dicts/lists; ``None`` when it breaks."""
    current = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
    return current


def first_text(payload: Any, paths: Iterable[KeyPath], default: str = "") -> str:
    """Return the first non-empty string found along *paths*, in order."""
    for path in paths:
        value = dig(payload, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return default


def first_value(payload: Any, paths: Iterable[KeyPath]) -> Any:
    """Return the first value along *paths* that is not ``None`` or ``""``."""
    for path in paths:
        value = dig(payload, path)
        if value is not None and value != "":
            return value
    return None


def require_text(value: str, what: str, provider: str = "") -> str:
    """Shape check: *value* must be a non-empty string."""
    if not value:
        raise UpstreamMalformedError(f"Response has no {what}", provider=provider)
    return value


def require_list(value: Any, what: str, provider: str = "") -> list[Any]:
    """Shape check: *value* must be a non-empty list."""
    if not isinstance(value, list) or not value:
        raise UpstreamMalformedError(f"Response has no {what}", provider=provider)
    return value


def require_mapping(value: Any, provider: str = "") -> dict[str, Any]:
    """Shape check: *value* must be a JSON object."""
    if not isinstance(value, dict):
        raise UpstreamMalformedError("Response is not a JSON object", provider=provider)
    return value


def optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def optional_int(value: Any) -> int | None:
    number = optional_float(value)
    return int(number) if number is not None else None


def format_duration(seconds: int | None) -> str:
    """Render seconds as ``m:ss`` or ``h:mm:ss`` (``"--:--"`` if unknown)."""
    if seconds is None:
        return "--:--"
    hours, rest = divmod(int(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
