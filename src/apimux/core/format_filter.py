"""Pure stream filtering, deduplication, and sorting logic.

Used by the local yt-dlp download provider to pick one directly
playable URL out of an extraction result.  Every function here is a
**pure** transformation — no I/O, no side effects.

Pipeline order (enforced by :func:`select_stream`):

1. **Filter** — progressive (audio+video) streams for video, audio-only
   streams for audio; a direct ``url`` is mandatory.
2. **Deduplicate** — collapse identical ``(height, ext)`` pairs.
3. **Sort** — resolution desc → preferred container first.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from apimux.core.models import StreamFormat


# ---------------------------------------------------------------------------
# 0. Parse
# ---------------------------------------------------------------------------

def parse_stream_formats(info: dict[str, Any]) -> list[StreamFormat]:
    """Convert the ``formats`` list of a yt-dlp info dict into models.

    Malformed entries are skipped.
    """
    raw: object = info.get("formats")
    if not isinstance(raw, list):
        return []
    parsed: list[StreamFormat] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        height = entry.get("height")
        parsed.append(
            StreamFormat(
                format_id=str(entry.get("format_id", "")),
                ext=str(entry.get("ext", "")),
                url=str(entry.get("url") or ""),
                height=height if isinstance(height, int) else None,
                vcodec=str(entry.get("vcodec") or "none"),
                acodec=str(entry.get("acodec") or "none"),
            )
        )
    return parsed


# ---------------------------------------------------------------------------
# 1. Filter
# ---------------------------------------------------------------------------

def filter_playable(
    formats: Sequence[StreamFormat],
    *,
    audio_only: bool,
) -> list[StreamFormat]:
    """Keep streams that can be sent as-is.

    Audio mode keeps audio-only streams; video mode keeps muxed streams
    that carry both tracks.
    """
    if audio_only:
        return [
            fmt for fmt in formats
            if fmt.url and fmt.acodec != "none" and fmt.vcodec == "none"
        ]
    return [
        fmt for fmt in formats
        if fmt.url and fmt.acodec != "none" and fmt.vcodec != "none"
    ]


# ---------------------------------------------------------------------------
# 2. Deduplicate
# ---------------------------------------------------------------------------

def deduplicate_streams(formats: Sequence[StreamFormat]) -> list[StreamFormat]:
    """Remove duplicates keyed by ``(height, ext)``; first occurrence wins."""
    seen: set[tuple[int | None, str]] = set()
    result: list[StreamFormat] = []
    for fmt in formats:
        key = (fmt.height, fmt.ext)
        if key not in seen:
            seen.add(key)
            result.append(fmt)
    return result


# ---------------------------------------------------------------------------
# 3. Sort
# ---------------------------------------------------------------------------

_PREFERRED_EXT = {"mp4": 0, "m4a": 0, "webm": 1}


def _sort_key(fmt: StreamFormat) -> tuple[int, int]:
    height = fmt.height if fmt.height is not None else 0
    return (-height, _PREFERRED_EXT.get(fmt.ext, 2))


def sort_streams(formats: Sequence[StreamFormat]) -> list[StreamFormat]:
    """Sort by resolution desc, mp4/m4a before webm before anything else."""
    return sorted(formats, key=_sort_key)


# ---------------------------------------------------------------------------
# Composite pipeline
# ---------------------------------------------------------------------------

def select_stream(
    formats: Sequence[StreamFormat],
    *,
    audio_only: bool = False,
) -> StreamFormat | None:
    """Run filter → deduplicate → sort and return the best stream, if any."""
    candidates = sort_streams(
        deduplicate_streams(filter_playable(formats, audio_only=audio_only))
    )
    return candidates[0] if candidates else None
