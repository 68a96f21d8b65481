"""Infrastructure layer — external system integration.

This layer wraps all interaction with httpx and yt-dlp.  Every raw
third-party exception must be caught here and re-raised as an
:class:`~apimux.exceptions.ApimuxError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from apimux.infra.http_executor import HttpxExecutor
from apimux.infra.ytdlp_executor import YtDlpExecutor

__all__: list[str] = [
    "HttpxExecutor",
    "YtDlpExecutor",
]
