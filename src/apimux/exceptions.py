"""Custom exception hierarchy for apimux.

All exceptions that cross layer boundaries must inherit from
:class:`ApimuxError`.  Raw third-party exceptions (``httpx``, ``yt_dlp``)
must NEVER propagate beyond the infrastructure layer — they are caught
there and re-raised as a typed subclass defined here.

Hierarchy
---------
ApimuxError
├── InvalidArgumentError
├── ProviderError
│   ├── UpstreamTimeoutError
│   ├── UpstreamRequestError
│   └── UpstreamMalformedError
├── UpstreamUnavailableError
└── EnvironmentError
"""

from __future__ import annotations


class ApimuxError(Exception):
    """Base exception for all apimux errors.

    Every user-visible error condition maps to a subclass of this
    exception so that callers (CLI, chat command handlers) can render a
    clean message without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Caller input ----------------------------------------------------------

class InvalidArgumentError(ApimuxError):
    """Raised when a required argument is missing, empty or out of range.

    Always detected before any network call is attempted.
    """


# --- Single provider failures ------------------------------------------------

class ProviderError(ApimuxError):
    """A single upstream provider failed; the next one may still succeed."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.provider: str = provider


class UpstreamTimeoutError(ProviderError):
    """Raised when a provider does not answer within the fixed timeout."""


class UpstreamRequestError(ProviderError):
    """Raised on transport errors and non-success HTTP status codes."""


class UpstreamMalformedError(ProviderError):
    """Raised when a provider answers but the payload fails the shape check."""


# --- Capability exhausted ----------------------------------------------------

class UpstreamUnavailableError(ApimuxError):
    """Raised when every configured provider for a capability failed."""

    def __init__(self, capability: str, last_error: str = "") -> None:
        message = f"All providers failed for '{capability}'"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(message, hint="The service is busy, try again later.")
        self.capability: str = capability
        self.last_error: str = last_error


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(ApimuxError):
    """Raised when a required runtime dependency is not available."""


def format_error_reply(exc: BaseException) -> str:
    """Render *exc* as a short chat reply for a command handler.

    Known errors show their message (and hint); anything else collapses
    to a generic line so stack traces never reach end users.
    """
    if isinstance(exc, UpstreamUnavailableError):
        return f"⚠️ {exc.capability} is unavailable right now. Try again later."
    if isinstance(exc, ApimuxError):
        lines = [f"❌ {exc}"]
        if exc.hint:
            lines.append(f"💡 {exc.hint}")
        return "\n".join(lines)
    return "❌ Something went wrong. Try again later."
