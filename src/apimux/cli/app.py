"""CLI application entry point and command routing for apimux.

This module is the **sole error boundary** for the command line.  It
catches :class:`~apimux.exceptions.ApimuxError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages and
returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — every command is one façade call.
* Output goes through the Rich-backed console proxy only.
* This module is the only place that translates between the domain
  world and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from apimux.cli import exit_codes
from apimux.cli.console import configure_logging, console
from apimux.exceptions import ApimuxError
from apimux.version import __version__

Call = Callable[[Any, argparse.Namespace], Awaitable[Any]]


# ---------------------------------------------------------------------------
# Capability commands
# ---------------------------------------------------------------------------

def _join(words: list[str]) -> str:
    return " ".join(words)


COMMANDS: dict[str, tuple[str, Call]] = {
    "download": (
        "Resolve a download link (youtube, tiktok, instagram).",
        lambda facade, args: facade.download_media(args.platform, args.url, args.format),
    ),
    "search": (
        "Search YouTube videos.",
        lambda facade, args: facade.search_video(_join(args.query), args.limit),
    ),
    "music": (
        "Search a music track with a preview clip.",
        lambda facade, args: facade.search_music(_join(args.query)),
    ),
    "play": (
        "Search YouTube and resolve the first hit.",
        lambda facade, args: facade.play(_join(args.query), audio=args.audio),
    ),
    "chat": (
        "Ask the AI chat providers.",
        lambda facade, args: facade.chat(_join(args.prompt)),
    ),
    "image": (
        "Generate an image from a prompt.",
        lambda facade, args: facade.text_to_image(_join(args.prompt)),
    ),
    "removebg": (
        "Remove the background of an image URL.",
        lambda facade, args: facade.remove_background(args.image_url),
    ),
    "upscale": (
        "Upscale an image URL.",
        lambda facade, args: facade.upscale_image(args.image_url),
    ),
    "translate": (
        "Translate text.",
        lambda facade, args: facade.translate(_join(args.text), args.to),
    ),
    "shorten": (
        "Shorten a URL.",
        lambda facade, args: facade.shorten_url(args.url),
    ),
    "weather": (
        "Current weather for a city.",
        lambda facade, args: facade.weather(_join(args.city)),
    ),
    "sticker": (
        "Build a text sticker URL.",
        lambda facade, args: facade.text_sticker(_join(args.text), animated=args.animated),
    ),
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser with one sub-command per capability."""
    parser = argparse.ArgumentParser(
        prog="apimux",
        description="Multi-provider API façade for chat-bot commands.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every provider attempt.",
    )
    sub = parser.add_subparsers(dest="command", metavar="command")

    def add(name: str) -> argparse.ArgumentParser:
        return sub.add_parser(name, help=COMMANDS[name][0])

    download = add("download")
    download.add_argument("platform", help="youtube, tiktok or instagram")
    download.add_argument("url")
    download.add_argument("-f", "--format", default="", help="mp4 or mp3 (YouTube only)")

    search = add("search")
    search.add_argument("query", nargs="+")
    search.add_argument("-n", "--limit", type=int, default=1)

    add("music").add_argument("query", nargs="+")

    play = add("play")
    play.add_argument("query", nargs="+")
    play.add_argument("--audio", action="store_true", help="Resolve audio instead of video.")

    add("chat").add_argument("prompt", nargs="+")
    add("image").add_argument("prompt", nargs="+")
    add("removebg").add_argument("image_url")
    add("upscale").add_argument("image_url")

    translate = add("translate")
    translate.add_argument("text", nargs="+")
    translate.add_argument("-t", "--to", default="", help="Target language code.")

    add("shorten").add_argument("url")
    add("weather").add_argument("city", nargs="+")

    sticker = add("sticker")
    sticker.add_argument("text", nargs="+")
    sticker.add_argument("--animated", action="store_true")

    doctor = sub.add_parser("doctor", help="Environment diagnostics.")
    doctor.add_argument(
        "--probe",
        action="store_true",
        help="Also call every capability once (needs network).",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_capability(args: argparse.Namespace) -> int:
    """Run one façade call and render its result."""
    import anyio

    from apimux.cli.render import render_result
    from apimux.factory import create_facade

    facade = create_facade()
    call = COMMANDS[args.command][1]

    async def _invoke() -> Any:
        return await call(facade, args)

    result = anyio.run(_invoke)
    render_result(result)
    return exit_codes.SUCCESS


def _handle_doctor(probe: bool) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from apimux.cli.doctor import run_doctor

    return run_doctor(probe=probe)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the apimux CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)

    if args.command == "doctor":
        return _handle_doctor(args.probe)

    return _handle_capability(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ApimuxError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
