"""``apimux doctor`` — environment diagnostics command.

Gathers runtime information and renders a Rich table summarising
whether the environment satisfies apimux's requirements.  With
``--probe`` it also calls every capability once through the façade and
reports which ones currently have a working provider.
"""

from __future__ import annotations

import platform
import sys

from apimux.cli import exit_codes
from apimux.cli.console import console
from apimux.config import FacadeConfig
from apimux.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = major >= 3 and minor >= 10
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _httpx_version_check() -> tuple[str, str, str]:
    """httpx is required for every HTTP provider."""
    try:
        import httpx
    except ImportError:
        return "httpx", "NOT INSTALLED", "[red]FAIL[/red]"
    return "httpx", httpx.__version__, "[green]OK[/green]"


def _ytdlp_version_check() -> tuple[str, str, str]:
    """yt-dlp only backs the local fallback providers, so absence is a warning."""
    try:
        from yt_dlp.version import __version__ as ydl_ver

        return "yt-dlp", ydl_ver, "[green]OK[/green]"
    except ImportError:
        pass

    try:
        import yt_dlp  # noqa: F401

        return "yt-dlp", "unknown", "[green]OK[/green]"
    except ImportError:
        return "yt-dlp", "NOT INSTALLED", "[yellow]WARN[/yellow]"


def _config_check(config: FacadeConfig) -> tuple[str, str, str]:
    keys = {
        "youtube": config.youtube_api_key,
        "rapidapi": config.rapidapi_key,
        "remove.bg": config.removebg_api_key,
        "openweather": config.openweather_api_key,
    }
    missing = [name for name, value in keys.items() if not value]
    value = f"{config.aggregator_url} (timeout {config.timeout:g}s)"
    if missing:
        return "Config", f"{value}; no key: {', '.join(missing)}", "[yellow]WARN[/yellow]"
    return "Config", value, "[green]OK[/green]"


def _apimux_version_check() -> tuple[str, str, str]:
    return "apimux", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\napimux doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<48} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<48} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _render_checks(checks: list[tuple[str, str, str]]) -> None:
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        return

    table = Table(
        title="apimux doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20, overflow="fold")
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()


def _probe_checks(config: FacadeConfig) -> list[tuple[str, str, str]]:
    """Call every capability once and turn the reports into rows."""
    import anyio

    from apimux.factory import create_facade

    facade = create_facade(config)
    reports = anyio.run(facade.check_providers)
    return [
        (
            report.capability,
            report.detail if not report.ok else "reachable",
            "[green]OK[/green]" if report.ok else "[yellow]WARN[/yellow]",
        )
        for report in reports
    ]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(*, probe: bool = False) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
        Probe results never fail the run; upstream outages are expected.
    """
    config = FacadeConfig.from_env()
    checks = [
        _apimux_version_check(),
        _python_version_check(),
        _httpx_version_check(),
        _ytdlp_version_check(),
        _config_check(config),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)
    if probe and not has_failure:
        checks.extend(_probe_checks(config))

    _render_checks(checks)

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
