"""Result rendering for the CLI layer.

Turns normalized result models into Rich tables (or plain text when
Rich is missing).  No business logic lives here.
"""

from __future__ import annotations

import sys
from dataclasses import fields, is_dataclass
from typing import Any

from apimux.cli.console import console
from apimux.core.models import SearchResults
from apimux.core.normalize import format_duration

# Fields too bulky to print in a key/value table.
_HIDDEN_FIELDS = frozenset({"raw"})


def _display_value(name: str, value: Any) -> str:
    if name == "duration":
        return format_duration(value)
    if value is None or value == "":
        return "-"
    return str(value)


def result_rows(result: Any) -> list[tuple[str, str]]:
    """Flatten one result dataclass into ``(field, value)`` rows."""
    if not is_dataclass(result):
        return [("value", str(result))]
    return [
        (field.name, _display_value(field.name, getattr(result, field.name)))
        for field in fields(result)
        if field.name not in _HIDDEN_FIELDS
    ]


def _print_rows(title: str, rows: list[tuple[str, str]]) -> None:
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        print(f"\n{title}", file=sys.stderr)
        for name, value in rows:
            print(f"  {name:<16} {value}", file=sys.stderr)
        return

    table = Table(title=title, show_header=False, border_style="dim")
    table.add_column("Field", style="bold cyan")
    table.add_column("Value", overflow="fold")
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def render_result(result: Any) -> None:
    """Render any capability result (or tuple of results)."""
    if isinstance(result, tuple):
        for item in result:
            render_result(item)
        return
    if isinstance(result, SearchResults):
        for index, item in enumerate(result, start=1):
            _print_rows(f"Result {index}", result_rows(item))
        return
    _print_rows(type(result).__name__, result_rows(result))

