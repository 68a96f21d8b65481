"""Allow ``python -m apimux`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m apimux`` behaves identically to the ``apimux``
console script.
"""

from __future__ import annotations

from apimux.cli.app import cli

if __name__ == "__main__":
    cli()
