"""CLI output helpers (Rich).

Why separate helpers:
- Keeps command logic free of output details.
- stdout only ever carries the resulting code, so scripts can capture it
  with `$(...)`; everything else goes to stderr.
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.console import Console


def error_console() -> Console:
    """Plain stderr console: no markup, highlighting or wrapping."""

    return Console(stderr=True, highlight=False, soft_wrap=True, markup=False, emoji=False)


def print_code(code: str) -> None:
    # No trailing newline.
    typer.echo(code, nl=False)


def print_error(console: Console, message: str) -> None:
    console.print(f"ERROR: {message}")


def configure_logging(level: str) -> None:
    """Send log records to stderr at `level`.

    `force=True` rebinds the handler to the current `sys.stderr` on every run.
    """

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
