"""Command line entry-point.

Prints the next (or active) blue/green target code of a service deployed on
Docker Cloud:

    get-next-target-code --user=me --token=... --target=web.prod --lb=lb

Only the code goes to stdout; errors go to stderr as `ERROR: <message>`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import click
import pydantic
import typer
from typer.core import TyperCommand

from cli.arguments import RawArguments, validate_arguments
from cli.ui_components import configure_logging, error_console, print_code, print_error
from core.config import AppSettings
from core.domain.errors import ArgumentError, BlueGreenError
from core.services.target_code import lookup_target_code

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False)


class LookupCommand(TyperCommand):
    """Command whose parsing problems are reported like argument errors.

    - `--help` wins over anything else on the command line.
    - A value option given without a value (`--lb`) is read as empty, so the
      argument checks report it.
    - Remaining usage errors print `ERROR: <message>` and exit 1.
    """

    def _value_options(self) -> set[str]:
        names: set[str] = set()
        for param in self.params:
            if isinstance(param, click.Option) and not param.is_flag:
                names.update(param.opts)
        return names

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        head = args[: args.index("--")] if "--" in args else args
        if "--help" in head:
            return super().parse_args(ctx, ["--help"])

        value_options = self._value_options()
        normalized: list[str] = []
        for i, arg in enumerate(args):
            following = args[i + 1] if i + 1 < len(args) else None
            if arg in value_options and (following is None or following.startswith("-")):
                arg = f"{arg}="
            normalized.append(arg)

        try:
            return super().parse_args(ctx, normalized)
        except click.UsageError as exc:
            print_error(error_console(), exc.format_message())
            raise typer.Exit(code=1)


def describe_settings_error(exc: pydantic.ValidationError) -> str:
    """One-line summary of invalid settings."""

    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    ]
    return "Invalid configuration: " + "; ".join(problems)


@app.command(
    cls=LookupCommand,
    help=(
        "Get the next active target code for blue/green deployments on Docker Cloud. "
        "Looks up the service the load balancer currently routes to and prints the "
        "other code of the pair (or the current one with --active)."
    ),
)
def get_next_target_code(
    user: str | None = typer.Option(None, "--user", help="Docker Cloud username."),
    token: str | None = typer.Option(
        None, "--token", help="Docker Cloud API token associated with the username."
    ),
    target: str | None = typer.Option(
        None,
        "--target",
        metavar="SERVICE.STACK",
        help="Docker Cloud internal domain name of the service in question.",
    ),
    lb: str | None = typer.Option(
        None, "--lb", help="Docker Cloud hostname of the load balancer. Must be on the target stack."
    ),
    options: str | None = typer.Option(
        None,
        "--options",
        metavar="A,B",
        help="Suffix codes used for the service. Defaults to blue,green.",
    ),
    active: bool = typer.Option(False, "--active", help="Return the active code rather than the next code."),
    host: str | None = typer.Option(None, "--host", help="Override the API base URL."),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging, including failure traces."),
) -> None:
    console = error_console()
    raw = RawArguments(target=target, lb=lb, options=options, user=user, token=token, active=active)

    try:
        request = validate_arguments(raw)
    except ArgumentError as exc:
        print_error(console, exc.message)
        raise typer.Exit(code=1)

    overrides: dict[str, Any] = {}
    if host:
        overrides["api_base_url"] = host
    if verbose:
        overrides["log_level"] = "DEBUG"
    try:
        settings = AppSettings(**overrides)
    except pydantic.ValidationError as exc:
        print_error(console, describe_settings_error(exc))
        raise typer.Exit(code=1)
    configure_logging(settings.log_level)

    try:
        code = asyncio.run(lookup_target_code(request, settings))
    except BlueGreenError as exc:
        logger.debug("Lookup of %s failed", request.target, exc_info=exc)
        print_error(console, exc.message)
        raise typer.Exit(code=1)
    except Exception as exc:
        logger.debug("Lookup of %s failed unexpectedly", request.target, exc_info=exc)
        print_error(console, str(exc) or exc.__class__.__name__)
        raise typer.Exit(code=1)

    print_code(code)


def run() -> None:
    app()
