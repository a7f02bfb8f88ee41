"""CLI argument validation.

The checks run in a fixed order and the first failure wins, so a command line
with several problems always reports the same one. No check touches the
network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from core.domain.errors import (
    ArgumentError,
    LbError,
    OptionsError,
    TargetError,
    TokenError,
    UserError,
)
from core.domain.models import ColorOptions, Credentials, LookupRequest, Target


@dataclass
class RawArguments:
    """Flags exactly as received from the command line."""

    target: str | None = None
    lb: str | None = None
    options: str | None = None
    user: str | None = None
    token: str | None = None
    active: bool = False


def _check_target(raw: RawArguments) -> ArgumentError | None:
    try:
        Target.parse(raw.target or "")
    except ValueError:
        return TargetError(
            "--target parameter must be used to specify the intended target in the format of [service].[stack]"
        )
    return None


def _check_lb(raw: RawArguments) -> ArgumentError | None:
    if not isinstance(raw.lb, str) or not raw.lb:
        return LbError("--lb parameter must be used to specify the service load balancer")
    return None


def _check_options(raw: RawArguments) -> ArgumentError | None:
    try:
        ColorOptions.parse(raw.options)
    except ValueError:
        return OptionsError("--options parameter use requires exactly two options delimited by a comma")
    return None


def _check_user(raw: RawArguments) -> ArgumentError | None:
    if not raw.user:
        return UserError("--user parameter must be used to specify a docker cloud username")
    return None


def _check_token(raw: RawArguments) -> ArgumentError | None:
    if not raw.token:
        return TokenError("--token parameter must be used to specify a docker cloud API token matched with --user")
    return None


CHECKS: tuple[Callable[[RawArguments], ArgumentError | None], ...] = (
    _check_target,
    _check_lb,
    _check_options,
    _check_user,
    _check_token,
)


def first_failure(raw: RawArguments) -> ArgumentError | None:
    for check in CHECKS:
        error = check(raw)
        if error is not None:
            return error
    return None


def validate_arguments(raw: RawArguments) -> LookupRequest:
    """Build a `LookupRequest` or raise the first `ArgumentError`."""

    error = first_failure(raw)
    if error is not None:
        raise error

    # Every field was checked above.
    return LookupRequest(
        target=Target.parse(raw.target or ""),
        lb=raw.lb or "",
        options=ColorOptions.parse(raw.options),
        credentials=Credentials(user=raw.user or "", token=raw.token or ""),
        active=raw.active,
    )
