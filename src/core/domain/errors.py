"""Error taxonomy.

Every `BlueGreenError` already carries a human-readable message and is shown
to the user as-is. Anything else that escapes an API stage (transport errors,
malformed payloads) is raw and gets wrapped in a stage-specific `FetchError`.
"""

from __future__ import annotations


class BlueGreenError(Exception):
    """Base class for errors that are safe to print verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Argument validation (raised before any network call).


class ArgumentError(BlueGreenError):
    pass


class TargetError(ArgumentError):
    pass


class LbError(ArgumentError):
    pass


class OptionsError(ArgumentError):
    pass


class UserError(ArgumentError):
    pass


class TokenError(ArgumentError):
    pass


# Resolution: the described entity is missing or structurally wrong.


class ResolutionError(BlueGreenError):
    pass


class NotFoundError(ResolutionError):
    pass


class LinkageError(ResolutionError):
    pass


class ValidationError(ResolutionError):
    """A linked service does not carry one of the configured color codes."""


class FetchError(BlueGreenError):
    """Generic API failure, wrapped with the stage that produced it."""
