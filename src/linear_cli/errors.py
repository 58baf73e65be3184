"""Exception types raised by the linear CLI."""

from __future__ import annotations


class LinearCliError(Exception):
    """Base class for errors the CLI reports to the user."""


class InvalidSelectorError(LinearCliError, ValueError):
    """A cycle selector is neither a number nor a known keyword."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"invalid --cycle value {value!r}: "
            "must be current, next, previous, or a number",
        )


class CycleNotFoundError(LinearCliError, LookupError):
    """A valid cycle selector matched no cycle."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"no {selector} cycle found")


class CacheCorruptError(LinearCliError):
    """A cached payload could not be decoded. Never shown to users."""


class ApiError(LinearCliError):
    """The remote API call failed or returned no data."""


class MissingApiKeyError(LinearCliError):
    """No API key could be found."""
