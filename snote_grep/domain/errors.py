"""Error taxonomy for snote-grep.

Only OutputOpenError is allowed to end a run. Everything else is handled
where it happens and logged.
"""

from __future__ import annotations


class SnoteGrepError(Exception):
    """Base class for all snote-grep errors."""


class OutputOpenError(SnoteGrepError):
    """The output destination could not be created or opened."""

    def __init__(self, destination: str, reason: str) -> None:
        super().__init__(f"could not open output file {destination}: {reason}")
        self.destination = destination
        self.reason = reason


class TemplateError(SnoteGrepError, ValueError):
    """An output template is malformed or names an unknown field."""


class RenderError(SnoteGrepError):
    """A single record could not be rendered through the template."""


class StreamClosedError(SnoteGrepError, RuntimeError):
    """A record stream was used after it was closed."""
