"""Output destination handling."""

from __future__ import annotations

from typing import TextIO

import click

from snote_grep.domain.errors import OutputOpenError

STDOUT = "-"


def open_sink(destination: str) -> TextIO:
    """Open '-' as standard output, or create/truncate the named file.

    Raises:
        OutputOpenError: if the file cannot be created. This is the only
            failure that aborts a run.
    """
    try:
        return click.open_file(destination, mode="w", encoding="utf-8", errors="surrogateescape")
    except OSError as err:
        raise OutputOpenError(destination, err.strerror or str(err)) from err
