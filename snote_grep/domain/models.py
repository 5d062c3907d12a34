"""Core domain models for server notice scanning.

These models have ZERO dependencies on the engine, CLI, or any framework.
A Record is the only thing that crosses from the scanners to the collector.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

WILDCARD = "*"
REMOTE_PREFIX = "REMOTE"

DEFAULT_TEMPLATE = "{output}"
DEFAULT_FAST_MULTIPLIER = 10
DEFAULT_QUEUE_SIZE = 256

RECORD_FIELDS = (
    "time",
    "server_name",
    "snote",
    "text",
    "path",
    "dir",
    "filename",
    "line",
    "output",
)


@dataclass(frozen=True)
class SnoteMatch:
    """The four named captures of a line that matched the notice pattern."""

    time: str
    server_name: str
    snote: str
    """Notice type, including any REMOTE marker (e.g. 'KILL', 'REMOTEKILL')."""

    text: str
    """Everything after the notice type's colon, verbatim."""


@dataclass(frozen=True)
class Record:
    """A single accepted server notice, ready to be rendered.

    Created once by a file scanner and consumed once by the collector.
    """

    time: str
    server_name: str
    snote: str
    text: str
    path: str
    dir: str
    filename: str
    line: str
    """The raw matched line, without its line terminator."""

    output: str
    """The emitted text: the line, or only its free text, optionally path-prefixed."""

    def as_fields(self) -> dict[str, str]:
        """Project the record into the name -> text mapping used by templates."""
        return {name: getattr(self, name) for name in RECORD_FIELDS}


def split_path(path: str) -> tuple[str, str]:
    """Return (directory, file name) for a scanned path.

    The directory keeps its trailing separator, so directory + file name
    rebuilds the path.
    """
    head, tail = os.path.split(path)
    if head and not head.endswith(os.sep):
        head += os.sep
    return head, tail


@dataclass(frozen=True)
class ScanConfig:
    """Every setting the scan pipeline reads, passed explicitly to each component."""

    snote_type: str = WILDCARD
    """Which notice type to accept. '*' accepts all."""

    ignore_remote: bool = False
    """Reject REMOTE-prefixed notices of the target type."""

    strip_leaders: bool = False
    include_filename: bool = False
    output: str = "-"
    """Destination file path, or '-' for standard output."""

    fast: bool = False
    """Scan files concurrently. Output order is then not guaranteed."""

    template: str = DEFAULT_TEMPLATE
    null_delimited: bool = False
    fast_multiplier: int = DEFAULT_FAST_MULTIPLIER
    workers: int | None = None
    """Explicit fast-mode concurrency limit; overrides the multiplier."""

    queue_size: int = DEFAULT_QUEUE_SIZE
    """Records buffered between scanners and the collector. 0 = unbounded."""

    @property
    def separator(self) -> str:
        return "\0" if self.null_delimited else "\n"


@dataclass
class FileResult:
    """Outcome of scanning one file."""

    path: str
    matched: int = 0
    emitted: int = 0
    error: str | None = None


@dataclass
class ScanSummary:
    """Totals for a whole run."""

    files_scanned: int = 0
    files_failed: int = 0
    dirs_failed: int = 0
    records_emitted: int = 0
    render_errors: int = 0
    elapsed: float = 0.0
    concurrency_limit: int = 1

    @property
    def total_errors(self) -> int:
        return self.files_failed + self.dirs_failed + self.render_errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "files_failed": self.files_failed,
            "dirs_failed": self.dirs_failed,
            "records_emitted": self.records_emitted,
            "render_errors": self.render_errors,
            "elapsed": round(self.elapsed, 3),
            "concurrency_limit": self.concurrency_limit,
        }
