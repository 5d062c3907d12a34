"""Directory tree walker.

Yields every entry under each input path in a deterministic, lexical order
(root first, then each directory's entries sorted by name, depth-first).
Failures are yielded as entries carrying the error rather than raised, so a
single unreadable directory never aborts the walk.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class WalkEntry:
    path: str
    is_dir: bool
    error: OSError | None = None


def walk(root: str) -> Iterator[WalkEntry]:
    """Walk a single root path. A regular file root yields only itself."""
    root = os.path.normpath(root)
    try:
        is_dir = os.path.isdir(root) and not os.path.islink(root)
        if not is_dir:
            os.stat(root)
    except OSError as err:
        yield WalkEntry(root, is_dir=False, error=err)
        return

    if not is_dir:
        yield WalkEntry(root, is_dir=False)
        return

    yield from _walk_dir(root)


def _walk_dir(directory: str) -> Iterator[WalkEntry]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as err:
        yield WalkEntry(directory, is_dir=True, error=err)
        return

    yield WalkEntry(directory, is_dir=True)
    for entry in entries:
        path = os.path.normpath(os.path.join(directory, entry.name))
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as err:
            yield WalkEntry(path, is_dir=False, error=err)
            continue
        if is_dir:
            yield from _walk_dir(path)
        else:
            yield WalkEntry(path, is_dir=False)


def walk_all(paths: Iterable[str]) -> Iterator[WalkEntry]:
    """Walk each root in argument order."""
    for root in paths:
        yield from walk(root)


def is_regular_file(entry: WalkEntry) -> bool:
    """True for entries worth handing to a scanner (files and file symlinks)."""
    if entry.error is not None or entry.is_dir:
        return False
    return os.path.isfile(entry.path)
