"""File scanner — one unit of work per regular file.

Reads a file line by line, keeps the lines that match the notice pattern
and pass the notice-type filter, and pushes a Record for each onto the
shared stream. Line order within a file is always preserved.
"""

from __future__ import annotations

import logging

from snote_grep.domain.models import FileResult, ScanConfig
from snote_grep.engine.matcher import accepts, build_record, match_line
from snote_grep.engine.stream import RecordStream

logger = logging.getLogger(__name__)


def _strip_terminator(raw: str) -> str:
    """Drop one trailing newline, then at most one carriage return."""
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def scan_file(path: str, config: ScanConfig, stream: RecordStream) -> FileResult:
    """Scan a single file into the stream.

    I/O errors are terminal for this file only: they are logged and
    reported in the result, never raised.
    """
    result = FileResult(path=path)
    try:
        f = open(path, encoding="utf-8", errors="surrogateescape", newline="\n")
    except OSError as err:
        logger.warning("could not open file %s: %s", path, err.strerror or err)
        result.error = str(err)
        return result

    with f:
        try:
            for raw in f:
                line = _strip_terminator(raw)
                match = match_line(line)
                if match is None:
                    continue
                result.matched += 1
                if not accepts(match.snote, config.snote_type, config.ignore_remote):
                    continue
                stream.put(build_record(line, match, path, config))
                result.emitted += 1
        except OSError as err:
            logger.warning("could not read %s: %s", path, err.strerror or err)
            result.error = str(err)

    logger.debug("scanned %s: %d matched, %d emitted", path, result.matched, result.emitted)
    return result
