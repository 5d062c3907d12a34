"""Server notice matcher and filter policy.

Pure functions only: no shared mutable state, safe to call from any number
of scanner threads at once.

Notice format:
    [HH:MM:SS] -server.name- *** NOTICETYPE: free text
Colons in the timestamp are optional. The notice type may carry a REMOTE
marker (e.g. REMOTEKILL) when the notice was relayed from another server.
"""

from __future__ import annotations

import re

from snote_grep.domain.models import (
    REMOTE_PREFIX,
    WILDCARD,
    Record,
    ScanConfig,
    SnoteMatch,
    split_path,
)

SNOTE_PATTERN: re.Pattern[str] = re.compile(
    r"\[(?P<time>(?:\d{2}:?){3})\]"
    r"\s-(?P<server_name>\S+)-"
    r"\s+\*{3}"
    r"\s(?P<snote>(?:REMOTE)?\S+):"
    r"\s(?P<text>.*)",
    re.ASCII,
)


def match_line(line: str) -> SnoteMatch | None:
    """Return the named captures of a notice line, or None if it doesn't conform."""
    m = SNOTE_PATTERN.search(line)
    if m is None:
        return None
    return SnoteMatch(
        time=m.group("time"),
        server_name=m.group("server_name"),
        snote=m.group("snote"),
        text=m.group("text"),
    )


def accepts(snote: str, snote_type: str, ignore_remote: bool) -> bool:
    """Apply the notice-type filter to a matched notice type."""
    if snote_type == WILDCARD:
        return True
    wanted = snote_type.casefold()
    found = snote.casefold()
    if found == wanted:
        return True
    return not ignore_remote and found == (REMOTE_PREFIX + snote_type).casefold()


def emitted_text(
    line: str,
    match: SnoteMatch,
    path: str,
    strip_leaders: bool = False,
    include_filename: bool = False,
) -> str:
    """Build the text a record emits by default."""
    text = match.text if strip_leaders else line
    if include_filename:
        text = f"{path}:{text}"
    return text


def build_record(line: str, match: SnoteMatch, path: str, config: ScanConfig) -> Record:
    """Attach path-derived fields and the emitted text to a match."""
    directory, filename = split_path(path)
    return Record(
        time=match.time,
        server_name=match.server_name,
        snote=match.snote,
        text=match.text,
        path=path,
        dir=directory,
        filename=filename,
        line=line,
        output=emitted_text(
            line,
            match,
            path,
            strip_leaders=config.strip_leaders,
            include_filename=config.include_filename,
        ),
    )

