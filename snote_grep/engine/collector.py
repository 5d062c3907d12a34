"""Collector — the single consumer that renders and writes every record.

All writes to the output destination happen on this thread, so concurrent
scanners never interleave output mid-record.
"""

from __future__ import annotations

import logging
import threading
from typing import TextIO

from snote_grep.domain.errors import RenderError
from snote_grep.engine.stream import RecordStream
from snote_grep.output.formatter import Formatter

logger = logging.getLogger(__name__)


class Collector(threading.Thread):
    def __init__(
        self,
        stream: RecordStream,
        formatter: Formatter,
        sink: TextIO,
        separator: str = "\n",
    ) -> None:
        super().__init__(name="snote-collector", daemon=True)
        self._stream = stream
        self._formatter = formatter
        self._sink = sink
        self._separator = separator
        self._written = 0
        self._errors = 0
        self._fatal: BaseException | None = None

    @property
    def written(self) -> int:
        return self._written

    @property
    def errors(self) -> int:
        return self._errors

    @property
    def fatal(self) -> BaseException | None:
        """An exception that stopped writing altogether (e.g. a closed pipe)."""
        return self._fatal

    def run(self) -> None:
        for record in self._stream:
            if self._fatal is not None:
                # Keep draining so producers blocked on a full stream can finish
                continue
            try:
                text = self._formatter.render(record)
                self._sink.write(text + self._separator)
            except RenderError as err:
                self._errors += 1
                logger.warning("%s", err)
                continue
            except BrokenPipeError as err:
                self._fatal = err
                continue
            except (OSError, ValueError) as err:
                self._errors += 1
                logger.warning("could not write record from %r: %s", record.path, err)
                continue
            except Exception:
                self._errors += 1
                logger.exception("unexpected error writing record from %r", record.path)
                continue
            self._written += 1

        if self._fatal is None:
            try:
                self._sink.flush()
            except BrokenPipeError as err:
                self._fatal = err
            except OSError as err:
                logger.warning("could not flush output: %s", err)
