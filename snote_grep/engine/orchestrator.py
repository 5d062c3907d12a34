"""Orchestrator — wires the gate, walker, scanners, and collector together.

Startup order:
1. Size the concurrency gate (1 = ordered, N = fast).
2. Start the collector on the already-opened output destination.
3. Walk every input path, launching one gated scan per regular file.
4. Wait for every scan to release its slot, then close the record stream
   and let the collector drain it.

With a gate of 1, files are scanned one at a time in walk order, so output
order matches traversal order. With a larger gate, records from different
files may interleave; line order within a file is always kept.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import TextIO

from snote_grep.domain.models import FileResult, ScanConfig, ScanSummary
from snote_grep.engine.collector import Collector
from snote_grep.engine.gate import ConcurrencyGate, concurrency_limit
from snote_grep.engine.scanner import scan_file
from snote_grep.engine.stream import RecordStream
from snote_grep.engine.walker import is_regular_file, walk_all
from snote_grep.output.formatter import Formatter, get_formatter

logger = logging.getLogger(__name__)

DEFAULT_PATHS = (".",)

ScanFn = Callable[[str, ScanConfig, RecordStream], FileResult]


class _Tally:
    """Thread-safe per-file result counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.files_scanned = 0
        self.files_failed = 0

    def add(self, result: FileResult) -> None:
        with self._lock:
            self.files_scanned += 1
            if result.error is not None:
                self.files_failed += 1


def run_scan(
    paths: Sequence[str],
    config: ScanConfig,
    sink: TextIO,
    formatter: Formatter | None = None,
    gate: ConcurrencyGate | None = None,
    scan_fn: ScanFn = scan_file,
) -> ScanSummary:
    """Scan every regular file under paths and write matching records to sink.

    Args:
        paths: Files and/or directories to scan. Defaults to the current directory.
        config: Run settings, passed through to every scanner.
        sink: Open text destination. Only the collector writes to it.
        formatter: Renders records. Defaults to the config's template.
        gate: Override the concurrency gate (sized from config by default).
        scan_fn: Per-file scan function.

    Returns:
        Totals for the run.
    """
    started = time.monotonic()
    if formatter is None:
        formatter = get_formatter(config.template)
    if gate is None:
        gate = ConcurrencyGate(concurrency_limit(config))

    stream = RecordStream(maxsize=config.queue_size)
    collector = Collector(stream, formatter, sink, separator=config.separator)
    collector.start()

    tally = _Tally()
    summary = ScanSummary(concurrency_limit=gate.limit)
    logger.debug("scanning with concurrency limit %d", gate.limit)

    def task(path: str) -> None:
        try:
            tally.add(scan_fn(path, config, stream))
        except Exception:
            logger.exception("unexpected error scanning %s", path)
            tally.add(FileResult(path=path, error="unexpected error"))
        finally:
            gate.release()

    try:
        for entry in walk_all(paths or DEFAULT_PATHS):
            if entry.error is not None:
                logger.warning("could not read %s: %s", entry.path, entry.error.strerror or entry.error)
                if entry.is_dir:
                    summary.dirs_failed += 1
                else:
                    summary.files_failed += 1
                continue
            if not is_regular_file(entry):
                continue
            gate.acquire()
            worker = threading.Thread(target=task, args=(entry.path,), name=f"scan:{entry.path!r}", daemon=True)
            try:
                worker.start()
            except BaseException:
                gate.release()
                raise
    finally:
        gate.wait_all()
        stream.close()
        collector.join()

    if collector.fatal is not None:
        raise collector.fatal

    summary.files_scanned = tally.files_scanned
    summary.files_failed += tally.files_failed
    summary.records_emitted = collector.written
    summary.render_errors = collector.errors
    summary.elapsed = time.monotonic() - started
    logger.debug("scan finished: %s", summary.to_dict())
    return summary
