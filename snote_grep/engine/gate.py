"""Concurrency gate — bounds how many file scans run at once.

A counting semaphore hands out slots; a condition-guarded counter tracks
outstanding work so the orchestrator can wait for every scan to finish
before closing the record stream. Capacity 1 gives strictly ordered,
one-file-at-a-time scanning.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from snote_grep.domain.models import ScanConfig


class ConcurrencyGate:
    """A counting semaphore plus a wait-group style completion barrier."""

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be at least 1, got {limit}")
        self._limit = limit
        self._slots = threading.BoundedSemaphore(limit)
        self._cond = threading.Condition()
        self._pending = 0
        self._peak = 0

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def pending(self) -> int:
        """Units of work acquired but not yet released."""
        with self._cond:
            return self._pending

    @property
    def peak(self) -> int:
        """Highest number of slots held at the same time so far."""
        with self._cond:
            return self._peak

    def acquire(self) -> None:
        """Block until a slot is free, then register one unit of work."""
        self._slots.acquire()
        with self._cond:
            self._pending += 1
            self._peak = max(self._peak, self._pending)

    def release(self) -> None:
        """Return a slot and mark its unit of work complete."""
        with self._cond:
            if self._pending == 0:
                raise RuntimeError("release() called without a matching acquire()")
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()
        self._slots.release()

    def wait_all(self, timeout: float | None = None) -> bool:
        """Block until every acquired slot has been released.

        Returns False only if the timeout expired first.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._pending == 0, timeout=timeout)

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold one slot for the duration of the block."""
        self.acquire()
        try:
            yield
        finally:
            self.release()


def fast_limit(multiplier: int, cpu_count: int | None = None) -> int:
    """Concurrency limit for fast mode: available CPUs times a multiplier."""
    cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
    return max(1, cpus * multiplier)


def concurrency_limit(config: ScanConfig) -> int:
    """Gate capacity for a run: 1 in ordered mode, workers or CPUs x multiplier in fast mode."""
    if not config.fast:
        return 1
    if config.workers is not None:
        return max(1, config.workers)
    return fast_limit(config.fast_multiplier)
