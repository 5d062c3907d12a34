"""Record stream — the single channel from many scanners to one collector."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator

from snote_grep.domain.errors import StreamClosedError
from snote_grep.domain.models import DEFAULT_QUEUE_SIZE, Record

_CLOSED = object()


class RecordStream:
    """Multi-producer, single-consumer queue of Records.

    Closed exactly once, after every producer is done. Iterating yields
    records in arrival order and stops once the stream is closed and drained.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def put(self, record: Record) -> None:
        """Push a record, blocking while the buffer is full."""
        if self.closed:
            raise StreamClosedError("put() on a closed record stream")
        self._queue.put(record)

    def close(self) -> None:
        """Signal that no more records will arrive."""
        with self._lock:
            if self._closed:
                raise StreamClosedError("record stream closed twice")
            self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Record]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
