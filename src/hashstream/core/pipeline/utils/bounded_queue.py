"""Bounded queue for pipeline backpressure control.

This module provides BoundedQueue, a thread-safe queue wrapper with size
limits for implementing backpressure between pipeline stages, plus a close
protocol: once the producer closes the queue and the consumer has drained
it, every further get() returns Pipeline.SENTINEL immediately.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Iterator
from typing import Any

from hashstream.core.pipeline.utils.statistics import QueueStatistics
from hashstream.shared.constants import Pipeline, Timeout
from hashstream.shared.errors import (
    ErrorCode,
    ErrorContext,
    PipelineCancelledError,
    QueueClosedError,
    QueueTimeoutError,
)


class BoundedQueue:
    """Thread-safe single-producer/single-consumer queue with a capacity.

    put() blocks while the queue is full and get() blocks while it is empty
    and still open. When a cancel_event is supplied, both wait in short
    slices and raise PipelineCancelledError once the event is set.
    wait_timeout bounds every wait; exceeding it raises QueueTimeoutError.

    Args:
        maxsize: Maximum number of items the queue can hold.
        name: Name used in error context and statistics reports.
        cancel_event: Optional event observed while suspended.
        wait_timeout: Optional upper bound in seconds for a single wait.
        stats: Optional QueueStatistics to update on put/get.
    """

    def __init__(
        self,
        maxsize: int,
        name: str = "queue",
        cancel_event: threading.Event | None = None,
        wait_timeout: float | None = None,
        stats: QueueStatistics | None = None,
    ) -> None:
        if maxsize <= 0:
            msg = f"maxsize must be positive, got {maxsize}"
            raise ValueError(msg)
        # One extra slot so close() never waits behind a full queue
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=maxsize + 1)
        self._maxsize = maxsize
        self._slots = threading.BoundedSemaphore(maxsize)
        self.name = name
        self._cancel_event = cancel_event
        self._wait_timeout = wait_timeout
        self.stats = stats or QueueStatistics()
        self._closed = threading.Event()
        self._exhausted = False

    def put(self, item: Any) -> None:
        """Put an item into the queue, blocking while it is full.

        Raises:
            QueueClosedError: If the queue has been closed.
            PipelineCancelledError: If cancellation is signalled while waiting.
            QueueTimeoutError: If the wait exceeds wait_timeout.
        """
        if self._closed.is_set():
            raise QueueClosedError(
                ErrorCode.QUEUE_CLOSED,
                f"Cannot put into closed queue '{self.name}'",
                ErrorContext(operation="queue_put", additional_data={"queue": self.name}),
            )
        self._wait(self._slots.acquire, "queue_put")
        self._queue.put_nowait(item)
        self.stats.increment_items_put()
        self.stats.update_max_size(self.qsize())

    def get(self) -> Any:
        """Get the next item, blocking while the queue is empty and open.

        Returns:
            The next item, or Pipeline.SENTINEL once the queue is closed
            and drained.

        Raises:
            PipelineCancelledError: If cancellation is signalled while waiting.
            QueueTimeoutError: If the wait exceeds wait_timeout.
        """
        if self._exhausted:
            return Pipeline.SENTINEL
        item = self._wait(self._get_item, "queue_get")
        if item is Pipeline.SENTINEL:
            self._exhausted = True
            return item
        self._slots.release()
        self.stats.increment_items_got()
        return item

    def close(self) -> None:
        """Mark the end of input. Idempotent; never blocks."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put_nowait(Pipeline.SENTINEL)

    def __iter__(self) -> Iterator[Any]:
        """Yield items until the queue is closed and drained."""
        while True:
            item = self.get()
            if item is Pipeline.SENTINEL:
                return
            yield item

    def _get_item(self, blocking: bool = True, timeout: float | None = None) -> Any:
        try:
            return self._queue.get(block=blocking, timeout=timeout)
        except queue.Empty:
            return _NOTHING

    def _wait(self, attempt: Any, operation: str) -> Any:
        """Run a blocking attempt, observing cancellation and the wait limit.

        ``attempt(blocking, timeout)`` follows the Semaphore.acquire /
        Queue.get convention: it returns False (or _NOTHING) on timeout.
        """
        if self._cancel_event is None and self._wait_timeout is None:
            return attempt(True, None)

        deadline = None if self._wait_timeout is None else time.monotonic() + self._wait_timeout
        while True:
            self._raise_if_cancelled(operation)
            slice_timeout = Timeout.PIPELINE_POLL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise QueueTimeoutError(
                        ErrorCode.QUEUE_TIMEOUT,
                        f"Waited more than {self._wait_timeout}s on queue '{self.name}'",
                        ErrorContext(
                            operation=operation,
                            additional_data={
                                "queue": self.name,
                                "wait_timeout": float(self._wait_timeout or 0.0),
                            },
                        ),
                    )
                slice_timeout = min(slice_timeout, remaining)
            result = attempt(True, slice_timeout)
            if result is not False and result is not _NOTHING:
                return result

    def _raise_if_cancelled(self, operation: str) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise PipelineCancelledError(
                ErrorCode.PIPELINE_CANCELLED,
                f"Cancelled while waiting on queue '{self.name}'",
                ErrorContext(operation=operation, additional_data={"queue": self.name}),
            )

    def qsize(self) -> int:
        """Return the approximate number of items waiting, excluding the close marker."""
        size = self._queue.qsize()
        if self._closed.is_set() and not self._exhausted:
            size -= 1
        return max(size, 0)

    def empty(self) -> bool:
        """Return True if no items are waiting."""
        return self.qsize() == 0

    def full(self) -> bool:
        """Return True if a put() would block."""
        return self.qsize() >= self._maxsize

    @property
    def closed(self) -> bool:
        """True once close() has been called."""
        return self._closed.is_set()

    @property
    def exhausted(self) -> bool:
        """True once the consumer has drained a closed queue."""
        return self._exhausted

    @property
    def maxsize(self) -> int:
        """Get the maximum size of the queue."""
        return self._maxsize


# Private marker for "no item within this slice"; None is a valid item
_NOTHING = object()
