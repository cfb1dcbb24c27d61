"""Statistics collectors for pipeline operations.

This module provides thread-safe statistics collectors for tracking
metrics across the pipeline stages:
- DecoderStatistics: Input line decoding metrics
- TransformStatistics: Digest computation metrics
- EncoderStatistics: Output line writing metrics
- QueueStatistics: Inter-stage queue metrics
"""

from __future__ import annotations

import threading


class DecoderStatistics:
    """Statistics collector for the request decoder.

    This class provides thread-safe counters for tracking decoding metrics.
    """

    def __init__(self) -> None:
        """Initialize the decoder statistics with zero counters."""
        self._lock = threading.Lock()
        self._lines_read = 0
        self._requests_accepted = 0
        self._lines_rejected = 0
        self._read_errors = 0

    def increment_lines_read(self) -> None:
        with self._lock:
            self._lines_read += 1

    def increment_requests_accepted(self) -> None:
        with self._lock:
            self._requests_accepted += 1

    def increment_lines_rejected(self) -> None:
        with self._lock:
            self._lines_rejected += 1

    def increment_read_errors(self) -> None:
        with self._lock:
            self._read_errors += 1

    @property
    def lines_read(self) -> int:
        """Get the number of raw lines read from the input."""
        with self._lock:
            return self._lines_read

    @property
    def requests_accepted(self) -> int:
        """Get the number of lines accepted as requests."""
        with self._lock:
            return self._requests_accepted

    @property
    def lines_rejected(self) -> int:
        """Get the number of malformed or invalid lines dropped."""
        with self._lock:
            return self._lines_rejected

    @property
    def read_errors(self) -> int:
        """Get the number of read errors that ended the input."""
        with self._lock:
            return self._read_errors


class TransformStatistics:
    """Statistics collector for the transformer.

    This class provides thread-safe counters for tracking digest metrics.
    """

    def __init__(self) -> None:
        """Initialize the transform statistics with zero counters."""
        self._lock = threading.Lock()
        self._items_processed = 0
        self._successes = 0
        self._failures = 0

    def increment_items_processed(self) -> None:
        """Increment the items processed counter."""
        with self._lock:
            self._items_processed += 1

    def increment_successes(self) -> None:
        """Increment the successes counter."""
        with self._lock:
            self._successes += 1

    def increment_failures(self) -> None:
        """Increment the failures counter."""
        with self._lock:
            self._failures += 1

    @property
    def items_processed(self) -> int:
        """Get the number of requests transformed."""
        with self._lock:
            return self._items_processed

    @property
    def successes(self) -> int:
        """Get the number of successful digests."""
        with self._lock:
            return self._successes

    @property
    def failures(self) -> int:
        """Get the number of failed digests."""
        with self._lock:
            return self._failures


class EncoderStatistics:
    """Thread-safe counters for the response encoder."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lines_written = 0
        self._write_failures = 0

    def increment_lines_written(self) -> None:
        with self._lock:
            self._lines_written += 1

    def increment_write_failures(self) -> None:
        with self._lock:
            self._write_failures += 1

    @property
    def lines_written(self) -> int:
        with self._lock:
            return self._lines_written

    @property
    def write_failures(self) -> int:
        with self._lock:
            return self._write_failures


class QueueStatistics:
    """Statistics collector for queue operations.

    This class provides thread-safe counters for tracking queue metrics.
    """

    def __init__(self) -> None:
        """Initialize the queue statistics with zero counters."""
        self._lock = threading.Lock()
        self._items_put = 0
        self._items_got = 0
        self._max_size = 0

    def increment_items_put(self) -> None:
        """Increment the items put counter."""
        with self._lock:
            self._items_put += 1

    def increment_items_got(self) -> None:
        """Increment the items got counter."""
        with self._lock:
            self._items_got += 1

    def update_max_size(self, size: int) -> None:
        """Update the maximum size observed.

        Args:
            size: The current size of the queue.
        """
        with self._lock:
            self._max_size = max(size, self._max_size)

    @property
    def items_put(self) -> int:
        """Get the number of items put into the queue."""
        with self._lock:
            return self._items_put

    @property
    def items_got(self) -> int:
        """Get the number of items got from the queue."""
        with self._lock:
            return self._items_got

    @property
    def max_size(self) -> int:
        """Get the maximum size observed."""
        with self._lock:
            return self._max_size
