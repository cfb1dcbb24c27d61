"""Shutdown coordination for the hashing pipeline.

The coordinator tracks requests that were accepted but whose responses
have not yet been handled, and blocks the caller until input has ended
and that count has drained to zero.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from hashstream.shared.errors import ErrorCode, ErrorContext, InfrastructureError

logger = logging.getLogger(__name__)


class ServiceState(str, Enum):
    """Lifecycle state of a hashing service."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


class PendingWorkCounter:
    """Counter of in-flight requests guarded by a Condition.

    Args:
        condition: Condition to notify on every change. Shared with the
            coordinator so waiters observe counter changes.
    """

    def __init__(self, condition: threading.Condition | None = None) -> None:
        self._condition = condition or threading.Condition()
        self._value = 0

    def increment(self) -> None:
        with self._condition:
            self._value += 1
            self._condition.notify_all()

    def decrement(self) -> None:
        """Decrement the counter.

        Raises:
            InfrastructureError: If the counter is already zero.
        """
        with self._condition:
            if self._value == 0:
                raise InfrastructureError(
                    ErrorCode.COUNTER_UNDERFLOW,
                    "Pending work counter decremented below zero",
                    ErrorContext(operation="decrement_pending"),
                )
            self._value -= 1
            self._condition.notify_all()

    @property
    def value(self) -> int:
        with self._condition:
            return self._value


class ShutdownCoordinator:
    """Decides when the service has finished.

    The service is finished once the decoder has reported the end of input
    and every accepted request has been handled by the encoder, or once
    cancel() has been called.

    Example:
        >>> coordinator = ShutdownCoordinator()
        >>> coordinator.task_accepted()
        >>> coordinator.mark_input_closed()
        >>> coordinator.task_done()
        >>> coordinator.wait()
        <ServiceState.STOPPED: 'STOPPED'>
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self.pending = PendingWorkCounter(self._condition)
        self._input_closed = False
        self._cancelled = False
        self._state = ServiceState.RUNNING

    def task_accepted(self) -> None:
        """Record one request accepted by the decoder."""
        self.pending.increment()

    def task_done(self) -> None:
        """Record one response handled by the encoder."""
        self.pending.decrement()

    def mark_input_closed(self) -> None:
        """Record that the decoder will accept no further requests."""
        with self._condition:
            self._input_closed = True
            self._condition.notify_all()

    def cancel(self) -> None:
        """Stop waiting regardless of outstanding work."""
        with self._condition:
            self._cancelled = True
            self._condition.notify_all()

    def _finished(self) -> bool:
        return self._cancelled or (self._input_closed and self.pending.value == 0)

    def wait(self, timeout: float | None = None) -> ServiceState:
        """Block until the service is finished.

        Args:
            timeout: Optional limit in seconds; on expiry the current state
                (still RUNNING) is returned.

        Returns:
            The state after waiting.
        """
        with self._condition:
            # Condition() wraps an RLock, so pending.value may re-enter it
            finished = self._condition.wait_for(self._finished, timeout=timeout)
            if finished:
                if self._state is ServiceState.RUNNING:
                    logger.debug(
                        "Coordinator stopped (cancelled=%s, pending=%d)",
                        self._cancelled,
                        self.pending.value,
                    )
                self._state = ServiceState.STOPPED
            return self._state

    @property
    def state(self) -> ServiceState:
        with self._condition:
            return self._state

    @property
    def input_closed(self) -> bool:
        with self._condition:
            return self._input_closed

    @property
    def cancelled(self) -> bool:
        with self._condition:
            return self._cancelled
