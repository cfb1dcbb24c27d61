"""Unit tests for pipeline utilities.

This module contains tests for:
- BoundedQueue: Thread-safe queue with size limits and a close protocol
- ShutdownCoordinator / PendingWorkCounter: completion tracking
- Statistics classes: Thread-safe counters for pipeline metrics
"""

import threading
import time

import pytest

from hashstream.core.pipeline.utils import (
    BoundedQueue,
    DecoderStatistics,
    EncoderStatistics,
    PendingWorkCounter,
    QueueStatistics,
    ServiceState,
    ShutdownCoordinator,
    TransformStatistics,
)
from hashstream.shared.constants import Pipeline
from hashstream.shared.errors import (
    ErrorCode,
    InfrastructureError,
    PipelineCancelledError,
    QueueClosedError,
    QueueTimeoutError,
)


class TestBoundedQueue:
    """Test cases for BoundedQueue class."""

    def test_init_with_maxsize(self) -> None:
        """Test BoundedQueue initialization with maxsize."""
        queue = BoundedQueue(maxsize=5)
        assert queue.maxsize == 5
        assert queue.empty()
        assert not queue.full()
        assert not queue.closed

    @pytest.mark.parametrize("maxsize", [0, -1])
    def test_init_rejects_non_positive_size(self, maxsize: int) -> None:
        """A queue must have at least one slot."""
        with pytest.raises(ValueError):
            BoundedQueue(maxsize=maxsize)

    def test_put_and_get_single_item(self) -> None:
        """Test basic put and get operations."""
        queue = BoundedQueue(maxsize=1)

        queue.put("test_item")
        assert queue.full()

        assert queue.get() == "test_item"
        assert queue.empty()
        assert not queue.full()

    def test_items_come_out_in_order(self) -> None:
        queue = BoundedQueue(maxsize=3)
        for item in ["item1", "item2", "item3"]:
            queue.put(item)

        assert queue.qsize() == 3
        assert [queue.get() for _ in range(3)] == ["item1", "item2", "item3"]

    def test_none_is_a_valid_item(self) -> None:
        queue = BoundedQueue(maxsize=1, cancel_event=threading.Event())

        queue.put(None)

        assert queue.get() is None

    def test_put_blocks_when_full(self) -> None:
        """Test that put blocks until the consumer frees a slot."""
        queue = BoundedQueue(maxsize=1)
        queue.put("first_item")
        put_done = threading.Event()

        def producer() -> None:
            queue.put("second_item")
            put_done.set()

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()

        assert not put_done.wait(0.1)
        assert queue.get() == "first_item"
        assert put_done.wait(1.0)
        assert queue.get() == "second_item"
        thread.join(1.0)

    def test_close_on_full_queue_does_not_block(self) -> None:
        queue = BoundedQueue(maxsize=1)
        queue.put("item")

        queue.close()

        assert queue.closed
        assert queue.qsize() == 1
        assert queue.full()

    def test_close_is_idempotent(self) -> None:
        queue = BoundedQueue(maxsize=2)
        queue.put("item")

        queue.close()
        queue.close()

        assert list(queue) == ["item"]

    def test_get_after_close_drains_then_returns_sentinel(self) -> None:
        # Given
        queue = BoundedQueue(maxsize=2)
        queue.put("a")
        queue.put("b")
        queue.close()

        # When / Then: items first, then the sentinel forever
        assert queue.get() == "a"
        assert queue.get() == "b"
        assert queue.get() is Pipeline.SENTINEL
        assert queue.get() is Pipeline.SENTINEL
        assert queue.exhausted
        assert queue.empty()

    def test_put_after_close_raises(self) -> None:
        queue = BoundedQueue(maxsize=1, name="requests")
        queue.close()

        with pytest.raises(QueueClosedError) as exc_info:
            queue.put("late")

        assert exc_info.value.code == ErrorCode.QUEUE_CLOSED
        assert exc_info.value.context.additional_data == {"queue": "requests"}

    def test_blocked_get_wakes_on_close(self) -> None:
        queue = BoundedQueue(maxsize=1)
        results: list[object] = []

        thread = threading.Thread(target=lambda: results.append(queue.get()), daemon=True)
        thread.start()
        time.sleep(0.05)
        queue.close()
        thread.join(1.0)

        assert results == [Pipeline.SENTINEL]

    def test_iteration_stops_at_close(self) -> None:
        queue = BoundedQueue(maxsize=10)
        for i in range(5):
            queue.put(i)
        queue.close()

        assert list(queue) == [0, 1, 2, 3, 4]

    def test_cancelled_get_raises(self) -> None:
        """A consumer suspended on an empty queue observes cancellation."""
        cancel_event = threading.Event()
        queue = BoundedQueue(maxsize=1, cancel_event=cancel_event)
        errors: list[BaseException] = []

        def consumer() -> None:
            try:
                queue.get()
            except PipelineCancelledError as e:
                errors.append(e)

        thread = threading.Thread(target=consumer, daemon=True)
        thread.start()
        cancel_event.set()
        thread.join(1.0)

        assert not thread.is_alive()
        assert len(errors) == 1
        assert errors[0].code == ErrorCode.PIPELINE_CANCELLED

    def test_cancelled_put_raises(self) -> None:
        cancel_event = threading.Event()
        queue = BoundedQueue(maxsize=1, cancel_event=cancel_event)
        queue.put("item")
        cancel_event.set()

        with pytest.raises(PipelineCancelledError):
            queue.put("blocked")

    def test_get_times_out(self) -> None:
        queue = BoundedQueue(maxsize=1, name="responses", wait_timeout=0.05)

        start = time.monotonic()
        with pytest.raises(QueueTimeoutError) as exc_info:
            queue.get()

        assert time.monotonic() - start >= 0.05
        assert exc_info.value.code == ErrorCode.QUEUE_TIMEOUT
        assert exc_info.value.context.additional_data == {
            "queue": "responses",
            "wait_timeout": 0.05,
        }

    def test_put_times_out_when_full(self) -> None:
        queue = BoundedQueue(maxsize=1, wait_timeout=0.05)
        queue.put("item")

        with pytest.raises(QueueTimeoutError):
            queue.put("blocked")

    def test_statistics_are_updated(self) -> None:
        stats = QueueStatistics()
        queue = BoundedQueue(maxsize=3, stats=stats)

        queue.put("a")
        queue.put("b")
        queue.get()
        queue.close()
        list(queue)

        assert stats.items_put == 2
        assert stats.items_got == 2
        assert stats.max_size == 2

    def test_single_producer_single_consumer_preserves_order(self) -> None:
        queue = BoundedQueue(maxsize=2)
        received: list[int] = []

        consumer = threading.Thread(target=lambda: received.extend(queue), daemon=True)
        consumer.start()
        for i in range(200):
            queue.put(i)
        queue.close()
        consumer.join(2.0)

        assert received == list(range(200))


class TestPendingWorkCounter:
    def test_increment_and_decrement(self) -> None:
        counter = PendingWorkCounter()

        counter.increment()
        counter.increment()
        counter.decrement()

        assert counter.value == 1

    def test_underflow_raises(self) -> None:
        counter = PendingWorkCounter()

        with pytest.raises(InfrastructureError) as exc_info:
            counter.decrement()

        assert exc_info.value.code == ErrorCode.COUNTER_UNDERFLOW
        assert counter.value == 0


class TestShutdownCoordinator:
    """Test cases for ShutdownCoordinator."""

    def test_initial_state(self) -> None:
        coordinator = ShutdownCoordinator()

        assert coordinator.state is ServiceState.RUNNING
        assert coordinator.pending.value == 0
        assert not coordinator.input_closed
        assert not coordinator.cancelled

    def test_not_finished_while_input_open(self) -> None:
        coordinator = ShutdownCoordinator()

        assert coordinator.wait(timeout=0.05) is ServiceState.RUNNING

    def test_not_finished_while_work_pending(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator.task_accepted()
        coordinator.mark_input_closed()

        assert coordinator.wait(timeout=0.05) is ServiceState.RUNNING

    def test_finished_when_input_closed_and_drained(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator.task_accepted()
        coordinator.mark_input_closed()
        coordinator.task_done()

        assert coordinator.wait() is ServiceState.STOPPED
        assert coordinator.state is ServiceState.STOPPED

    def test_empty_input_finishes_immediately(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator.mark_input_closed()

        assert coordinator.wait(timeout=1.0) is ServiceState.STOPPED

    def test_wait_wakes_on_last_task_done(self) -> None:
        # Given: a waiter blocked on one outstanding request
        coordinator = ShutdownCoordinator()
        coordinator.task_accepted()
        coordinator.mark_input_closed()
        states: list[ServiceState] = []
        waiter = threading.Thread(target=lambda: states.append(coordinator.wait()), daemon=True)
        waiter.start()
        time.sleep(0.05)
        assert states == []

        # When
        coordinator.task_done()
        waiter.join(1.0)

        # Then
        assert states == [ServiceState.STOPPED]

    def test_cancel_finishes_with_work_pending(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator.task_accepted()

        coordinator.cancel()

        assert coordinator.wait(timeout=1.0) is ServiceState.STOPPED
        assert coordinator.cancelled
        assert coordinator.pending.value == 1

    def test_task_done_without_accept_raises(self) -> None:
        coordinator = ShutdownCoordinator()

        with pytest.raises(InfrastructureError):
            coordinator.task_done()


class TestStatistics:
    """Test cases for the statistics collectors."""

    def test_decoder_statistics(self) -> None:
        stats = DecoderStatistics()
        stats.increment_lines_read()
        stats.increment_lines_read()
        stats.increment_requests_accepted()
        stats.increment_lines_rejected()
        stats.increment_read_errors()

        assert stats.lines_read == 2
        assert stats.requests_accepted == 1
        assert stats.lines_rejected == 1
        assert stats.read_errors == 1

    def test_transform_statistics(self) -> None:
        stats = TransformStatistics()
        stats.increment_items_processed()
        stats.increment_successes()

        assert stats.items_processed == 1
        assert stats.successes == 1
        assert stats.failures == 0

    def test_encoder_statistics(self) -> None:
        stats = EncoderStatistics()
        stats.increment_lines_written()
        stats.increment_write_failures()

        assert stats.lines_written == 1
        assert stats.write_failures == 1

    def test_queue_statistics_max_size_only_grows(self) -> None:
        stats = QueueStatistics()
        stats.update_max_size(4)
        stats.update_max_size(2)

        assert stats.max_size == 4

    def test_concurrent_increments(self) -> None:
        """Counters do not lose updates under concurrent increments."""
        stats = TransformStatistics()

        def worker() -> None:
            for _ in range(1000):
                stats.increment_items_processed()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert stats.items_processed == 8000
