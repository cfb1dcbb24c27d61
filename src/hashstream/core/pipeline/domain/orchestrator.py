"""Pipeline orchestration and component factory.

This module provides the hashing service and the factory that wires it:
- PipelineFactory: Creates and wires up all pipeline components
- HashingService: Runs one pipeline over an input and an output stream
- run_service: Convenience wrapper running a service to completion
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import IO, Any

from hashstream.config.models import PipelineSettings
from hashstream.core.pipeline.components import (
    PipelineStage,
    RequestDecoder,
    ResponseEncoder,
    Transformer,
)
from hashstream.core.pipeline.domain.lifecycle import (
    force_shutdown_if_needed,
    start_pipeline_components,
    wait_for_stage_completion,
)
from hashstream.core.pipeline.domain.statistics import StatisticsAggregator
from hashstream.core.pipeline.utils import (
    BoundedQueue,
    DecoderStatistics,
    EncoderStatistics,
    QueueStatistics,
    ServiceState,
    ShutdownCoordinator,
    TransformStatistics,
)
from hashstream.shared.codec import LineCodec
from hashstream.shared.constants import Timeout
from hashstream.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    HashStreamError,
)
from hashstream.shared.logging import log_operation_start, log_operation_success

logger = logging.getLogger(__name__)


@dataclass
class PipelineComponents:
    """Everything one service run owns."""

    coordinator: ShutdownCoordinator
    request_queue: BoundedQueue
    response_queue: BoundedQueue
    decoder: RequestDecoder
    transformer: Transformer
    encoder: ResponseEncoder

    @property
    def stages(self) -> tuple[PipelineStage, ...]:
        return (self.decoder, self.transformer, self.encoder)

    def statistics(self, total_duration: float) -> StatisticsAggregator:
        return StatisticsAggregator(
            decoder_stats=self.decoder.stats,
            request_queue_stats=self.request_queue.stats,
            transform_stats=self.transformer.stats,
            response_queue_stats=self.response_queue.stats,
            encoder_stats=self.encoder.stats,
            total_duration=total_duration,
        )


@dataclass
class ServiceReport:
    """Outcome of HashingService.blocking_start()."""

    statistics: StatisticsAggregator
    duration: float
    state: ServiceState
    cancelled: bool = False
    error: HashStreamError | None = None
    stalled_stages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "cancelled": self.cancelled,
            "duration": self.duration,
            "error": self.error.to_dict() if self.error else None,
            "stalled_stages": list(self.stalled_stages),
            "statistics": self.statistics.to_dict(),
        }


class PipelineFactory:
    """Factory for creating and wiring pipeline components."""

    @staticmethod
    def create_components(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        input_stream: IO[Any],
        output_stream: IO[bytes],
        settings: PipelineSettings,
        cancel_event: threading.Event,
        on_failure: Any = None,
        codec: LineCodec | None = None,
    ) -> PipelineComponents:
        """Create and wire all pipeline components.

        Args:
            input_stream: Readable line source.
            output_stream: Binary writable sink.
            settings: Queue sizes, wait limit and flush policy.
            cancel_event: Event observed by both queues while waiting.
            on_failure: Callback invoked with a stage's fatal error.
            codec: Line codec shared by decoder and encoder.

        Returns:
            The wired, not yet started, components.
        """
        codec = codec or LineCodec()
        coordinator = ShutdownCoordinator()

        request_queue = BoundedQueue(
            maxsize=settings.request_queue_size,
            name="requests",
            cancel_event=cancel_event,
            wait_timeout=settings.queue_wait_timeout,
            stats=QueueStatistics(),
        )
        response_queue = BoundedQueue(
            maxsize=settings.response_queue_size,
            name="responses",
            cancel_event=cancel_event,
            wait_timeout=settings.queue_wait_timeout,
            stats=QueueStatistics(),
        )

        decoder = RequestDecoder(
            input_stream=input_stream,
            request_queue=request_queue,
            coordinator=coordinator,
            stats=DecoderStatistics(),
            codec=codec,
            on_failure=on_failure,
        )
        transformer = Transformer(
            request_queue=request_queue,
            response_queue=response_queue,
            stats=TransformStatistics(),
            on_failure=on_failure,
        )
        encoder = ResponseEncoder(
            response_queue=response_queue,
            output_stream=output_stream,
            coordinator=coordinator,
            stats=EncoderStatistics(),
            codec=codec,
            flush_each_line=settings.flush_each_line,
            on_failure=on_failure,
        )

        logger.debug(
            "Created pipeline components (request_queue=%d, response_queue=%d, wait_timeout=%s)",
            settings.request_queue_size,
            settings.response_queue_size,
            settings.queue_wait_timeout,
        )

        return PipelineComponents(
            coordinator=coordinator,
            request_queue=request_queue,
            response_queue=response_queue,
            decoder=decoder,
            transformer=transformer,
            encoder=encoder,
        )


class HashingService:
    """Reads requests from one stream and writes responses to another.

    A service instance runs at most once. blocking_start() returns when
    the input has ended and every accepted request has a handled response,
    or when the service has been cancelled through stop() or a queue wait
    timeout.

    Example:
        >>> import io
        >>> source = io.BytesIO(b'{"id":"1","user":"u","alg":"MD5","payload":"abc"}\\n')
        >>> sink = io.BytesIO()
        >>> report = HashingService(source, sink).blocking_start()
        >>> sink.getvalue()
        b'{"id":"1","user":"u","output":"900150983cd24fb0d6963f7d28e17f72","success":true}\\n'
    """

    def __init__(
        self,
        input_stream: IO[Any],
        output_stream: IO[bytes],
        settings: PipelineSettings | None = None,
        codec: LineCodec | None = None,
    ) -> None:
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.settings = settings or PipelineSettings()
        self.codec = codec
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._started = False
        self._components: PipelineComponents | None = None

    def blocking_start(self) -> ServiceReport:
        """Run the pipeline until it stops.

        Returns:
            ServiceReport with statistics, duration and final state.

        Raises:
            ApplicationError: If the service has already been started.
            InfrastructureError: If the stage threads cannot be started.
        """
        with self._lock:
            if self._started:
                raise ApplicationError(
                    ErrorCode.SERVICE_ALREADY_STARTED,
                    "HashingService can only be started once",
                    ErrorContext(operation="blocking_start"),
                )
            self._started = True
            self._components = PipelineFactory.create_components(
                input_stream=self.input_stream,
                output_stream=self.output_stream,
                settings=self.settings,
                cancel_event=self._cancel_event,
                on_failure=self._on_stage_failure,
                codec=self.codec,
            )
            if self._cancel_event.is_set():
                self._components.coordinator.cancel()

        components = self._components
        log_operation_start(logger, "blocking_start")
        start_time = time.time()
        stalled: list[PipelineStage] = []

        try:
            start_pipeline_components(components.stages)
            components.coordinator.wait()
        except BaseException:
            # KeyboardInterrupt in the waiting thread: stop the stages too
            self.stop()
            raise
        finally:
            stalled = self._shutdown_stages(components)

        total_duration = time.time() - start_time
        report = ServiceReport(
            statistics=components.statistics(total_duration),
            duration=total_duration,
            state=components.coordinator.state,
            cancelled=components.coordinator.cancelled,
            error=next((stage.error for stage in components.stages if stage.failed), None),
            stalled_stages=[stage.name for stage in stalled],
        )

        log_operation_success(
            logger,
            "blocking_start",
            total_duration * 1000,
            result_info={
                "cancelled": report.cancelled,
                "lines_written": components.encoder.stats.lines_written,
            },
        )
        return report

    def _shutdown_stages(self, components: PipelineComponents) -> list[PipelineStage]:
        join_timeout = self.settings.shutdown_join_timeout
        if self._cancel_event.is_set():
            join_timeout = min(join_timeout, Timeout.PIPELINE_CANCEL_JOIN)
        wait_for_stage_completion(components.stages, join_timeout)
        return force_shutdown_if_needed(components.stages, self.stop, Timeout.PIPELINE_POLL)

    def _on_stage_failure(self, error: HashStreamError) -> None:
        logger.warning("Cancelling service after stage failure: %s", error.message)
        self.stop()

    def stop(self) -> None:
        """Cancel the service. Safe to call from any thread, any number of times."""
        self._cancel_event.set()
        with self._lock:
            components = self._components
        if components is not None:
            components.coordinator.cancel()

    @property
    def state(self) -> ServiceState | None:
        """Coordinator state, or None before blocking_start()."""
        return self._components.coordinator.state if self._components else None

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()


def run_service(
    input_stream: IO[Any],
    output_stream: IO[bytes],
    settings: PipelineSettings | None = None,
) -> ServiceReport:
    """Run a fresh HashingService to completion.

    Args:
        input_stream: Readable line source.
        output_stream: Binary writable sink.
        settings: Optional pipeline settings; defaults apply otherwise.

    Returns:
        The service's report.
    """
    return HashingService(input_stream, output_stream, settings).blocking_start()
