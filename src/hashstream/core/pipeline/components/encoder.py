"""Response encoder stage.

Sole consumer of the response queue. Writes one JSON line per Response to
the output sink and marks the request as handled, whether or not the
write succeeded.
"""

from __future__ import annotations

import logging
from typing import IO, Any

from hashstream.core.pipeline.components.stage import FailureCallback, PipelineStage
from hashstream.core.pipeline.utils import (
    BoundedQueue,
    EncoderStatistics,
    ShutdownCoordinator,
)
from hashstream.shared.codec import LineCodec
from hashstream.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    ResponseEncodeError,
)
from hashstream.shared.logging import log_operation_error
from hashstream.shared.models import Response

logger = logging.getLogger(__name__)


class ResponseEncoder(PipelineStage):
    """Consumer stage writing responses to a binary sink.

    Args:
        response_queue: Queue of Responses to write.
        output_stream: Binary writable sink.
        coordinator: Coordinator notified once per handled Response.
        stats: EncoderStatistics for tracking output metrics.
        codec: Line codec, LineCodec by default.
        flush_each_line: Flush the sink after every line.
        on_failure: Called with the error if the stage fails.
    """

    operation = "encode_responses"
    error_code = ErrorCode.ENCODER_ERROR

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        response_queue: BoundedQueue,
        output_stream: IO[bytes],
        coordinator: ShutdownCoordinator,
        stats: EncoderStatistics | None = None,
        codec: LineCodec | None = None,
        flush_each_line: bool = True,
        on_failure: FailureCallback | None = None,
    ) -> None:
        super().__init__(name="response-encoder", on_failure=on_failure)
        self.response_queue = response_queue
        self.output_stream = output_stream
        self.coordinator = coordinator
        self.stats = stats or EncoderStatistics()
        self.codec = codec or LineCodec()
        self.flush_each_line = flush_each_line

    def process(self) -> None:
        for response in self.response_queue:
            try:
                self.write_response(response)
            finally:
                self.coordinator.task_done()

    def write_response(self, response: Response) -> bool:
        """Encode and write one Response.

        Returns:
            True if the line was written, False if it was skipped.
        """
        try:
            line = self.codec.encode_response(response)
        except ResponseEncodeError as e:
            self.stats.increment_write_failures()
            log_operation_error(logger, e, operation="write_response", level=logging.WARNING)
            return False

        try:
            self.output_stream.write(line + b"\n")
            if self.flush_each_line:
                self.output_stream.flush()
        except (OSError, ValueError, TypeError) as e:
            # ValueError: sink closed; TypeError: sink rejects bytes
            self.stats.increment_write_failures()
            error = InfrastructureError(
                ErrorCode.STREAM_WRITE_ERROR,
                f"Failed to write response: {e}",
                ErrorContext(request_id=response.id, operation="write_response"),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return False

        self.stats.increment_lines_written()
        return True

    def finish(self) -> None:
        try:
            self.output_stream.flush()
        except (OSError, ValueError) as e:
            # ValueError: sink already closed
            logger.warning("Failed to flush output: %s", e)

    def result_info(self) -> dict[str, Any]:
        return {
            "lines_written": self.stats.lines_written,
            "write_failures": self.stats.write_failures,
        }
