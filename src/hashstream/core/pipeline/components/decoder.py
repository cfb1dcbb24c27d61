"""Request decoder stage.

Reads raw lines from the input stream, turns valid lines into Requests and
feeds them to the request queue. Invalid lines are dropped.
"""

from __future__ import annotations

import logging
from typing import IO, Any

from hashstream.core.pipeline.components.stage import FailureCallback, PipelineStage
from hashstream.core.pipeline.utils import (
    BoundedQueue,
    DecoderStatistics,
    ShutdownCoordinator,
)
from hashstream.shared.codec import LineCodec
from hashstream.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    RequestDecodeError,
)
from hashstream.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class RequestDecoder(PipelineStage):
    """Producer stage reading the input stream until it ends.

    Args:
        input_stream: Readable stream yielding lines (bytes or str).
        request_queue: Queue the decoded Requests are put into.
        coordinator: Coordinator tracking accepted requests.
        stats: DecoderStatistics for tracking decoding metrics.
        codec: Line codec, LineCodec by default.
        on_failure: Called with the error if the stage fails.
    """

    operation = "decode_requests"
    error_code = ErrorCode.DECODER_ERROR

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        input_stream: IO[Any],
        request_queue: BoundedQueue,
        coordinator: ShutdownCoordinator,
        stats: DecoderStatistics | None = None,
        codec: LineCodec | None = None,
        on_failure: FailureCallback | None = None,
    ) -> None:
        super().__init__(name="request-decoder", on_failure=on_failure)
        self.input_stream = input_stream
        self.request_queue = request_queue
        self.coordinator = coordinator
        self.stats = stats or DecoderStatistics()
        self.codec = codec or LineCodec()

    def process(self) -> None:
        while True:
            line = self._read_line()
            if not line:
                return
            self.stats.increment_lines_read()
            self._handle_line(line)

    def _read_line(self) -> bytes | str:
        try:
            return self.input_stream.readline()
        except (OSError, ValueError) as e:
            # A broken input ends the input; requests already read still complete.
            # ValueError covers undecodable text streams and closed streams.
            self.stats.increment_read_errors()
            error = InfrastructureError(
                ErrorCode.STREAM_READ_ERROR,
                f"Input read failed, treating as end of input: {e}",
                ErrorContext(operation="read_line"),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return b""

    def _handle_line(self, line: bytes | str) -> None:
        try:
            request = self.codec.decode_request(line)
        except RequestDecodeError as e:
            self.stats.increment_lines_rejected()
            logger.debug(
                "Dropping input line: %s",
                e.message,
                extra={"error_code": e.code.name, "context": e.context.safe_dict()},
            )
            return

        self.coordinator.task_accepted()
        try:
            self.request_queue.put(request)
        except BaseException:
            # Not enqueued: nothing downstream will ever mark it done
            self.coordinator.task_done()
            raise
        self.stats.increment_requests_accepted()

    def finish(self) -> None:
        self.request_queue.close()
        self.coordinator.mark_input_closed()

    def result_info(self) -> dict[str, Any]:
        return {
            "lines_read": self.stats.lines_read,
            "requests_accepted": self.stats.requests_accepted,
            "lines_rejected": self.stats.lines_rejected,
        }
