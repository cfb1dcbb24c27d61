"""Transformer stage.

Sole consumer of the request queue. Computes one Response per Request in
arrival order; a digest failure becomes an unsuccessful Response rather
than an error.
"""

from __future__ import annotations

import logging
from typing import Any

from hashstream.core import digest
from hashstream.core.pipeline.components.stage import FailureCallback, PipelineStage
from hashstream.core.pipeline.utils import BoundedQueue, TransformStatistics
from hashstream.shared.errors import (
    DigestError,
    ErrorCode,
    ErrorContext,
    UnsupportedAlgorithmError,
)
from hashstream.shared.logging import log_operation_error
from hashstream.shared.models import Request, Response

logger = logging.getLogger(__name__)


class Transformer(PipelineStage):
    """Consumer/producer stage between the request and response queues.

    Args:
        request_queue: Queue of Requests to transform.
        response_queue: Queue the Responses are put into.
        stats: TransformStatistics for tracking digest metrics.
        on_failure: Called with the error if the stage fails.
    """

    operation = "transform_requests"
    error_code = ErrorCode.TRANSFORMER_ERROR

    def __init__(
        self,
        request_queue: BoundedQueue,
        response_queue: BoundedQueue,
        stats: TransformStatistics | None = None,
        on_failure: FailureCallback | None = None,
    ) -> None:
        super().__init__(name="transformer", on_failure=on_failure)
        self.request_queue = request_queue
        self.response_queue = response_queue
        self.stats = stats or TransformStatistics()

    def process(self) -> None:
        for request in self.request_queue:
            self.response_queue.put(self.transform_request(request))

    def transform_request(self, request: Request) -> Response:
        """Compute the Response for a single Request.

        Never raises for digest problems: an unsupported algorithm or a
        failed digest yields ``Response.failed(request)``.
        """
        self.stats.increment_items_processed()
        # Request validation already restricts this to Algorithm members
        name = getattr(request.algorithm, "value", request.algorithm)
        try:
            output = digest.transform_text(request.payload, name)
        except (UnsupportedAlgorithmError, DigestError) as e:
            self.stats.increment_failures()
            log_operation_error(
                logger,
                e,
                operation="transform_request",
                context=ErrorContext(request_id=request.id, user_id=request.user),
                level=logging.WARNING,
            )
            return Response.failed(request)

        self.stats.increment_successes()
        return Response.succeeded(request, output)

    def finish(self) -> None:
        self.response_queue.close()

    def result_info(self) -> dict[str, Any]:
        return {
            "items_processed": self.stats.items_processed,
            "successes": self.stats.successes,
            "failures": self.stats.failures,
        }
