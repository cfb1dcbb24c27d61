"""Pipeline configuration model.

Queue capacities, the optional queue-wait limit and output flushing for
the hashing service.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from hashstream.shared.constants import Pipeline, Timeout


class PipelineSettings(BaseModel):
    """Pipeline configuration.

    This class manages the bounded queue capacities between the stages,
    the optional limit on a single queue wait and the output flush policy.
    """

    request_queue_size: int = Field(
        default=Pipeline.REQUEST_QUEUE_SIZE,
        gt=0,
        description="Capacity of the queue between decoder and transformer",
    )
    response_queue_size: int = Field(
        default=Pipeline.RESPONSE_QUEUE_SIZE,
        gt=0,
        description="Capacity of the queue between transformer and encoder",
    )
    queue_wait_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds a stage may wait on a queue before the service is cancelled (None waits forever)",
    )
    flush_each_line: bool = Field(
        default=True,
        description="Flush the output after every response line",
    )
    shutdown_join_timeout: float = Field(
        default=Timeout.PIPELINE_SHUTDOWN,
        ge=0,
        description="Seconds to wait for each stage thread when shutting down",
    )


__all__ = ["PipelineSettings"]
