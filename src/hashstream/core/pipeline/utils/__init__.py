"""Pipeline utilities package.

This package provides the building blocks shared by the pipeline stages:
- BoundedQueue: Closable thread-safe queue with a capacity for backpressure
- ShutdownCoordinator: Pending-work tracking and termination condition
- Statistics classes: For collecting pipeline metrics
"""

from __future__ import annotations

from hashstream.core.pipeline.utils.bounded_queue import BoundedQueue
from hashstream.core.pipeline.utils.coordinator import (
    PendingWorkCounter,
    ServiceState,
    ShutdownCoordinator,
)
from hashstream.core.pipeline.utils.statistics import (
    DecoderStatistics,
    EncoderStatistics,
    QueueStatistics,
    TransformStatistics,
)

__all__ = [
    "BoundedQueue",
    "DecoderStatistics",
    "EncoderStatistics",
    "PendingWorkCounter",
    "QueueStatistics",
    "ServiceState",
    "ShutdownCoordinator",
    "TransformStatistics",
]
