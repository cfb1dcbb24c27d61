"""Request/response hashing pipeline.

Three stages connected by bounded queues:
- RequestDecoder: input lines -> Requests
- Transformer: Requests -> Responses, in arrival order
- ResponseEncoder: Responses -> output lines

Recommended imports:
    from hashstream.core.pipeline import HashingService, run_service
    from hashstream.core.pipeline.domain import PipelineFactory
    from hashstream.core.pipeline.components import RequestDecoder, Transformer, ResponseEncoder
"""

from hashstream.core.pipeline.domain.orchestrator import (
    HashingService,
    ServiceReport,
    run_service,
)
from hashstream.core.pipeline.utils import ServiceState

__all__ = ["HashingService", "ServiceReport", "ServiceState", "run_service"]
