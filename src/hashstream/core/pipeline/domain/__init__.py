"""Pipeline domain logic package.

This package contains domain-specific logic for the pipeline:
- lifecycle: Stage lifecycle management functions
- orchestrator: Component factory and the hashing service
- statistics: Statistics formatting and aggregation
"""

from __future__ import annotations

from hashstream.core.pipeline.domain.lifecycle import (
    force_shutdown_if_needed,
    start_pipeline_components,
    wait_for_stage_completion,
)
from hashstream.core.pipeline.domain.orchestrator import (
    HashingService,
    PipelineComponents,
    PipelineFactory,
    ServiceReport,
    run_service,
)
from hashstream.core.pipeline.domain.statistics import (
    StatisticsAggregator,
    format_statistics,
)

__all__ = [
    "HashingService",
    "PipelineComponents",
    "PipelineFactory",
    "ServiceReport",
    "StatisticsAggregator",
    "force_shutdown_if_needed",
    "format_statistics",
    "run_service",
    "start_pipeline_components",
    "wait_for_stage_completion",
]
