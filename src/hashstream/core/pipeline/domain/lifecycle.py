"""Pipeline stage lifecycle management.

This module provides functions for managing the lifecycle of the stages:
- Starting stages
- Waiting for completion
- Forced shutdown of stages that outlive the service
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from hashstream.core.pipeline.components import PipelineStage
from hashstream.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from hashstream.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


def start_pipeline_components(stages: Sequence[PipelineStage]) -> None:
    """Start all pipeline stages, consumers first.

    Args:
        stages: Stages in pipeline order (decoder, transformer, encoder).

    Raises:
        InfrastructureError: If a stage thread cannot be started.
    """
    context = ErrorContext(
        operation="start_pipeline_components",
        additional_data={"stage_count": len(stages)},
    )

    try:
        for stage in reversed(stages):
            logger.debug("Starting stage %s...", stage.name)
            stage.start()

        log_operation_success(
            logger=logger,
            operation="start_pipeline_components",
            duration_ms=0.0,
            context=context,
        )

    except RuntimeError as e:
        infrastructure_error = InfrastructureError(
            ErrorCode.PIPELINE_INITIALIZATION_ERROR,
            f"Failed to start pipeline components: {e}",
            context,
            original_error=e,
        )
        log_operation_error(
            logger=logger,
            error=infrastructure_error,
            operation="start_pipeline_components",
        )
        raise infrastructure_error from e


def wait_for_stage_completion(
    stages: Sequence[PipelineStage],
    timeout: float | None = None,
) -> list[PipelineStage]:
    """Join every stage, giving each at most ``timeout`` seconds.

    Args:
        stages: Stages to join.
        timeout: Per-stage join timeout, None waits forever.

    Returns:
        The stages still alive after joining.
    """
    start_time = time.time()
    for stage in stages:
        # Never started (start_pipeline_components failed part-way)
        if stage.ident is None:
            continue
        stage.join(timeout)

    alive = [stage for stage in stages if stage.is_alive()]
    log_operation_success(
        logger=logger,
        operation="wait_for_stage_completion",
        duration_ms=(time.time() - start_time) * 1000,
        result_info={"alive": [stage.name for stage in alive]},
    )
    return alive


def force_shutdown_if_needed(
    stages: Sequence[PipelineStage],
    cancel: Callable[[], None],
    timeout: float,
) -> list[PipelineStage]:
    """Cancel and join stages that are still alive.

    A decoder blocked on a read that never returns cannot be interrupted;
    stage threads are daemons, so such a thread does not keep the process
    alive.

    Args:
        stages: Stages of the service.
        cancel: Zero-argument callable signalling cancellation.
        timeout: Per-stage join timeout.

    Returns:
        The stages still alive after the forced shutdown.
    """
    alive = [stage for stage in stages if stage.is_alive()]
    if not alive:
        return []

    for stage in alive:
        logger.warning("Stage %s still alive, forcing stop...", stage.name)
    cancel()

    remaining = wait_for_stage_completion(alive, timeout)
    for stage in remaining:
        log_operation_error(
            logger=logger,
            error=InfrastructureError(
                ErrorCode.PIPELINE_SHUTDOWN_ERROR,
                f"Stage {stage.name} did not stop within {timeout}s",
                ErrorContext(
                    operation="force_shutdown_if_needed",
                    additional_data={"stage": stage.name, "timeout": timeout},
                ),
            ),
            level=logging.WARNING,
        )
    return remaining
