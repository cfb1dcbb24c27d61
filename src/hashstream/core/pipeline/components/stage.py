"""Common thread wrapper for pipeline stages."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from hashstream.shared.errors import (
    ErrorCode,
    ErrorContext,
    HashStreamError,
    InfrastructureError,
    PipelineCancelledError,
)
from hashstream.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)

FailureCallback = Callable[[HashStreamError], None]


class PipelineStage(threading.Thread, ABC):
    """A pipeline stage running its loop on a dedicated daemon thread.

    Subclasses implement process() and finish(). finish() always runs,
    whatever way process() ended, so a stage can close its output queue.

    A stage that fails for any reason other than cancellation stores the
    error on ``self.error`` and reports it through ``on_failure`` so the
    service can cancel the remaining stages.
    """

    operation = "pipeline_stage"
    error_code = ErrorCode.PIPELINE_EXECUTION_ERROR

    def __init__(self, name: str, on_failure: FailureCallback | None = None) -> None:
        super().__init__(name=name, daemon=True)
        self.on_failure = on_failure
        self.error: HashStreamError | None = None

    @abstractmethod
    def process(self) -> None:
        """Run the stage loop until its input ends.

        Raises:
            PipelineCancelledError: If the service is cancelled while the
                stage is suspended on a queue.
        """

    def finish(self) -> None:
        """Release what the stage owns. Called exactly once, after process()."""

    def result_info(self) -> dict[str, Any]:
        return {}

    def run(self) -> None:
        log_operation_start(logger, self.operation, {"stage": self.name})
        start_time = time.time()
        try:
            self.process()
        except PipelineCancelledError as e:
            self.error = e
            logger.debug("Stage %s cancelled: %s", self.name, e.message)
        except HashStreamError as e:
            self._fail(e)
        except Exception as e:  # noqa: BLE001
            self._fail(
                InfrastructureError(
                    self.error_code,
                    f"Unexpected error in stage {self.name}: {e}",
                    ErrorContext(operation=self.operation),
                    original_error=e,
                ),
            )
        else:
            log_operation_success(
                logger,
                self.operation,
                (time.time() - start_time) * 1000,
                self.result_info(),
                {"stage": self.name},
            )
        finally:
            self.finish()

    def _fail(self, error: HashStreamError) -> None:
        self.error = error
        log_operation_error(logger, error, operation=self.operation)
        if self.on_failure is not None:
            self.on_failure(error)

    @property
    def failed(self) -> bool:
        """True if the stage ended with an error other than cancellation."""
        return self.error is not None and not isinstance(self.error, PipelineCancelledError)
