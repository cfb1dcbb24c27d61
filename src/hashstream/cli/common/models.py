"""
Pydantic models for CLI argument validation.

Arguments are validated at the boundary so invalid values never reach the
pipeline.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from hashstream.shared.constants import CLIDefaults


class ServeOptions(BaseModel):
    """Options of the serve command. None means "use the configured value"."""

    model_config = ConfigDict(frozen=True)

    input: str = Field(default=CLIDefaults.STDIO_PATH, min_length=1)
    output: str = Field(default=CLIDefaults.STDIO_PATH, min_length=1)
    config: Path | None = None
    request_queue_size: int | None = Field(default=None, gt=0)
    response_queue_size: int | None = Field(default=None, gt=0)
    queue_timeout: float | None = Field(default=None, gt=0)
    stats: bool = False

    def pipeline_overrides(self) -> dict[str, int | float]:
        """Pipeline settings given explicitly on the command line."""
        overrides: dict[str, int | float] = {}
        if self.request_queue_size is not None:
            overrides["request_queue_size"] = self.request_queue_size
        if self.response_queue_size is not None:
            overrides["response_queue_size"] = self.response_queue_size
        if self.queue_timeout is not None:
            overrides["queue_wait_timeout"] = self.queue_timeout
        return overrides


class DigestOptions(BaseModel):
    """Arguments of the digest command."""

    model_config = ConfigDict(frozen=True)

    algorithm: str = Field(min_length=1)
    payload: str


__all__ = ["DigestOptions", "ServeOptions"]
