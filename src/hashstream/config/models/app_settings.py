"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from hashstream.shared.constants import Logging

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output and
    the console handler style.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    use_rich_console: bool = Field(
        default=True,
        description="Render console logs with Rich instead of JSON lines",
    )

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            msg = f"level must be one of {', '.join(_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
