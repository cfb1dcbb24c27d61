"""hashstream Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hashstream.config.models.app_settings import LoggingSettings
from hashstream.config.models.pipeline_settings import PipelineSettings
from hashstream.shared.constants import Config

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from, in increasing priority: defaults, ``HASHSTREAM_*``
    environment variables (``HASHSTREAM_PIPELINE__REQUEST_QUEUE_SIZE``) and
    keyword arguments. from_toml_file() passes the file as keyword arguments,
    so a key set in the file wins over the same key in the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix=Config.ENV_PREFIX,
        env_nested_delimiter=Config.ENV_DELIMITER,
        env_ignore_empty=True,
        extra="ignore",
    )

    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""

        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration sections %s from %s", sorted(raw_config), file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file. Unset optional values are omitted."""

        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)


__all__ = ["Settings"]
