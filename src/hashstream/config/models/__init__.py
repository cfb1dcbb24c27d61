"""Configuration models package."""

from hashstream.config.models.app_settings import LoggingSettings
from hashstream.config.models.pipeline_settings import PipelineSettings
from hashstream.config.models.settings import Settings

__all__ = ["LoggingSettings", "PipelineSettings", "Settings"]
