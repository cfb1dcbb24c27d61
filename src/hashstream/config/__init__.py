"""hashstream Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config, reset_config
- Domain models: Pipeline and Logging settings
"""

from __future__ import annotations

from .models import LoggingSettings, PipelineSettings, Settings

# Import loader functions directly from loader module to avoid circular dependency
from .loader import get_config, load_settings, reload_config, reset_config

__all__ = [
    "LoggingSettings",
    "PipelineSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
    "reset_config",
]
