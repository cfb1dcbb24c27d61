"""
hashstream Constants Module

This module provides centralized constants for the hashstream application.
All magic values and configuration constants are defined here to ensure
consistency across the codebase.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp, CLIMessages, CLIOptions
from .system import Application, Config, Logging, Pipeline, Timeout

__all__ = [
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CLIOptions",
    "Config",
    "Logging",
    "Pipeline",
    "Timeout",
]
