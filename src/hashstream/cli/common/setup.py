"""Logging setup shared by the CLI callback and the commands."""

from __future__ import annotations

import logging

from hashstream.cli.common.context import CliContext
from hashstream.config.models import LoggingSettings
from hashstream.shared.constants import Logging
from hashstream.shared.logging import setup_structured_logger


def configure_logging(
    context: CliContext,
    settings: LoggingSettings | None = None,
) -> logging.Logger:
    """Configure the application logger from CLI flags and configuration.

    Command-line flags win over configured values.

    Args:
        context: Current CLI context
        settings: Logging configuration, defaults when None

    Returns:
        The configured application logger
    """
    settings = settings or LoggingSettings()
    return setup_structured_logger(
        name=Logging.LOGGER_NAME,
        level=context.get_effective_log_level(settings.level),
        log_file=context.log_file or settings.file,
        use_rich_console=settings.use_rich_console,
    )
