"""Serve command handler for hashstream CLI.

Opens the input and output streams, runs one HashingService over them and
reports the outcome.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path
from typing import IO

from hashstream.cli.common.context import get_cli_context
from hashstream.cli.common.error_handler import format_json_output
from hashstream.cli.common.models import ServeOptions
from hashstream.cli.common.setup import configure_logging
from hashstream.config import load_settings
from hashstream.core.pipeline import HashingService, ServiceReport
from hashstream.shared.constants import CLICommands, CLIDefaults, CLIMessages

logger = logging.getLogger(__name__)


def _open_input(path: str, stack: contextlib.ExitStack) -> IO[bytes]:
    if path == CLIDefaults.STDIO_PATH:
        return sys.stdin.buffer
    return stack.enter_context(open(Path(path), "rb"))


def _open_output(path: str, stack: contextlib.ExitStack) -> IO[bytes]:
    if path == CLIDefaults.STDIO_PATH:
        return sys.stdout.buffer
    return stack.enter_context(open(Path(path), "wb"))


def _write_stats(report: ServiceReport, *, json_output: bool) -> None:
    if json_output:
        output = format_json_output(
            command=CLICommands.SERVE,
            success=not report.cancelled,
            data=report.to_dict(),
        )
        sys.stderr.write(output.decode("utf-8"))
        sys.stderr.write("\n")
    else:
        sys.stderr.write(report.statistics.format_report())
    sys.stderr.flush()


def handle_serve_command(options: ServeOptions) -> int:
    """Handle the serve command.

    Args:
        options: Validated serve command options

    Returns:
        Exit code (0 when every request was handled, 1 if cancelled)

    Raises:
        ApplicationError: If the configuration is invalid.
        OSError: If an input or output file cannot be opened.
    """
    context = get_cli_context()
    settings = load_settings(options.config)
    configure_logging(context, settings.logging)

    pipeline_settings = settings.pipeline.model_copy(update=options.pipeline_overrides())

    with contextlib.ExitStack() as stack:
        input_stream = _open_input(options.input, stack)
        output_stream = _open_output(options.output, stack)

        logger.info(
            "Serving %s -> %s",
            options.input,
            options.output,
            extra={"context": pipeline_settings.model_dump()},
        )
        service = HashingService(input_stream, output_stream, pipeline_settings)
        report: ServiceReport = service.blocking_start()

    if options.stats:
        _write_stats(report, json_output=context.is_json_output_enabled())

    if report.cancelled:
        logger.warning(CLIMessages.SERVICE_CANCELLED)
        return CLIDefaults.EXIT_ERROR

    logger.info(
        "Service stopped after %.2fs: %d responses written",
        report.duration,
        report.statistics.encoder_stats.lines_written,
    )
    return CLIDefaults.EXIT_SUCCESS
