"""
Reusable Typer Options Module

This module provides reusable Typer options shared by the main callback.
Use them as ``Annotated[<type>, <option>]`` metadata.

The options include:
- verbose: Verbosity level (count-based)
- log_level: Logging level (enum-based)
- log_file: JSON log file path
- json_output: JSON output mode (flag-based)
- version: Version information (eager)
"""

from __future__ import annotations

import typer

from hashstream.shared.constants import CLIDefaults, CLIHelp, CLIOptions


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)


# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: from configuration, INFO.",
)


log_file_option = typer.Option(
    CLIOptions.LOG_FILE,
    help=CLIHelp.LOG_FILE_HELP,
)


# JSON output option - flag-based
json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output for command results and errors.",
)


# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)
