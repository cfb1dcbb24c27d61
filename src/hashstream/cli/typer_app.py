"""
hashstream Typer CLI Application

This is the main Typer-based CLI application for hashstream.
Commands:
- serve: run the hashing service over stdin/stdout or files
- digest: hash a single payload
- algorithms: list the supported algorithm names
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Callable

import typer

from hashstream.cli.common.context import (
    CliContext,
    LogLevel,
    get_cli_context,
    set_cli_context,
)
from hashstream.cli.common.error_handler import handle_cli_error
from hashstream.cli.common.models import DigestOptions, ServeOptions
from hashstream.cli.common.options import (
    json_output_option,
    log_file_option,
    log_level_option,
    verbose_option,
    version_option,
)
from hashstream.cli.common.setup import configure_logging
from hashstream.cli.digest_handler import (
    handle_algorithms_command,
    handle_digest_command,
)
from hashstream.cli.serve_handler import handle_serve_command
from hashstream.shared.constants import (
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
)


def main_callback(
    verbose: int,
    log_level: LogLevel | None,
    log_file: str | None,
    json_output: bool,
) -> None:
    """
    Process the common options.

    Called before any command is executed; sets up the global CLI context
    and the console logger with the parsed options.
    """
    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        log_file=log_file,
        json_output=json_output,
    )
    set_cli_context(context)
    configure_logging(context)


# Create the main Typer app with callback
app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel | None, log_level_option] = None,
    log_file: Annotated[str | None, log_file_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,  # noqa: ARG001
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, log_file, json_output)
    except (ValueError, OSError) as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


def _run(command: str, handler: Callable[..., int], *args: Any) -> None:
    """Run a command handler, mapping failures to exit codes."""
    json_output = get_cli_context().is_json_output_enabled()
    try:
        exit_code = handler(*args)
    except (KeyboardInterrupt, Exception) as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, command, json_output=json_output)

    if exit_code != CLIDefaults.EXIT_SUCCESS:
        raise typer.Exit(exit_code)


@app.command(CLICommands.SERVE)
def serve_command_typer(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    input_path: str = typer.Option(
        CLIDefaults.STDIO_PATH,
        CLIOptions.INPUT,
        CLIOptions.INPUT_SHORT,
        help=CLIHelp.SERVE_INPUT_HELP,
    ),
    output_path: str = typer.Option(
        CLIDefaults.STDIO_PATH,
        CLIOptions.OUTPUT,
        CLIOptions.OUTPUT_SHORT,
        help=CLIHelp.SERVE_OUTPUT_HELP,
    ),
    config: Path | None = typer.Option(
        None,
        CLIOptions.CONFIG,
        CLIOptions.CONFIG_SHORT,
        help=CLIHelp.SERVE_CONFIG_HELP,
        dir_okay=False,
    ),
    request_queue_size: int | None = typer.Option(
        None,
        CLIOptions.REQUEST_QUEUE_SIZE,
        min=1,
        help=CLIHelp.SERVE_REQUEST_QUEUE_HELP,
    ),
    response_queue_size: int | None = typer.Option(
        None,
        CLIOptions.RESPONSE_QUEUE_SIZE,
        min=1,
        help=CLIHelp.SERVE_RESPONSE_QUEUE_HELP,
    ),
    queue_timeout: float | None = typer.Option(
        None,
        CLIOptions.QUEUE_TIMEOUT,
        help=CLIHelp.SERVE_QUEUE_TIMEOUT_HELP,
    ),
    stats: bool = typer.Option(
        False,
        CLIOptions.STATS,
        help=CLIHelp.SERVE_STATS_HELP,
    ),
) -> None:
    """
    Run the hashing service.

    Reads one JSON request per line, for example
    {"id":"1","user":"u","alg":"SHA256","payload":"abc"}, and writes one
    JSON response per valid request, in request order. Invalid lines are
    skipped.

    Examples:
        # Hash requests from stdin to stdout
        hashstream serve < requests.jsonl

        # Files, with statistics on stderr
        hashstream serve -i requests.jsonl -o responses.jsonl --stats
    """
    json_output = get_cli_context().is_json_output_enabled()
    try:
        options = ServeOptions(
            input=input_path,
            output=output_path,
            config=config,
            request_queue_size=request_queue_size,
            response_queue_size=response_queue_size,
            queue_timeout=queue_timeout,
            stats=stats,
        )
    except ValueError as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.SERVE, json_output=json_output)) from e

    _run(CLICommands.SERVE, handle_serve_command, options)


@app.command(CLICommands.DIGEST)
def digest_command_typer(
    algorithm: str = typer.Argument(..., help=CLIHelp.DIGEST_ALGORITHM_HELP),
    payload: str = typer.Argument(..., help=CLIHelp.DIGEST_PAYLOAD_HELP),
) -> None:
    """
    Hash a single payload.

    Examples:
        hashstream digest SHA256 abc
    """
    json_output = get_cli_context().is_json_output_enabled()
    try:
        options = DigestOptions(algorithm=algorithm, payload=payload)
    except ValueError as e:
        raise typer.Exit(handle_cli_error(e, CLICommands.DIGEST, json_output=json_output)) from e

    _run(CLICommands.DIGEST, handle_digest_command, options)


@app.command(CLICommands.ALGORITHMS)
def algorithms_command_typer() -> None:
    """List the supported algorithm names."""
    _run(CLICommands.ALGORITHMS, handle_algorithms_command)


if __name__ == "__main__":
    app()
