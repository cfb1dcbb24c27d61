"""
CLI Error Handling Utilities

This module provides utilities for consistent error handling across CLI commands,
including standardized error output formatting and exception mapping.

Errors are always written to stderr: stdout carries command results and,
for ``serve``, response lines.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import orjson

from hashstream.shared.constants import CLICommands, CLIDefaults, CLIMessages
from hashstream.shared.errors import (
    ApplicationError,
    CliError,
    DomainError,
    ErrorCode,
    HashStreamError,
    InfrastructureError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

_COMMAND_ERROR_CODES: dict[str, ErrorCode] = {
    CLICommands.SERVE: ErrorCode.CLI_SERVE_COMMAND_FAILED,
    CLICommands.DIGEST: ErrorCode.CLI_DIGEST_COMMAND_FAILED,
}


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> bytes:
    """Format command output as JSON.

    Args:
        command: The command that was executed
        success: Whether the operation was successful
        errors: List of error messages
        data: Additional data to include

    Returns:
        JSON-formatted bytes for output
    """
    output: dict[str, Any] = {
        "success": success,
        "command": command,
    }

    if errors:
        output["errors"] = errors

    if data:
        output["data"] = data

    return orjson.dumps(output, option=orjson.OPT_INDENT_2)


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
    }
    cli_error = _map_error_to_cli_error(error, command, error_context)
    _log_error(error, command, cli_error, error_context)
    _output_error(cli_error, error, command, error_context, json_output=json_output)

    return cli_error.exit_code


def _map_error_to_cli_error(
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
) -> CliError:
    """Map specific exception types to CLI errors."""
    if isinstance(error, CliError):
        error_context["error_code"] = error.code.value
        return error

    if isinstance(error, KeyboardInterrupt):
        error_context["interrupt_type"] = "user_interrupt"
        return create_cli_error(
            message=CLIMessages.INTERRUPTED,
            command=command,
            exit_code=CLIDefaults.EXIT_INTERRUPTED,
            code=ErrorCode.CLI_COMMAND_INTERRUPTED,
        )

    if isinstance(error, HashStreamError):
        error_context["error_code"] = error.code.value
        category = "Error"
        if isinstance(error, ApplicationError):
            category = "Application error"
        elif isinstance(error, InfrastructureError):
            category = "Infrastructure error"
        elif isinstance(error, DomainError):
            category = "Invalid input"
        return create_cli_error(
            message=f"{category}: {error.message}",
            command=command,
            original_error=error,
            code=_COMMAND_ERROR_CODES.get(command, ErrorCode.CLI_UNEXPECTED_ERROR),
        )

    if isinstance(error, OSError):
        error_context["error_category"] = "file_system"
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
            code=_COMMAND_ERROR_CODES.get(command, ErrorCode.CLI_UNEXPECTED_ERROR),
        )

    if isinstance(error, (ValueError, TypeError)):
        error_context["error_category"] = "invalid_arguments"
        return create_cli_error(
            message=f"Invalid arguments: {error}",
            command=command,
            original_error=error,
            code=ErrorCode.CLI_INVALID_ARGUMENTS,
        )

    error_context["error_category"] = "unexpected"
    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error if isinstance(error, Exception) else None,
    )


def _log_error(
    error: BaseException,
    command: str,
    cli_error: CliError,
    error_context: dict[str, Any],
) -> None:
    """Log the error with structured context."""
    if isinstance(error, KeyboardInterrupt):
        logger.warning(
            "Command interrupted: %s",
            cli_error.message,
            extra={"context": error_context},
        )
    elif isinstance(error, HashStreamError):
        # Expected failure: no traceback
        logger.error(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"error_code": error.code.name, "context": error_context},
        )
    else:
        logger.error(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
            exc_info=(type(error), error, error.__traceback__),
        )


def _output_error(
    cli_error: CliError,
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
    *,
    json_output: bool,
) -> None:
    """Output error message in appropriate format."""
    if not json_output:
        sys.stderr.write(f"Error: {cli_error.message}\n")
        return

    error_output = format_json_output(
        command=command,
        success=False,
        errors=[cli_error.message],
        data={
            "error_code": cli_error.code.value,
            "error_type": type(error).__name__,
            "exit_code": cli_error.exit_code,
            "context": error_context,
        },
    )
    sys.stderr.write(error_output.decode("utf-8"))
    sys.stderr.write("\n")
