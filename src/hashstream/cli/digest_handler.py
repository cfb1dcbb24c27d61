"""Digest and algorithms command handlers for hashstream CLI."""

from __future__ import annotations

import sys

import typer

from hashstream.cli.common.context import get_cli_context
from hashstream.cli.common.error_handler import format_json_output
from hashstream.cli.common.models import DigestOptions
from hashstream.core import digest
from hashstream.shared.constants import CLICommands, CLIDefaults, CLIMessages
from hashstream.shared.errors import (
    ErrorCode,
    UnsupportedAlgorithmError,
    create_cli_error,
)


def _write_json(command: str, data: dict[str, object]) -> None:
    sys.stdout.buffer.write(format_json_output(command=command, success=True, data=data))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


def handle_digest_command(options: DigestOptions) -> int:
    """Hash one payload and print the digest.

    Raises:
        CliError: If the algorithm is not supported.
        DigestError: If the digest cannot be computed.
    """
    try:
        output = digest.transform_text(options.payload, options.algorithm)
    except UnsupportedAlgorithmError as e:
        raise create_cli_error(
            message=CLIMessages.UNSUPPORTED_ALGORITHM.format(name=options.algorithm),
            command=CLICommands.DIGEST,
            operation="handle_digest_command",
            original_error=e,
            code=ErrorCode.CLI_INVALID_ARGUMENTS,
        ) from e

    if get_cli_context().is_json_output_enabled():
        _write_json(
            CLICommands.DIGEST,
            {"algorithm": options.algorithm, "output": output},
        )
    else:
        typer.echo(output)
    return CLIDefaults.EXIT_SUCCESS


def handle_algorithms_command() -> int:
    """Print the supported algorithm names, one per line."""
    if get_cli_context().is_json_output_enabled():
        _write_json(CLICommands.ALGORITHMS, {"algorithms": list(digest.SUPPORTED_ALGORITHMS)})
    else:
        for name in digest.SUPPORTED_ALGORITHMS:
            typer.echo(name)
    return CLIDefaults.EXIT_SUCCESS
