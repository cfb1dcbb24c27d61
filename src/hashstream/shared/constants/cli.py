"""
CLI Configuration Constants

This module contains all constants related to command-line interface
configuration, default values, and help text.
"""

from __future__ import annotations

from .system import Application


class CLIDefaults:
    """CLI default values."""

    VERSION = Application.VERSION
    STDIO_PATH = "-"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INTERRUPTED = 130


class CLICommands:
    """CLI command names."""

    SERVE = "serve"
    DIGEST = "digest"
    ALGORITHMS = "algorithms"


class CLIOptions:
    """CLI option flags."""

    INPUT = "--input"
    INPUT_SHORT = "-i"
    OUTPUT = "--output"
    OUTPUT_SHORT = "-o"
    CONFIG = "--config"
    CONFIG_SHORT = "-c"
    REQUEST_QUEUE_SIZE = "--request-queue-size"
    RESPONSE_QUEUE_SIZE = "--response-queue-size"
    QUEUE_TIMEOUT = "--queue-timeout"
    STATS = "--stats"
    LOG_FILE = "--log-file"


class CLIHelp:
    """CLI help text."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = (
        "Read JSON requests line by line, hash each payload, "
        "and write ordered JSON responses."
    )
    APP_STYLE = "rich"
    VERSION_TEXT = "hashstream {version}"

    SERVE_INPUT_HELP = "Input file with one JSON request per line ('-' for stdin)."
    SERVE_OUTPUT_HELP = "Output file for JSON responses ('-' for stdout)."
    SERVE_CONFIG_HELP = "Path to a TOML configuration file."
    SERVE_REQUEST_QUEUE_HELP = "Capacity of the request queue."
    SERVE_RESPONSE_QUEUE_HELP = "Capacity of the response queue."
    SERVE_QUEUE_TIMEOUT_HELP = "Maximum seconds a stage may wait on a queue."
    SERVE_STATS_HELP = "Print pipeline statistics to stderr when done."

    DIGEST_ALGORITHM_HELP = "Algorithm name (MD5, SHA1, SHA256, SHA512)."
    DIGEST_PAYLOAD_HELP = "Payload to hash."

    LOG_FILE_HELP = "Write JSON logs to this file in addition to the console."


class CLIMessages:
    """CLI message templates."""

    SERVICE_CANCELLED = "Service cancelled before all input was processed"
    UNSUPPORTED_ALGORITHM = "Unsupported algorithm: {name}"
    INTERRUPTED = "Command interrupted by user"


__all__ = [
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CLIOptions",
]
