"""hashstream Error Handling Module

This module defines the error handling system for hashstream, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict for PII protection
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("user_id",)


class ErrorCode(str, Enum):
    """Error codes for hashstream.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Codec Errors
    PARSING_ERROR = "PARSING_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"

    # Digest Errors
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    DIGEST_FAILED = "DIGEST_FAILED"

    # Stream Errors
    STREAM_READ_ERROR = "STREAM_READ_ERROR"
    STREAM_WRITE_ERROR = "STREAM_WRITE_ERROR"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    SERVICE_ALREADY_STARTED = "SERVICE_ALREADY_STARTED"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_SERVE_COMMAND_FAILED = "CLI_SERVE_COMMAND_FAILED"
    CLI_DIGEST_COMMAND_FAILED = "CLI_DIGEST_COMMAND_FAILED"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"

    # Pipeline Errors
    PIPELINE_INITIALIZATION_ERROR = "PIPELINE_INITIALIZATION_ERROR"
    PIPELINE_EXECUTION_ERROR = "PIPELINE_EXECUTION_ERROR"
    PIPELINE_SHUTDOWN_ERROR = "PIPELINE_SHUTDOWN_ERROR"
    PIPELINE_CANCELLED = "PIPELINE_CANCELLED"
    QUEUE_CLOSED = "QUEUE_CLOSED"
    QUEUE_TIMEOUT = "QUEUE_TIMEOUT"
    COUNTER_UNDERFLOW = "COUNTER_UNDERFLOW"
    DECODER_ERROR = "DECODER_ERROR"
    TRANSFORMER_ERROR = "TRANSFORMER_ERROR"
    ENCODER_ERROR = "ENCODER_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization and prevent sensitive
    data leakage.

    Attributes:
        request_id: Optional id of the request being handled
        operation: Optional operation name that caused the error
        user_id: Optional user of the request (masked in logs)
        additional_data: Optional dict with primitive values only
    """

    request_id: str | None = None
    operation: str | None = None
    user_id: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            # frozen dataclass: bypass __setattr__ for the coerced copy
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with PII masking.

        Args:
            mask_keys: Fields to exclude from output. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked sensitive fields and guaranteed additional_data key.

        Example:
            >>> context = ErrorContext(user_id="alice", request_id="42")
            >>> context.safe_dict()
            {'request_id': '42', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.request_id is not None and "request_id" not in mask_keys:
            data["request_id"] = self.request_id
        if self.operation is not None and "operation" not in mask_keys:
            data["operation"] = self.operation
        if self.user_id is not None and "user_id" not in mask_keys:
            data["user_id"] = self.user_id

        if self.additional_data is not None and "additional_data" not in mask_keys:
            data["additional_data"] = self.additional_data
        else:
            data["additional_data"] = {}

        return data


class HashStreamError(Exception):
    """Base exception class for all hashstream errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize HashStreamError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging with PII masking.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(HashStreamError):
    """Domain-specific errors.

    These errors occur when a record or an algorithm name violates the
    rules of the request/response protocol.

    Examples:
    - Unparseable request line
    - Missing or empty required field
    - Unsupported digest algorithm
    """


class InfrastructureError(HashStreamError):
    """Infrastructure-related errors.

    These errors occur in the pipeline machinery: queues, threads,
    streams.

    Examples:
    - Put on a closed queue
    - Queue wait timeout
    - Pipeline cancellation
    """


class ApplicationError(HashStreamError):
    """Application-level errors.

    Configuration errors and service lifecycle misuse.
    """


class RequestDecodeError(DomainError):
    """An input line could not be decoded into a valid request."""


class ResponseEncodeError(DomainError):
    """A response could not be serialized to an output line."""


class UnsupportedAlgorithmError(DomainError):
    """The requested digest algorithm is not in the supported set."""


class DigestError(DomainError):
    """The digest could not be computed for the given payload."""


class QueueClosedError(InfrastructureError):
    """An item was submitted to a queue that has already been closed."""


class QueueTimeoutError(InfrastructureError):
    """A queue operation waited longer than the configured limit."""


class PipelineCancelledError(InfrastructureError):
    """A pipeline stage observed the cancellation signal while suspended."""


def create_config_error(
    message: str,
    config_path: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_path": config_path} if config_path else None
    )
    context = ErrorContext(operation="load_config", additional_data=additional_data)
    return ApplicationError(
        ErrorCode.CONFIGURATION_ERROR,
        message,
        context,
        original_error,
    )


class CliError(ApplicationError):
    """CLI-specific error with enhanced context for command-line operations."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
