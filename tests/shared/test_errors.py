"""
Tests for hashstream error handling system.

This module contains unit tests for the error hierarchy defined in
hashstream.shared.errors.
"""

from enum import Enum
from pathlib import Path

import pytest

from hashstream.shared.errors import (
    ApplicationError,
    CliError,
    DomainError,
    ErrorCode,
    ErrorContext,
    HashStreamError,
    InfrastructureError,
    PipelineCancelledError,
    QueueClosedError,
    QueueTimeoutError,
    RequestDecodeError,
    UnsupportedAlgorithmError,
    create_cli_error,
    create_config_error,
)


class _Colour(Enum):
    RED = "red"


class TestErrorContext:
    """Test cases for ErrorContext frozen dataclass."""

    def test_empty_context(self):
        context = ErrorContext()

        assert context.request_id is None
        assert context.operation is None
        assert context.user_id is None
        assert context.additional_data is None

    def test_additional_data_is_coerced_to_primitives(self):
        context = ErrorContext(
            additional_data={"path": Path("a/b"), "colour": _Colour.RED, "count": 3},
        )

        assert context.additional_data == {"path": str(Path("a/b")), "colour": "red", "count": 3}

    def test_non_primitive_value_is_rejected(self):
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_frozen_immutability(self):
        context = ErrorContext(request_id="1")

        with pytest.raises(AttributeError):
            context.request_id = "2"  # type: ignore[misc]

    def test_safe_dict_masks_user_id(self):
        # Given
        context = ErrorContext(request_id="42", operation="op", user_id="alice")

        # When
        data = context.safe_dict()

        # Then
        assert data == {"request_id": "42", "operation": "op", "additional_data": {}}

    def test_safe_dict_custom_mask(self):
        context = ErrorContext(request_id="42", user_id="alice")

        data = context.safe_dict(mask_keys=("request_id",))

        assert data == {"user_id": "alice", "additional_data": {}}


class TestHashStreamError:
    def test_str_contains_code_and_message(self):
        error = HashStreamError(ErrorCode.APPLICATION_ERROR, "boom")

        assert str(error) == "APPLICATION_ERROR: boom"

    def test_to_dict(self):
        cause = ValueError("bad")
        error = DomainError(
            ErrorCode.VALIDATION_ERROR,
            "invalid",
            ErrorContext(request_id="7", user_id="secret"),
            original_error=cause,
        )

        assert error.to_dict() == {
            "code": "VALIDATION_ERROR",
            "message": "invalid",
            "context": {"request_id": "7", "additional_data": {}},
            "original_error": "bad",
        }

    @pytest.mark.parametrize(
        ("error_class", "base"),
        [
            (RequestDecodeError, DomainError),
            (UnsupportedAlgorithmError, DomainError),
            (QueueClosedError, InfrastructureError),
            (QueueTimeoutError, InfrastructureError),
            (PipelineCancelledError, InfrastructureError),
            (CliError, ApplicationError),
        ],
    )
    def test_hierarchy(self, error_class, base):
        assert issubclass(error_class, base)
        assert issubclass(error_class, HashStreamError)


class TestFactories:
    def test_create_config_error(self):
        cause = FileNotFoundError("missing")

        error = create_config_error("not found", config_path="x.toml", original_error=cause)

        assert isinstance(error, ApplicationError)
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert error.context.operation == "load_config"
        assert error.context.additional_data == {"config_path": "x.toml"}
        assert error.original_error is cause

    def test_create_cli_error_defaults(self):
        error = create_cli_error("failed", command="serve")

        assert error.code == ErrorCode.CLI_UNEXPECTED_ERROR
        assert error.command == "serve"
        assert error.exit_code == 1
        assert error.context.additional_data == {"command": "serve"}

    def test_create_cli_error_custom_exit_code(self):
        error = create_cli_error(
            "interrupted",
            exit_code=130,
            code=ErrorCode.CLI_COMMAND_INTERRUPTED,
        )

        assert error.exit_code == 130
        assert error.code == ErrorCode.CLI_COMMAND_INTERRUPTED
        assert error.context.additional_data is None
