"""Tests for CLI error mapping and output."""

import orjson
import pytest

from hashstream.cli.common.error_handler import format_json_output, handle_cli_error
from hashstream.shared.errors import (
    ApplicationError,
    ErrorCode,
    InfrastructureError,
    RequestDecodeError,
    create_cli_error,
)


class TestFormatJsonOutput:
    def test_success_without_data(self) -> None:
        assert orjson.loads(format_json_output("digest", success=True)) == {
            "success": True,
            "command": "digest",
        }

    def test_errors_and_data(self) -> None:
        output = orjson.loads(
            format_json_output("serve", success=False, errors=["boom"], data={"exit_code": 1}),
        )

        assert output["errors"] == ["boom"]
        assert output["data"] == {"exit_code": 1}


class TestHandleCliError:
    """Test cases for handle_cli_error()."""

    def test_cli_error_passes_through(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = create_cli_error("custom failure", command="digest", exit_code=3)

        assert handle_cli_error(error, "digest") == 3
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: custom failure\n" in captured.err

    def test_keyboard_interrupt(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert handle_cli_error(KeyboardInterrupt(), "serve") == 130
        assert "interrupted" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("error", "prefix"),
        [
            (ApplicationError(ErrorCode.CONFIGURATION_ERROR, "bad config"), "Application error: bad config"),
            (InfrastructureError(ErrorCode.QUEUE_TIMEOUT, "stalled"), "Infrastructure error: stalled"),
            (RequestDecodeError(ErrorCode.PARSING_ERROR, "bad line"), "Invalid input: bad line"),
        ],
    )
    def test_hashstream_errors_are_categorised(
        self,
        error,
        prefix: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert handle_cli_error(error, "serve") == 1
        assert f"Error: {prefix}\n" in capsys.readouterr().err

    def test_os_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert handle_cli_error(FileNotFoundError("no such file"), "serve") == 1
        assert "File system error: no such file" in capsys.readouterr().err

    def test_value_error_is_invalid_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        handle_cli_error(ValueError("queue_timeout must be positive"), "serve", json_output=True)

        output = orjson.loads(capsys.readouterr().err)
        assert output["success"] is False
        assert output["command"] == "serve"
        assert output["errors"] == ["Invalid arguments: queue_timeout must be positive"]
        assert output["data"]["error_code"] == "CLI_INVALID_ARGUMENTS"
        assert output["data"]["error_type"] == "ValueError"
        assert output["data"]["exit_code"] == 1

    def test_json_error_code_for_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        handle_cli_error(
            InfrastructureError(ErrorCode.PIPELINE_INITIALIZATION_ERROR, "cannot start"),
            "serve",
            json_output=True,
        )

        output = orjson.loads(capsys.readouterr().err)
        assert output["data"]["error_code"] == "CLI_SERVE_COMMAND_FAILED"
        assert output["data"]["context"]["error_code"] == "PIPELINE_INITIALIZATION_ERROR"

    def test_unexpected_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert handle_cli_error(RuntimeError("surprise"), "digest") == 1
        assert "Unexpected error: surprise" in capsys.readouterr().err
