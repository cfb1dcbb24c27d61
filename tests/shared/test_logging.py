"""
Tests for the structured logging helpers in hashstream.shared.logging.
"""

import json
import logging

from rich.logging import RichHandler

from hashstream.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from hashstream.shared.logging import (
    StructuredFormatter,
    log_operation_error,
    log_operation_start,
    log_operation_success,
    setup_structured_logger,
)


def _record(**extra):
    record = logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="Test %s",
        args=("message",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_format_basic_log_record(self):
        log_data = json.loads(StructuredFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Test message"
        assert "timestamp" in log_data

    def test_format_includes_extra_fields(self):
        record = _record(error_code="QUEUE_TIMEOUT", operation="queue_get", duration_ms=1.5)

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["error_code"] == "QUEUE_TIMEOUT"
        assert log_data["operation"] == "queue_get"
        assert log_data["duration_ms"] == 1.5


class TestSetupStructuredLogger:
    def test_rich_console_handler_by_default(self):
        logger = setup_structured_logger("hashstream.test_rich", "DEBUG")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_reconfiguring_does_not_stack_handlers(self):
        setup_structured_logger("hashstream.test_stack", "INFO", use_rich_console=False)
        logger = setup_structured_logger("hashstream.test_stack", "WARNING", use_rich_console=False)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_file_handler_writes_json(self, tmp_path):
        # Given
        log_file = tmp_path / "hashstream.log"
        logger = setup_structured_logger(
            "hashstream.test_file",
            "DEBUG",
            log_file=str(log_file),
            use_rich_console=False,
        )
        error = InfrastructureError(
            ErrorCode.QUEUE_TIMEOUT,
            "waited too long",
            ErrorContext(operation="queue_get", user_id="alice"),
        )

        # When
        log_operation_error(logger, error, level=logging.WARNING)
        for handler in logger.handlers:
            handler.flush()

        # Then
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert entry["message"] == "waited too long"
        assert entry["error_code"] == "QUEUE_TIMEOUT"
        assert entry["operation"] == "queue_get"
        assert "user_id" not in entry["context"]

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


class TestOperationHelpers:
    def test_log_operation_start_and_success_at_debug(self, caplog):
        logger = logging.getLogger("hashstream.test_helpers")

        with caplog.at_level(logging.DEBUG, logger="hashstream.test_helpers"):
            log_operation_start(logger, "decode_requests", {"stage": "request-decoder"})
            log_operation_success(logger, "decode_requests", 12.5, {"lines_read": 3})

        assert [record.levelno for record in caplog.records] == [logging.DEBUG, logging.DEBUG]
        assert caplog.records[1].duration_ms == 12.5
        assert caplog.records[1].result_info == {"lines_read": 3}

    def test_log_operation_error_merges_context(self, caplog):
        logger = logging.getLogger("hashstream.test_helpers")
        error = InfrastructureError(
            ErrorCode.PIPELINE_EXECUTION_ERROR,
            "failed",
            ErrorContext(operation="run", additional_data={"stage": "transformer"}),
        )

        with caplog.at_level(logging.ERROR, logger="hashstream.test_helpers"):
            log_operation_error(logger, error, context={"attempt": 1})

        record = caplog.records[0]
        assert record.error_code == "PIPELINE_EXECUTION_ERROR"
        assert record.operation == "run"
        assert record.context["attempt"] == 1
        assert record.context["additional_data"] == {"stage": "transformer"}
