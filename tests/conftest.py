"""
Pytest configuration and shared fixtures for hashstream tests.

This module provides common fixtures used across the test modules.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import orjson
import pytest

from hashstream.cli.common.context import clear_cli_context
from hashstream.config import reset_config
from hashstream.shared.constants import Config, Logging


@pytest.fixture(autouse=True)
def reset_application_logger() -> Generator[None, None, None]:
    """Undo setup_structured_logger() so caplog keeps working across tests."""
    yield
    logger = logging.getLogger(Logging.LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def reset_cli_state() -> Generator[None, None, None]:
    yield
    clear_cli_context()
    reset_config()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no hashstream environment or home config.

    Returns:
        The temporary working directory.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith(Config.ENV_PREFIX):
            monkeypatch.delenv(key)
    reset_config()
    return tmp_path


@pytest.fixture
def request_line() -> Callable[..., bytes]:
    """Build one newline-terminated request line.

    Usage:
        request_line("1", "SHA256", "abc") -> b'{"id":"1","user":"u",...}\\n'
    """

    def _build(request_id: str, alg: str, payload: str, user: str = "u") -> bytes:
        return orjson.dumps({"id": request_id, "user": user, "alg": alg, "payload": payload}) + b"\n"

    return _build
