"""System-level constants: application metadata, pipeline and timeouts."""

from __future__ import annotations


class Application:
    """Application metadata constants."""

    NAME = "hashstream"
    VERSION = "0.1.0"
    DESCRIPTION = "Ordered line-delimited hashing service"


class Config:
    """Configuration system constants."""

    ENV_PREFIX = "HASHSTREAM_"
    ENV_DELIMITER = "__"
    DEFAULT_FILENAME = "hashstream.toml"
    ENV_FILENAME = ".env"


class Pipeline:
    """Pipeline configuration constants."""

    # Transformation is the slow stage, so the request side buffers more.
    REQUEST_QUEUE_SIZE = 512
    RESPONSE_QUEUE_SIZE = 128
    SENTINEL = object()  # Unique sentinel object, marks an exhausted queue


class Timeout:
    """Timeout configuration constants (seconds)."""

    PIPELINE_SHUTDOWN = 5.0  # join timeout for stage threads after STOPPED
    PIPELINE_POLL = 0.1  # slice used when waiting on a queue with cancellation
    PIPELINE_CANCEL_JOIN = 1.0  # join timeout for stage threads after cancellation


class Logging:
    """Logging defaults."""

    LOGGER_NAME = "hashstream"
    DEFAULT_LEVEL = "INFO"
    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_ENCODING = "utf-8"


__all__ = ["Application", "Config", "Logging", "Pipeline", "Timeout"]
