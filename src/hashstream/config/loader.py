"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from an optional .env file
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import toml
from dotenv import load_dotenv
from pydantic import ValidationError

from hashstream.config.models.settings import Settings
from hashstream.shared.constants import Config
from hashstream.shared.errors import create_config_error

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance (thread-safe).

        Returns:
            The global Settings instance, loading it if necessary.
        """
        # First check (without lock for performance)
        if self._instance is None:
            # Second check (with lock for thread-safety)
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files.

        Returns:
            The reloaded Settings instance.
        """
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance

    def reset(self) -> None:
        """Forget the cached instance; the next get_config() loads again."""
        with self._lock:
            self._instance = None


def _load_env_file(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file if one exists.

    Variables already present in the environment win over the file.

    Returns:
        True if a file was loaded.
    """
    env_file = env_file or Path(Config.ENV_FILENAME)
    if not env_file.is_file():
        return False
    load_dotenv(env_file, override=False)
    logger.debug("Loaded environment from %s", env_file)
    return True


def _default_config_paths() -> list[Path]:
    return [
        Path(Config.DEFAULT_FILENAME),
        Path.home() / ".config" / "hashstream" / Config.DEFAULT_FILENAME,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, the
            first existing default location is used, falling back to
            defaults plus environment variables.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If the file is missing, unreadable or invalid.
    """
    _load_env_file()

    if config_path is None:
        config_path = next((path for path in _default_config_paths() if path.exists()), None)

    try:
        if config_path is not None:
            return Settings.from_toml_file(config_path)
        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {config_path}",
            config_path=str(config_path),
            original_error=e,
        ) from e
    except (toml.TomlDecodeError, OSError) as e:
        raise create_config_error(
            f"Failed to read configuration file: {e}",
            config_path=str(config_path),
            original_error=e,
        ) from e
    except ValidationError as e:
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            config_path=str(config_path) if config_path else None,
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe).

    Returns:
        The global Settings instance, loading it if necessary.
    """
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files.

    Returns:
        The reloaded Settings instance.
    """
    return _loader.reload_config(config_path)


def reset_config() -> None:
    """Drop the cached global settings instance."""
    _loader.reset()
