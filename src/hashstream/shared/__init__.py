"""hashstream Shared Module.

This package contains the error types, constants, records, line codec and
logging helpers used across hashstream.
"""

__all__ = ["codec", "constants", "errors", "logging", "models"]
