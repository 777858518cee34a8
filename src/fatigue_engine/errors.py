"""Error taxonomy for the fatigue engine.

Configuration defects fail fast; persistence failures surface to the caller
unchanged in meaning (wrapped, never swallowed or retried).
"""

from __future__ import annotations


class FatigueEngineError(Exception):
    """Base class for all fatigue engine errors."""


class ConfigurationError(FatigueEngineError):
    """Domain tables are incomplete or a lookup key is unsupported."""


class RepositoryError(FatigueEngineError):
    """A persistence operation failed at the storage boundary."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
