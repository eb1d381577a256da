"""
Custom exception hierarchy for the settings accessor.

All exceptions inherit from OptsError, which provides optional context
for structured error handling and logging.

Reads never raise for missing data (a missing group or key resolves to an
empty string). These exceptions cover misuse and infrastructure failures.
"""

from __future__ import annotations

from typing import Any


class OptsError(Exception):
    """Base exception for all settings accessor errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class StoreError(OptsError):
    """Raised when the persistent settings store fails.

    Context should include:
        - group: The settings group being read or written
        - backend: The store implementation
    """

    pass


class StoreNotInitializedError(StoreError):
    """Raised when a store is used before init() or after close()."""

    pass


class SerializationError(StoreError):
    """Raised when a settings group cannot be serialized for storage.

    Context should include:
        - group: The settings group being written
        - error: The underlying encoder error
    """

    pass


class NoActiveRequestError(OptsError):
    """Raised when request-scoped helpers are used outside request_scope()."""

    pass
