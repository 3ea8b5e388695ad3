"""Custom exception hierarchy for remember-cursor.

Exception Hierarchy:
    RememberCursorError (base)
    ├── PositionStoreError - reading/writing the position database
    │   ├── PositionStoreReadError
    │   └── PositionStoreWriteError
    └── ConfigurationError - settings issues

Usage:
    from remember_cursor.exceptions import PositionStoreWriteError

    try:
        store.flush()
    except PositionStoreWriteError as e:
        logger.error(f"Flush failed: {e}")
"""

from typing import Any, Optional


class RememberCursorError(Exception):
    """Base exception for all remember-cursor errors.

    Keyword arguments are kept in ``context`` and appended to the message,
    e.g. ``Failed to save settings (path='/w/.remember-cursor/data.json')``.
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        details = ", ".join(f"{key}={value!r}" for key, value in context.items())
        super().__init__(f"{message} ({details})" if details else message)


# =============================================================================
# Position Store Errors
# =============================================================================


class PositionStoreError(RememberCursorError):
    """Base exception for position database operations."""

    default_message = "Position database error"

    def __init__(self, message: Optional[str] = None, *, path: Optional[str] = None, **context: Any) -> None:
        self.path = path
        if path:
            context = {"path": path, **context}
        super().__init__(message or self.default_message, **context)


class PositionStoreReadError(PositionStoreError):
    """The position database exists but couldn't be read or parsed."""

    default_message = "Failed to read position database"


class PositionStoreWriteError(PositionStoreError):
    """Writing the position database failed; the next flush retries."""

    default_message = "Failed to write position database"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RememberCursorError):
    """Invalid or unsaveable settings."""
