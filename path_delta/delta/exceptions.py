"""Delta resolution exceptions.

Components raise these instead of terminating the process; only the entry
point decides that a failure is fatal.
"""

from typing import Any


class DeltaError(Exception):
    """Base exception for all delta resolution errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize delta error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.details = details or {}


class RevisionError(DeltaError):
    """Raised when the base revision cannot be determined."""

    pass


class DiffError(DeltaError):
    """Raised when the changed paths between two revisions cannot be computed."""

    def __init__(
        self,
        message: str,
        base: str | None = None,
        current: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize diff error.

        Args:
            message: Human-readable error message
            base: Base revision of the failed comparison
            current: Current revision of the failed comparison
            details: Optional dictionary with additional error details
        """
        super().__init__(message, details)
        self.base = base
        self.current = current


class PatternError(DeltaError):
    """Raised when a glob pattern cannot be compiled."""

    def __init__(self, message: str, pattern: str):
        super().__init__(message, {"pattern": pattern})
        self.pattern = pattern
