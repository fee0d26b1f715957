"""Configuration-related exceptions.

This module defines the exceptions raised while loading and validating the
action inputs. They carry enough detail for the entry point to report which
precondition failed.
"""

from typing import Any


class ConfigurationError(Exception):
    """Base exception for all configuration-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize configuration error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.details = details or {}


class ConfigurationValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(
        self,
        message: str,
        validation_errors: list[Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize configuration validation error.

        Args:
            message: Human-readable error message
            validation_errors: List of specific validation errors
            details: Optional dictionary with additional error details
        """
        super().__init__(message, details)
        self.validation_errors = validation_errors or []


class ConfigurationMissingError(ConfigurationError):
    """Exception raised when required configuration is missing."""

    def __init__(
        self,
        message: str,
        missing_fields: list[Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize configuration missing error.

        Args:
            message: Human-readable error message
            missing_fields: List of missing required fields
            details: Optional dictionary with additional error details
        """
        super().__init__(message, details)
        self.missing_fields = missing_fields or []
