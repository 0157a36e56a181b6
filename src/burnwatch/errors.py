"""
Burnwatch - Core Error Types

Defines the exception hierarchy for the usage monitor runtime.
All exceptions inherit from BurnwatchError for consistent error handling.

Fetch failures fall into three classes:
- ToolNotFoundError: no usable npx located, or the subprocess failed to launch
- ToolExitError: the report tool ran but exited non-zero
- ReportDecodeError: stdout did not match the expected report schema
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for MCP tool responses.

    Used for structured error handling and client-side error recovery.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Report tool errors
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    TOOL_EXIT_NONZERO = "TOOL_EXIT_NONZERO"
    DECODE_FAILURE = "DECODE_FAILURE"

    # Setup errors
    NEEDS_SETUP = "NEEDS_SETUP"
    CONFIG_WRITE_FAILED = "CONFIG_WRITE_FAILED"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BurnwatchError(Exception):
    """Base exception for all Burnwatch errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(BurnwatchError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=500)


class DependencyError(BurnwatchError):
    """Raised when a required external dependency is missing or unusable."""

    def __init__(
        self,
        package: str,
        feature: str | None = None,
        install_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if feature:
            message = f"Required dependency '{package}' is missing for {feature}"
        else:
            message = f"Required dependency '{package}' is missing"

        if install_hint:
            message += f". Install with: {install_hint}"

        error_details = details or {}
        error_details.update(
            {
                "package": package,
                "feature": feature,
                "install_hint": install_hint,
            }
        )

        super().__init__(message, error_details, status_code=500)


class FetchError(BurnwatchError):
    """Base exception for report fetch failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, status_code=502)


class ToolNotFoundError(DependencyError):
    """Raised when no usable npx executable exists or the tool fails to launch."""

    def __init__(self, reason: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if reason:
            error_details["reason"] = reason
        super().__init__(
            "npx",
            feature="usage reports",
            install_hint="brew install node",
            details=error_details,
        )
        self.reason = reason


class ToolExitError(FetchError):
    """Raised when the report tool exits with a non-zero status."""

    def __init__(self, exit_code: int, details: dict[str, Any] | None = None):
        error_details = details or {}
        error_details["exit_code"] = exit_code
        super().__init__(f"tool exit {exit_code}", error_details)
        self.exit_code = exit_code


class ReportDecodeError(FetchError):
    """Raised when report output does not match the expected schema."""

    pass


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response for MCP tools.

    Args:
        error_code: Standard error code
        message: Human-readable error message
        context: Additional context/details

    Returns:
        Standardized error response dictionary

    Example:
        >>> make_error_response(
        ...     ErrorCode.INVALID_INPUT,
        ...     "Unknown history period",
        ...     {"parameter": "period", "provided_value": "yearly"}
        ... )
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Unknown history period",
            "details": {"parameter": "period", "provided_value": "yearly"}
        }
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, ToolNotFoundError):
        return ErrorCode.TOOL_NOT_FOUND

    if isinstance(error, ToolExitError):
        return ErrorCode.TOOL_EXIT_NONZERO

    if isinstance(error, ReportDecodeError):
        return ErrorCode.DECODE_FAILURE

    return ErrorCode.INTERNAL_ERROR
