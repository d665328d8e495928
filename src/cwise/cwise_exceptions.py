"""Custom exceptions for routine compilation."""

from typing import Any


class CwiseError(Exception):
    """Base exception for routine compilation."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Why the routine could not be compiled
            error_details: Optional context such as the failing phase, the rejected
                construct and its source range
        """
        super().__init__(message)
        self.error_details = error_details


class CwiseSyntaxError(CwiseError):
    """Raised when the routine source does not parse as a function."""


class CwiseUnsupportedError(CwiseError):
    """Raised when a routine uses a construct that cannot be inlined."""


class CwiseRangeError(CwiseError):
    """Raised when a syntax tree node carries no source range."""


class CwiseEditError(CwiseError):
    """Raised when text edits overlap or fall outside the rewritten window."""


class CwiseConfigError(CwiseError):
    """Raised when a compiler configuration is invalid."""
