"""Core exception classes for the UCS index engine."""

from typing import Any


class UCSIndexError(Exception):
    """Base exception for every engine error."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: human readable message
            error_code: machine readable code
            details: extra structured context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


__all__ = ["UCSIndexError"]
