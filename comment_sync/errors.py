"""
Error types for comment-sync.

Every failure in the pipeline is raised as a SyncError subclass carrying a
context dict (offset, limit, batch size, status code...). Components never
terminate the process themselves; the CLI is the single place that logs the
error and exits.

Hierarchy:
    SyncError
    ├── ConfigurationError
    ├── DatabaseConnectionError
    ├── ExtractionError
    │   ├── TransportError
    │   ├── HttpStatusError
    │   └── DecodeError
    └── LoadError
        └── SqlBuildError
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SyncError(Exception):
    """
    Base exception for all sync failures.

    Attributes
    ----------
    message : str
        Human-readable error message.
    context : dict
        Extra fields describing where the failure happened.
    original_exception : Exception | None
        The library exception that was caught, if any.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        super().__init__(message)
        if original_exception is not None:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        text = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            text += " | " + ", ".join(f"{k}={v}" for k, v in self.context.items())
        if self.original_exception is not None:
            text += (
                f" | Caused by: {type(self.original_exception).__name__}: "
                f"{self.original_exception}"
            )
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error into a dict suitable for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "original_error": str(self.original_exception) if self.original_exception else None,
        }


class ConfigurationError(SyncError):
    """Settings could not be loaded from the environment."""


class DatabaseConnectionError(SyncError):
    """Opening or pinging the database connection failed."""


class ExtractionError(SyncError):
    """Base class for failures while fetching or decoding a page."""


class TransportError(ExtractionError):
    """The HTTP request never produced a response."""


class HttpStatusError(ExtractionError):
    """The upstream API answered with a status other than 200."""


class DecodeError(ExtractionError):
    """The response body is not a JSON array of comments."""


class LoadError(SyncError):
    """Executing or committing a batch insert failed; the batch was rolled back."""


class SqlBuildError(LoadError):
    """The multi-row INSERT statement could not be built."""


__all__ = [
    "ConfigurationError",
    "DatabaseConnectionError",
    "DecodeError",
    "ExtractionError",
    "HttpStatusError",
    "LoadError",
    "SqlBuildError",
    "SyncError",
    "TransportError",
]
