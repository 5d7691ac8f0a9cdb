"""Exception types shared across the package."""

from typing import Optional


class VsgError(Exception):
    """Base class for all package errors."""


class GenerationError(VsgError):
    """The generation endpoint failed or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(VsgError, ValueError):
    """Malformed or missing user input."""


class StorageError(VsgError):
    """Persisted state could not be read or written."""
