"""
Exception hierarchy for the tutor backend.

Scope refusals and empty retrievals are normal outcomes, not exceptions.
Routers translate these errors into HTTP responses; the detail stays in the logs.
"""

from typing import Any


class TutorError(Exception):
    """Base exception for all tutor backend errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class LoadError(TutorError):
    """Raised when lesson content cannot be read."""


class ConfigurationError(TutorError):
    """Raised for invalid settings such as chunk overlap >= chunk size."""


class CompletionServiceError(TutorError):
    """Raised when the completion service fails, times out or returns nothing usable."""
