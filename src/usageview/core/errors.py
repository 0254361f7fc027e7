"""Custom exception hierarchy for report ingestion and sharing."""

from __future__ import annotations

from typing import Any, Mapping

ErrorDetails = Mapping[str, Any] | None


class ApplicationError(Exception):
    """Base exception carrying optional structured details."""

    def __init__(self, message: str, *, details: ErrorDetails = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:  # pragma: no cover - mirrors Exception.__str__
        return self.message


class ParseError(ApplicationError):
    """Raised when an input is not well-formed JSON."""


class FormatError(ApplicationError):
    """Raised when a parsed value is not one of the recognized report shapes."""


class MergeError(ApplicationError):
    """Raised when sources of different report kinds are combined."""


class InputReadError(ApplicationError):
    """Raised when a report file cannot be read as UTF-8 text."""


class ValidationError(ApplicationError):
    """Raised when request payloads fail validation rules."""


class ShortLinkNotFoundError(ApplicationError):
    """Raised when a short-link identifier cannot be resolved."""


class ShortLinkError(ApplicationError):
    """Raised when the remote short-link service rejects or fails a request."""


def error_response(error: Exception, *, details: ErrorDetails = None) -> dict[str, Any]:
    """Normalize errors into the public API response format."""

    payload: dict[str, Any]
    if isinstance(error, ApplicationError):
        payload = dict(error.details)
        if details:
            payload.update(details)
    else:
        payload = dict(details or {})

    return {
        "error": {
            "type": error.__class__.__name__,
            "message": str(error),
            "details": payload,
        }
    }


__all__ = [
    "ApplicationError",
    "ParseError",
    "FormatError",
    "MergeError",
    "InputReadError",
    "ValidationError",
    "ShortLinkNotFoundError",
    "ShortLinkError",
    "error_response",
]
