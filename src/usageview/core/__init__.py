"""Core utilities shared by the report engine, the CLI and the short-link service."""

from .settings import Settings, get_settings
from .logging import configure_logging, get_logger
from .errors import (
    ApplicationError,
    FormatError,
    InputReadError,
    MergeError,
    ParseError,
    ShortLinkError,
    ShortLinkNotFoundError,
    ValidationError,
    error_response,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "ApplicationError",
    "FormatError",
    "InputReadError",
    "MergeError",
    "ParseError",
    "ShortLinkError",
    "ShortLinkNotFoundError",
    "ValidationError",
    "error_response",
]
