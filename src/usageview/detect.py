"""Classify a parsed JSON value into one of the five report kinds."""

from __future__ import annotations

from typing import Any, Mapping

from .core.errors import FormatError
from .models import REPORT_KEYS, DetectedReport

NOT_AN_OBJECT_MESSAGE = "Invalid JSON: expected an object"
UNRECOGNIZED_MESSAGE = (
    "Unrecognized report format. Expected one of: daily, weekly, monthly, sessions, blocks"
)


def detect_report(value: Any) -> DetectedReport:
    """Tag ``value`` with its report kind.

    The first top-level key among ``daily``, ``weekly``, ``monthly``,
    ``sessions`` and ``blocks`` whose value is a list decides the kind.
    """

    if not isinstance(value, Mapping):
        raise FormatError(NOT_AN_OBJECT_MESSAGE, details={"type": type(value).__name__})

    for key, kind in REPORT_KEYS:
        if isinstance(value.get(key), list):
            return DetectedReport(kind=kind, data=value)

    raise FormatError(UNRECOGNIZED_MESSAGE, details={"keys": sorted(map(str, value.keys()))})


def looks_like_report(value: Any) -> bool:
    """Return ``True`` when ``value`` is a mapping carrying a report key."""

    return isinstance(value, Mapping) and any(key in value for key, _ in REPORT_KEYS)


__all__ = [
    "NOT_AN_OBJECT_MESSAGE",
    "UNRECOGNIZED_MESSAGE",
    "detect_report",
    "looks_like_report",
]
