"""Normalize, merge, analyse and share ccusage JSON reports."""

from .core.settings import Settings, get_settings
from .models import (
    CanonicalEntry,
    CanonicalTotals,
    DashboardData,
    DetectedReport,
    ModelBreakdown,
    ParseResult,
    SourceInput,
)
from .pipeline import load_dashboard, parse_inputs

__all__ = [
    "CanonicalEntry",
    "CanonicalTotals",
    "DashboardData",
    "DetectedReport",
    "ModelBreakdown",
    "ParseResult",
    "Settings",
    "SourceInput",
    "get_settings",
    "load_dashboard",
    "parse_inputs",
]
