"""Convert detected reports of any kind into canonical entries and totals."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from .aggregate import group_entries, sum_entries
from .models import (
    CanonicalEntry,
    CanonicalTotals,
    DetectedReport,
    ReportKind,
    breakdowns_from_payload,
    coerce_float,
    coerce_int,
    coerce_str_tuple,
)

UNKNOWN_PROJECT = "Unknown Project"
SESSION_ID_TAIL = 20

_MONTH_BUCKET = re.compile(r"(\d{4}-\d{2})(?:-\d{2})?")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""

    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_block_label(start_time: Any) -> str:
    """Render a block start as a short local ``"Jul 1, 09:00"`` label."""

    parsed = parse_timestamp(start_time)
    if parsed is None:
        return str(start_time or "")
    local = parsed.astimezone()
    return f"{local:%b} {local.day}, {local:%H:%M}"


def _usage_entry(payload: Mapping[str, Any], label: str) -> CanonicalEntry:
    return CanonicalEntry(
        label=label,
        input_tokens=coerce_int(payload.get("inputTokens")),
        output_tokens=coerce_int(payload.get("outputTokens")),
        cache_creation_tokens=coerce_int(payload.get("cacheCreationTokens")),
        cache_read_tokens=coerce_int(payload.get("cacheReadTokens")),
        total_tokens=coerce_int(payload.get("totalTokens")),
        cost=coerce_float(payload.get("totalCost")),
        models=coerce_str_tuple(payload.get("modelsUsed")),
        model_breakdowns=breakdowns_from_payload(payload.get("modelBreakdowns")),
    )


def _session_label(payload: Mapping[str, Any]) -> str:
    project = payload.get("projectPath")
    if isinstance(project, str) and project and project != UNKNOWN_PROJECT:
        return project
    return str(payload.get("sessionId") or "")[-SESSION_ID_TAIL:]


def _session_sort_key(record: Any) -> tuple[int, float]:
    parsed = parse_timestamp(_as_mapping(record).get("lastActivity"))
    if parsed is None:
        return (1, 0.0)
    return (0, parsed.timestamp())


def _normalize_time_entries(label_key: str) -> Callable[[DetectedReport], list[CanonicalEntry]]:
    def normalize(report: DetectedReport) -> list[CanonicalEntry]:
        entries = []
        for record in report.records:
            payload = _as_mapping(record)
            label = payload.get(label_key)
            entries.append(_usage_entry(payload, str(label) if label is not None else ""))
        return entries

    return normalize


def _normalize_sessions(report: DetectedReport) -> list[CanonicalEntry]:
    return [
        _usage_entry(_as_mapping(record), _session_label(_as_mapping(record)))
        for record in sorted(report.records, key=_session_sort_key)
    ]


def _normalize_blocks(report: DetectedReport) -> list[CanonicalEntry]:
    entries = []
    for record in report.records:
        payload = _as_mapping(record)
        if payload.get("isGap") is True:
            continue
        counts = _as_mapping(payload.get("tokenCounts"))
        entries.append(
            CanonicalEntry(
                label=format_block_label(payload.get("startTime")),
                input_tokens=coerce_int(counts.get("inputTokens")),
                output_tokens=coerce_int(counts.get("outputTokens")),
                cache_creation_tokens=coerce_int(counts.get("cacheCreationInputTokens")),
                cache_read_tokens=coerce_int(counts.get("cacheReadInputTokens")),
                total_tokens=coerce_int(payload.get("totalTokens")),
                cost=coerce_float(payload.get("costUSD")),
                models=coerce_str_tuple(payload.get("models")),
            )
        )
    return entries


_ENTRY_NORMALIZERS: dict[ReportKind, Callable[[DetectedReport], list[CanonicalEntry]]] = {
    "daily": _normalize_time_entries("date"),
    "weekly": _normalize_time_entries("week"),
    "monthly": _normalize_time_entries("month"),
    "session": _normalize_sessions,
    "blocks": _normalize_blocks,
}


def normalize_entries(report: DetectedReport) -> list[CanonicalEntry]:
    """Return the report's records as canonical entries.

    Sessions are ordered by last activity; gap blocks are dropped.
    """

    return _ENTRY_NORMALIZERS[report.kind](report)


def normalize_totals(report: DetectedReport) -> CanonicalTotals:
    """Return report totals.

    Blocks reports carry no trustworthy totals object, so they are summed
    from the non-gap blocks instead.
    """

    if report.kind == "blocks":
        return sum_entries(_normalize_blocks(report))
    return CanonicalTotals.from_payload(report.data.get("totals"))


def _month_key(entry: CanonicalEntry) -> str | None:
    match = _MONTH_BUCKET.fullmatch(entry.label)
    return match.group(1) if match else None


def aggregate_to_monthly(daily_entries: Sequence[CanonicalEntry]) -> list[CanonicalEntry]:
    """Roll day-labelled entries up into months.

    Entries whose label is not ``YYYY-MM-DD`` (or already ``YYYY-MM``) are
    left out of the result.
    """

    return group_entries(daily_entries, _month_key)


__all__ = [
    "UNKNOWN_PROJECT",
    "aggregate_to_monthly",
    "format_block_label",
    "normalize_entries",
    "normalize_totals",
    "parse_timestamp",
]
