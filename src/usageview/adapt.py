"""Rewrite alternate vendor report shapes into the canonical report shape.

The only alternate shape handled today is the per-day report emitted by the
Codex flavour of the metering tool: it uses ``costUSD`` instead of
``totalCost``, human-readable dates, a single ``cachedInputTokens`` counter
and a ``models`` mapping keyed by model name.  Adaptation runs before
detection so that downstream code only ever sees the canonical shape.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

_VENDOR_DATE_FORMATS: tuple[str, ...] = ("%b %d, %Y", "%B %d, %Y")


def _or_zero(payload: Mapping[str, Any], key: str) -> Any:
    value = payload.get(key)
    return 0 if value is None else value


def parse_vendor_date(value: Any) -> Any:
    """Convert ``"Sep 16, 2025"`` into ``"2025-09-16"``.

    Values that are not strings or do not parse are returned unchanged.
    """

    if not isinstance(value, str):
        return value
    candidate = value.strip()
    for fmt in _VENDOR_DATE_FORMATS:
        try:
            parsed = datetime.strptime(candidate, fmt)
        except ValueError:
            continue
        return parsed.strftime("%Y-%m-%d")
    return value


def is_vendor_daily(data: Mapping[str, Any]) -> bool:
    daily = data.get("daily")
    if not isinstance(daily, list) or not daily:
        return False
    first = daily[0]
    if not isinstance(first, Mapping):
        return False
    return "costUSD" in first and "totalCost" not in first


def _adapt_entry(entry: Mapping[str, Any]) -> dict[str, Any]:
    raw_models = entry.get("models")
    models: Mapping[str, Any] = raw_models if isinstance(raw_models, Mapping) else {}
    breakdowns = []
    for name, counts in models.items():
        counts = counts if isinstance(counts, Mapping) else {}
        breakdowns.append(
            {
                "modelName": name,
                "inputTokens": _or_zero(counts, "inputTokens"),
                "outputTokens": _or_zero(counts, "outputTokens"),
                "cacheCreationTokens": 0,
                "cacheReadTokens": _or_zero(counts, "cachedInputTokens"),
                "cost": 0,
            }
        )

    return {
        "date": parse_vendor_date(entry.get("date")),
        "inputTokens": _or_zero(entry, "inputTokens"),
        "outputTokens": _or_zero(entry, "outputTokens"),
        "cacheCreationTokens": 0,
        "cacheReadTokens": _or_zero(entry, "cachedInputTokens"),
        "totalTokens": _or_zero(entry, "totalTokens"),
        "totalCost": _or_zero(entry, "costUSD"),
        "modelsUsed": list(models.keys()),
        "modelBreakdowns": breakdowns,
    }


def _adapt_totals(totals: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "inputTokens": _or_zero(totals, "inputTokens"),
        "outputTokens": _or_zero(totals, "outputTokens"),
        "cacheCreationTokens": 0,
        "cacheReadTokens": _or_zero(totals, "cachedInputTokens"),
        "totalTokens": _or_zero(totals, "totalTokens"),
        "totalCost": _or_zero(totals, "costUSD"),
    }


def adapt_report(data: Any) -> Any:
    """Return ``data`` in canonical shape.

    Anything that is not the alternate vendor shape (non-mappings, lists,
    already-canonical reports) is returned as the very same object.
    """

    if not isinstance(data, Mapping) or not is_vendor_daily(data):
        return data

    daily = [
        _adapt_entry(entry if isinstance(entry, Mapping) else {}) for entry in data["daily"]
    ]
    totals = data.get("totals")
    if isinstance(totals, Mapping):
        totals = _adapt_totals(totals)
    return {**data, "daily": daily, "totals": totals}


__all__ = ["adapt_report", "is_vendor_daily", "parse_vendor_date"]
