"""Generic grouping and summation over canonical entries.

A single reducer backs every roll-up in the package: monthly aggregation,
multi-source merging and per-model breakdown totals.  What gets summed,
unioned and merged by key is declared once in the field tuples below.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Sequence

from .models import CanonicalEntry, CanonicalTotals, ModelBreakdown

ENTRY_SUM_FIELDS: tuple[str, ...] = (
    "input_tokens",
    "output_tokens",
    "cache_creation_tokens",
    "cache_read_tokens",
    "total_tokens",
    "cost",
)

BREAKDOWN_SUM_FIELDS: tuple[str, ...] = (
    "input_tokens",
    "output_tokens",
    "cache_creation_tokens",
    "cache_read_tokens",
    "cost",
)

KeyFn = Callable[[CanonicalEntry], str | None]


class _BreakdownAccumulator:
    """Merge breakdown records by model name, preserving first-seen order."""

    def __init__(self) -> None:
        self._records: dict[str, ModelBreakdown] = {}

    def add(self, breakdowns: Iterable[ModelBreakdown]) -> None:
        for breakdown in breakdowns:
            existing = self._records.get(breakdown.model_name)
            if existing is None:
                self._records[breakdown.model_name] = breakdown
                continue
            self._records[breakdown.model_name] = replace(
                existing,
                **{
                    name: getattr(existing, name) + getattr(breakdown, name)
                    for name in BREAKDOWN_SUM_FIELDS
                },
            )

    def build(self) -> tuple[ModelBreakdown, ...]:
        return tuple(self._records.values())


class _EntryBucket:
    def __init__(self) -> None:
        self.sums: dict[str, int | float] = {name: 0 for name in ENTRY_SUM_FIELDS}
        self.models: dict[str, None] = {}
        self.breakdowns = _BreakdownAccumulator()
        self.has_breakdowns = False

    def add(self, entry: CanonicalEntry) -> None:
        for name in ENTRY_SUM_FIELDS:
            self.sums[name] += getattr(entry, name)
        for model in entry.models:
            self.models.setdefault(model, None)
        if entry.model_breakdowns is not None:
            self.has_breakdowns = True
            self.breakdowns.add(entry.model_breakdowns)

    def build(self, label: str) -> CanonicalEntry:
        return CanonicalEntry(
            label=label,
            input_tokens=int(self.sums["input_tokens"]),
            output_tokens=int(self.sums["output_tokens"]),
            cache_creation_tokens=int(self.sums["cache_creation_tokens"]),
            cache_read_tokens=int(self.sums["cache_read_tokens"]),
            total_tokens=int(self.sums["total_tokens"]),
            cost=float(self.sums["cost"]),
            models=tuple(self.models),
            model_breakdowns=self.breakdowns.build() if self.has_breakdowns else None,
        )


def group_entries(entries: Iterable[CanonicalEntry], key_fn: KeyFn) -> list[CanonicalEntry]:
    """Group ``entries`` by ``key_fn`` and collapse each group into one entry.

    Entries whose key is ``None`` are dropped.  Numeric counters are summed,
    model names are unioned and breakdowns are merged by model name.  The
    merged ``model_breakdowns`` is ``None`` only when no member carried any.
    Results are ordered by key using plain code-point comparison.
    """

    buckets: dict[str, _EntryBucket] = {}
    for entry in entries:
        key = key_fn(entry)
        if key is None:
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _EntryBucket()
        bucket.add(entry)

    return [buckets[key].build(key) for key in sorted(buckets)]


def sum_entries(entries: Iterable[CanonicalEntry]) -> CanonicalTotals:
    """Sum every numeric counter across ``entries``."""

    sums: dict[str, int | float] = {name: 0 for name in ENTRY_SUM_FIELDS}
    for entry in entries:
        for name in ENTRY_SUM_FIELDS:
            sums[name] += getattr(entry, name)
    return CanonicalTotals(
        input_tokens=int(sums["input_tokens"]),
        output_tokens=int(sums["output_tokens"]),
        cache_creation_tokens=int(sums["cache_creation_tokens"]),
        cache_read_tokens=int(sums["cache_read_tokens"]),
        total_tokens=int(sums["total_tokens"]),
        total_cost=float(sums["cost"]),
    )


def aggregate_model_breakdowns(entries: Sequence[CanonicalEntry]) -> list[ModelBreakdown]:
    """Merge breakdowns across ``entries`` by model name, in first-seen order."""

    accumulator = _BreakdownAccumulator()
    for entry in entries:
        if entry.model_breakdowns:
            accumulator.add(entry.model_breakdowns)
    return list(accumulator.build())


__all__ = [
    "BREAKDOWN_SUM_FIELDS",
    "ENTRY_SUM_FIELDS",
    "aggregate_model_breakdowns",
    "group_entries",
    "sum_entries",
]
