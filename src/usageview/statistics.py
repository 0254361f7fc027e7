"""Descriptive statistics over canonical entries.

Every public helper works on plain sequences of entries and returns new
values; nothing here mutates its inputs.  Metric keys are the snake_case
attribute names shared by :class:`CanonicalEntry` and
:class:`ModelBreakdown` (a breakdown's ``total_tokens`` is derived from its
four counters).
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import AbstractSet, Literal, Sequence

from .models import CanonicalEntry, DistributionPoint, LabeledValue, ModelBreakdown

StatMetricKey = Literal[
    "cost",
    "total_tokens",
    "input_tokens",
    "output_tokens",
    "cache_creation_tokens",
    "cache_read_tokens",
]

STAT_METRIC_KEYS: tuple[StatMetricKey, ...] = (
    "cost",
    "total_tokens",
    "input_tokens",
    "output_tokens",
    "cache_creation_tokens",
    "cache_read_tokens",
)

# Statistics that may coincide with an observed value.
SOURCE_STAT_FIELDS: tuple[str, ...] = ("min", "max", "median", "p75", "p90", "p95", "p99")


@dataclass(frozen=True)
class DescriptiveStats:
    count: int = 0
    min: float = 0.0
    max: float = 0.0
    sum: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    standard_deviation: float = 0.0
    coefficient_of_variation: float = math.nan
    skewness: float = math.nan
    p25: float = 0.0
    p75: float = 0.0
    p90: float = 0.0
    p95: float = 0.0
    p99: float = 0.0
    iqr: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolation percentile of pre-sorted ``sorted_values``.

    ``p`` is a fraction in ``[0, 1]``.  Empty input yields ``0``.
    """

    n = len(sorted_values)
    if n == 0:
        return 0
    if n == 1:
        return sorted_values[0]

    rank = p * (n - 1)
    lo = math.floor(rank)
    hi = math.ceil(rank)
    frac = rank - lo
    return sorted_values[lo] + frac * (sorted_values[hi] - sorted_values[lo])


def compute_stats(values: Sequence[float]) -> DescriptiveStats:
    """Summarize ``values`` (which are left untouched)."""

    n = len(values)
    if n == 0:
        return DescriptiveStats()

    ordered = sorted(values)
    total = sum(ordered)
    mean = total / n

    sum_sq_diff = sum((value - mean) ** 2 for value in ordered)
    variance = sum_sq_diff / (n - 1) if n > 1 else 0.0
    std_dev = math.sqrt(variance)

    cv = std_dev / mean if mean != 0 else math.nan

    if n < 3 or std_dev == 0:
        skewness = math.nan
    else:
        sum_cubes = sum(((value - mean) / std_dev) ** 3 for value in ordered)
        skewness = (n / ((n - 1) * (n - 2))) * sum_cubes

    p25 = percentile(ordered, 0.25)
    p75 = percentile(ordered, 0.75)
    return DescriptiveStats(
        count=n,
        min=ordered[0],
        max=ordered[-1],
        sum=total,
        mean=mean,
        median=percentile(ordered, 0.5),
        standard_deviation=std_dev,
        coefficient_of_variation=cv,
        skewness=skewness,
        p25=p25,
        p75=p75,
        p90=percentile(ordered, 0.9),
        p95=percentile(ordered, 0.95),
        p99=percentile(ordered, 0.99),
        iqr=p75 - p25,
    )


def _breakdown_metric(breakdown: ModelBreakdown, key: StatMetricKey) -> float:
    return getattr(breakdown, key)


def _find_breakdown(entry: CanonicalEntry, model_name: str) -> ModelBreakdown | None:
    for breakdown in entry.model_breakdowns or ():
        if breakdown.model_name == model_name:
            return breakdown
    return None


def extract_metric(entries: Sequence[CanonicalEntry], key: StatMetricKey) -> list[float]:
    return [getattr(entry, key) for entry in entries]


def extract_metric_with_labels(
    entries: Sequence[CanonicalEntry], key: StatMetricKey
) -> list[LabeledValue]:
    return [LabeledValue(entry.label, getattr(entry, key)) for entry in entries]


def extract_metric_by_model_with_labels(
    entries: Sequence[CanonicalEntry], key: StatMetricKey, model_name: str
) -> list[LabeledValue]:
    """Values of ``key`` for ``model_name``, skipping entries where it is absent."""

    values = []
    for entry in entries:
        breakdown = _find_breakdown(entry, model_name)
        if breakdown is not None:
            values.append(LabeledValue(entry.label, _breakdown_metric(breakdown, key)))
    return values


def extract_metric_by_model(
    entries: Sequence[CanonicalEntry], key: StatMetricKey, model_name: str
) -> list[float]:
    return [item.value for item in extract_metric_by_model_with_labels(entries, key, model_name)]


def compute_all_stats(entries: Sequence[CanonicalEntry]) -> dict[StatMetricKey, DescriptiveStats]:
    return {key: compute_stats(extract_metric(entries, key)) for key in STAT_METRIC_KEYS}


def compute_all_stats_by_model(
    entries: Sequence[CanonicalEntry], model_name: str
) -> dict[StatMetricKey, DescriptiveStats]:
    return {
        key: compute_stats(extract_metric_by_model(entries, key, model_name))
        for key in STAT_METRIC_KEYS
    }


def extract_metric_for_visible_models_with_labels(
    entries: Sequence[CanonicalEntry],
    key: StatMetricKey,
    visible_models: AbstractSet[str],
    include_other: bool,
) -> list[LabeledValue]:
    """Per-entry sum of ``key`` across the visible models.

    Entries without breakdowns stand for the ``Other`` series and contribute
    their own aggregate value only when ``include_other`` is set.  Entries
    whose breakdowns mention none of the visible models are skipped.
    """

    values = []
    for entry in entries:
        if not entry.model_breakdowns:
            if include_other:
                values.append(LabeledValue(entry.label, getattr(entry, key)))
            continue

        matched = [mb for mb in entry.model_breakdowns if mb.model_name in visible_models]
        if matched:
            values.append(
                LabeledValue(entry.label, sum(_breakdown_metric(mb, key) for mb in matched))
            )
    return values


def extract_metric_for_visible_models(
    entries: Sequence[CanonicalEntry],
    key: StatMetricKey,
    visible_models: AbstractSet[str],
    include_other: bool,
) -> list[float]:
    return [
        item.value
        for item in extract_metric_for_visible_models_with_labels(
            entries, key, visible_models, include_other
        )
    ]


def compute_all_stats_for_visible_models(
    entries: Sequence[CanonicalEntry],
    visible_models: AbstractSet[str],
    include_other: bool,
) -> dict[StatMetricKey, DescriptiveStats]:
    return {
        key: compute_stats(
            extract_metric_for_visible_models(entries, key, visible_models, include_other)
        )
        for key in STAT_METRIC_KEYS
    }


def build_distribution_from_values(values: Sequence[float]) -> list[DistributionPoint]:
    """Sort ``values`` and assign each a percentile rank from 0 to 100."""

    ordered = sorted(values)
    n = len(ordered)
    if n == 1:
        return [DistributionPoint(rank=100, value=ordered[0])]
    return [
        DistributionPoint(rank=_round_half_up(index / (n - 1) * 100), value=value)
        for index, value in enumerate(ordered)
    ]


def build_distribution(
    entries: Sequence[CanonicalEntry], key: StatMetricKey
) -> list[DistributionPoint]:
    return build_distribution_from_values(extract_metric(entries, key))


def find_stat_sources(
    labeled_values: Sequence[LabeledValue], stats: DescriptiveStats
) -> dict[str, list[str]]:
    """Map statistic names to the labels whose value equals that statistic.

    Matching is exact, so an interpolated percentile that falls between two
    observations has no entry in the result.
    """

    if stats.count == 0:
        return {}

    sources: dict[str, list[str]] = {}
    for field_name in SOURCE_STAT_FIELDS:
        target = getattr(stats, field_name)
        labels = [item.label for item in labeled_values if item.value == target]
        if labels:
            sources[field_name] = labels
    return sources


def find_rank_for_value(points: Sequence[DistributionPoint], value: float) -> float | None:
    """Invert a distribution: the percentile rank at which ``value`` sits.

    Values outside the curve snap to the boundary ranks; values between two
    points interpolate linearly between their ranks.
    """

    if not points:
        return None

    first, last = points[0], points[-1]
    if value <= first.value:
        return first.rank
    if value >= last.value:
        return last.rank

    for lo, hi in zip(points, points[1:]):
        if lo.value <= value <= hi.value:
            if hi.value == lo.value:
                return lo.rank
            fraction = (value - lo.value) / (hi.value - lo.value)
            return lo.rank + fraction * (hi.rank - lo.rank)
    return last.rank


__all__ = [
    "STAT_METRIC_KEYS",
    "DescriptiveStats",
    "StatMetricKey",
    "build_distribution",
    "build_distribution_from_values",
    "compute_all_stats",
    "compute_all_stats_by_model",
    "compute_all_stats_for_visible_models",
    "compute_stats",
    "extract_metric",
    "extract_metric_by_model",
    "extract_metric_by_model_with_labels",
    "extract_metric_for_visible_models",
    "extract_metric_for_visible_models_with_labels",
    "extract_metric_with_labels",
    "find_rank_for_value",
    "find_stat_sources",
    "percentile",
]
