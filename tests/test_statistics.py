from __future__ import annotations

import math

import pytest

from usageview.models import CanonicalEntry, DistributionPoint, LabeledValue, ModelBreakdown
from usageview.statistics import (
    STAT_METRIC_KEYS,
    DescriptiveStats,
    build_distribution,
    build_distribution_from_values,
    compute_all_stats,
    compute_all_stats_by_model,
    compute_all_stats_for_visible_models,
    compute_stats,
    extract_metric,
    extract_metric_by_model,
    extract_metric_by_model_with_labels,
    extract_metric_for_visible_models,
    extract_metric_for_visible_models_with_labels,
    extract_metric_with_labels,
    find_rank_for_value,
    find_stat_sources,
    percentile,
)


def _entry(label: str, **kwargs) -> CanonicalEntry:
    return CanonicalEntry(label=label, **kwargs)


def _counted_breakdown(name: str) -> ModelBreakdown:
    return ModelBreakdown(
        name, input_tokens=10, output_tokens=20, cache_creation_tokens=5, cache_read_tokens=3
    )


def _points(*pairs: tuple[float, float]) -> list[DistributionPoint]:
    return [DistributionPoint(rank=rank, value=value) for rank, value in pairs]


VISIBLE_ENTRIES = [
    _entry(
        "day1",
        cost=10,
        model_breakdowns=(ModelBreakdown("modelA", cost=6), ModelBreakdown("modelB", cost=4)),
    ),
    _entry(
        "day2",
        cost=20,
        model_breakdowns=(ModelBreakdown("modelA", cost=12), ModelBreakdown("modelB", cost=8)),
    ),
    _entry("day3", cost=5),
]


class TestPercentile:
    def test_empty_is_zero(self) -> None:
        assert percentile([], 0.5) == 0

    def test_single_value(self) -> None:
        assert percentile([42], 0) == 42
        assert percentile([42], 0.5) == 42
        assert percentile([42], 1) == 42

    def test_bounds_are_min_and_max(self) -> None:
        values = [1, 2, 3, 4, 5]
        assert percentile(values, 0) == 1
        assert percentile(values, 1) == 5

    def test_interpolates_between_ranks(self) -> None:
        assert percentile([1, 2, 3, 4], 0.5) == 2.5
        assert percentile(list(range(1, 11)), 0.9) == pytest.approx(9.1)


class TestComputeStats:
    def test_empty_values(self) -> None:
        stats = compute_stats([])

        assert stats.count == 0
        assert stats.mean == 0
        assert stats.p99 == 0
        assert math.isnan(stats.coefficient_of_variation)
        assert math.isnan(stats.skewness)

    def test_single_value(self) -> None:
        stats = compute_stats([7])

        assert stats.count == 1
        assert stats.min == stats.max == stats.median == 7
        assert stats.standard_deviation == 0
        assert stats.coefficient_of_variation == 0
        assert math.isnan(stats.skewness)

    def test_basic_summary(self) -> None:
        stats = compute_stats([4, 1, 3, 2, 5])

        assert stats.count == 5
        assert stats.sum == 15
        assert stats.mean == 3
        assert stats.median == 3
        assert stats.p25 == 2
        assert stats.p75 == 4
        assert stats.iqr == 2
        assert stats.standard_deviation == pytest.approx(math.sqrt(2.5))
        assert stats.coefficient_of_variation == pytest.approx(math.sqrt(2.5) / 3)
        assert stats.skewness == pytest.approx(0.0)

    def test_does_not_mutate_input(self) -> None:
        values = [3, 1, 2]
        compute_stats(values)
        assert values == [3, 1, 2]

    def test_zero_mean_has_undefined_cv(self) -> None:
        stats = compute_stats([-1, 1])
        assert math.isnan(stats.coefficient_of_variation)

    def test_constant_values_have_undefined_skewness(self) -> None:
        assert math.isnan(compute_stats([2, 2, 2, 2]).skewness)

    def test_detects_right_skew(self) -> None:
        assert compute_stats([1, 1, 1, 1, 1, 1, 1, 100]).skewness > 0

    def test_detects_left_skew(self) -> None:
        assert compute_stats([100, 100, 100, 100, 1]).skewness < 0


def test_extract_metric_and_labels() -> None:
    entries = [_entry("a", cost=1.5, total_tokens=10), _entry("b", cost=2.5, total_tokens=20)]

    assert extract_metric(entries, "cost") == [1.5, 2.5]
    assert extract_metric_with_labels(entries, "total_tokens") == [
        LabeledValue("a", 10),
        LabeledValue("b", 20),
    ]


def test_extract_metric_by_model_skips_entries_without_model() -> None:
    entries = [
        _entry(
            "a",
            model_breakdowns=(
                _counted_breakdown("m"),
            ),
        ),
        _entry("b", model_breakdowns=(ModelBreakdown("other", input_tokens=1),)),
        _entry("c"),
    ]

    assert extract_metric_by_model(entries, "total_tokens", "m") == [38]
    assert extract_metric_by_model_with_labels(entries, "input_tokens", "m") == [
        LabeledValue("a", 10)
    ]


def test_compute_all_stats_covers_every_metric() -> None:
    result = compute_all_stats(
        [_entry("a", cost=1, input_tokens=10), _entry("b", cost=3, input_tokens=30)]
    )

    assert set(result) == set(STAT_METRIC_KEYS)
    assert result["cost"].mean == 2
    assert result["input_tokens"].max == 30


def test_compute_all_stats_by_model() -> None:
    result = compute_all_stats_by_model(VISIBLE_ENTRIES, "modelB")

    assert result["cost"].count == 2
    assert result["cost"].mean == 6


class TestVisibleModels:
    def test_sums_all_visible_models(self) -> None:
        values = extract_metric_for_visible_models(
            VISIBLE_ENTRIES, "cost", {"modelA", "modelB"}, False
        )
        assert values == [10, 20]

    def test_filters_to_single_model(self) -> None:
        values = extract_metric_for_visible_models(VISIBLE_ENTRIES, "cost", {"modelA"}, False)
        assert values == [6, 12]

    def test_includes_other_entries_on_request(self) -> None:
        values = extract_metric_for_visible_models(VISIBLE_ENTRIES, "cost", {"modelA"}, True)
        assert values == [6, 12, 5]

    def test_only_other_when_nothing_matches(self) -> None:
        assert extract_metric_for_visible_models(VISIBLE_ENTRIES, "cost", {"missing"}, True) == [5]
        assert extract_metric_for_visible_models(VISIBLE_ENTRIES, "cost", {"missing"}, False) == []

    def test_total_tokens_come_from_breakdown_counters(self) -> None:
        entries = [
            _entry(
                "x",
                total_tokens=999,
                model_breakdowns=(
                    _counted_breakdown("modelA"),
                ),
            )
        ]
        assert extract_metric_for_visible_models(entries, "total_tokens", {"modelA"}, False) == [38]

    def test_labels_are_kept(self) -> None:
        values = extract_metric_for_visible_models_with_labels(
            VISIBLE_ENTRIES, "cost", {"modelA"}, True
        )
        assert values == [
            LabeledValue("day1", 6),
            LabeledValue("day2", 12),
            LabeledValue("day3", 5),
        ]

    def test_all_stats_for_visible_models(self) -> None:
        result = compute_all_stats_for_visible_models(VISIBLE_ENTRIES, {"modelA"}, False)

        assert set(result) == set(STAT_METRIC_KEYS)
        assert result["cost"].count == 2
        assert result["cost"].mean == 9
        assert result["input_tokens"].count == 2


class TestDistribution:
    def test_empty(self) -> None:
        assert build_distribution_from_values([]) == []

    def test_single_point_ranks_at_hundred(self) -> None:
        assert build_distribution_from_values([42]) == [DistributionPoint(rank=100, value=42)]

    def test_ranks_span_zero_to_hundred(self) -> None:
        points = build_distribution_from_values([30, 10, 20])
        assert points == _points((0, 10), (50, 20), (100, 30))

    def test_ranks_round_half_up(self) -> None:
        points = build_distribution_from_values(list(range(9)))
        assert [point.rank for point in points] == [0, 13, 25, 38, 50, 63, 75, 88, 100]

    def test_build_distribution_reads_entry_metric(self) -> None:
        points = build_distribution([_entry("a", cost=2), _entry("b", cost=1)], "cost")
        assert [point.value for point in points] == [1, 2]


class TestFindStatSources:
    def test_empty_stats_have_no_sources(self) -> None:
        assert find_stat_sources([LabeledValue("a", 0)], DescriptiveStats()) == {}

    def test_matches_exact_values_only(self) -> None:
        labeled = [LabeledValue(label, value) for label, value in zip("abcd", [1, 2, 3, 4])]
        sources = find_stat_sources(labeled, compute_stats([item.value for item in labeled]))

        assert sources["min"] == ["a"]
        assert sources["max"] == ["d"]
        # 2.5 falls between observations
        assert "median" not in sources

    def test_returns_every_matching_label_in_order(self) -> None:
        labeled = [LabeledValue("x", 5), LabeledValue("y", 1), LabeledValue("z", 5)]
        sources = find_stat_sources(labeled, compute_stats([5, 1, 5]))

        assert sources["max"] == ["x", "z"]
        assert sources["median"] == ["x", "z"]


class TestFindRankForValue:
    CURVE = _points((0, 10), (25, 20), (50, 30), (75, 40), (100, 50))

    def test_empty_curve(self) -> None:
        assert find_rank_for_value([], 10) is None

    def test_boundaries_snap(self) -> None:
        assert find_rank_for_value(self.CURVE, 10) == 0
        assert find_rank_for_value(self.CURVE, 5) == 0
        assert find_rank_for_value(self.CURVE, 50) == 100
        assert find_rank_for_value(self.CURVE, 100) == 100

    def test_exact_and_interpolated_values(self) -> None:
        assert find_rank_for_value(self.CURVE, 30) == 50
        assert find_rank_for_value(self.CURVE, 25) == 37.5
        assert find_rank_for_value(self.CURVE, 15) == 12.5

    def test_consecutive_equal_values(self) -> None:
        curve = _points((0, 10), (33, 10), (67, 20), (100, 30))
        assert find_rank_for_value(curve, 10) == 0
        assert find_rank_for_value(curve, 15) == 50

    def test_single_point(self) -> None:
        curve = _points((100, 42))
        assert find_rank_for_value(curve, 42) == 100
        assert find_rank_for_value(curve, 0) == 100
        assert find_rank_for_value(curve, 999) == 100
