"""Per-model series and rows for stacked charts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from .models import CanonicalEntry
from .pricing import family_key

OTHER_SERIES = "Other"

MODEL_COLORS: tuple[str, ...] = (
    "#3b82f6",
    "#22c55e",
    "#f97316",
    "#a855f7",
    "#14b8a6",
    "#ef4444",
)

ModelTokenType = Literal[
    "input_tokens",
    "output_tokens",
    "cache_creation_tokens",
    "cache_read_tokens",
]

ChartRow = dict[str, str | float]


@dataclass(frozen=True)
class SeriesItem:
    key: str
    label: str
    color: str


def shorten_model_name(name: str) -> str:
    return family_key(name)


def collect_models(entries: Sequence[CanonicalEntry]) -> list[str]:
    """Sorted union of model names found in breakdowns."""

    names: set[str] = set()
    for entry in entries:
        for breakdown in entry.model_breakdowns or ():
            names.add(breakdown.model_name)
    return sorted(names)


def build_model_series(
    all_models: Sequence[str],
    entries: Sequence[CanonicalEntry],
    colors: Sequence[str] = MODEL_COLORS,
) -> list[SeriesItem]:
    """One series per model, plus ``Other`` when some entry has no breakdowns."""

    series = [
        SeriesItem(key=model, label=shorten_model_name(model), color=colors[index % len(colors)])
        for index, model in enumerate(all_models)
    ]
    if any(not entry.model_breakdowns for entry in entries):
        series.append(
            SeriesItem(
                key=OTHER_SERIES,
                label=OTHER_SERIES,
                color=colors[len(series) % len(colors)],
            )
        )
    return series


def _rows_by_model(entries: Sequence[CanonicalEntry], attribute: str) -> list[ChartRow]:
    rows: list[ChartRow] = []
    for entry in entries:
        row: ChartRow = {"label": entry.label}
        if entry.model_breakdowns:
            for breakdown in entry.model_breakdowns:
                row[breakdown.model_name] = getattr(breakdown, attribute)
        else:
            row[OTHER_SERIES] = getattr(entry, attribute)
        rows.append(row)
    return rows


def build_cost_by_model(entries: Sequence[CanonicalEntry]) -> list[ChartRow]:
    return _rows_by_model(entries, "cost")


def build_token_type_by_model(
    entries: Sequence[CanonicalEntry], token_type: ModelTokenType
) -> list[ChartRow]:
    return _rows_by_model(entries, token_type)


__all__ = [
    "MODEL_COLORS",
    "OTHER_SERIES",
    "SeriesItem",
    "build_cost_by_model",
    "build_model_series",
    "build_token_type_by_model",
    "collect_models",
    "shorten_model_name",
]
