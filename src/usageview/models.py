"""Canonical value objects shared by the normalizer, aggregator and statistics.

Usage reports arrive in five shapes (daily, weekly, monthly, session and
blocks) with slightly different field names.  Everything downstream of the
detector works on the uniform records defined here.  Wire JSON keeps the
external camelCase names; the Python attributes are snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

ReportKind = Literal["daily", "weekly", "monthly", "session", "blocks"]

# Detection order matters: the first array-valued key wins.
REPORT_KEYS: tuple[tuple[str, ReportKind], ...] = (
    ("daily", "daily"),
    ("weekly", "weekly"),
    ("monthly", "monthly"),
    ("sessions", "session"),
    ("blocks", "blocks"),
)


def coerce_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        if isinstance(value, (int, float)):
            return int(value)
        if isinstance(value, str) and value.strip():
            return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return 0


def coerce_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str) and value.strip():
            return float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0


def coerce_str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class ModelBreakdown:
    """Per-model slice of a usage entry."""

    model_name: str
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    cost: float = 0.0

    @property
    def total_tokens(self) -> int:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_creation_tokens
            + self.cache_read_tokens
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ModelBreakdown":
        return cls(
            model_name=str(payload.get("modelName", "")),
            input_tokens=coerce_int(payload.get("inputTokens")),
            output_tokens=coerce_int(payload.get("outputTokens")),
            cache_creation_tokens=coerce_int(payload.get("cacheCreationTokens")),
            cache_read_tokens=coerce_int(payload.get("cacheReadTokens")),
            cost=coerce_float(payload.get("cost")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "modelName": self.model_name,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "cacheCreationTokens": self.cache_creation_tokens,
            "cacheReadTokens": self.cache_read_tokens,
            "cost": self.cost,
        }


def breakdowns_from_payload(value: Any) -> tuple[ModelBreakdown, ...] | None:
    """Parse a ``modelBreakdowns`` array; ``None`` when the field is absent."""

    if not isinstance(value, (list, tuple)):
        return None
    return tuple(
        ModelBreakdown.from_payload(item) for item in value if isinstance(item, Mapping)
    )


@dataclass(frozen=True)
class CanonicalEntry:
    """One time bucket, session or block with a uniform field set."""

    label: str
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_tokens: int = 0
    cost: float = 0.0
    models: tuple[str, ...] = ()
    model_breakdowns: tuple[ModelBreakdown, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "label": self.label,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "cacheCreationTokens": self.cache_creation_tokens,
            "cacheReadTokens": self.cache_read_tokens,
            "totalTokens": self.total_tokens,
            "cost": self.cost,
            "models": list(self.models),
        }
        if self.model_breakdowns is not None:
            payload["modelBreakdowns"] = [mb.to_dict() for mb in self.model_breakdowns]
        return payload


@dataclass(frozen=True)
class CanonicalTotals:
    """Aggregate token counters and cost for a whole report."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0

    @classmethod
    def from_payload(cls, payload: Any) -> "CanonicalTotals":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            input_tokens=coerce_int(payload.get("inputTokens")),
            output_tokens=coerce_int(payload.get("outputTokens")),
            cache_creation_tokens=coerce_int(payload.get("cacheCreationTokens")),
            cache_read_tokens=coerce_int(payload.get("cacheReadTokens")),
            total_tokens=coerce_int(payload.get("totalTokens")),
            total_cost=coerce_float(payload.get("totalCost")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "cacheCreationTokens": self.cache_creation_tokens,
            "cacheReadTokens": self.cache_read_tokens,
            "totalTokens": self.total_tokens,
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class DetectedReport:
    """A parsed report tagged with its kind.

    ``data`` is the original mapping, untouched; no deep validation happens
    at detection time.
    """

    kind: ReportKind
    data: Mapping[str, Any]

    @property
    def records(self) -> list[Any]:
        key = next(key for key, kind in REPORT_KEYS if kind == self.kind)
        return list(self.data[key])


@dataclass(frozen=True)
class DashboardData:
    """Result of parsing and merging one or more sources."""

    entries: tuple[CanonicalEntry, ...]
    totals: CanonicalTotals
    report_type: ReportKind
    source_labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceInput:
    """One labeled raw input (file, paste or stdin) prior to merging."""

    label: str = ""
    content: str = ""
    enabled: bool = True

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()

    @property
    def is_active(self) -> bool:
        return self.enabled and not self.is_blank


def active_inputs(inputs: Sequence[SourceInput]) -> list[SourceInput]:
    """Return inputs that are enabled and carry non-blank content."""

    return [item for item in inputs if item.is_active]


@dataclass(frozen=True)
class LabeledValue:
    """A metric value paired with the label of the entry it came from."""

    label: str
    value: float


@dataclass(frozen=True)
class DistributionPoint:
    """One point on a sorted distribution curve (rank is 0..100)."""

    rank: float
    value: float


@dataclass(frozen=True)
class ParseResult:
    """Non-raising envelope: at most one of ``data``/``error`` is set."""

    data: DashboardData | None = None
    error: str | None = None


__all__ = [
    "REPORT_KEYS",
    "ReportKind",
    "ModelBreakdown",
    "CanonicalEntry",
    "CanonicalTotals",
    "DetectedReport",
    "DashboardData",
    "SourceInput",
    "LabeledValue",
    "DistributionPoint",
    "ParseResult",
    "active_inputs",
    "breakdowns_from_payload",
    "coerce_float",
    "coerce_int",
    "coerce_str_tuple",
]
