"""Per-token-type cost estimates from a static model price table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from .models import CanonicalEntry

TOKENS_PER_PRICE_UNIT = 1_000_000

_FAMILY_PATTERN = re.compile(r"^claude-(.+)-\d{8}$")


@dataclass(frozen=True)
class TokenPricing:
    """USD prices per million tokens."""

    input: float
    output: float
    cache_write: float
    cache_read: float


@dataclass(frozen=True)
class CostByTokenType:
    input_cost: float = 0.0
    output_cost: float = 0.0
    cache_write_cost: float = 0.0
    cache_read_cost: float = 0.0

    def __add__(self, other: "CostByTokenType") -> "CostByTokenType":
        return CostByTokenType(
            input_cost=self.input_cost + other.input_cost,
            output_cost=self.output_cost + other.output_cost,
            cache_write_cost=self.cache_write_cost + other.cache_write_cost,
            cache_read_cost=self.cache_read_cost + other.cache_read_cost,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "inputCost": self.input_cost,
            "outputCost": self.output_cost,
            "cacheWriteCost": self.cache_write_cost,
            "cacheReadCost": self.cache_read_cost,
        }


_OPUS_CURRENT = TokenPricing(input=5, output=25, cache_write=6.25, cache_read=0.5)
_OPUS_LEGACY = TokenPricing(input=15, output=75, cache_write=18.75, cache_read=1.5)
_SONNET = TokenPricing(input=3, output=15, cache_write=3.75, cache_read=0.3)
_HAIKU_4_5 = TokenPricing(input=1, output=5, cache_write=1.25, cache_read=0.1)
_HAIKU_3_5 = TokenPricing(input=0.8, output=4, cache_write=1, cache_read=0.08)
_HAIKU_3 = TokenPricing(input=0.25, output=1.25, cache_write=0.3, cache_read=0.03)

# Family key -> pricing. Legacy families are listed under both orderings
# ("sonnet-3-5" and "3-5-sonnet").
PRICING_MAP: Mapping[str, TokenPricing] = MappingProxyType(
    {
        "opus-4-6": _OPUS_CURRENT,
        "opus-4-5": _OPUS_CURRENT,
        "opus-4-1": _OPUS_LEGACY,
        "opus-4": _OPUS_LEGACY,
        "sonnet-4-6": _SONNET,
        "sonnet-4-5": _SONNET,
        "sonnet-4": _SONNET,
        "sonnet-3-7": _SONNET,
        "3-7-sonnet": _SONNET,
        "sonnet-3-5": _SONNET,
        "3-5-sonnet": _SONNET,
        "haiku-4-5": _HAIKU_4_5,
        "haiku-3-5": _HAIKU_3_5,
        "3-5-haiku": _HAIKU_3_5,
        "opus-3": _OPUS_LEGACY,
        "3-opus": _OPUS_LEGACY,
        "sonnet-3": _SONNET,
        "3-sonnet": _SONNET,
        "haiku-3": _HAIKU_3,
        "3-haiku": _HAIKU_3,
    }
)


def family_key(model_name: str) -> str:
    """``"claude-sonnet-4-5-20250929"`` -> ``"sonnet-4-5"``; other names pass through."""

    match = _FAMILY_PATTERN.match(model_name)
    return match.group(1) if match else model_name


def get_token_pricing(model_name: str) -> TokenPricing | None:
    return PRICING_MAP.get(family_key(model_name))


def _price(
    pricing: TokenPricing,
    input_tokens: int,
    output_tokens: int,
    cache_creation_tokens: int,
    cache_read_tokens: int,
) -> CostByTokenType:
    return CostByTokenType(
        input_cost=input_tokens * pricing.input / TOKENS_PER_PRICE_UNIT,
        output_cost=output_tokens * pricing.output / TOKENS_PER_PRICE_UNIT,
        cache_write_cost=cache_creation_tokens * pricing.cache_write / TOKENS_PER_PRICE_UNIT,
        cache_read_cost=cache_read_tokens * pricing.cache_read / TOKENS_PER_PRICE_UNIT,
    )


def calculate_cost_by_token_type(entry: CanonicalEntry) -> CostByTokenType | None:
    """Estimate the entry's cost split by token type.

    With breakdowns, every priced model contributes and unpriced models are
    skipped (``None`` when no model is priced).  Without breakdowns the entry
    is only priced when it names exactly one model.
    """

    if entry.model_breakdowns:
        total: CostByTokenType | None = None
        for breakdown in entry.model_breakdowns:
            pricing = get_token_pricing(breakdown.model_name)
            if pricing is None:
                continue
            cost = _price(
                pricing,
                breakdown.input_tokens,
                breakdown.output_tokens,
                breakdown.cache_creation_tokens,
                breakdown.cache_read_tokens,
            )
            total = cost if total is None else total + cost
        return total

    if len(entry.models) != 1:
        return None
    pricing = get_token_pricing(entry.models[0])
    if pricing is None:
        return None
    return _price(
        pricing,
        entry.input_tokens,
        entry.output_tokens,
        entry.cache_creation_tokens,
        entry.cache_read_tokens,
    )


@dataclass(frozen=True)
class CostByTokenTypeRow:
    label: str
    costs: CostByTokenType

    def to_dict(self) -> dict[str, object]:
        return {"label": self.label, **self.costs.to_dict()}


def build_cost_by_token_type(entries: Sequence[CanonicalEntry]) -> list[CostByTokenTypeRow]:
    """One row per entry; entries that cannot be priced get zero costs."""

    return [
        CostByTokenTypeRow(
            label=entry.label,
            costs=calculate_cost_by_token_type(entry) or CostByTokenType(),
        )
        for entry in entries
    ]


__all__ = [
    "PRICING_MAP",
    "CostByTokenType",
    "CostByTokenTypeRow",
    "TokenPricing",
    "build_cost_by_token_type",
    "calculate_cost_by_token_type",
    "family_key",
    "get_token_pricing",
]
