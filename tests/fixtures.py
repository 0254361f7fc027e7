"""Shared report payloads in the shape the metering tool emits."""

from __future__ import annotations

import copy
import json
from typing import Any

SONNET = "claude-sonnet-4-20250514"
HAIKU = "claude-haiku-3-20240307"

MB_SONNET: dict[str, Any] = {
    "modelName": SONNET,
    "inputTokens": 500_000,
    "outputTokens": 20_000,
    "cacheCreationTokens": 100_000,
    "cacheReadTokens": 800_000,
    "cost": 2.5,
}

MB_HAIKU: dict[str, Any] = {
    "modelName": HAIKU,
    "inputTokens": 100_000,
    "outputTokens": 5_000,
    "cacheCreationTokens": 10_000,
    "cacheReadTokens": 200_000,
    "cost": 0.3,
}

_COUNTERS = ("inputTokens", "outputTokens", "cacheCreationTokens", "cacheReadTokens", "totalTokens")


def _totals(entries: list[dict[str, Any]]) -> dict[str, Any]:
    totals: dict[str, Any] = {name: sum(entry[name] for entry in entries) for name in _COUNTERS}
    totals["totalCost"] = sum(entry["totalCost"] for entry in entries)
    return totals


_DAILY_ENTRIES: list[dict[str, Any]] = [
    {
        "date": "2025-07-01",
        "inputTokens": 600_000,
        "outputTokens": 25_000,
        "cacheCreationTokens": 110_000,
        "cacheReadTokens": 1_000_000,
        "totalTokens": 1_735_000,
        "totalCost": 2.8,
        "modelsUsed": [SONNET, HAIKU],
        "modelBreakdowns": [MB_SONNET, MB_HAIKU],
    },
    {
        "date": "2025-07-02",
        "inputTokens": 400_000,
        "outputTokens": 15_000,
        "cacheCreationTokens": 50_000,
        "cacheReadTokens": 500_000,
        "totalTokens": 965_000,
        "totalCost": 1.5,
        "modelsUsed": [SONNET],
        "modelBreakdowns": [MB_SONNET],
    },
    {
        "date": "2025-08-01",
        "inputTokens": 200_000,
        "outputTokens": 10_000,
        "cacheCreationTokens": 30_000,
        "cacheReadTokens": 300_000,
        "totalTokens": 540_000,
        "totalCost": 0.9,
        "modelsUsed": [HAIKU],
        "modelBreakdowns": [MB_HAIKU],
    },
]

_WEEKLY_ENTRIES: list[dict[str, Any]] = [
    {
        "week": "2025-06-30",
        "inputTokens": 1_000_000,
        "outputTokens": 40_000,
        "cacheCreationTokens": 160_000,
        "cacheReadTokens": 1_500_000,
        "totalTokens": 2_700_000,
        "totalCost": 4.3,
        "modelsUsed": [SONNET, HAIKU],
        "modelBreakdowns": [MB_SONNET, MB_HAIKU],
    },
]

_MONTHLY_ENTRIES: list[dict[str, Any]] = [
    {
        "month": "2025-07",
        "inputTokens": 1_000_000,
        "outputTokens": 40_000,
        "cacheCreationTokens": 160_000,
        "cacheReadTokens": 1_500_000,
        "totalTokens": 2_700_000,
        "totalCost": 4.3,
        "modelsUsed": [SONNET],
        "modelBreakdowns": [MB_SONNET],
    },
]

_SESSION_REPORT: dict[str, Any] = {
    "sessions": [
        {
            "sessionId": "abc123def456ghi789jkl012mno345",
            "inputTokens": 600_000,
            "outputTokens": 25_000,
            "cacheCreationTokens": 110_000,
            "cacheReadTokens": 1_000_000,
            "totalTokens": 1_735_000,
            "totalCost": 2.8,
            "lastActivity": "2025-07-02T10:00:00Z",
            "modelsUsed": [SONNET],
            "modelBreakdowns": [MB_SONNET],
            "projectPath": "/home/user/my-project",
        },
        {
            "sessionId": "zzz999yyy888xxx777www666vvv555",
            "inputTokens": 100_000,
            "outputTokens": 5_000,
            "cacheCreationTokens": 10_000,
            "cacheReadTokens": 200_000,
            "totalTokens": 315_000,
            "totalCost": 0.3,
            "lastActivity": "2025-07-01T08:00:00Z",
            "modelsUsed": [HAIKU],
            "modelBreakdowns": [MB_HAIKU],
            "projectPath": "Unknown Project",
        },
    ],
    "totals": {
        "inputTokens": 700_000,
        "outputTokens": 30_000,
        "cacheCreationTokens": 120_000,
        "cacheReadTokens": 1_200_000,
        "totalTokens": 2_050_000,
        "totalCost": 3.1,
    },
}


def _block(
    block_id: str,
    start: str,
    end: str,
    *,
    gap: bool,
    counts: tuple[int, int, int, int],
    total: int,
    cost: float,
    models: list[str],
) -> dict[str, Any]:
    return {
        "id": block_id,
        "startTime": start,
        "endTime": end,
        "isActive": False,
        "isGap": gap,
        "tokenCounts": {
            "inputTokens": counts[0],
            "outputTokens": counts[1],
            "cacheCreationInputTokens": counts[2],
            "cacheReadInputTokens": counts[3],
        },
        "totalTokens": total,
        "costUSD": cost,
        "models": models,
    }


_BLOCKS_REPORT: dict[str, Any] = {
    "blocks": [
        _block(
            "block-1",
            "2025-07-01T09:00:00Z",
            "2025-07-01T10:00:00Z",
            gap=False,
            counts=(500_000, 20_000, 100_000, 800_000),
            total=1_420_000,
            cost=2.5,
            models=[SONNET],
        ),
        _block(
            "gap-1",
            "2025-07-01T10:00:00Z",
            "2025-07-01T11:00:00Z",
            gap=True,
            counts=(0, 0, 0, 0),
            total=0,
            cost=0,
            models=[],
        ),
        _block(
            "block-2",
            "2025-07-01T11:00:00Z",
            "2025-07-01T12:00:00Z",
            gap=False,
            counts=(100_000, 5_000, 10_000, 200_000),
            total=315_000,
            cost=0.3,
            models=[HAIKU],
        ),
    ],
    "totals": {},
}

_CODEX_DAILY_REPORT: dict[str, Any] = {
    "daily": [
        {
            "date": "Sep 16, 2025",
            "inputTokens": 130_000,
            "cachedInputTokens": 90_000,
            "outputTokens": 4_000,
            "reasoningOutputTokens": 2_000,
            "totalTokens": 134_000,
            "costUSD": 0.18388725,
            "models": {
                "gpt-5-codex": {
                    "inputTokens": 130_000,
                    "cachedInputTokens": 90_000,
                    "outputTokens": 4_000,
                    "reasoningOutputTokens": 2_000,
                    "totalTokens": 134_000,
                    "isFallback": False,
                }
            },
        }
    ],
    "totals": {
        "inputTokens": 130_000,
        "cachedInputTokens": 90_000,
        "outputTokens": 4_000,
        "reasoningOutputTokens": 2_000,
        "totalTokens": 134_000,
        "costUSD": 0.18388725,
    },
}


def daily_report() -> dict[str, Any]:
    return {"daily": copy.deepcopy(_DAILY_ENTRIES), "totals": _totals(_DAILY_ENTRIES)}


def weekly_report() -> dict[str, Any]:
    return {"weekly": copy.deepcopy(_WEEKLY_ENTRIES), "totals": _totals(_WEEKLY_ENTRIES)}


def monthly_report() -> dict[str, Any]:
    return {"monthly": copy.deepcopy(_MONTHLY_ENTRIES), "totals": _totals(_MONTHLY_ENTRIES)}


def session_report() -> dict[str, Any]:
    return copy.deepcopy(_SESSION_REPORT)


def blocks_report() -> dict[str, Any]:
    return copy.deepcopy(_BLOCKS_REPORT)


def codex_daily_report() -> dict[str, Any]:
    return copy.deepcopy(_CODEX_DAILY_REPORT)


def single_day_report(
    date: str, *, input_tokens: int, cost: float, model: str = SONNET
) -> dict[str, Any]:
    entry = {
        "date": date,
        "inputTokens": input_tokens,
        "outputTokens": 0,
        "cacheCreationTokens": 0,
        "cacheReadTokens": 0,
        "totalTokens": input_tokens,
        "totalCost": cost,
        "modelsUsed": [model],
        "modelBreakdowns": [
            {
                "modelName": model,
                "inputTokens": input_tokens,
                "outputTokens": 0,
                "cacheCreationTokens": 0,
                "cacheReadTokens": 0,
                "cost": cost,
            }
        ],
    }
    return {"daily": [entry], "totals": _totals([entry])}


def as_json(payload: Any, *, indent: int | None = None) -> str:
    return json.dumps(payload, indent=indent)
