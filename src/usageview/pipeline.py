"""Turn labeled raw inputs into a single dashboard dataset."""

from __future__ import annotations

from typing import Any, Sequence

from .adapt import adapt_report
from .aggregate import sum_entries
from .codec import parse_json
from .core.errors import ApplicationError, MergeError, ParseError
from .core.logging import get_logger
from .detect import detect_report
from .merge import merge_normalized_entries
from .models import DashboardData, DetectedReport, ParseResult, SourceInput, active_inputs
from .normalize import normalize_entries, normalize_totals

logger = get_logger(__name__)

MERGE_MISMATCH_PREFIX = "Cannot merge different report types: "


def _parse_json(source: SourceInput) -> Any:
    try:
        return parse_json(source.content)
    except ValueError as exc:
        raise ParseError(str(exc), details={"label": source.label}) from exc


def _detect_all(value: Any) -> list[DetectedReport]:
    if isinstance(value, list):
        return [detect_report(adapt_report(item)) for item in value]
    return [detect_report(adapt_report(value))]


def load_dashboard(inputs: Sequence[SourceInput]) -> DashboardData | None:
    """Parse, detect, normalize and merge ``inputs``.

    Blank and disabled inputs are skipped; when nothing is left ``None`` is
    returned.  All inputs are parsed before any is detected, so the first
    syntax error in input order wins.  Raises :class:`ParseError`,
    :class:`FormatError` or :class:`MergeError`.
    """

    sources = active_inputs(inputs)
    if not sources:
        logger.debug("No active inputs to parse")
        return None

    parsed = [_parse_json(source) for source in sources]

    reports: list[DetectedReport] = []
    for source, value in zip(sources, parsed):
        detected = _detect_all(value)
        logger.debug(
            "Detected reports",
            source=source.label or None,
            report_type=",".join(report.kind for report in detected) or None,
            count=len(detected),
        )
        reports.extend(detected)

    if not reports:
        # Every source was an empty JSON array.
        return None

    kinds = list(dict.fromkeys(report.kind for report in reports))
    if len(kinds) > 1:
        raise MergeError(MERGE_MISMATCH_PREFIX + ", ".join(kinds), details={"kinds": kinds})

    labels = tuple(source.label for source in sources if source.label)

    if len(reports) == 1:
        report = reports[0]
        return DashboardData(
            entries=tuple(normalize_entries(report)),
            totals=normalize_totals(report),
            report_type=report.kind,
            source_labels=labels,
        )

    entries = merge_normalized_entries([normalize_entries(report) for report in reports])
    logger.debug(
        "Merged reports",
        report_type=kinds[0],
        reports=len(reports),
        entries=len(entries),
    )
    return DashboardData(
        entries=tuple(entries),
        totals=sum_entries(entries),
        report_type=kinds[0],
        source_labels=labels,
    )


def parse_inputs(inputs: Sequence[SourceInput]) -> ParseResult:
    """Non-raising wrapper around :func:`load_dashboard`."""

    try:
        data = load_dashboard(inputs)
    except ApplicationError as exc:
        logger.debug("Failed to parse inputs", error=exc.__class__.__name__)
        return ParseResult(error=exc.message)
    return ParseResult(data=data)


__all__ = ["MERGE_MISMATCH_PREFIX", "load_dashboard", "parse_inputs"]
