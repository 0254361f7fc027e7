"""Command line entrypoint: turn usage reports into a shareable viewer URL."""

from __future__ import annotations

import argparse
import sys
import webbrowser
from pathlib import Path
from typing import Sequence, TextIO
from urllib.parse import urlsplit

from .client import ShortLinkClient
from .codec import HASH_PREFIX, encode_payload
from .core.errors import ApplicationError, InputReadError
from .core.logging import configure_logging, get_logger
from .core.settings import get_settings
from .format import format_cost, format_skewness, format_tokens
from .models import DashboardData, SourceInput, active_inputs
from .payload import build_payload
from .pipeline import load_dashboard
from .statistics import compute_stats, extract_metric

logger = get_logger(__name__)

NO_INPUT_MESSAGE = (
    "Error: No input received. Pipe JSON from ccusage:\n  ccusage daily --json | usageview"
)
INVALID_JSON_MESSAGE = "Error: Invalid JSON input."
URL_PREVIEW_LENGTH = 80


def build_viewer_url(payload: str, base_url: str) -> str:
    """Append the encoded ``payload`` to ``base_url`` as a ``#data=`` fragment."""

    return f"{base_url.rstrip('/')}/{HASH_PREFIX}{encode_payload(payload)}"


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="usageview",
        description="Open ccusage JSON reports in the usage dashboard viewer.",
        epilog="Example: ccusage daily --json | usageview",
    )
    parser.add_argument("files", nargs="*", help="Report files to include (JSON)")
    parser.add_argument(
        "--url",
        default=settings.viewer_url,
        help=f"Base URL of the viewer app (default: {settings.viewer_url})",
    )
    parser.add_argument(
        "--label",
        action="append",
        default=[],
        metavar="NAME",
        help="Label for the next file, in file order (repeatable)",
    )
    parser.add_argument(
        "--stdin-label", default="", metavar="NAME", help="Label for standard input"
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Print the URL to stdout instead of opening a browser",
    )
    parser.add_argument(
        "--shorten",
        action="store_true",
        help="Store the payload with the short-link service and use the short URL",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a plain-text summary of the merged reports instead of a URL",
    )
    return parser


def _read_file(name: str) -> str:
    try:
        return Path(name).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputReadError(
            f"Cannot read {name}: not valid UTF-8 text", details={"path": name}
        ) from exc
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise InputReadError(f"Cannot read {name}: {reason}", details={"path": name}) from exc


def _collect_inputs(args: argparse.Namespace, stdin: TextIO) -> list[SourceInput]:
    inputs = []
    for index, name in enumerate(args.files):
        label = args.label[index] if index < len(args.label) else ""
        content = _read_file(name)
        inputs.append(SourceInput(label=label, content=content))

    if not stdin.isatty():
        inputs.append(SourceInput(label=args.stdin_label, content=stdin.read()))
    return inputs


def render_summary(data: DashboardData) -> str:
    """Plain-text overview of a merged dataset."""

    totals = data.totals
    cost_stats = compute_stats(extract_metric(data.entries, "cost"))
    lines = [f"Report type: {data.report_type}"]
    if data.source_labels:
        lines.append(f"Sources: {', '.join(data.source_labels)}")
    lines.extend(
        [
            f"Entries: {len(data.entries)}",
            f"Total tokens: {format_tokens(totals.total_tokens)}"
            f" (input {format_tokens(totals.input_tokens)},"
            f" output {format_tokens(totals.output_tokens)},"
            f" cache write {format_tokens(totals.cache_creation_tokens)},"
            f" cache read {format_tokens(totals.cache_read_tokens)})",
            f"Total cost: {format_cost(totals.total_cost)}",
        ]
    )
    if cost_stats.count:
        lines.append(
            f"Cost per entry: mean {format_cost(cost_stats.mean)},"
            f" median {format_cost(cost_stats.median)},"
            f" p90 {format_cost(cost_stats.p90)},"
            f" max {format_cost(cost_stats.max)},"
            f" skewness {format_skewness(cost_stats.skewness)}"
        )
    return "\n".join(lines)


def _shorten(payload: str, base_url: str) -> str:
    api_url = get_settings().shortlink_api_url or _origin(base_url)
    token = encode_payload(payload)
    with ShortLinkClient(api_url) as client:
        short_id = client.create(token)
        return client.short_url(short_id)


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        inputs = _collect_inputs(args, sys.stdin)
    except InputReadError as exc:
        sys.stderr.write(f"Error: {exc.message}\n")
        return 1

    if not active_inputs(inputs):
        sys.stderr.write(NO_INPUT_MESSAGE + "\n")
        return 1

    if args.summary:
        try:
            data = load_dashboard(inputs)
        except ApplicationError as exc:
            logger.error("Failed to load reports", error=exc.__class__.__name__)
            sys.stderr.write(f"Error: {exc.message}\n")
            return 1
        if data is None:
            sys.stderr.write(NO_INPUT_MESSAGE + "\n")
            return 1
        sys.stdout.write(render_summary(data) + "\n")
        return 0

    try:
        payload = build_payload(inputs)
        if payload is None:
            sys.stderr.write(NO_INPUT_MESSAGE + "\n")
            return 1
        url = build_viewer_url(payload, args.url)
    except ValueError:
        sys.stderr.write(INVALID_JSON_MESSAGE + "\n")
        return 1

    if args.shorten:
        try:
            url = _shorten(payload, args.url)
        except ApplicationError as exc:
            logger.error("Failed to shorten URL", error=exc.message)
            sys.stderr.write(f"Error: {exc.message}\n")
            return 1

    if args.no_open:
        sys.stdout.write(url + "\n")
    else:
        sys.stderr.write(f"Opening: {url[:URL_PREVIEW_LENGTH]}...\n")
        webbrowser.open(url)
    return 0


__all__ = ["build_parser", "build_viewer_url", "main", "render_summary"]
