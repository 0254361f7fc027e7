"""Build and restore the multi-source share payload.

Three shapes exist on the wire: a single unlabeled report is shared as its
raw text, several unlabeled reports as a bare JSON array, and anything with a
label as ``{"sources": [{"label": ..., "data": ...}, ...]}``.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from .codec import parse_json
from .detect import looks_like_report
from .models import SourceInput, active_inputs


def _pretty(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_payload(inputs: Sequence[SourceInput]) -> str | None:
    """Return the JSON text to share for ``inputs``, or ``None`` if all are skipped.

    Raises :class:`ValueError` when a multi-source payload contains invalid
    JSON.
    """

    sources = active_inputs(inputs)
    if not sources:
        return None

    if len(sources) == 1 and not sources[0].label:
        return sources[0].content

    if any(source.label for source in sources):
        wrapped = {
            "sources": [
                {"label": source.label, "data": parse_json(source.content)} for source in sources
            ]
        }
        return json.dumps(wrapped, ensure_ascii=False)

    return json.dumps([parse_json(source.content) for source in sources], ensure_ascii=False)


def restore_from_hash(json_text: str) -> list[SourceInput] | None:
    """Split a shared payload back into labeled inputs.

    ``None`` is returned only for unparseable JSON; unknown shapes come back
    as a single unlabeled input holding ``json_text`` unchanged.
    """

    try:
        parsed = parse_json(json_text)
    except ValueError:
        return None

    if isinstance(parsed, Mapping) and "sources" in parsed and isinstance(parsed["sources"], list):
        restored = []
        for source in parsed["sources"]:
            source = source if isinstance(source, Mapping) else {}
            label = source.get("label")
            restored.append(
                SourceInput(
                    label=label if isinstance(label, str) else "",
                    content=_pretty(source.get("data")),
                )
            )
        return restored

    if isinstance(parsed, list) and parsed and looks_like_report(parsed[0]):
        return [SourceInput(content=_pretty(item)) for item in parsed]

    return [SourceInput(content=json_text)]


__all__ = ["build_payload", "restore_from_hash"]
