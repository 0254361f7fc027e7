"""Compact, URL-safe encoding of JSON payloads for the ``#data=`` fragment.

Tokens use lz-string's ``EncodedURIComponent`` flavour so that the hosted
viewer, which decodes the fragment with the same algorithm, can open every
link this package builds.
"""

from __future__ import annotations

import json
from typing import Any

from lzstring import LZString

HASH_PREFIX = "#data="


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON: {name} is not a JSON value")


def parse_json(json_text: str) -> Any:
    """Parse strict JSON text.

    ``NaN``, ``Infinity`` and ``-Infinity`` are rejected.  Raises
    :class:`ValueError` (:class:`json.JSONDecodeError` for syntax errors).
    """

    return json.loads(json_text, parse_constant=_reject_constant)


def minify_json(json_text: str) -> str:
    """Re-serialize ``json_text`` without insignificant whitespace.

    Raises :class:`ValueError` when the text is not valid JSON.
    """

    return json.dumps(parse_json(json_text), separators=(",", ":"), ensure_ascii=False)


def encode_payload(json_text: str) -> str:
    """Minify ``json_text`` and compress it into a URI-component-safe token."""

    return LZString().compressToEncodedURIComponent(minify_json(json_text))


def decode_payload(token: str) -> str | None:
    """Inverse of :func:`encode_payload`; ``None`` when ``token`` is corrupt.

    A token only counts as intact when it decompresses to valid JSON.
    """

    if not token:
        return None
    try:
        text = LZString().decompressFromEncodedURIComponent(token)
    except (IndexError, KeyError, TypeError, ValueError):
        return None
    if not text:
        return None
    try:
        parse_json(text)
    except ValueError:
        return None
    return text


def build_hash(json_text: str) -> str:
    return HASH_PREFIX + encode_payload(json_text)


def load_from_hash(fragment: str) -> str | None:
    """Extract the JSON text from a ``#data=<token>`` fragment."""

    if not fragment.startswith(HASH_PREFIX):
        return None
    token = fragment[len(HASH_PREFIX):]
    if not token:
        return None
    return decode_payload(token)


__all__ = [
    "HASH_PREFIX",
    "build_hash",
    "decode_payload",
    "encode_payload",
    "load_from_hash",
    "minify_json",
    "parse_json",
]
