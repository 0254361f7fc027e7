"""Combine normalized entry arrays from several sources."""

from __future__ import annotations

from typing import Sequence

from .aggregate import group_entries
from .models import CanonicalEntry


def merge_normalized_entries(
    arrays_of_entries: Sequence[Sequence[CanonicalEntry]],
) -> Sequence[CanonicalEntry]:
    """Merge entry arrays by exact label.

    A single array is returned as-is; two or more are flattened and grouped
    so that entries sharing a label collapse into one.
    """

    if not arrays_of_entries:
        return []
    if len(arrays_of_entries) == 1:
        return arrays_of_entries[0]

    flattened = [entry for entries in arrays_of_entries for entry in entries]
    return group_entries(flattened, lambda entry: entry.label)


__all__ = ["merge_normalized_entries"]
