"""Indentation normalization for abstracted line pairs."""

from __future__ import annotations

from collections.abc import Sequence

from diff_patterns.patterns.models import AbstractLine


def min_leading_spaces(lines: Sequence[AbstractLine]) -> int | None:
    """Return the smallest leading-space count over non-empty lines, or None."""
    counts = [line.leading_spaces() for line in lines if not line.is_empty()]
    if not counts:
        return None
    return min(counts)


def normalize_indentation(
    condition: Sequence[AbstractLine],
    consequent: Sequence[AbstractLine],
) -> tuple[tuple[AbstractLine, ...], tuple[AbstractLine, ...]]:
    """Strip the indentation shared by every non-empty line of both sides."""
    minima = [
        count
        for count in (min_leading_spaces(condition), min_leading_spaces(consequent))
        if count is not None
    ]
    if not minima:
        return tuple(condition), tuple(consequent)
    width = min(minima)
    return (
        tuple(line.strip_leading(width) for line in condition),
        tuple(line.strip_leading(width) for line in consequent),
    )
