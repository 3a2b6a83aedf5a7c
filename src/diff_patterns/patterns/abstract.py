"""Token stream to abstracted line conversion."""

from __future__ import annotations

from collections.abc import Sequence

from diff_patterns.patterns.models import AbstractLine, Identifier, Literal, Placeholder, Segment
from diff_patterns.tokenizers.base import Token


def abstract_tokens(
    tokens: Sequence[Token],
    identifiers: Sequence[Identifier],
) -> tuple[AbstractLine, ...]:
    """Rebuild source lines with shared identifiers replaced by placeholders.

    Horizontal spacing between tokens is reproduced from their columns. One
    line is produced per distinct token line; an empty stream yields a single
    empty line.
    """
    index_by_key: dict[tuple[str, str], int] = {}
    for index, identifier in enumerate(identifiers, start=1):
        index_by_key.setdefault((identifier.value, identifier.scope), index)

    lines: list[AbstractLine] = []
    segments: list[Segment] = []
    current_line: int | None = None
    cursor = 1

    for token in tokens:
        if current_line is None:
            current_line = token.line
        if token.line != current_line:
            lines.append(AbstractLine(segments=tuple(segments)))
            segments = []
            cursor = 1
            current_line = token.line

        gap = " " * max(token.start_col - cursor, 0)
        cursor = token.end_col
        index = index_by_key.get((token.value, token.scope))
        if index is None:
            _append_literal(segments, gap + token.value)
            continue
        if gap:
            _append_literal(segments, gap)
        segments.append(Placeholder(index=index, scope=token.scope))

    lines.append(AbstractLine(segments=tuple(segments)))
    return tuple(lines)


def _append_literal(segments: list[Segment], text: str) -> None:
    if segments and isinstance(segments[-1], Literal):
        segments[-1] = Literal(segments[-1].text + text)
        return
    segments.append(Literal(text))
