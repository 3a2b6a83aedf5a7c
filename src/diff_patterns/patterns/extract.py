"""Chunk-to-pattern driver and diff-level aggregation."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from diff_patterns.diff import Chunk, parse_unified_diff
from diff_patterns.patterns.abstract import abstract_tokens
from diff_patterns.patterns.models import Pattern, validate_pattern
from diff_patterns.patterns.normalize import normalize_indentation
from diff_patterns.patterns.unify import unify_identifiers
from diff_patterns.tokenizers.base import Token, TokenStream

TokenizeFn = Callable[[str, str], Awaitable[TokenStream | None]]
ParseFn = Callable[[str], list[Chunk]]

_Item = TypeVar("_Item")
_Result = TypeVar("_Result")

CHUNK_STATUSES = ("emitted", "degenerate", "no_source", "untokenizable", "too_large")


@dataclass(slots=True, frozen=True)
class ChunkOutcome:
    """What happened to one chunk during extraction."""

    index: int
    path: str | None
    source: str | None
    status: str
    pattern: Pattern | None = None


@dataclass(slots=True, frozen=True)
class ExtractionReport:
    """Per-chunk outcomes for one diff, in chunk order."""

    outcomes: tuple[ChunkOutcome, ...]

    @property
    def patterns(self) -> list[Pattern]:
        return [
            outcome.pattern
            for outcome in self.outcomes
            if outcome.status == "emitted" and outcome.pattern is not None
        ]

    def status_counts(self) -> dict[str, int]:
        counts = {status: 0 for status in CHUNK_STATUSES}
        for outcome in self.outcomes:
            counts[outcome.status] += 1
        return counts


def build_pattern(before_tokens: Sequence[Token], after_tokens: Sequence[Token]) -> Pattern:
    """Unify, abstract, and normalize two token streams into a pattern."""
    identifiers = unify_identifiers(before_tokens, after_tokens)
    condition, consequent = normalize_indentation(
        abstract_tokens(before_tokens, identifiers),
        abstract_tokens(after_tokens, identifiers),
    )
    pattern = Pattern(condition=condition, consequent=consequent, identifiers=identifiers)
    validate_pattern(pattern)
    return pattern


async def pattern_from_texts(
    before: str | None,
    after: str | None,
    source: str | None,
    tokenize: TokenizeFn,
) -> Pattern | None:
    """Build a pattern from before/after text; None when either side is unavailable."""
    if before is None or after is None or not source:
        return None
    before_stream = await tokenize(before, source)
    if before_stream is None:
        return None
    after_stream = await tokenize(after, source)
    if after_stream is None:
        return None
    return build_pattern(before_stream.tokens, after_stream.tokens)


async def pattern_from_chunk(chunk: Chunk, tokenize: TokenizeFn) -> Pattern | None:
    """Build a pattern from one diff chunk."""
    return await pattern_from_texts(chunk.before_text, chunk.after_text, chunk.source, tokenize)


async def patterns_from_diff(
    diff_text: str,
    tokenize: TokenizeFn,
    *,
    parse: ParseFn = parse_unified_diff,
    max_concurrency: int = 1,
) -> list[Pattern]:
    """Return non-degenerate patterns for every chunk of a diff, in chunk order."""
    chunks = parse(diff_text)

    async def worker(chunk: Chunk) -> Pattern | None:
        return await pattern_from_chunk(chunk, tokenize)

    results = await _map_in_order(chunks, worker, max_concurrency)
    return [pattern for pattern in results if pattern is not None and not pattern.is_degenerate()]


async def extract_diff_report(
    diff_text: str,
    tokenize: TokenizeFn,
    *,
    parse: ParseFn = parse_unified_diff,
    max_concurrency: int = 1,
    max_chunk_lines: int | None = None,
) -> ExtractionReport:
    """Extract patterns for a diff and record the outcome of every chunk."""
    chunks = parse(diff_text)

    async def worker(item: tuple[int, Chunk]) -> ChunkOutcome:
        index, chunk = item
        if max_chunk_lines is not None and chunk.line_count > max_chunk_lines:
            return _outcome(index, chunk, "too_large")
        if not chunk.source:
            return _outcome(index, chunk, "no_source")
        pattern = await pattern_from_chunk(chunk, tokenize)
        if pattern is None:
            return _outcome(index, chunk, "untokenizable")
        if pattern.is_degenerate():
            return _outcome(index, chunk, "degenerate", pattern)
        return _outcome(index, chunk, "emitted", pattern)

    outcomes = await _map_in_order(list(enumerate(chunks)), worker, max_concurrency)
    return ExtractionReport(outcomes=tuple(outcomes))


def _outcome(index: int, chunk: Chunk, status: str, pattern: Pattern | None = None) -> ChunkOutcome:
    return ChunkOutcome(
        index=index,
        path=chunk.path,
        source=chunk.source,
        status=status,
        pattern=pattern,
    )


async def _map_in_order(
    items: Sequence[_Item],
    worker: Callable[[_Item], Awaitable[_Result]],
    max_concurrency: int,
) -> list[_Result]:
    if max_concurrency <= 1:
        results: list[_Result] = []
        for item in items:
            results.append(await worker(item))
        return results

    semaphore = asyncio.Semaphore(max_concurrency)

    async def bounded(item: _Item) -> _Result:
        async with semaphore:
            return await worker(item)

    return list(await asyncio.gather(*(bounded(item) for item in items)))
