"""Deterministic lexical scanning for grammar-driven tokenizers."""

from __future__ import annotations

import bisect
import re

from diff_patterns.tokenizers.base import Token, TokenStream
from diff_patterns.tokenizers.grammars import (
    LexicalGrammar,
    LexicalRules,
    classify_identifier,
    operator_scope,
)

_NUMBER_PATTERN = re.compile(
    r"(?:0[xXbBoO][0-9A-Fa-f_]+|[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9]+)?)[A-Za-z]*"
)


class LexicalTokenizer:
    """Tokenizer backed by the lexical scanner and one grammar."""

    def __init__(self, grammar: LexicalGrammar, *, languages: tuple[str, ...] | None = None):
        self.grammar = grammar
        self.name = f"{grammar.name}_lexical"
        self._languages = languages if languages is not None else (grammar.name,)

    def supports_language(self, language: str) -> bool:
        """Return True when the grammar covers the language."""
        return language in self._languages

    def tokenize(self, text: str) -> TokenStream:
        """Scan text; lexical scanning never rejects input."""
        return TokenStream(
            language=self.grammar.name,
            tokens=tuple(scan_tokens(text, self.grammar)),
            strategy="lexical",
        )


class _Emitter:
    """Collects tokens, splitting multi-line lexemes into one token per line."""

    def __init__(self, source: str, root_scope: str) -> None:
        self._source = source
        self._root_scope = root_scope
        self._line_starts = [0] + [
            index + 1 for index, char in enumerate(source) if char == "\n"
        ]
        self.tokens: list[Token] = []

    def emit(self, start: int, end: int, scope: str) -> None:
        line_index = bisect.bisect_right(self._line_starts, start) - 1
        column = start - self._line_starts[line_index] + 1
        for offset, piece in enumerate(self._source[start:end].split("\n")):
            piece_column = column if offset == 0 else 1
            stripped = piece.lstrip(" \t")
            piece_column += len(piece) - len(stripped)
            if not stripped.strip():
                continue
            self.tokens.append(
                Token(
                    value=stripped,
                    scopes=(self._root_scope, scope),
                    line=line_index + 1 + offset,
                    start_col=piece_column,
                    end_col=piece_column + len(stripped),
                )
            )


def scan_tokens(text: str, grammar: LexicalGrammar) -> list[Token]:
    """Scan text into scoped tokens with 1-based line/column metadata."""
    source = text.replace("\r\n", "\n").replace("\r", "\n")
    rules = grammar.rules
    suffix = grammar.scope_suffix
    line_prefixes = _longest_first(rules.line_comment_prefixes)
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = _longest_first(rules.string_delimiters)
    operators = _longest_first(grammar.operators + grammar.accessors)
    emitter = _Emitter(source, f"source.{suffix}")

    length = len(source)
    index = 0
    previous: str | None = None

    while index < length:
        char = source[index]
        if char.isspace():
            index += 1
            continue

        line_marker = _match_any(source, index, line_prefixes)
        if line_marker is not None:
            end = source.find("\n", index)
            end = length if end == -1 else end
            emitter.emit(index, end, f"comment.line.{suffix}")
            index = end
            continue

        block_marker = _match_block_start(source, index, block_pairs)
        if block_marker is not None:
            start_marker, end_marker = block_marker
            close = source.find(end_marker, index + len(start_marker))
            end = length if close == -1 else close + len(end_marker)
            emitter.emit(index, end, f"comment.block.{suffix}")
            index = end
            continue

        string_marker = _match_any(source, index, string_delimiters)
        if string_marker is not None:
            end = _string_end(source, index, string_marker, rules)
            emitter.emit(index, end, f"string.quoted.{suffix}")
            previous = source[index:end]
            index = end
            continue

        if char.isdigit():
            number = _NUMBER_PATTERN.match(source, index)
            if number is not None:
                emitter.emit(index, number.end(), f"constant.numeric.{suffix}")
                previous = number.group(0)
                index = number.end()
                continue

        identifier = grammar.identifier_pattern.match(source, index)
        if identifier is not None:
            value = identifier.group(0)
            end = identifier.end()
            if value.lower() in grammar.string_prefixes:
                prefixed_marker = _match_any(source, end, string_delimiters)
                if prefixed_marker is not None:
                    string_end = _string_end(source, end, prefixed_marker, rules)
                    emitter.emit(index, string_end, f"string.quoted.{suffix}")
                    previous = source[index:string_end]
                    index = string_end
                    continue
            scope = classify_identifier(
                grammar,
                value,
                previous=previous,
                next_char=_next_non_blank(source, end),
            )
            emitter.emit(index, end, scope)
            previous = value
            index = end
            continue

        operator = _match_any(source, index, operators)
        lexeme = operator if operator is not None else char
        emitter.emit(index, index + len(lexeme), operator_scope(grammar, lexeme))
        previous = lexeme
        index += len(lexeme)

    return emitter.tokens


def _longest_first(markers: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(sorted((marker for marker in set(markers) if marker), key=lambda m: (-len(m), m)))


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str,
    index: int,
    pairs: tuple[tuple[str, str], ...],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _string_end(text: str, index: int, marker: str, rules: LexicalRules) -> int:
    """Return the index just past the closing marker, or the stop position if unterminated."""
    multiline = marker in rules.multiline_string_delimiters
    cursor = index + len(marker)
    length = len(text)
    while cursor < length:
        if text.startswith(marker, cursor) and not _is_escaped(
            text, cursor, marker, rules.escape_char
        ):
            return cursor + len(marker)
        if text[cursor] == "\n" and not multiline:
            return cursor
        cursor += 1
    return length


def _is_escaped(text: str, index: int, marker: str, escape_char: str) -> bool:
    if len(marker) > 1:
        return False
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1


def _next_non_blank(text: str, index: int) -> str | None:
    length = len(text)
    while index < length and text[index] in " \t":
        index += 1
    if index >= length:
        return None
    return text[index]
