"""Python tokenizer built on the standard-library tokenize module."""

from __future__ import annotations

import io
import tokenize

from diff_patterns.tokenizers.base import Token, TokenStream
from diff_patterns.tokenizers.grammars import PYTHON_GRAMMAR, classify_identifier, operator_scope
from diff_patterns.tokenizers.lexical import LexicalTokenizer

_LAYOUT_TOKEN_TYPES = frozenset(
    {
        tokenize.NEWLINE,
        tokenize.NL,
        tokenize.INDENT,
        tokenize.DEDENT,
        tokenize.ENDMARKER,
    }
)
# Python 3.12+ splits f-strings into START/MIDDLE/END pieces around ordinary tokens.
_FSTRING_START = getattr(tokenize, "FSTRING_START", None)
_FSTRING_END = getattr(tokenize, "FSTRING_END", None)


class PythonTokenizer:
    """Python-first tokenizer with lexical fallback for fragments tokenize rejects."""

    name = "python_native"

    def __init__(self) -> None:
        self._fallback = LexicalTokenizer(PYTHON_GRAMMAR)

    def supports_language(self, language: str) -> bool:
        """Return True for Python."""
        return language == "python"

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize with the stdlib tokenizer, falling back to lexical scanning."""
        source = text.replace("\r\n", "\n").replace("\r", "\n")
        try:
            raw_tokens = [
                raw
                for raw in tokenize.generate_tokens(io.StringIO(source).readline)
                if raw.type not in _LAYOUT_TOKEN_TYPES
                and not (raw.type == tokenize.ERRORTOKEN and not raw.string.strip())
            ]
        except (tokenize.TokenError, SyntaxError):
            return self._fallback.tokenize(source)
        raw_tokens = _merge_fstrings(raw_tokens, source.split("\n"))

        tokens: list[Token] = []
        for index, raw in enumerate(raw_tokens):
            previous = raw_tokens[index - 1].string if index > 0 else None
            following = raw_tokens[index + 1] if index + 1 < len(raw_tokens) else None
            next_char: str | None = None
            if following is not None and following.start[0] == raw.end[0]:
                next_char = following.string[:1]
            scope = _scope_for(raw, previous=previous, next_char=next_char)
            tokens.extend(_split_token(raw, scope))
        return TokenStream(language="python", tokens=tuple(tokens), strategy="native")


def _scope_for(raw: tokenize.TokenInfo, *, previous: str | None, next_char: str | None) -> str:
    suffix = PYTHON_GRAMMAR.scope_suffix
    if raw.type == tokenize.NAME:
        return classify_identifier(
            PYTHON_GRAMMAR,
            raw.string,
            previous=previous,
            next_char=next_char,
        )
    if raw.type == tokenize.NUMBER:
        return f"constant.numeric.{suffix}"
    if raw.type == tokenize.STRING:
        return f"string.quoted.{suffix}"
    if raw.type == tokenize.COMMENT:
        return f"comment.line.{suffix}"
    return operator_scope(PYTHON_GRAMMAR, raw.string)


def _split_token(raw: tokenize.TokenInfo, scope: str) -> list[Token]:
    line, column = raw.start
    pieces: list[Token] = []
    for offset, piece in enumerate(raw.string.split("\n")):
        piece_column = column + 1 if offset == 0 else 1
        stripped = piece.lstrip(" \t")
        piece_column += len(piece) - len(stripped)
        if not stripped.strip():
            continue
        pieces.append(
            Token(
                value=stripped,
                scopes=(f"source.{PYTHON_GRAMMAR.scope_suffix}", scope),
                line=line + offset,
                start_col=piece_column,
                end_col=piece_column + len(stripped),
            )
        )
    return pieces


def _merge_fstrings(
    raw_tokens: list[tokenize.TokenInfo], lines: list[str]
) -> list[tokenize.TokenInfo]:
    """Collapse each f-string into one STRING token, as tokenize did before 3.12."""
    if _FSTRING_START is None:
        return raw_tokens
    merged: list[tokenize.TokenInfo] = []
    depth = 0
    start: tokenize.TokenInfo | None = None
    for raw in raw_tokens:
        if raw.type == _FSTRING_START:
            if depth == 0:
                start = raw
            depth += 1
            continue
        if depth == 0:
            merged.append(raw)
            continue
        if raw.type == _FSTRING_END:
            depth -= 1
            if depth == 0 and start is not None:
                text = _source_span(lines, start.start, raw.end)
                merged.append(
                    tokenize.TokenInfo(tokenize.STRING, text, start.start, raw.end, start.line)
                )
                start = None
    return merged


def _source_span(lines: list[str], start: tuple[int, int], end: tuple[int, int]) -> str:
    (start_row, start_col), (end_row, end_col) = start, end
    if start_row == end_row:
        return lines[start_row - 1][start_col:end_col]
    parts = [lines[start_row - 1][start_col:]]
    parts.extend(lines[start_row : end_row - 1])
    parts.append(lines[end_row - 1][:end_col])
    return "\n".join(parts)
