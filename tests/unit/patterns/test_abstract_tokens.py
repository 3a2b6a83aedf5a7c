from __future__ import annotations

from diff_patterns.patterns import (
    AbstractLine,
    Identifier,
    Literal,
    Placeholder,
    abstract_tokens,
)
from diff_patterns.tokenizers import scan_tokens
from diff_patterns.tokenizers.grammars import JAVASCRIPT_GRAMMAR

READWRITE = "variable.other.readwrite.js"


def test_shared_identifiers_become_placeholders() -> None:
    tokens = scan_tokens("total = total + step", JAVASCRIPT_GRAMMAR)
    identifiers = (Identifier("total", READWRITE), Identifier("step", READWRITE))

    lines = abstract_tokens(tokens, identifiers)

    assert len(lines) == 1
    assert lines[0].segments == (
        Placeholder(1, READWRITE),
        Literal(" = "),
        Placeholder(1, READWRITE),
        Literal(" + "),
        Placeholder(2, READWRITE),
    )
    assert lines[0].render() == (
        "${1:variable.other.readwrite.js} = ${1:variable.other.readwrite.js} + "
        "${2:variable.other.readwrite.js}"
    )


def test_column_gaps_are_reproduced_including_indentation() -> None:
    tokens = scan_tokens("    call( x )", JAVASCRIPT_GRAMMAR)

    lines = abstract_tokens(tokens, ())

    assert lines == (AbstractLine((Literal("    call( x )"),)),)


def test_one_line_per_token_line_and_blank_lines_dropped() -> None:
    tokens = scan_tokens("a;\n\n  b;", JAVASCRIPT_GRAMMAR)

    lines = abstract_tokens(tokens, ())

    assert [line.render() for line in lines] == ["a;", "  b;"]


def test_identifier_with_different_scope_stays_literal() -> None:
    tokens = scan_tokens("obj.total", JAVASCRIPT_GRAMMAR)

    lines = abstract_tokens(tokens, (Identifier("total", READWRITE),))

    assert lines[0].render() == "obj.total"
    assert lines[0].placeholders() == ()


def test_empty_stream_is_one_empty_line() -> None:
    lines = abstract_tokens([], (Identifier("x", READWRITE),))

    assert lines == (AbstractLine(()),)
    assert lines[0].is_empty()
