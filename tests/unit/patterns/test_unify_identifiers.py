from __future__ import annotations

from diff_patterns.patterns import Identifier, is_abstractable, unify_identifiers
from diff_patterns.tokenizers import Token, scan_tokens
from diff_patterns.tokenizers.grammars import JAVASCRIPT_GRAMMAR

READWRITE = "variable.other.readwrite.js"
PROPERTY = "variable.other.property.js"


def _token(value: str, scope: str) -> Token:
    return Token(
        value=value,
        scopes=("source.js", scope),
        line=1,
        start_col=1,
        end_col=1 + len(value),
    )


def test_identifier_and_number_shapes_are_abstractable() -> None:
    assert is_abstractable(_token("arr", "variable.other.readwrite.js"))
    assert is_abstractable(_token("snake_case1", "variable.other.readwrite.js"))
    assert is_abstractable(_token("42", "constant.numeric.js"))


def test_non_identifier_shapes_are_not_abstractable() -> None:
    assert not is_abstractable(_token("(", "punctuation.js"))
    assert not is_abstractable(_token("_private", "variable.other.readwrite.js"))
    assert not is_abstractable(_token("3.14", "constant.numeric.js"))
    assert not is_abstractable(_token("'text'", "string.quoted.js"))


def test_structural_scopes_are_never_abstracted() -> None:
    assert not is_abstractable(_token("for", "keyword.control.js"))
    assert not is_abstractable(_token("const", "storage.type.js"))
    assert not is_abstractable(_token("console", "support.function.builtin.js"))


def test_unify_keeps_first_occurrence_order_of_before_side() -> None:
    before = scan_tokens("b(a, b, c)", JAVASCRIPT_GRAMMAR)
    after = scan_tokens("c + a + b", JAVASCRIPT_GRAMMAR)

    identifiers = unify_identifiers(before, after)

    assert [identifier.value for identifier in identifiers] == ["a", "b", "c"]


def test_unify_requires_equal_innermost_scope() -> None:
    before = [_token("foo", "entity.name.function.js"), _token("x", READWRITE)]
    after = [_token("foo", READWRITE), _token("x", READWRITE)]

    identifiers = unify_identifiers(before, after)

    assert identifiers == (Identifier(value="x", scope=READWRITE),)


def test_same_value_with_two_scopes_yields_two_identifiers() -> None:
    before = [_token("id", READWRITE), _token("id", PROPERTY)]
    after = [_token("id", PROPERTY), _token("id", READWRITE)]

    identifiers = unify_identifiers(before, after)

    assert [identifier.scope for identifier in identifiers] == [READWRITE, PROPERTY]


def test_unify_of_empty_streams_is_empty() -> None:
    assert unify_identifiers([], scan_tokens("a", JAVASCRIPT_GRAMMAR)) == ()
    assert unify_identifiers(scan_tokens("a", JAVASCRIPT_GRAMMAR), []) == ()
