from __future__ import annotations

from diff_patterns.tokenizers import LexicalTokenizer, scan_tokens
from diff_patterns.tokenizers.grammars import JAVASCRIPT_GRAMMAR, PYTHON_GRAMMAR, RUST_GRAMMAR


def _pairs(text: str, grammar=JAVASCRIPT_GRAMMAR) -> list[tuple[str, str]]:
    return [(token.value, token.scope) for token in scan_tokens(text, grammar)]


def test_javascript_call_and_property_scopes() -> None:
    pairs = _pairs("foo(arr.length)")

    assert pairs == [
        ("foo", "entity.name.function.js"),
        ("(", "punctuation.js"),
        ("arr", "variable.other.readwrite.js"),
        (".", "punctuation.accessor.js"),
        ("length", "variable.other.property.js"),
        (")", "punctuation.js"),
    ]


def test_javascript_keywords_storage_and_constants() -> None:
    pairs = dict(_pairs("for (let x of null) return"))

    assert pairs["for"] == "keyword.control.js"
    assert pairs["let"] == "storage.type.js"
    assert pairs["of"] == "keyword.control.js"
    assert pairs["null"] == "constant.language.builtin.js"
    assert pairs["x"] == "variable.other.readwrite.js"


def test_method_call_after_accessor() -> None:
    pairs = _pairs("items.push(value)")

    assert ("push", "entity.name.function.method.js") in pairs


def test_operators_use_longest_match() -> None:
    values = [value for value, _ in _pairs("a === b && c++")]

    assert values == ["a", "===", "b", "&&", "c", "++"]


def test_positions_are_one_based_with_exclusive_end() -> None:
    tokens = scan_tokens("  let i = 0;", JAVASCRIPT_GRAMMAR)

    first = tokens[0]
    assert (first.value, first.line, first.start_col, first.end_col) == ("let", 1, 3, 6)
    assert [token.start_col for token in tokens] == [3, 7, 9, 11, 12]


def test_scopes_start_with_source_root() -> None:
    tokens = scan_tokens("x", RUST_GRAMMAR)

    assert tokens[0].scopes == ("source.rust", "variable.other.readwrite.rust")


def test_rust_path_separator_is_an_accessor() -> None:
    pairs = _pairs("Vec::new()", RUST_GRAMMAR)

    assert pairs[0] == ("Vec", "support.function.builtin.rust")
    assert pairs[1] == ("::", "punctuation.accessor.rust")
    assert pairs[2] == ("new", "entity.name.function.method.rust")


def test_python_grammar_marks_builtins_and_constants() -> None:
    pairs = dict(_pairs("print(len(items), None)", PYTHON_GRAMMAR))

    assert pairs["print"] == "support.function.builtin.python"
    assert pairs["len"] == "support.function.builtin.python"
    assert pairs["None"] == "constant.language.builtin.python"
    assert pairs["items"] == "variable.other.readwrite.python"


def test_lexical_tokenizer_reports_strategy_and_language() -> None:
    tokenizer = LexicalTokenizer(JAVASCRIPT_GRAMMAR)

    stream = tokenizer.tokenize("a")

    assert tokenizer.name == "javascript_lexical"
    assert tokenizer.supports_language("javascript")
    assert not tokenizer.supports_language("python")
    assert stream.strategy == "lexical"
    assert stream.language == "javascript"
