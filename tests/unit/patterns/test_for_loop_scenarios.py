from __future__ import annotations

import asyncio
from pathlib import Path

from diff_patterns.config import default_config
from diff_patterns.patterns import Pattern, pattern_from_texts
from diff_patterns.tokenizers import build_tokenizer_registry

INDEXED_LOOP = "for (let i = 0;i < arr.length;i++) foo( arr[i] )"
RW = "variable.other.readwrite.js"
FN = "entity.name.function.js"


def _pattern(tmp_path: Path, before: str, after: str, language: str) -> Pattern:
    registry = build_tokenizer_registry(default_config(tmp_path))
    pattern = asyncio.run(pattern_from_texts(before, after, language, registry.tokenize))
    assert pattern is not None
    return pattern


def test_for_of_rewrite_abstracts_array_and_callee(tmp_path: Path) -> None:
    pattern = _pattern(
        tmp_path,
        INDEXED_LOOP,
        "for (const value of arr)) { foo(value) }",
        "javascript",
    )

    assert pattern.identifier_values() == ["arr", "foo"]
    assert pattern.condition_lines() == [
        f"for (let i = 0;i < ${{1:{RW}}}.length;i++) ${{2:{FN}}}( ${{1:{RW}}}[i] )"
    ]
    assert pattern.consequent_lines() == [
        f"for (const value of ${{1:{RW}}})) {{ ${{2:{FN}}}(value) }}"
    ]


def test_loop_index_is_abstracted_only_when_shared(tmp_path: Path) -> None:
    pattern = _pattern(
        tmp_path,
        INDEXED_LOOP,
        "for (let i = 0;i < arr.length;i++) { foo(arr[i]) }",
        "js",
    )

    assert pattern.identifier_values() == ["i", "0", "arr", "length", "foo"]
    assert [identifier.scope for identifier in pattern.identifiers] == [
        RW,
        "constant.numeric.js",
        RW,
        "variable.other.property.js",
        FN,
    ]


def test_keywords_and_storage_are_never_placeholders(tmp_path: Path) -> None:
    pattern = _pattern(
        tmp_path,
        "for (let i = 0;i < n;i++) {}",
        "for (let i = 0;i < n;i++) { continue }",
        "javascript",
    )

    assert "for" not in pattern.identifier_values()
    assert "let" not in pattern.identifier_values()
    for line in pattern.condition_lines():
        assert line.startswith("for (let ")


def test_python_loop_rewrite_with_native_tokenizer(tmp_path: Path) -> None:
    pattern = _pattern(
        tmp_path,
        "for i in range(len(items)):\n    print(items[i])",
        "for item in items:\n    print(item)",
        "python",
    )

    py_rw = "variable.other.readwrite.python"
    assert pattern.identifier_values() == ["items"]
    assert pattern.condition_lines() == [
        f"for i in range(len(${{1:{py_rw}}})):",
        f"    print(${{1:{py_rw}}}[i])",
    ]
    assert pattern.consequent_lines() == [
        f"for item in ${{1:{py_rw}}}:",
        "    print(item)",
    ]


def test_placeholders_align_with_identifier_list(tmp_path: Path) -> None:
    pattern = _pattern(
        tmp_path,
        "const total = prices.reduce((sum, p) => sum + p, 0);",
        "let total = 0; for (const p of prices) total += p;",
        "typescript",
    )

    for line in pattern.condition + pattern.consequent:
        for placeholder in line.placeholders():
            identifier = pattern.identifiers[placeholder.index - 1]
            assert placeholder.scope == identifier.scope


def test_extraction_is_deterministic(tmp_path: Path) -> None:
    first = _pattern(tmp_path, INDEXED_LOOP, "arr.forEach(foo)", "javascript")
    second = _pattern(tmp_path, INDEXED_LOOP, "arr.forEach(foo)", "javascript")

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_missing_side_or_source_yields_none(tmp_path: Path) -> None:
    registry = build_tokenizer_registry(default_config(tmp_path))

    assert asyncio.run(pattern_from_texts(None, "x", "javascript", registry.tokenize)) is None
    assert asyncio.run(pattern_from_texts("x", None, "javascript", registry.tokenize)) is None
    assert asyncio.run(pattern_from_texts("x", "y", None, registry.tokenize)) is None
