from __future__ import annotations

import asyncio
from functools import partial
from pathlib import Path

from diff_patterns.config import default_config
from diff_patterns.diff import parse_unified_diff
from diff_patterns.patterns import extract_diff_report, patterns_from_diff
from diff_patterns.patterns.extract import TokenizeFn
from diff_patterns.tokenizers import TokenStream, build_tokenizer_registry

DIFF = "\n".join(
    [
        "--- a/app.js",
        "+++ b/app.js",
        "@@ -1,5 +1,6 @@",
        " function main(items) {",
        "-  for (let i = 0; i < items.length; i++) {",
        "-    handle(items[i]);",
        "+  for (const item of items) {",
        "+    handle(item);",
        "   }",
        "+  done();",
        " }",
        "--- a/notes.txt",
        "+++ b/notes.txt",
        "@@ -1 +1 @@",
        "-old words",
        "+new words",
    ]
)


def _tokenize(tmp_path: Path) -> TokenizeFn:
    return build_tokenizer_registry(default_config(tmp_path)).tokenize


def test_patterns_from_diff_filters_degenerate_and_sourceless(tmp_path: Path) -> None:
    patterns = asyncio.run(patterns_from_diff(DIFF, _tokenize(tmp_path)))

    assert len(patterns) == 1
    assert patterns[0].identifier_values() == ["items", "handle"]
    assert patterns[0].condition_lines()[0].startswith("for (let i = 0;")


def test_report_records_every_chunk_status(tmp_path: Path) -> None:
    report = asyncio.run(extract_diff_report(DIFF, _tokenize(tmp_path)))

    assert [(outcome.path, outcome.status) for outcome in report.outcomes] == [
        ("app.js", "emitted"),
        ("app.js", "degenerate"),
        ("notes.txt", "no_source"),
    ]
    assert report.status_counts() == {
        "emitted": 1,
        "degenerate": 1,
        "no_source": 1,
        "untokenizable": 0,
        "too_large": 0,
    }
    assert len(report.patterns) == 1


def test_default_language_gives_sourceless_chunks_a_tokenizer(tmp_path: Path) -> None:
    parse = partial(parse_unified_diff, default_language="javascript")

    report = asyncio.run(extract_diff_report(DIFF, _tokenize(tmp_path), parse=parse))

    assert report.outcomes[2].source == "javascript"
    assert report.outcomes[2].status == "emitted"


def test_chunk_line_limit_marks_large_chunks(tmp_path: Path) -> None:
    report = asyncio.run(extract_diff_report(DIFF, _tokenize(tmp_path), max_chunk_lines=3))

    assert report.outcomes[0].status == "too_large"
    assert report.outcomes[1].status == "degenerate"


def test_tokenizer_rejection_is_untokenizable(tmp_path: Path) -> None:
    async def reject(text: str, language: str) -> TokenStream | None:
        return None

    report = asyncio.run(extract_diff_report(DIFF, reject))

    assert [outcome.status for outcome in report.outcomes] == [
        "untokenizable",
        "untokenizable",
        "no_source",
    ]


def test_concurrent_extraction_preserves_chunk_order(tmp_path: Path) -> None:
    files = []
    for index in range(6):
        files.extend(
            [
                f"--- a/f{index}.js",
                f"+++ b/f{index}.js",
                "@@ -1 +1 @@",
                f"-call{index}(value);",
                f"+value.call{index}();",
            ]
        )
    diff = "\n".join(files)
    tokenize = _tokenize(tmp_path)

    sequential = asyncio.run(patterns_from_diff(diff, tokenize, max_concurrency=1))
    concurrent = asyncio.run(patterns_from_diff(diff, tokenize, max_concurrency=4))

    assert [pattern.to_dict() for pattern in concurrent] == [
        pattern.to_dict() for pattern in sequential
    ]
    assert [pattern.identifier_values() for pattern in sequential] == [["value"]] * 6
