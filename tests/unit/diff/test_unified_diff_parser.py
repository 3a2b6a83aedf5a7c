from __future__ import annotations

from diff_patterns.diff import parse_unified_diff

GIT_DIFF = "\n".join(
    [
        "diff --git a/src/loop.js b/src/loop.js",
        "index 3f1c2aa..9b0e4d1 100644",
        "--- a/src/loop.js",
        "+++ b/src/loop.js",
        "@@ -1,5 +1,5 @@",
        " function run(arr) {",
        "-  for (let i = 0; i < arr.length; i++) {",
        "-    foo(arr[i]);",
        "+  for (const value of arr) {",
        "+    foo(value);",
        "   }",
        "-  return arr;",
        "+  return [...arr];",
        "@@ -20,2 +20,3 @@ function other() {",
        "   const a = 1;",
        "+  const b = 2;",
        "   return a;",
        "",
    ]
)


def test_chunks_are_split_by_context_lines() -> None:
    chunks = parse_unified_diff(GIT_DIFF)

    assert len(chunks) == 3
    assert chunks[0].deleted == (
        "  for (let i = 0; i < arr.length; i++) {",
        "    foo(arr[i]);",
    )
    assert chunks[0].added == ("  for (const value of arr) {", "    foo(value);")
    assert chunks[1].deleted == ("  return arr;",)
    assert chunks[1].added == ("  return [...arr];",)
    assert chunks[2].deleted == ()
    assert chunks[2].added == ("  const b = 2;",)


def test_chunks_carry_path_source_and_start_lines() -> None:
    chunks = parse_unified_diff(GIT_DIFF)

    assert {chunk.path for chunk in chunks} == {"src/loop.js"}
    assert {chunk.source for chunk in chunks} == {"javascript"}
    assert (chunks[0].old_start, chunks[0].new_start) == (2, 2)
    assert (chunks[1].old_start, chunks[1].new_start) == (5, 5)
    assert (chunks[2].old_start, chunks[2].new_start) == (21, 21)


def test_before_and_after_text_join_lines() -> None:
    chunk = parse_unified_diff(GIT_DIFF)[0]

    assert chunk.before_text == "  for (let i = 0; i < arr.length; i++) {\n    foo(arr[i]);"
    assert chunk.line_count == 4


def test_multiple_files_and_deleted_file_path() -> None:
    diff = "\n".join(
        [
            "--- a/old.py",
            "+++ /dev/null",
            "@@ -1 +0,0 @@",
            "-print('gone')",
            "--- a/keep.go\t2024-01-01 00:00:00",
            "+++ b/keep.go\t2024-01-02 00:00:00",
            "@@ -1 +1 @@",
            "-x := 1",
            "+x := 2",
        ]
    )

    chunks = parse_unified_diff(diff)

    assert [(chunk.path, chunk.source) for chunk in chunks] == [
        ("old.py", "python"),
        ("keep.go", "go"),
    ]
    assert chunks[0].added == ()


def test_hunk_counts_keep_dash_lines_inside_body() -> None:
    diff = "\n".join(
        [
            "--- a/notes.c",
            "+++ b/notes.c",
            "@@ -1,2 +1,2 @@",
            "--- counter;",
            "-x = 1;",
            "+++ counter;",
            "+x = 2;",
        ]
    )

    chunks = parse_unified_diff(diff)

    assert len(chunks) == 1
    assert chunks[0].deleted == ("-- counter;", "x = 1;")
    assert chunks[0].added == ("++ counter;", "x = 2;")


def test_no_newline_marker_is_ignored() -> None:
    diff = "\n".join(
        [
            "--- a/a.rs",
            "+++ b/a.rs",
            "@@ -1 +1 @@",
            "-let a = 1;",
            "\\ No newline at end of file",
            "+let a = 2;",
            "\\ No newline at end of file",
        ]
    )

    chunks = parse_unified_diff(diff)

    assert len(chunks) == 1
    assert chunks[0].deleted == ("let a = 1;",)
    assert chunks[0].added == ("let a = 2;",)


def test_unknown_extension_uses_default_language() -> None:
    diff = "--- a/script.tpl\n+++ b/script.tpl\n@@ -1 +1 @@\n-a\n+b\n"

    assert parse_unified_diff(diff)[0].source is None
    assert parse_unified_diff(diff, default_language="JS")[0].source == "javascript"
    assert (
        parse_unified_diff(diff, extensions={".tpl": "python"}, default_language="js")[0].source
        == "python"
    )


def test_loose_hunk_header_without_ranges() -> None:
    diff = "\n".join(["@@", "-old()", "+new()", " keep()", "-gone()", "@@", "+added()"])

    chunks = parse_unified_diff(diff)

    assert [(chunk.deleted, chunk.added) for chunk in chunks] == [
        (("old()",), ("new()",)),
        (("gone()",), ()),
        ((), ("added()",)),
    ]
    assert all(chunk.path is None for chunk in chunks)


def test_text_without_hunks_has_no_chunks() -> None:
    assert parse_unified_diff("") == []
    assert parse_unified_diff("just some text\n-not a hunk\n") == []


def test_form_feed_stays_inside_its_line() -> None:
    diff = "@@ -1,3 +1,3 @@\n-a = 1\x0cb\n+a = 2\n-c = 3\n+c = 4\n ctx"

    chunks = parse_unified_diff(diff)

    assert [(chunk.deleted, chunk.added) for chunk in chunks] == [
        (("a = 1\x0cb",), ("a = 2",)),
        (("c = 3",), ("c = 4",)),
    ]


def test_unicode_line_separator_stays_inside_its_line() -> None:
    diff = "--- a/s.js\n+++ b/s.js\n@@ -1 +1 @@\n-var s = '\u2028';\n+let s = '\u2028';\n"

    chunks = parse_unified_diff(diff)

    assert len(chunks) == 1
    assert chunks[0].deleted == ("var s = '\u2028';",)
    assert chunks[0].added == ("let s = '\u2028';",)


def test_crlf_line_endings_are_stripped() -> None:
    diff = "--- a/x.go\r\n+++ b/x.go\r\n@@ -1 +1 @@\r\n-a()\r\n+b()\r\n"

    chunks = parse_unified_diff(diff)

    assert chunks[0].deleted == ("a()",)
    assert chunks[0].added == ("b()",)
    assert chunks[0].source == "go"
