"""Unified diff parsing into deleted/added chunks."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from diff_patterns.diff.models import Chunk
from diff_patterns.languages import language_for_path, normalize_language

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_GIT_HEADER_RE = re.compile(r"^diff --git \"?a/(.+?)\"? \"?b/(.+?)\"?$")


@dataclass(slots=True)
class _PendingChunk:
    old_start: int
    new_start: int
    deleted: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)


class _DiffParser:
    """Line-driven unified diff state machine."""

    def __init__(self, extensions: Mapping[str, str] | None, default_language: str | None):
        self._extensions = extensions
        self._default_language = (
            normalize_language(default_language) if default_language else None
        )
        self.chunks: list[Chunk] = []
        self._old_path: str | None = None
        self._new_path: str | None = None
        self._old_line = 0
        self._new_line = 0
        self._old_remaining = 0
        self._new_remaining = 0
        self._unbounded = False
        self._pending: _PendingChunk | None = None

    def feed(self, raw_line: str) -> None:
        if self._in_hunk():
            if self._feed_hunk_line(raw_line):
                return
            self._end_hunk()

        if raw_line.startswith("\\"):
            return
        hunk = _HUNK_HEADER_RE.match(raw_line)
        if hunk is not None:
            self._flush()
            self._old_line = int(hunk.group(1))
            self._old_remaining = int(hunk.group(2)) if hunk.group(2) is not None else 1
            self._new_line = int(hunk.group(3))
            self._new_remaining = int(hunk.group(4)) if hunk.group(4) is not None else 1
            self._unbounded = False
            return
        if raw_line.startswith("@@"):
            self._flush()
            self._old_line = 0
            self._new_line = 0
            self._unbounded = True
            return
        git_header = _GIT_HEADER_RE.match(raw_line)
        if git_header is not None:
            self._flush()
            self._old_path = git_header.group(1)
            self._new_path = git_header.group(2)
            return
        if raw_line.startswith("--- "):
            self._old_path = _header_path(raw_line[4:])
            return
        if raw_line.startswith("+++ "):
            self._new_path = _header_path(raw_line[4:])

    def finish(self) -> list[Chunk]:
        self._end_hunk()
        return self.chunks

    def _in_hunk(self) -> bool:
        return self._unbounded or self._old_remaining > 0 or self._new_remaining > 0

    def _feed_hunk_line(self, raw_line: str) -> bool:
        """Consume one hunk body line; False when the line ends the hunk."""
        if raw_line.startswith("\\"):
            return True
        if self._unbounded and (raw_line.startswith("@@") or raw_line.startswith("diff ")):
            return False
        marker = raw_line[:1]
        content = raw_line[1:]
        if marker == "-":
            self._pending_chunk().deleted.append(content)
            self._old_line += 1
            self._old_remaining -= 1
        elif marker == "+":
            self._pending_chunk().added.append(content)
            self._new_line += 1
            self._new_remaining -= 1
        elif marker in (" ", ""):
            self._flush()
            self._old_line += 1
            self._new_line += 1
            self._old_remaining -= 1
            self._new_remaining -= 1
        else:
            return False
        if not self._in_hunk():
            self._flush()
        return True

    def _end_hunk(self) -> None:
        self._flush()
        self._old_remaining = 0
        self._new_remaining = 0
        self._unbounded = False

    def _pending_chunk(self) -> _PendingChunk:
        if self._pending is None:
            self._pending = _PendingChunk(old_start=self._old_line, new_start=self._new_line)
        return self._pending

    def _flush(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is None or not (pending.deleted or pending.added):
            return
        path = self._new_path if self._new_path is not None else self._old_path
        source = language_for_path(path, self._extensions) or self._default_language
        self.chunks.append(
            Chunk(
                deleted=tuple(pending.deleted),
                added=tuple(pending.added),
                source=source,
                path=path,
                old_start=pending.old_start,
                new_start=pending.new_start,
            )
        )


def parse_unified_diff(
    diff_text: str,
    *,
    extensions: Mapping[str, str] | None = None,
    default_language: str | None = None,
) -> list[Chunk]:
    """Parse unified diff text into ordered chunks of contiguous changes."""
    parser = _DiffParser(extensions=extensions, default_language=default_language)
    for raw_line in _diff_lines(diff_text):
        parser.feed(raw_line)
    return parser.finish()


def _diff_lines(diff_text: str) -> list[str]:
    """Split on line feeds only; form feeds and U+2028 stay inside their line."""
    lines = diff_text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _header_path(value: str) -> str | None:
    path = value.split("\t", 1)[0].strip()
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if not path or path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path
